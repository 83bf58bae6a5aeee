# app/core/auth.py
import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel, Field

from app.core.config import get_settings
from app.core.errors import AuthenticationError, ForbiddenError
from app.core.supabase_client import supabase_public

settings = get_settings()
logger = logging.getLogger(__name__)

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can fall back to the Supabase session cookie, or to "anonymous".
bearer_scheme = HTTPBearer(auto_error=False)


class Identity(BaseModel):
    """
    The signed-in Supabase user, as seen on this request.

    Never persisted; resolved again on every request.
    """

    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class RequestContext:
    """
    Explicit per-request context handed to every route.

    identity is None for anonymous callers.
    """

    identity: Identity | None = None

    def require_user(self) -> Identity:
        """
        Raises:
            AuthenticationError(401): if nobody is signed in.
        """
        if not require_auth(self.identity):
            raise AuthenticationError("Authentication required")
        return self.identity

    def require_admin_user(self) -> Identity:
        """
        Raises:
            AuthenticationError(401): if nobody is signed in.
            ForbiddenError(403): if the user is not an admin.
        """
        identity = self.require_user()
        if not require_admin(identity):
            raise ForbiddenError("Admin access required")
        return identity


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        JWTError: if token is invalid/expired.
    """
    return jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=[settings.SUPABASE_JWT_ALG],
        options={"verify_aud": False},
    )


def _identity_from_claims(claims: dict[str, Any]) -> Identity | None:
    sub = claims.get("sub")
    if not sub:
        return None
    return Identity(
        id=sub,
        email=claims.get("email"),
        user_metadata=claims.get("user_metadata") or {},
    )


def _lookup_remote(token: str) -> Identity | None:
    """Ask Supabase Auth who owns this token (used when no JWT secret is set)."""
    response = supabase_public().auth.get_user(token)
    user = getattr(response, "user", None)
    if user is None:
        return None
    return Identity(
        id=str(user.id),
        email=user.email,
        user_metadata=user.user_metadata or {},
    )


def get_current_user(token: str | None) -> Identity | None:
    """
    Resolve the caller from a Supabase access token.

    Flow:
      1. No token => anonymous => None.
      2. SUPABASE_JWT_SECRET configured => verify the JWT locally.
      3. Otherwise => ask Supabase Auth.

    Never raises: invalid tokens and provider failures are logged and
    treated as "not signed in".
    """
    if not token:
        return None

    try:
        if settings.SUPABASE_JWT_SECRET:
            return _identity_from_claims(decode_access_token(token))
        return _lookup_remote(token)
    except JWTError as e:
        logger.info(f"Rejected access token: {e}")
        return None
    except Exception:
        logger.exception("Error getting current user")
        return None


def is_admin(identity: Identity | None) -> bool:
    """True iff signed in and Supabase user_metadata.role == "admin"."""
    if identity is None:
        return False
    return identity.user_metadata.get("role") == "admin"


def require_auth(identity: Identity | None) -> bool:
    """Pure check; the caller decides what to answer."""
    return identity is not None


def require_admin(identity: Identity | None) -> bool:
    """Pure check; the caller decides what to answer."""
    return require_auth(identity) and is_admin(identity)


def get_request_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> RequestContext:
    """
    FastAPI dependency building the RequestContext.

    Token lookup order:
      1. Authorization: Bearer <token>
      2. Supabase session cookie (AUTH_COOKIE_NAME)
    """
    token = credentials.credentials if credentials else request.cookies.get(settings.AUTH_COOKIE_NAME)
    return RequestContext(identity=get_current_user(token))
