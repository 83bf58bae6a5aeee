# app/routers/users.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import RequestContext, get_request_context
from app.database import get_session
from app.repositories.user_repo import UserRepository
from app.schemas.user import (
    ProfileUpdate,
    ProfileUpdateResponse,
    UserCreate,
    UserListResponse,
    UserRead,
)
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])
admin_router = APIRouter(prefix="/admin", tags=["Admin"])

repo = UserRepository()
service = UserService(repo)


@router.post("/create", response_model=UserRead)
def create_user(
    payload: UserCreate,
    session: Session = Depends(get_session),
):
    """
    Mirror a freshly signed-up Supabase user into the database.

    Called by the auth callback right after sign-in, so it takes no
    session; the caller is trusted to pass the Supabase user id.

    Errors:
      - 409 if a user with this id or email already exists
    """
    return service.create_user(session, payload)


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    payload: ProfileUpdate,
    ctx: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
):
    """
    Update the authenticated user's display name.

    Errors:
      - 401 if not signed in
      - 400 if name is missing or blank
    """
    identity = ctx.require_user()
    user = service.update_user_profile(session, identity.id, payload.name)
    return ProfileUpdateResponse(user=UserRead.model_validate(user))


# -------- Admin endpoints --------


@admin_router.get("/users", response_model=UserListResponse)
def list_users(
    ctx: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    List all users (admin only).

    Pagination via skip/limit.
    """
    ctx.require_admin_user()
    users = service.list_users(session, skip, limit)
    return UserListResponse(data=[UserRead.model_validate(u) for u in users])
