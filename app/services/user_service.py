# app/services/user_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - mirror Supabase users into the database with explicit defaults
      - enforce profile rules (non-empty trimmed name)
      - translate storage failures into domain errors
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def create_user(self, session: Session, payload: UserCreate) -> User:
        """
        Create the profile row for a freshly signed-up user.

        Defaults: role USER, tier FREE, zeroed usage counters, plus a
        default settings row.

        Not idempotent: a second call with the same id (or email) hits
        the uniqueness constraint and raises ConflictError. The existing
        row is left untouched.
        """
        user = User(
            id=payload.id,
            email=str(payload.email),
            name=payload.name,
            avatar=payload.avatar,
            role="USER",
            subscription_tier="FREE",
            books_generated=0,
            words_generated=0,
        )
        try:
            created = self.repo.create(session, user)
        except IntegrityError:
            logger.info("User %s already exists", payload.id)
            raise ConflictError("User already exists")

        logger.info("Created user %s", created.id)
        return created

    def get_user(self, session: Session, user_id: str) -> User:
        """
        Raises:
            NotFoundError: if the profile row does not exist.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_user_profile(self, session: Session, user_id: str, name: str | None) -> User:
        """
        Update the display name. Nothing else is editable here.

        Raises:
            ValidationError: if name is missing or blank after trimming.
            NotFoundError: if the profile row does not exist.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required")

        user = self.get_user(session, user_id)
        user.name = name
        return self.repo.update(session, user)

    def list_users(self, session: Session, skip: int = 0, limit: int = 50) -> list[User]:
        """List users with pagination (admin only)."""
        return self.repo.list(session, skip=skip, limit=limit)
