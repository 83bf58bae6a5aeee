# app/repositories/user_repo.py
from datetime import datetime, timezone

from sqlalchemy import update
from sqlmodel import Session, select

from app.models.user import User, UserSettings


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Basic CRUD -----

    def get_by_id(self, session: Session, user_id: str) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def list(self, session: Session, skip: int = 0, limit: int = 50) -> list[User]:
        """
        Paginated user listing, oldest accounts first.

        Args:
            skip: offset rows (for paging)
            limit: max number of rows returned
        """
        stmt = select(User).order_by(User.created_at).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def create(self, session: Session, user: User) -> User:
        """
        Insert a new User together with its default UserSettings row.

        Raises:
            sqlalchemy.exc.IntegrityError: if the id or email already exists.
                The session is rolled back before re-raising.
        """
        session.add(user)
        session.add(UserSettings(user_id=user.id))
        try:
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    # ----- Usage counters -----

    def increment_usage(
        self,
        session: Session,
        user_id: str,
        books: int = 0,
        words: int = 0,
    ) -> bool:
        """
        Atomically add to the usage counters.

        Runs a single UPDATE ... SET col = col + n so concurrent requests
        never lose an increment. Returns False if no such user exists.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                books_generated=User.books_generated + books,
                words_generated=User.words_generated + words,
            )
        )
        result = session.exec(stmt)
        session.commit()
        return result.rowcount > 0

    def reset_usage(self, session: Session, user: User) -> User:
        """Zero the monthly counters and stamp a new reset date."""
        user.books_generated = 0
        user.words_generated = 0
        user.last_reset_date = datetime.now(timezone.utc)
        return self.update(session, user)
