# app/models/user.py
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field, Relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Persistent user profile.

    Identity:
      - id: MUST match Supabase auth.users.id (the JWT "sub")

    Role:
      - "USER" | "ADMIN"

    This table is *not* responsible for password hashes. Supabase Auth
    stores the password in its own schema. We only mirror identity,
    profile fields, subscription tier and usage counters.
    """

    __tablename__ = "users"

    id: str = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Email from Supabase auth.users",
    )

    name: str | None = Field(default=None, max_length=200)
    avatar: str | None = Field(default=None, description="Avatar URL")

    # USER | ADMIN
    role: str = Field(default="USER", index=True)

    # FREE | BASIC | PREMIUM
    subscription_tier: str = Field(default="FREE", index=True)

    # Usage counters for the current billing month
    books_generated: int = Field(default=0, ge=0)
    words_generated: int = Field(default=0, ge=0)
    last_reset_date: datetime = Field(default_factory=_utcnow)

    created_at: datetime = Field(
        default_factory=_utcnow,
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column_kwargs={"onupdate": _utcnow},
    )

    settings: Optional["UserSettings"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"uselist": False, "lazy": "selectin"},
    )


class UserSettings(SQLModel, table=True):
    """
    Per-user preferences, one row per user.
    Created together with the user profile.
    """

    __tablename__ = "user_settings"

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="users.id", unique=True, index=True)

    # LIGHT | DARK | SYSTEM
    theme: str = Field(default="SYSTEM")
    language: str = Field(default="en", max_length=10)
    email_notifications: bool = Field(default=True)
    push_notifications: bool = Field(default=True)
    marketing_emails: bool = Field(default=False)
    # PRIVATE | PUBLIC | FRIENDS
    profile_visibility: str = Field(default="PRIVATE")

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column_kwargs={"onupdate": _utcnow},
    )

    user: Optional[User] = Relationship(back_populates="settings")
