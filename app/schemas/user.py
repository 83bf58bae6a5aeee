# app/schemas/user.py
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import CamelModel, SuccessResponse

Role = Literal["USER", "ADMIN"]
SubscriptionTier = Literal["FREE", "BASIC", "PREMIUM"]


class UserSettingsRead(CamelModel):
    id: int
    user_id: str
    theme: str
    language: str
    email_notifications: bool
    push_notifications: bool
    marketing_emails: bool
    profile_visibility: str
    created_at: datetime
    updated_at: datetime


class UserRead(CamelModel):
    """Response schema returned to clients."""

    id: str
    email: str
    name: str | None = None
    avatar: str | None = None
    role: Role
    subscription_tier: SubscriptionTier
    books_generated: int
    words_generated: int
    last_reset_date: datetime
    created_at: datetime
    updated_at: datetime
    settings: UserSettingsRead | None = None


class UserCreate(CamelModel):
    """
    Payload sent after first sign-in to mirror the Supabase user
    into our database.

    `id` must be the Supabase auth user id.
    """

    id: str = Field(min_length=1)
    email: EmailStr
    name: str | None = Field(default=None, max_length=200)
    avatar: str | None = None

    @field_validator("id")
    @classmethod
    def normalize_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("id cannot be empty")
        return v


class ProfileUpdate(CamelModel):
    """
    Profile edit payload. Only `name` is editable.

    Emptiness is checked by UserService so the route can answer 400
    with a specific message.
    """

    name: str | None = Field(default=None, max_length=200)


class ProfileUpdateResponse(SuccessResponse):
    user: UserRead


class UserListResponse(SuccessResponse):
    data: list[UserRead]
