# app/schemas/usage.py
from datetime import datetime

from app.schemas.common import CamelModel, SuccessResponse
from app.schemas.user import SubscriptionTier


class UsageStats(CamelModel):
    user_id: str
    tier: SubscriptionTier
    books_generated: int
    words_generated: int
    books_remaining_this_month: int
    words_remaining_this_month: int
    last_reset_date: datetime
    current_period_end: datetime
    is_at_limit: bool
    can_generate_book: bool


class UsageUser(CamelModel):
    id: str
    email: str
    subscription_tier: SubscriptionTier


class UsageData(CamelModel):
    usage: UsageStats
    tier: SubscriptionTier
    user: UsageUser


class UsageResponse(SuccessResponse):
    data: UsageData
