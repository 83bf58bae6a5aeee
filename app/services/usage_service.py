# app/services/usage_service.py
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlmodel import Session

from app.core.errors import NotFoundError
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.usage import UsageData, UsageStats, UsageUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierLimits:
    books_per_month: int
    words_per_month: int
    max_words_per_book: int


TIER_LIMITS: dict[str, TierLimits] = {
    "FREE": TierLimits(books_per_month=3, words_per_month=150_000, max_words_per_book=50_000),
    "BASIC": TierLimits(books_per_month=10, words_per_month=750_000, max_words_per_book=75_000),
    "PREMIUM": TierLimits(books_per_month=25, words_per_month=5_000_000, max_words_per_book=200_000),
}


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _start_of_next_month(value: datetime) -> datetime:
    if value.month == 12:
        return value.replace(year=value.year + 1, month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return value.replace(month=value.month + 1, day=1, hour=0, minute=0, second=0, microsecond=0)


class UsageService:
    """
    Monthly generation quotas per subscription tier.

    Counters live on the users row. Increments are delegated to
    UserRepository.increment_usage(), which is a single atomic UPDATE.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    @staticmethod
    def get_tier_limits(tier: str) -> TierLimits:
        return TIER_LIMITS.get(tier, TIER_LIMITS["FREE"])

    def reset_usage_if_needed(self, session: Session, user: User, now: datetime | None = None) -> User:
        """Zero the counters once a new calendar month has started."""
        now = now or datetime.now(timezone.utc)
        if now >= _start_of_next_month(_as_utc(user.last_reset_date)):
            logger.info("Resetting monthly usage for user %s", user.id)
            return self.repo.reset_usage(session, user)
        return user

    def record_generation(self, session: Session, user_id: str, books: int = 1, words: int = 0) -> None:
        """
        Count a finished book against the monthly quota.

        Called by the book generation pipeline once a book completes; no
        HTTP route in this service writes usage.

        Raises:
            NotFoundError: if the user row does not exist.
        """
        if not self.repo.increment_usage(session, user_id, books=books, words=words):
            raise NotFoundError("User not found")

    def get_usage_stats(self, user: User) -> UsageStats:
        limits = self.get_tier_limits(user.subscription_tier)
        books_left = max(0, limits.books_per_month - user.books_generated)
        words_left = max(0, limits.words_per_month - user.words_generated)
        last_reset = _as_utc(user.last_reset_date)

        return UsageStats(
            user_id=user.id,
            tier=user.subscription_tier,
            books_generated=user.books_generated,
            words_generated=user.words_generated,
            books_remaining_this_month=books_left,
            words_remaining_this_month=words_left,
            last_reset_date=last_reset,
            current_period_end=_start_of_next_month(last_reset),
            is_at_limit=books_left == 0 or words_left == 0,
            can_generate_book=books_left > 0 and words_left > 0,
        )

    def get_usage_overview(self, session: Session, user_id: str) -> UsageData:
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("User not found")

        user = self.reset_usage_if_needed(session, user)
        return UsageData(
            usage=self.get_usage_stats(user),
            tier=user.subscription_tier,
            user=UsageUser(
                id=user.id,
                email=user.email,
                subscription_tier=user.subscription_tier,
            ),
        )
