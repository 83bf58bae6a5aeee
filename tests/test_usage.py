"""Monthly usage counters and GET /api/subscription/usage"""

from datetime import datetime, timezone

import pytest

from app.core.errors import NotFoundError
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.services.usage_service import TIER_LIMITS, UsageService
from conftest import auth_headers


@pytest.fixture
def usage_service():
    return UsageService(UserRepository())


class TestUsageService:

    def test_record_generation_increments_counters(self, session, make_user, usage_service):
        make_user("user-1")

        usage_service.record_generation(session, "user-1", books=1, words=1200)
        usage_service.record_generation(session, "user-1", books=1, words=800)

        session.expunge_all()
        user = session.get(User, "user-1")
        assert user.books_generated == 2
        assert user.words_generated == 2000

    def test_record_generation_for_missing_user(self, session, usage_service):
        with pytest.raises(NotFoundError):
            usage_service.record_generation(session, "ghost")

    def test_counters_reset_in_a_new_month(self, session, make_user, usage_service):
        user = make_user(
            "user-1",
            books_generated=3,
            words_generated=90_000,
            last_reset_date=datetime(2024, 1, 15, tzinfo=timezone.utc),
        )

        user = usage_service.reset_usage_if_needed(session, user, now=datetime(2024, 2, 1, tzinfo=timezone.utc))

        assert user.books_generated == 0
        assert user.words_generated == 0

    def test_counters_kept_within_the_same_month(self, session, make_user, usage_service):
        user = make_user(
            "user-1",
            books_generated=2,
            last_reset_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

        user = usage_service.reset_usage_if_needed(session, user, now=datetime(2024, 1, 31, 23, 59, tzinfo=timezone.utc))

        assert user.books_generated == 2

    def test_free_tier_limit_reached(self, make_user, usage_service):
        user = make_user("user-1", books_generated=TIER_LIMITS["FREE"].books_per_month)

        stats = usage_service.get_usage_stats(user)

        assert stats.books_remaining_this_month == 0
        assert stats.is_at_limit is True
        assert stats.can_generate_book is False

    def test_unknown_tier_falls_back_to_free(self, usage_service):
        assert usage_service.get_tier_limits("ENTERPRISE") == TIER_LIMITS["FREE"]


class TestUsageEndpoint:

    def test_requires_sign_in(self, client):
        assert client.get("/api/subscription/usage").status_code == 401

    def test_returns_usage_overview(self, client, make_user):
        make_user("user-1", subscription_tier="BASIC", books_generated=4, last_reset_date=datetime.now(timezone.utc))

        response = client.get("/api/subscription/usage", headers=auth_headers("user-1"))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["tier"] == "BASIC"
        assert data["usage"]["booksGenerated"] == 4
        assert data["usage"]["booksRemainingThisMonth"] == 6
        assert data["usage"]["canGenerateBook"] is True
        assert data["user"]["subscriptionTier"] == "BASIC"
