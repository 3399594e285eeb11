"""
Tests for SubscriptionService: tier changes, expiry and limit checks.
"""

from datetime import timedelta

import pytest

from rest_api.models import Restaurant, Subscription
from rest_api.services.domain import SubscriptionService
from shared.config.constants import SubscriptionTier
from shared.utils.dates import as_utc, utcnow
from shared.utils.exceptions import ValidationError
from tests.conftest import make_restaurant, make_user


class TestTierChanges:
    """Upgrade and downgrade."""

    def test_upgrade_sets_window_and_subscription_row(self, db_session, owner):
        service = SubscriptionService(db_session)
        before = utcnow()

        user = service.upgrade_to_premium(owner.id, "3_months")

        assert user.subscription_tier == SubscriptionTier.PREMIUM
        assert user.premium_duration == "3_months"
        assert user.notification_sent is False
        window = as_utc(user.premium_end_date) - as_utc(user.premium_start_date)
        assert window == timedelta(days=90)
        assert as_utc(user.premium_start_date) >= before.replace(microsecond=0)

        row = db_session.query(Subscription).one()
        assert row.is_active is True
        assert row.tier == SubscriptionTier.PREMIUM

    def test_upgrade_again_replaces_active_subscription(self, db_session, owner):
        service = SubscriptionService(db_session)
        service.upgrade_to_premium(owner.id, "1_month")
        service.upgrade_to_premium(owner.id, "1_year")

        rows = db_session.query(Subscription).order_by(Subscription.id).all()
        assert [r.is_active for r in rows] == [False, True]

    def test_unknown_duration(self, db_session, owner):
        with pytest.raises(ValidationError):
            SubscriptionService(db_session).upgrade_to_premium(owner.id, "2_weeks")

    def test_downgrade_clears_premium_fields(self, db_session, premium_owner):
        user = SubscriptionService(db_session).downgrade_to_free(premium_owner.id)

        assert user.subscription_tier == SubscriptionTier.FREE
        assert user.premium_start_date is None
        assert user.premium_end_date is None
        assert user.premium_duration is None

    def test_downgrade_keeps_restaurants(self, db_session, premium_owner):
        for name in ("A", "B", "C"):
            make_restaurant(db_session, premium_owner, name=name)
        service = SubscriptionService(db_session)

        service.downgrade_to_free(premium_owner.id)
        over_limit = service.manage_restaurants_by_subscription(premium_owner.id)

        assert [r.name for r in over_limit] == ["C", "B"]
        assert db_session.query(Restaurant).count() == 3


class TestExpiry:
    """Expired premium accounts."""

    def test_expired_premium_is_downgraded_on_limit_check(self, db_session, premium_owner):
        premium_owner.premium_end_date = utcnow() - timedelta(minutes=1)
        db_session.commit()
        service = SubscriptionService(db_session)

        assert service.effective_tier(premium_owner) == SubscriptionTier.FREE
        limits = service.check_user_limits(premium_owner.id)

        assert limits.tier == SubscriptionTier.FREE
        assert limits.limits.max_restaurants == 1
        db_session.refresh(premium_owner)
        assert premium_owner.subscription_tier == SubscriptionTier.FREE

    def test_expiry_notifications_sent_once(self, db_session):
        now = utcnow()
        soon = make_user(
            db_session,
            "soon",
            subscription_tier=SubscriptionTier.PREMIUM,
            premium_end_date=now + timedelta(days=3),
        )
        make_user(
            db_session,
            "later",
            subscription_tier=SubscriptionTier.PREMIUM,
            premium_end_date=now + timedelta(days=60),
        )
        service = SubscriptionService(db_session)

        notified = service.check_expiry_notifications()
        assert [u.id for u in notified] == [soon.id]
        assert service.check_expiry_notifications() == []

        db_session.refresh(soon)
        assert soon.notification_sent is True


class TestStatus:
    """Status and limits payloads."""

    def test_free_status(self, db_session, owner, restaurant):
        status = SubscriptionService(db_session).get_subscription_status(owner.id)
        assert status == {
            "tier": "free",
            "is_paid": False,
            "max_restaurants": 1,
            "current_restaurants": 1,
            "can_create_restaurant": False,
            "max_menu_item_images": 10,
            "has_ads": True,
            "expires_at": None,
            "days_remaining": None,
        }

    def test_premium_status_endpoint(self, client, premium_headers):
        response = client.get("/api/user/subscription-status", headers=premium_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["tier"] == "premium"
        assert data["isPaid"] is True
        assert data["maxRestaurants"] == 3
        assert data["canCreateRestaurant"] is True
        assert data["hasAds"] is False
        assert data["daysRemaining"] == 30

    def test_status_requires_auth(self, client):
        assert client.get("/api/user/subscription-status").status_code == 401
