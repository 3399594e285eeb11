"""
Tests for the operations CLI.
The CLI opens its own sessions on the shared in-memory engine.
"""

from datetime import timedelta

from typer.testing import CliRunner

from cli import app
from rest_api.models import AdSettings, User
from shared.config.constants import SubscriptionTier
from shared.utils.dates import utcnow
from tests.conftest import make_user

runner = CliRunner()


class TestCreateAdmin:

    def test_creates_admin(self, db_session):
        result = runner.invoke(app, ["create-admin", "root", "root@test.com", "--password", "supersecret"])
        assert result.exit_code == 0, result.output

        admin = db_session.query(User).filter_by(username="root").one()
        assert admin.is_admin is True

    def test_rejects_taken_username(self, db_session, owner):
        result = runner.invoke(app, ["create-admin", "owner", "new@test.com", "--password", "supersecret"])
        assert result.exit_code == 1
        assert "username" in result.output

    def test_rejects_short_password(self, db_session):
        result = runner.invoke(app, ["create-admin", "root", "root@test.com", "--password", "short"])
        assert result.exit_code == 1


class TestSeed:

    def test_seed_creates_ad_settings(self, db_session):
        result = runner.invoke(app, ["db-seed"])
        assert result.exit_code == 0, result.output
        assert db_session.query(AdSettings).count() == 4


class TestCheckExpiry:

    def test_downgrades_and_reminds(self, db_session):
        now = utcnow()
        expired = make_user(
            db_session,
            "lapsed",
            subscription_tier=SubscriptionTier.PREMIUM,
            premium_end_date=now - timedelta(days=2),
        )
        expiring = make_user(
            db_session,
            "expiring",
            subscription_tier=SubscriptionTier.PREMIUM,
            premium_end_date=now + timedelta(days=5),
        )

        result = runner.invoke(app, ["check-expiry"])
        assert result.exit_code == 0, result.output
        assert "1 downgraded, 1 reminded" in result.output

        db_session.expire_all()
        assert db_session.get(User, expired.id).subscription_tier == SubscriptionTier.FREE
        assert db_session.get(User, expiring.id).notification_sent is True

    def test_nothing_to_do(self, db_session):
        result = runner.invoke(app, ["check-expiry"])
        assert result.exit_code == 0
        assert "0 downgraded, 0 reminded" in result.output
