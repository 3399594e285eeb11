"""
Tests for the admin console API.
"""

from rest_api.models import AdminLog, MenuView, PricingPlan, User
from tests.conftest import ADMIN_PASSWORD, make_restaurant, make_user


class TestAdminAccess:
    """Every admin route needs an admin token."""

    def test_owner_gets_403(self, client, auth_headers):
        response = client.get("/api/admin/dashboard", headers=auth_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    def test_anonymous_gets_401(self, client):
        assert client.get("/api/admin/users").status_code == 401


class TestDashboard:

    def test_counts(self, client, admin_headers, owner, premium_owner, restaurant, db_session):
        db_session.add(MenuView(restaurant_id=restaurant.id, source="qr"))
        db_session.commit()

        response = client.get("/api/admin/dashboard", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["stats"] == {
            "totalUsers": 3,
            "activeUsers": 3,
            "freeUsers": 2,
            "paidUsers": 1,
            "totalRestaurants": 1,
        }
        assert data["viewStats"]["daily"] == 1
        assert data["viewStats"]["total"] == 1
        assert len(data["recentUsers"]) == 3


class TestUserManagement:

    def test_list_paginates_by_ten(self, client, admin_headers, db_session):
        for n in range(12):
            make_user(db_session, f"diner{n:02d}")

        first = client.get("/api/admin/users", headers=admin_headers).json()
        assert len(first["users"]) == 10
        assert first["pagination"] == {
            "page": 1,
            "limit": 10,
            "total": 13,
            "totalPages": 2,
            "hasNext": True,
            "hasPrev": False,
        }

        second = client.get("/api/admin/users", params={"page": 2}, headers=admin_headers).json()
        assert len(second["users"]) == 3
        assert second["pagination"]["hasNext"] is False

    def test_search_and_tier_filter(self, client, admin_headers, owner, premium_owner):
        found = client.get("/api/admin/users", params={"search": "Olivia"}, headers=admin_headers).json()
        assert [u["username"] for u in found["users"]] == ["owner"]

        paid = client.get("/api/admin/users", params={"tier": "premium"}, headers=admin_headers).json()
        assert [u["username"] for u in paid["users"]] == ["premium"]

    def test_create_user_and_admin(self, client, admin_headers, admin_user, db_session):
        body = {"username": "newbie", "email": "newbie@test.com", "password": "longenough1"}
        created = client.post("/api/admin/users", json=body, headers=admin_headers)
        assert created.status_code == 201
        assert created.json()["isAdmin"] is False

        body = {"username": "second", "email": "second@test.com", "password": "longenough1"}
        admin = client.post("/api/admin/users/create-admin", json=body, headers=admin_headers)
        assert admin.json()["isAdmin"] is True

        actions = {log.action for log in db_session.query(AdminLog).filter_by(admin_id=admin_user.id)}
        assert {"create_user", "create_admin"} <= actions

    def test_create_duplicate_username(self, client, admin_headers, owner):
        body = {"username": "owner", "email": "fresh@test.com", "password": "longenough1"}
        assert client.post("/api/admin/users", json=body, headers=admin_headers).status_code == 400

    def test_deactivate_revokes_tokens(self, client, admin_headers, owner, auth_headers):
        assert client.get("/api/auth/me", headers=auth_headers).status_code == 200

        response = client.patch(
            f"/api/admin/users/{owner.id}/status",
            json={"isActive": False},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["isActive"] is False

        assert client.get("/api/auth/me", headers=auth_headers).status_code == 401

    def test_reset_password(self, client, admin_headers, owner, db_session):
        response = client.put(
            f"/api/admin/users/{owner.id}/reset-password",
            json={"newPassword": "brandnewpass"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Password reset successfully"}

        login = client.post("/api/auth/login", json={"username": "owner", "password": "brandnewpass"})
        assert login.status_code == 200

    def test_reset_password_unknown_user(self, client, admin_headers):
        response = client.put(
            "/api/admin/users/9999/reset-password",
            json={"newPassword": "brandnewpass"},
            headers=admin_headers,
        )
        assert response.status_code == 404


class TestSubscriptionChange:

    def test_upgrade(self, client, admin_headers, owner, db_session):
        response = client.post(
            f"/api/admin/users/{owner.id}/subscription",
            json={"tier": "premium", "duration": "1_month"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["subscriptionTier"] == "premium"
        assert data["user"]["premiumDuration"] == "1_month"
        assert data["overLimitRestaurantIds"] == []

        log = db_session.query(AdminLog).filter_by(action="upgrade_subscription").one()
        assert log.entity_id == owner.id

    def test_premium_without_duration(self, client, admin_headers, owner):
        response = client.post(
            f"/api/admin/users/{owner.id}/subscription",
            json={"tier": "premium"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_downgrade_reports_over_limit(self, client, admin_headers, premium_owner, db_session):
        keep = make_restaurant(db_session, premium_owner, name="Keep")
        extra = make_restaurant(db_session, premium_owner, name="Extra")

        response = client.post(
            f"/api/admin/users/{premium_owner.id}/subscription",
            json={"tier": "free"},
            headers=admin_headers,
        )
        data = response.json()
        assert data["user"]["subscriptionTier"] == "free"
        assert data["overLimitRestaurantIds"] == [extra.id]
        assert keep.id not in data["overLimitRestaurantIds"]


class TestPlatform:

    def test_restaurants_are_enriched(self, client, admin_headers, restaurant, menu):
        client.post(f"/api/restaurants/{restaurant.id}/views", json={})

        response = client.get("/api/admin/restaurants", headers=admin_headers)
        assert response.status_code == 200
        [row] = response.json()
        assert row["ownerName"] == "owner"
        assert row["ownerSubscriptionTier"] == "free"
        assert row["categoryCount"] == 1
        assert row["menuItemCount"] == 3
        assert row["viewCount"] == 1
        assert row["lastVisitDate"] is not None

    def test_registration_analytics(self, client, admin_headers):
        for n, source in enumerate(["website", "website", "mobile", "partner"]):
            client.post(
                "/api/auth/register",
                json={
                    "username": f"signup{n}",
                    "email": f"signup{n}@test.com",
                    "password": "longenough1",
                    "source": source,
                },
            )

        response = client.get("/api/admin/registration-analytics", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["totalRegistrationsInRange"] == 4
        assert data["registrationsBySource"] == {
            "website": 2,
            "mobile": 1,
            "referral": 0,
            "other": 0,
            "partner": 1,
        }

        filtered = client.get(
            "/api/admin/registration-analytics", params={"source": "mobile"}, headers=admin_headers
        ).json()
        assert filtered["totalRegistrationsInRange"] == 1
        assert filtered["registrationsBySource"] == {"mobile": 1}

    def test_registration_analytics_bad_range(self, client, admin_headers):
        response = client.get(
            "/api/admin/registration-analytics",
            params={"startDate": "2026-02-01T00:00:00Z", "endDate": "2026-01-01T00:00:00Z"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_logs_newest_first(self, client, admin_headers):
        client.post("/api/admin/pricing", json={"name": "Basic", "price": "0"}, headers=admin_headers)
        client.post("/api/admin/pricing", json={"name": "Pro", "price": "9.99"}, headers=admin_headers)

        logs = client.get("/api/admin/logs", params={"limit": 1}, headers=admin_headers).json()
        assert len(logs) == 1
        assert logs[0]["action"] == "create"
        assert logs[0]["entityType"] == "pricing_plan"


class TestProfile:

    def test_get_profile(self, client, admin_headers):
        response = client.get("/api/admin/profile", headers=admin_headers)
        assert response.json()["username"] == "admin"

    def test_new_password_needs_current(self, client, admin_headers):
        response = client.patch(
            "/api/admin/profile", json={"newPassword": "anotherpass1"}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_change_password(self, client, admin_headers, admin_user, db_session):
        response = client.patch(
            "/api/admin/profile",
            json={"currentPassword": ADMIN_PASSWORD, "newPassword": "anotherpass1", "fullName": "Ada Admin"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["fullName"] == "Ada Admin"

        login = client.post("/api/auth/admin-login", json={"username": "admin", "password": "anotherpass1"})
        assert login.status_code == 200


class TestContentManagement:

    def test_pricing_crud_is_audited(self, client, admin_headers, db_session):
        created = client.post(
            "/api/admin/pricing",
            json={"name": "Premium", "price": "19.99", "tier": "premium", "features": ["3 restaurants"]},
            headers=admin_headers,
        )
        assert created.status_code == 201
        plan_id = created.json()["id"]

        updated = client.patch(f"/api/admin/pricing/{plan_id}", json={"isPopular": True}, headers=admin_headers)
        assert updated.json()["isPopular"] is True

        assert client.delete(f"/api/admin/pricing/{plan_id}", headers=admin_headers).status_code == 204
        assert db_session.query(PricingPlan).count() == 0

        actions = [
            log.action
            for log in db_session.query(AdminLog).filter_by(entity_type="pricing_plan").order_by(AdminLog.id)
        ]
        assert actions == ["create", "update", "delete"]

    def test_testimonial_and_example(self, client, admin_headers):
        testimonial = client.post(
            "/api/admin/testimonials",
            json={"name": "Sam", "content": "Our menu looks great", "rating": 4},
            headers=admin_headers,
        )
        assert testimonial.status_code == 201

        example = client.post(
            "/api/admin/menu-examples",
            json={"name": "Sushi bar", "menuUrl": "https://example.com/menu"},
            headers=admin_headers,
        )
        assert example.status_code == 201
        assert client.get("/api/admin/menu-examples", headers=admin_headers).json()[0]["name"] == "Sushi bar"

    def test_advertisement_window(self, client, admin_headers, admin_user, db_session):
        response = client.post(
            "/api/admin/advertisements",
            json={
                "title": "Backwards",
                "position": "top",
                "startDate": "2026-05-01T00:00:00Z",
                "endDate": "2026-04-01T00:00:00Z",
            },
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_contact_info_update(self, client, admin_headers):
        response = client.patch(
            "/api/admin/contact-info", json={"phone": "+1 555 0000"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["phone"] == "+1 555 0000"
        assert response.json()["email"] == "support@vividplate.com"

        public = client.get("/api/contact-info").json()
        assert public["phone"] == "+1 555 0000"

    def test_null_for_required_content_field(self, client, admin_headers):
        response = client.patch("/api/admin/contact-info", json={"email": None}, headers=admin_headers)
        assert response.status_code == 400

        plan = client.post(
            "/api/admin/pricing",
            json={"name": "Starter", "price": "0", "tier": "free"},
            headers=admin_headers,
        ).json()
        response = client.patch(f"/api/admin/pricing/{plan['id']}", json={"price": None}, headers=admin_headers)
        assert response.status_code == 400

    def test_ad_settings(self, client, admin_headers):
        listed = client.get("/api/admin/ad-settings", headers=admin_headers).json()
        assert {row["position"] for row in listed} == {"top", "middle", "bottom", "sidebar"}

        response = client.put(
            "/api/admin/ad-settings",
            json={"position": "top", "isEnabled": False, "displayFrequency": 5},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["isEnabled"] is False
        assert response.json()["displayFrequency"] == 5
