"""
Tests for diner feedback and its moderation.
"""

from datetime import timedelta

from rest_api.models import AdminLog, Feedback
from shared.utils.dates import utcnow
from tests.conftest import headers_for


def submit(client, restaurant_id, **body):
    payload = {"rating": 5, "comment": "Lovely"}
    payload.update(body)
    return client.post(f"/api/restaurants/{restaurant_id}/feedback/submit", json=payload)


class TestSubmitFeedback:
    """Test POST /api/restaurants/{id}/feedback/submit."""

    def test_free_restaurant_rejects_feedback(self, client, restaurant):
        response = submit(client, restaurant.id)
        assert response.status_code == 403
        assert response.json()["detail"] == "Customer feedback is only available for premium restaurants"

    def test_premium_restaurant_accepts_feedback(self, client, premium_restaurant):
        response = submit(client, premium_restaurant.id, customerName="Dana", customerEmail="dana@example.com")
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["rating"] == 5
        assert data["customerName"] == "Dana"

    def test_expired_premium_counts_as_free(self, client, premium_restaurant, premium_owner, db_session):
        premium_owner.premium_end_date = utcnow() - timedelta(days=1)
        db_session.commit()

        assert submit(client, premium_restaurant.id).status_code == 403

    def test_rating_bounds(self, client, premium_restaurant):
        assert submit(client, premium_restaurant.id, rating=0).status_code == 400
        assert submit(client, premium_restaurant.id, rating=6).status_code == 400

    def test_item_from_another_restaurant(self, client, premium_restaurant, menu):
        response = submit(client, premium_restaurant.id, menuItemId=menu["items"][0].id)
        assert response.status_code == 400

    def test_unknown_restaurant(self, client):
        assert submit(client, 31337).status_code == 404


class TestModeration:
    """Owner and admin moderation."""

    def test_owner_lists_and_approves(self, client, premium_restaurant, premium_headers):
        feedback_id = submit(client, premium_restaurant.id).json()["id"]

        listed = client.get(f"/api/restaurants/{premium_restaurant.id}/feedback", headers=premium_headers)
        assert listed.status_code == 200
        assert [f["id"] for f in listed.json()] == [feedback_id]

        approved = client.post(f"/api/feedback/{feedback_id}/approve", headers=premium_headers)
        assert approved.status_code == 200
        assert approved.json()["status"] == "approved"

    def test_owner_rejects(self, client, premium_restaurant, premium_headers, db_session):
        feedback_id = submit(client, premium_restaurant.id).json()["id"]
        response = client.post(f"/api/feedback/{feedback_id}/reject", headers=premium_headers)
        assert response.json()["status"] == "rejected"
        assert db_session.get(Feedback, feedback_id).status == "rejected"

    def test_other_owner_cannot_moderate(self, client, premium_restaurant, other_owner):
        feedback_id = submit(client, premium_restaurant.id).json()["id"]
        response = client.post(f"/api/feedback/{feedback_id}/approve", headers=headers_for(other_owner))
        assert response.status_code == 403

    def test_other_owner_cannot_list(self, client, premium_restaurant, other_owner):
        response = client.get(
            f"/api/restaurants/{premium_restaurant.id}/feedback", headers=headers_for(other_owner)
        )
        assert response.status_code == 403

    def test_admin_moderation_is_logged(self, client, premium_restaurant, admin_headers, db_session):
        feedback_id = submit(client, premium_restaurant.id).json()["id"]

        pending = client.get("/api/admin/feedback", params={"status": "pending"}, headers=admin_headers)
        assert [f["id"] for f in pending.json()] == [feedback_id]

        response = client.patch(f"/api/admin/feedback/{feedback_id}/reject", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "rejected"

        log = db_session.query(AdminLog).filter_by(entity_type="feedback").one()
        assert log.action == "reject_feedback"
        assert log.entity_id == feedback_id
