"""
Tests for dietary preference upsert and lookup.
"""

import uuid

from rest_api.models import DietaryPreference


class TestDietaryUpsert:
    """Test POST /api/dietary-preferences."""

    def test_anonymous_create_generates_session_id(self, client):
        response = client.post("/api/dietary-preferences", json={"preferences": {"vegan": True}})
        assert response.status_code == 201

        data = response.json()
        session_id = data["sessionId"]
        assert uuid.UUID(session_id).version == 4
        assert data["preference"]["preferences"] == {"vegan": True}
        assert data["preference"]["allergies"] == []

    def test_second_post_updates_and_returns_200(self, client):
        first = client.post("/api/dietary-preferences", json={"sessionId": "abc", "calorieGoal": 600})
        assert first.status_code == 201

        second = client.post("/api/dietary-preferences", json={"sessionId": "abc", "allergies": ["nuts"]})
        assert second.status_code == 200
        preference = second.json()["preference"]
        assert preference["id"] == first.json()["preference"]["id"]
        # Fields absent from the body are left alone
        assert preference["calorieGoal"] == 600
        assert preference["allergies"] == ["nuts"]

    def test_preferences_are_replaced_not_merged(self, client):
        client.post("/api/dietary-preferences", json={"sessionId": "r", "preferences": {"vegan": True}})
        response = client.post(
            "/api/dietary-preferences", json={"sessionId": "r", "preferences": {"glutenFree": True}}
        )
        assert response.json()["preference"]["preferences"] == {"glutenFree": True}

    def test_signed_in_record_is_keyed_by_user(self, client, auth_headers, owner, db_session):
        response = client.post(
            "/api/dietary-preferences",
            json={"sessionId": "ignored", "preferences": {"vegetarian": True}},
            headers=auth_headers,
        )
        assert response.status_code == 201

        record = db_session.query(DietaryPreference).one()
        assert record.user_id == owner.id
        assert record.session_id is None

        again = client.post("/api/dietary-preferences", json={"calorieGoal": 700}, headers=auth_headers)
        assert again.status_code == 200
        assert db_session.query(DietaryPreference).count() == 1

    def test_negative_calorie_goal_is_rejected(self, client):
        response = client.post("/api/dietary-preferences", json={"calorieGoal": -5})
        assert response.status_code == 400

    def test_invalid_token_is_rejected(self, client):
        response = client.post(
            "/api/dietary-preferences",
            json={"preferences": {}},
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401


class TestDietaryLookup:
    """Test GET /api/dietary-preferences."""

    def test_get_by_session(self, client):
        client.post("/api/dietary-preferences", json={"sessionId": "look", "allergies": ["soy"]})
        response = client.get("/api/dietary-preferences", params={"sessionId": "look"})
        assert response.status_code == 200
        assert response.json()["allergies"] == ["soy"]

    def test_unknown_session_is_404(self, client):
        response = client.get("/api/dietary-preferences", params={"sessionId": "missing"})
        assert response.status_code == 404

    def test_no_key_is_404(self, client):
        assert client.get("/api/dietary-preferences").status_code == 404
