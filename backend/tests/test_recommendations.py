"""
Tests for menu recommendation scoring and the recommendations endpoint.
"""

import pytest

from rest_api.models import DietaryPreference
from rest_api.services.domain import score_item, score_items
from rest_api.services.domain.recommendation_service import calorie_score


VEGAN_NO_NUTS = {"preferences": {"vegan": True}, "allergies": ["nuts"], "calorie_goal": 500}


class TestScoreItem:
    """Scoring rules for a single item."""

    def test_vegan_item_near_calorie_goal(self):
        item = {"dietary_info": {"vegan": True}, "calories": 520, "allergens": []}
        result = score_items(VEGAN_NO_NUTS, [item])[0]
        assert result.score == pytest.approx(19.8)
        assert result.match is True

    def test_allergen_wins_over_missing_dietary_info(self):
        result = score_items(VEGAN_NO_NUTS, [{"allergens": ["nuts"]}])[0]
        assert result.score == -100
        assert result.match is False

    def test_allergen_overrides_matching_preferences(self):
        item = {"dietary_info": {"vegan": True}, "calories": 500, "allergens": ["nuts", "soy"]}
        result = score_item(item, {"vegan": True}, ["nuts"], 500)
        assert result.score == -100
        assert result.match is False

    def test_no_dietary_info_scores_zero(self):
        result = score_item({"calories": 500}, {"vegan": True}, [], 500)
        assert result.score == 0
        assert result.match is False

    def test_empty_dietary_info_still_scores_calories(self):
        result = score_item({"dietary_info": {}, "calories": 500, "allergens": []}, {}, [], 500)
        assert result.score == 10
        assert result.match is True

    def test_false_flags_do_not_match(self):
        """A diner not wanting a flag gains nothing from items without it."""
        item = {"dietary_info": {"vegan": False}}
        result = score_item(item, {"vegan": False}, [], None)
        assert result.score == 0
        assert result.match is False

    def test_each_wanted_flag_adds_ten(self):
        item = {"dietary_info": {"vegan": True, "glutenFree": True, "spicy": True}}
        result = score_item(item, {"vegan": True, "glutenFree": True, "spicy": False}, [], None)
        assert result.score == 20
        assert result.match is True

    def test_calorie_match_without_preferences(self):
        item = {"dietary_info": {"vegan": False}, "calories": 450}
        result = score_item(item, {}, [], 500)
        assert result.score == pytest.approx(9.5)
        assert result.match is True

    def test_calories_far_from_goal_do_not_match(self):
        item = {"dietary_info": {"vegan": False}, "calories": 1200}
        result = score_item(item, {}, [], 500)
        assert result.score == pytest.approx(3.0)
        assert result.match is False

    def test_zero_calorie_goal_is_a_goal(self):
        item = {"dietary_info": {"vegan": False}, "calories": 0}
        result = score_item(item, {}, [], 0)
        assert result.score == 10

    @pytest.mark.parametrize(
        "distance,expected",
        [(0, 10), (100, 9), (550, 4.5), (1000, 0), (5000, 0)],
    )
    def test_calorie_score(self, distance, expected):
        assert calorie_score(500, 500 + distance) == pytest.approx(expected)


class TestScoreItems:
    """Ranking over a list of items."""

    def test_sorted_best_first_and_stable(self):
        items = [
            {"name": "a", "dietary_info": {"vegan": False}},
            {"name": "b", "dietary_info": {"vegan": True}},
            {"name": "c", "dietary_info": {"vegan": False}},
            {"name": "d", "allergens": ["nuts"]},
        ]
        results = score_items({"preferences": {"vegan": True}, "allergies": ["nuts"]}, items)
        assert [r.item["name"] for r in results] == ["b", "a", "c", "d"]

    def test_empty_menu(self):
        assert score_items(VEGAN_NO_NUTS, []) == []

    def test_accepts_orm_rows(self, db_session, menu):
        preference = DietaryPreference(
            session_id="s", preferences={"vegan": True}, allergies=["peanuts"], calorie_goal=400
        )
        results = score_items(preference, menu["items"])
        assert [r.item.name for r in results] == ["Garden Salad", "Cheeseburger", "Peanut Noodles"]


class TestRecommendationsEndpoint:
    """Test GET /api/menu-recommendations/{restaurant_id}."""

    def test_ranked_for_session(self, client, restaurant, menu):
        client.post(
            "/api/dietary-preferences",
            json={"sessionId": "diner-1", "preferences": {"vegan": True}, "allergies": ["peanuts"]},
        )
        response = client.get(f"/api/menu-recommendations/{restaurant.id}", params={"sessionId": "diner-1"})
        assert response.status_code == 200

        data = response.json()
        assert len(data) == 3
        assert data[0]["item"]["name"] == "Garden Salad"
        assert data[0]["match"] is True
        assert data[-1]["item"]["name"] == "Peanut Noodles"
        assert data[-1]["score"] == -100

    def test_no_preference_is_404(self, client, restaurant, menu):
        response = client.get(f"/api/menu-recommendations/{restaurant.id}", params={"sessionId": "unknown"})
        assert response.status_code == 404

    def test_unknown_restaurant_is_404(self, client):
        response = client.get("/api/menu-recommendations/9999", params={"sessionId": "x"})
        assert response.status_code == 404

    def test_restaurant_without_items(self, client, restaurant):
        client.post("/api/dietary-preferences", json={"sessionId": "diner-2", "preferences": {}})
        response = client.get(f"/api/menu-recommendations/{restaurant.id}", params={"sessionId": "diner-2"})
        assert response.status_code == 200
        assert response.json() == []

    def test_signed_in_user_preference(self, client, restaurant, menu, auth_headers):
        client.post(
            "/api/dietary-preferences",
            json={"preferences": {"vegan": True}, "allergies": []},
            headers=auth_headers,
        )
        response = client.get(f"/api/menu-recommendations/{restaurant.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()[0]["score"] >= 10

    def test_signed_in_user_does_not_fall_back_to_session(self, client, restaurant, menu, auth_headers):
        client.post("/api/dietary-preferences", json={"sessionId": "diner-3", "preferences": {"vegan": True}})
        response = client.get(
            f"/api/menu-recommendations/{restaurant.id}",
            params={"sessionId": "diner-3"},
            headers=auth_headers,
        )
        assert response.status_code == 404
