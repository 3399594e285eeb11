"""
Tests for menu categories, items and the image quota.
"""

import pytest

from rest_api.models import MenuCategory, MenuItem
from rest_api.services.domain import CategoryService
from shared.utils.exceptions import DatabaseError
from tests.conftest import headers_for


def fill_image_quota(db_session, category, count=10):
    db_session.add_all(
        MenuItem(
            category_id=category.id,
            name=f"Photo dish {n}",
            price="5.00",
            image_url=f"https://cdn.example.com/{n}.jpg",
        )
        for n in range(count)
    )
    db_session.commit()


class TestCategories:
    """Category CRUD."""

    def test_create_appends_display_order(self, client, auth_headers, restaurant):
        first = client.post(
            f"/api/restaurants/{restaurant.id}/categories",
            json={"name": "Starters"},
            headers=auth_headers,
        )
        second = client.post(
            f"/api/restaurants/{restaurant.id}/categories",
            json={"name": "Desserts", "mainCategory": "Food"},
            headers=auth_headers,
        )
        assert first.status_code == 201
        assert first.json()["displayOrder"] == 0
        assert second.json()["displayOrder"] == 1

        listed = client.get(f"/api/restaurants/{restaurant.id}/categories")
        assert [c["name"] for c in listed.json()] == ["Starters", "Desserts"]

    def test_create_on_someone_elses_restaurant(self, client, restaurant, other_owner):
        response = client.post(
            f"/api/restaurants/{restaurant.id}/categories",
            json={"name": "Hijack"},
            headers=headers_for(other_owner),
        )
        assert response.status_code == 403

    def test_create_on_missing_restaurant(self, client, auth_headers):
        response = client.post("/api/restaurants/999/categories", json={"name": "X"}, headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Restaurant with ID 999 not found"

    def test_update(self, client, auth_headers, menu):
        category = menu["category"]
        response = client.patch(
            f"/api/categories/{category.id}",
            json={"name": "Main Courses"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Main Courses"

    def test_delete_cascades_to_items(self, client, auth_headers, menu, db_session):
        response = client.delete(f"/api/categories/{menu['category'].id}", headers=auth_headers)
        assert response.status_code == 204
        assert db_session.query(MenuCategory).count() == 0
        assert db_session.query(MenuItem).count() == 0

    def test_delete_by_non_owner(self, client, menu, other_owner):
        response = client.delete(f"/api/categories/{menu['category'].id}", headers=headers_for(other_owner))
        assert response.status_code == 403

    def test_update_with_null_name(self, client, auth_headers, menu):
        category = menu["category"]
        response = client.patch(f"/api/categories/{category.id}", json={"name": None}, headers=auth_headers)
        assert response.status_code == 400
        assert client.get(f"/api/restaurants/{category.restaurant_id}/categories").json()[0]["name"] == "Mains"


class TestItems:
    """Menu item CRUD."""

    def test_list_is_public(self, client, menu):
        response = client.get(f"/api/categories/{menu['category'].id}/items")
        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_create_item(self, client, auth_headers, menu):
        response = client.post(
            f"/api/categories/{menu['category'].id}/items",
            json={
                "name": "Tomato Soup",
                "price": "6.25",
                "dietaryInfo": {"vegan": True},
                "calories": 220,
                "allergens": ["celery"],
            },
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["price"] == "6.25"
        assert data["currency"] == "USD"
        assert data["displayOrder"] == 3
        assert data["clickCount"] == 0

    def test_invalid_price(self, client, auth_headers, menu):
        response = client.post(
            f"/api/categories/{menu['category'].id}/items",
            json={"name": "Free lunch", "price": "-1"},
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_update_and_delete(self, client, auth_headers, menu, db_session):
        item = menu["items"][0]
        response = client.patch(f"/api/items/{item.id}", json={"isAvailable": False}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["isAvailable"] is False

        assert client.delete(f"/api/items/{item.id}", headers=auth_headers).status_code == 204
        assert db_session.query(MenuItem).count() == 2

    def test_update_by_non_owner(self, client, menu, other_owner):
        item = menu["items"][0]
        response = client.patch(f"/api/items/{item.id}", json={"price": "0"}, headers=headers_for(other_owner))
        assert response.status_code == 403

    def test_missing_item(self, client, auth_headers):
        assert client.patch("/api/items/555", json={"name": "Ghost"}, headers=auth_headers).status_code == 404

    def test_null_for_required_field_is_rejected(self, client, auth_headers, menu):
        item = menu["items"][0]
        response = client.patch(f"/api/items/{item.id}", json={"name": None}, headers=auth_headers)
        assert response.status_code == 400
        assert client.patch(f"/api/items/{item.id}", json={"price": None}, headers=auth_headers).status_code == 400

        # Nullable fields can still be cleared, and the session stays usable
        response = client.patch(
            f"/api/items/{item.id}", json={"calories": None, "name": "Side Salad"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Side Salad"
        assert response.json()["calories"] is None


class TestImageQuota:
    """Free owners may show 10 item images."""

    def test_create_with_image_over_quota(self, client, auth_headers, menu, db_session):
        fill_image_quota(db_session, menu["category"])

        response = client.post(
            f"/api/categories/{menu['category'].id}/items",
            json={"name": "Pretty Cake", "price": "7.00", "imageUrl": "https://cdn.example.com/cake.jpg"},
            headers=auth_headers,
        )
        assert response.status_code == 403
        assert response.json()["detail"] == {
            "message": "Image upload limit reached",
            "limit": 10,
            "used": 10,
        }

    def test_create_without_image_still_allowed(self, client, auth_headers, menu, db_session):
        fill_image_quota(db_session, menu["category"])

        response = client.post(
            f"/api/categories/{menu['category'].id}/items",
            json={"name": "Plain Bread", "price": "2.00"},
            headers=auth_headers,
        )
        assert response.status_code == 201

    def test_adding_image_to_existing_item_over_quota(self, client, auth_headers, menu, db_session):
        fill_image_quota(db_session, menu["category"])
        item = menu["items"][0]

        response = client.patch(
            f"/api/items/{item.id}",
            json={"imageUrl": "https://cdn.example.com/salad.jpg"},
            headers=auth_headers,
        )
        assert response.status_code == 403

    def test_replacing_an_image_does_not_count(self, client, auth_headers, menu, db_session):
        fill_image_quota(db_session, menu["category"], count=9)
        item = menu["items"][0]
        item.image_url = "https://cdn.example.com/old.jpg"
        db_session.commit()

        response = client.patch(
            f"/api/items/{item.id}",
            json={"imageUrl": "https://cdn.example.com/new.jpg"},
            headers=auth_headers,
        )
        assert response.status_code == 200

    def test_premium_quota(self, client, premium_headers, premium_restaurant, db_session):
        category = MenuCategory(restaurant_id=premium_restaurant.id, name="Gallery")
        db_session.add(category)
        db_session.commit()
        fill_image_quota(db_session, category, count=12)

        response = client.post(
            f"/api/categories/{category.id}/items",
            json={"name": "Plated", "price": "30", "imageUrl": "/uploads/plated.png"},
            headers=premium_headers,
        )
        assert response.status_code == 201

        usage = client.get("/api/user/image-usage", headers=premium_headers).json()
        assert usage == {"used": 13, "limit": 1000, "remaining": 987, "tier": "premium"}


class TestWriteFailures:
    """A failed flush is rolled back and reported as a database error."""

    def test_failed_update_leaves_session_usable(self, db_session, menu, owner):
        category = menu["category"]
        with pytest.raises(DatabaseError) as exc:
            CategoryService(db_session).update_for_owner(category.id, {"name": None}, owner.id)
        assert exc.value.status_code == 500

        assert db_session.get(MenuCategory, category.id).name == "Mains"
        updated = CategoryService(db_session).update_for_owner(category.id, {"name": "Plates"}, owner.id)
        assert updated.name == "Plates"

    def test_failed_create_adds_nothing(self, db_session, restaurant, owner):
        with pytest.raises(DatabaseError):
            CategoryService(db_session).create_for_owner(restaurant.id, {"name": None}, owner.id)

        assert db_session.query(MenuCategory).count() == 0
