"""
Tests for restaurant endpoints — owner management and public search.
"""
import pytest
import pytest_asyncio
from datetime import timedelta
from fastapi import status

from db_models import utcnow
from tests.conftest import auth_headers


def _restaurant_body(**overrides) -> dict:
    body = {
        "restaurantName": "Curry Corner",
        "city": "Manchester",
        "country": "United Kingdom",
        "deliveryPrice": 199,
        "estimatedDeliveryTime": 40,
        "cuisines": ["Indian", "Curry"],
        "menuItems": [{"name": "Korma", "price": 950}, {"name": "Naan", "price": 250}],
        "imageUrl": "https://img.example.com/curry.jpg",
    }
    body.update(overrides)
    return body


class TestMyRestaurant:
    """/api/my/restaurant"""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_get_without_restaurant_is_404(self, client, customer):
        response = await client.get("/api/my/restaurant", headers=auth_headers(customer.auth0_id))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_then_get(self, client, customer):
        headers = auth_headers(customer.auth0_id)
        created = await client.post("/api/my/restaurant", json=_restaurant_body(), headers=headers)
        assert created.status_code == status.HTTP_201_CREATED
        assert [m["name"] for m in created.json()["menuItems"]] == ["Korma", "Naan"]

        fetched = await client.get("/api/my/restaurant", headers=headers)
        assert fetched.status_code == status.HTTP_200_OK
        assert fetched.json()["restaurantName"] == "Curry Corner"
        assert fetched.json()["userId"] == customer.id

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_second_create_is_409(self, client, owner, restaurant):
        response = await client.post(
            "/api/my/restaurant", json=_restaurant_body(), headers=auth_headers(owner.auth0_id)
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_update_replaces_menu(self, client, owner, restaurant):
        response = await client.put(
            "/api/my/restaurant",
            json=_restaurant_body(
                restaurantName="Pasta Palace II",
                menuItems=[{"name": "Lasagne", "price": 1300}],
            ),
            headers=auth_headers(owner.auth0_id),
        )
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["restaurantName"] == "Pasta Palace II"
        assert [(m["name"], m["price"]) for m in body["menuItems"]] == [("Lasagne", 1300)]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_update_without_restaurant_is_404(self, client, customer):
        response = await client.put(
            "/api/my/restaurant", json=_restaurant_body(), headers=auth_headers(customer.auth0_id)
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_invalid_body_is_422(self, client, customer):
        response = await client.post(
            "/api/my/restaurant",
            json=_restaurant_body(menuItems=[]),
            headers=auth_headers(customer.auth0_id),
        )
        assert response.status_code == 422


class TestPublicRestaurant:
    """/api/restaurant"""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_get_by_id(self, client, restaurant):
        response = await client.get(f"/api/restaurant/{restaurant.id}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["restaurantName"] == "Pasta Palace"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_get_unknown_is_404(self, client):
        response = await client.get("/api/restaurant/unknown")
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest_asyncio.fixture
async def london_restaurants(db_session, restaurant, other_owner):
    """Pasta Palace (350, 30min) and Rival Ramen (299, 25min), Ramen updated last."""
    from services import restaurant_service

    rival = await restaurant_service.get_owner_restaurant(db_session, owner_id=other_owner.id)
    restaurant.last_updated = utcnow() - timedelta(days=1)
    rival.last_updated = utcnow()
    await db_session.commit()
    return restaurant, rival


class TestSearch:
    """GET /api/restaurant/search/{city}"""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_city_is_case_insensitive(self, client, london_restaurants):
        response = await client.get("/api/restaurant/search/lONDON")
        body = response.json()
        assert body["pagination"] == {"total": 2, "page": 1, "pages": 1}
        # Default sort: most recently updated first
        assert [r["restaurantName"] for r in body["data"]] == ["Rival Ramen", "Pasta Palace"]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_unknown_city_is_empty(self, client, london_restaurants):
        body = (await client.get("/api/restaurant/search/Paris")).json()
        assert body["data"] == []
        assert body["pagination"] == {"total": 0, "page": 1, "pages": 1}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_search_query_matches_name_or_cuisine(self, client, london_restaurants):
        by_name = (await client.get("/api/restaurant/search/London", params={"searchQuery": "palace"})).json()
        assert [r["restaurantName"] for r in by_name["data"]] == ["Pasta Palace"]

        by_cuisine = (await client.get("/api/restaurant/search/London", params={"searchQuery": "noodle"})).json()
        assert [r["restaurantName"] for r in by_cuisine["data"]] == ["Rival Ramen"]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_selected_cuisines_must_all_match(self, client, london_restaurants):
        both = (await client.get(
            "/api/restaurant/search/London", params={"selectedCuisines": "italian,pasta"}
        )).json()
        assert [r["restaurantName"] for r in both["data"]] == ["Pasta Palace"]

        none = (await client.get(
            "/api/restaurant/search/London", params={"selectedCuisines": "Italian,Japanese"}
        )).json()
        assert none["data"] == []

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_sort_by_estimated_delivery_time(self, client, london_restaurants):
        body = (await client.get(
            "/api/restaurant/search/London", params={"sortOption": "estimatedDeliveryTime"}
        )).json()
        assert [r["estimatedDeliveryTime"] for r in body["data"]] == [25, 30]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_unknown_sort_option_is_400(self, client, london_restaurants):
        response = await client.get("/api/restaurant/search/London", params={"sortOption": "rating"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_page_past_end_is_empty(self, client, london_restaurants):
        body = (await client.get("/api/restaurant/search/London", params={"page": 2})).json()
        assert body["data"] == []
        assert body["pagination"]["total"] == 2
