"""
Restaurant service — the owner's restaurant record and public search.
"""

import logging
import math
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import MenuItem, Restaurant, utcnow
from domain.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("lastUpdated", "deliveryPrice", "estimatedDeliveryTime")


def serialize_restaurant(restaurant: Restaurant) -> dict:
    return {
        "id": restaurant.id,
        "userId": restaurant.user_id,
        "restaurantName": restaurant.restaurant_name,
        "city": restaurant.city,
        "country": restaurant.country,
        "deliveryPrice": restaurant.delivery_price,
        "estimatedDeliveryTime": restaurant.estimated_delivery_time,
        "cuisines": list(restaurant.cuisines or []),
        "menuItems": [
            {"id": m.id, "name": m.name, "price": m.price}
            for m in restaurant.menu_items
        ],
        "imageUrl": restaurant.image_url,
        "lastUpdated": restaurant.last_updated.replace(tzinfo=timezone.utc).isoformat() if restaurant.last_updated else None,
    }


def _menu_items(menu_items: list[dict]) -> list[MenuItem]:
    return [
        MenuItem(name=m["name"], price=m["price"], position=i)
        for i, m in enumerate(menu_items)
    ]


async def get_restaurant(db: AsyncSession, *, restaurant_id: str) -> Restaurant | None:
    res = await db.execute(select(Restaurant).where(Restaurant.id == restaurant_id))
    return res.scalar_one_or_none()


async def get_owner_restaurant(db: AsyncSession, *, owner_id: str) -> Restaurant | None:
    res = await db.execute(select(Restaurant).where(Restaurant.user_id == owner_id))
    return res.scalar_one_or_none()


async def create_restaurant(
    db: AsyncSession,
    *,
    owner_id: str,
    restaurant_name: str,
    city: str,
    country: str,
    delivery_price: int,
    estimated_delivery_time: int,
    cuisines: list[str],
    menu_items: list[dict],
    image_url: str | None,
) -> Restaurant:
    """Create the owner's restaurant. One restaurant per user."""
    if await get_owner_restaurant(db, owner_id=owner_id):
        raise ConflictError("User restaurant already exists")

    restaurant = Restaurant(
        user_id=owner_id,
        restaurant_name=restaurant_name,
        city=city,
        country=country,
        delivery_price=delivery_price,
        estimated_delivery_time=estimated_delivery_time,
        cuisines=list(cuisines),
        image_url=image_url,
        menu_items=_menu_items(menu_items),
        last_updated=utcnow(),
    )
    db.add(restaurant)
    await db.flush()
    logger.info(f"Restaurant {restaurant.id} created for user {owner_id}")
    return restaurant


async def update_restaurant(
    db: AsyncSession,
    *,
    owner_id: str,
    restaurant_name: str,
    city: str,
    country: str,
    delivery_price: int,
    estimated_delivery_time: int,
    cuisines: list[str],
    menu_items: list[dict],
    image_url: str | None,
) -> Restaurant:
    """Replace the owner's restaurant fields and menu."""
    restaurant = await get_owner_restaurant(db, owner_id=owner_id)
    if not restaurant:
        raise NotFoundError("Restaurant", f"owner {owner_id}")

    restaurant.restaurant_name = restaurant_name
    restaurant.city = city
    restaurant.country = country
    restaurant.delivery_price = delivery_price
    restaurant.estimated_delivery_time = estimated_delivery_time
    restaurant.cuisines = list(cuisines)
    if image_url is not None:
        restaurant.image_url = image_url
    restaurant.menu_items = _menu_items(menu_items)
    restaurant.last_updated = utcnow()
    await db.flush()
    return restaurant


async def search_restaurants(
    db: AsyncSession,
    *,
    city: str,
    search_query: str = "",
    selected_cuisines: list[str] | None = None,
    sort_option: str = "lastUpdated",
    page: int = 1,
    page_size: int = 10,
) -> dict:
    """
    Restaurants in a city, filtered, sorted and paginated.

    Cuisine and free-text filters are applied in Python after the city
    query since cuisines are stored as a JSON list.
    """
    if sort_option not in SORT_OPTIONS:
        raise ValidationError(
            f"Unknown sort option '{sort_option}'",
            field="sortOption",
            details={"allowed": list(SORT_OPTIONS)},
        )
    if page < 1:
        raise ValidationError("Page must be at least 1", field="page")

    res = await db.execute(
        select(Restaurant).where(func.lower(Restaurant.city) == city.strip().lower())
    )
    restaurants = list(res.scalars().all())

    wanted = [c.strip().lower() for c in (selected_cuisines or []) if c.strip()]
    if wanted:
        restaurants = [
            r for r in restaurants
            if all(w in {c.lower() for c in r.cuisines or []} for w in wanted)
        ]

    needle = search_query.strip().lower()
    if needle:
        restaurants = [
            r for r in restaurants
            if needle in r.restaurant_name.lower()
            or any(needle in c.lower() for c in r.cuisines or [])
        ]

    if sort_option == "lastUpdated":
        restaurants.sort(key=lambda r: r.last_updated or datetime.min, reverse=True)
    elif sort_option == "deliveryPrice":
        restaurants.sort(key=lambda r: r.delivery_price)
    else:
        restaurants.sort(key=lambda r: r.estimated_delivery_time)

    total = len(restaurants)
    start = (page - 1) * page_size
    page_items = restaurants[start:start + page_size]

    return {
        "data": [serialize_restaurant(r) for r in page_items],
        "pagination": {
            "total": total,
            "page": page,
            "pages": max(1, math.ceil(total / page_size)),
        },
    }
