"""
Owner endpoints — the caller's restaurant and its orders.

Status updates are only accepted from the user who owns the order's
restaurant; see order_service.update_order_status().
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import User
from deps import require_current_user
from domain.errors import NotFoundError
from models import OrderStatusUpdateRequest, RestaurantRequest
from services import order_service, restaurant_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/my/restaurant", tags=["my-restaurant"])


def _restaurant_fields(request: RestaurantRequest) -> dict:
    return {
        "restaurant_name": request.restaurant_name,
        "city": request.city,
        "country": request.country,
        "delivery_price": request.delivery_price,
        "estimated_delivery_time": request.estimated_delivery_time,
        "cuisines": request.cuisines,
        "menu_items": [m.model_dump() for m in request.menu_items],
        "image_url": request.image_url,
    }


@router.get("")
async def get_my_restaurant(
    user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    restaurant = await restaurant_service.get_owner_restaurant(db, owner_id=user.id)
    if not restaurant:
        raise NotFoundError("Restaurant", f"owner {user.id}")
    return restaurant_service.serialize_restaurant(restaurant)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_my_restaurant(
    request: RestaurantRequest,
    user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    restaurant = await restaurant_service.create_restaurant(
        db, owner_id=user.id, **_restaurant_fields(request)
    )
    await db.commit()
    return restaurant_service.serialize_restaurant(restaurant)


@router.put("")
async def update_my_restaurant(
    request: RestaurantRequest,
    user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    restaurant = await restaurant_service.update_restaurant(
        db, owner_id=user.id, **_restaurant_fields(request)
    )
    await db.commit()
    return restaurant_service.serialize_restaurant(restaurant)


@router.get("/order")
async def get_my_restaurant_orders(
    user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Orders for the caller's restaurant, newest first (empty if none)."""
    orders = await order_service.list_owner_orders(db, owner_id=user.id)
    return [order_service.serialize_order(o) for o in orders]


@router.patch("/order/{order_id}/status")
async def update_order_status(
    order_id: str,
    request: OrderStatusUpdateRequest,
    user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Move an order to another status.

    404 unknown order, 403 not the owner, 400 status outside the enumeration.
    """
    order = await order_service.update_order_status(
        db,
        order_id=order_id,
        owner_id=user.id,
        status=request.status,
    )
    await db.commit()
    return order_service.serialize_order(order)
