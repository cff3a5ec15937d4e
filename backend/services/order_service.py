"""
Order service — checkout, scoped order lists, and status updates.

Only `Order.status` is ever written after checkout. There is no row lock on
status updates: concurrent writers race at the storage layer and the last
commit wins.
"""

import logging
from datetime import timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from db_models import MenuItem, Order, OrderItem, Restaurant, User
from domain import order_status
from domain.enums import OrderStatus
from domain.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError

logger = logging.getLogger(__name__)


def serialize_order(order: Order) -> dict:
    """Order as returned by the API (camelCase, with status label/progress)."""
    info = order_status.lookup(order.status)
    restaurant = order.restaurant
    return {
        "id": order.id,
        "status": order.status,
        "statusLabel": info.label,
        "progress": info.progress,
        "totalAmount": order.total_amount,
        # Stored naive in UTC; emitted with an explicit offset
        "createdAt": order.created_at.replace(tzinfo=timezone.utc).isoformat() if order.created_at else None,
        "userId": order.user_id,
        "restaurantId": order.restaurant_id,
        "restaurant": {
            "id": restaurant.id,
            "restaurantName": restaurant.restaurant_name,
            "imageUrl": restaurant.image_url,
            "estimatedDeliveryTime": restaurant.estimated_delivery_time,
        } if restaurant is not None else None,
        "deliveryDetails": {
            "name": order.delivery_name,
            "email": order.delivery_email,
            "addressLine1": order.delivery_address_line1,
            "city": order.delivery_city,
        },
        "cartItems": [
            {
                "menuItemId": item.menu_item_id,
                "name": item.name,
                "quantity": item.quantity,
            }
            for item in order.items
        ],
    }


async def get_order(db: AsyncSession, *, order_id: str) -> Order | None:
    res = await db.execute(select(Order).where(Order.id == order_id))
    return res.scalar_one_or_none()


async def create_order(
    db: AsyncSession,
    *,
    user: User,
    restaurant_id: str,
    cart_items: list[dict],
    delivery_details: dict,
) -> Order:
    """
    Record a checked-out cart as a new order in status `placed`.

    cart_items: [{menu_item_id:str, name:str, quantity:int}]
    delivery_details: {name, email, address_line1, city}

    Prices come from the restaurant's current menu, never from the client.
    """
    res = await db.execute(select(Restaurant).where(Restaurant.id == restaurant_id))
    restaurant = res.scalar_one_or_none()
    if not restaurant:
        raise NotFoundError("Restaurant", restaurant_id)

    if not cart_items:
        raise ValidationError("Cart is empty", field="cartItems")

    menu: dict[str, MenuItem] = {m.id: m for m in restaurant.menu_items}
    total = 0
    items: list[OrderItem] = []
    for position, line in enumerate(cart_items):
        menu_item = menu.get(line["menu_item_id"])
        if menu_item is None:
            raise ValidationError(
                f"Menu item {line['menu_item_id']} is not offered by this restaurant",
                field="cartItems",
            )
        quantity = int(line["quantity"])
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", field="cartItems")
        total += menu_item.price * quantity
        items.append(
            OrderItem(
                menu_item_id=menu_item.id,
                name=menu_item.name,
                quantity=quantity,
                position=position,
            )
        )
    total += restaurant.delivery_price

    order = Order(
        restaurant_id=restaurant.id,
        user_id=user.id,
        delivery_name=delivery_details["name"],
        delivery_email=delivery_details["email"],
        delivery_address_line1=delivery_details["address_line1"],
        delivery_city=delivery_details["city"],
        total_amount=total,
        status=order_status.INITIAL_STATUS.value,
        items=items,
    )
    order.restaurant = restaurant
    db.add(order)
    await db.flush()
    logger.info(f"Order {order.id} placed at restaurant {restaurant.id} (total={total})")
    return order


async def list_customer_orders(db: AsyncSession, *, user_id: str) -> list[Order]:
    res = await db.execute(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id)
    )
    return list(res.scalars().all())


async def list_owner_orders(db: AsyncSession, *, owner_id: str) -> list[Order]:
    """Orders of the owner's restaurant, newest first. No restaurant -> []."""
    res = await db.execute(
        select(Order)
        .join(Restaurant, Order.restaurant_id == Restaurant.id)
        .where(Restaurant.user_id == owner_id)
        .order_by(Order.created_at.desc(), Order.id)
    )
    return list(res.scalars().all())


async def update_order_status(
    db: AsyncSession,
    *,
    order_id: str,
    owner_id: str,
    status: Any,
) -> Order:
    """
    Set an order's status on behalf of the owner of its restaurant.

    Raises:
        NotFoundError: unknown order
        PermissionDeniedError: caller does not own the order's restaurant
        ValidationError: status outside the enumeration
        ConflictError: backwards move while forward-only mode is enabled
    """
    order = await get_order(db, order_id=order_id)
    if not order:
        raise NotFoundError("Order", order_id)

    if order.restaurant is None or order.restaurant.user_id != owner_id:
        logger.warning(f"User {owner_id} attempted to update order {order_id} it does not own")
        raise PermissionDeniedError("Only the restaurant owner can update this order.")

    target: OrderStatus = order_status.parse_status(status)

    if settings.enforce_forward_transitions and not order_status.is_forward(order.status, target):
        raise ConflictError(
            f"Cannot move order from {order.status} back to {target.value}",
            details={"current": order.status, "requested": target.value},
        )

    previous = order.status
    order.status = target.value
    await db.flush()
    logger.info(f"Order {order.id} status {previous} -> {target.value}")
    return order
