"""
SQLAlchemy ORM models for the food ordering backend.

Tables:
    users        — customers and restaurant owners (keyed by Auth0 subject)
    restaurants  — one restaurant per owning user
    menu_items   — priced dishes belonging to a restaurant
    orders       — checkout results; only `status` changes after creation
    order_items  — line items snapshotted at checkout
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, JSON, Index,
)
from sqlalchemy.orm import relationship

from database import Base
from domain.enums import OrderStatus


def _new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (all stored timestamps are UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """Authenticated identities (customers and restaurant owners)."""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_id)
    auth0_id = Column(String(128), unique=True, nullable=False, index=True)
    email = Column(String(320), nullable=False)
    name = Column(String(200), nullable=True)
    address_line1 = Column(String(300), nullable=True)
    city = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="owner", uselist=False, lazy="select")


class Restaurant(Base):
    """A restaurant and its delivery terms."""
    __tablename__ = "restaurants"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String(32), ForeignKey("users.id"), unique=True, nullable=False, index=True)
    restaurant_name = Column(String(200), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    country = Column(String(100), nullable=False)
    delivery_price = Column(Integer, nullable=False, default=0)  # minor currency units
    estimated_delivery_time = Column(Integer, nullable=False, default=30)  # minutes
    cuisines = Column(JSON, nullable=False, default=list)
    image_url = Column(String(500), nullable=True)
    last_updated = Column(DateTime, default=utcnow, index=True)

    # Relationships
    owner = relationship("User", back_populates="restaurant")
    menu_items = relationship(
        "MenuItem",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        order_by="MenuItem.position",
        lazy="selectin",
    )


class MenuItem(Base):
    """Dish offered by a restaurant."""
    __tablename__ = "menu_items"

    id = Column(String(32), primary_key=True, default=_new_id)
    restaurant_id = Column(String(32), ForeignKey("restaurants.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    price = Column(Integer, nullable=False)  # minor currency units
    position = Column(Integer, nullable=False, default=0)

    restaurant = relationship("Restaurant", back_populates="menu_items")


class Order(Base):
    """Customer order. Line items and delivery details are write-once."""
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=_new_id)
    restaurant_id = Column(String(32), ForeignKey("restaurants.id"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    delivery_name = Column(String(200), nullable=False)
    delivery_email = Column(String(320), nullable=False)
    delivery_address_line1 = Column(String(300), nullable=False)
    delivery_city = Column(String(100), nullable=False)
    total_amount = Column(Integer, nullable=False)  # minor currency units
    status = Column(String(30), nullable=False, default=OrderStatus.PLACED.value, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    restaurant = relationship("Restaurant", lazy="joined")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
        lazy="selectin",
    )

    __table_args__ = (
        # Owner order list: filter by restaurant, newest first
        Index("ix_orders_restaurant_created", "restaurant_id", "created_at"),
        # Customer order list: filter by user, newest first
        Index("ix_orders_user_created", "user_id", "created_at"),
    )


class OrderItem(Base):
    """Cart line captured at checkout (menu item reference + name snapshot)."""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(32), ForeignKey("orders.id"), nullable=False, index=True)
    menu_item_id = Column(String(32), nullable=False)
    name = Column(String(200), nullable=False)
    quantity = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    order = relationship("Order", back_populates="items")
