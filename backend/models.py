"""
Pydantic models for request validation.

Request bodies use the camelCase keys the web client sends; every model
also accepts the snake_case field names.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional


class ApiModel(BaseModel):
    """Shared base — allows construction by Python name or alias."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ── User Models ─────────────────────────────────────────────────────

class CreateUserRequest(ApiModel):
    auth0_id: str = Field(..., alias="auth0Id", min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=320)


class UpdateUserRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    address_line1: str = Field(..., alias="addressLine1", min_length=1, max_length=300)
    city: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)


# ── Restaurant Models ───────────────────────────────────────────────

class MenuItemInput(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: int = Field(..., ge=0, description="Price in minor currency units")


class RestaurantRequest(ApiModel):
    """Body for creating or replacing the caller's restaurant."""
    restaurant_name: str = Field(..., alias="restaurantName", min_length=1, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    delivery_price: int = Field(..., alias="deliveryPrice", ge=0)
    estimated_delivery_time: int = Field(..., alias="estimatedDeliveryTime", ge=1, le=24 * 60)
    cuisines: List[str] = Field(..., min_length=1)
    menu_items: List[MenuItemInput] = Field(..., alias="menuItems", min_length=1)
    image_url: Optional[str] = Field(default=None, alias="imageUrl", max_length=500)


# ── Order Models ────────────────────────────────────────────────────

class CheckoutCartItem(ApiModel):
    menu_item_id: str = Field(..., alias="menuItemId", min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    quantity: int = Field(..., ge=1, le=100)


class DeliveryDetails(ApiModel):
    email: str = Field(..., min_length=3, max_length=320)
    name: str = Field(..., min_length=1, max_length=200)
    address_line1: str = Field(..., alias="addressLine1", min_length=1, max_length=300)
    city: str = Field(..., min_length=1, max_length=100)


class CheckoutSessionRequest(ApiModel):
    cart_items: List[CheckoutCartItem] = Field(..., alias="cartItems", min_length=1)
    delivery_details: DeliveryDetails = Field(..., alias="deliveryDetails")
    restaurant_id: str = Field(..., alias="restaurantId", min_length=1)


class OrderStatusUpdateRequest(ApiModel):
    """
    Target status for an order.

    Any JSON value is accepted (numbers, null, long strings included) so
    everything outside the enumeration reaches order_status.parse_status()
    and is rejected with the domain's 400 error rather than a schema 422.
    Only a missing field is a schema error.
    """
    status: Any = Field(...)
