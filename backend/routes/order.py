"""
Customer order endpoints — order history (polled by the status page) and
checkout.

Checkout records the order and hands back the redirect URL; capturing the
payment is the checkout provider's job.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from db_models import User
from deps import require_current_user
from middleware.rate_limit import rate_limit
from models import CheckoutSessionRequest
from services import order_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/order", tags=["order"])


@router.get("")
async def get_my_orders(
    user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Orders placed by the caller, newest first (empty if none)."""
    orders = await order_service.list_customer_orders(db, user_id=user.id)
    return [order_service.serialize_order(o) for o in orders]


@router.post("/checkout/create-checkout-session", status_code=status.HTTP_201_CREATED)
async def create_checkout_session(
    request: CheckoutSessionRequest,
    user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
    _rate=Depends(rate_limit(max_requests=20, window_seconds=60)),
):
    order = await order_service.create_order(
        db,
        user=user,
        restaurant_id=request.restaurant_id,
        cart_items=[item.model_dump() for item in request.cart_items],
        delivery_details=request.delivery_details.model_dump(),
    )
    await db.commit()
    return {
        "orderId": order.id,
        "totalAmount": order.total_amount,
        "url": settings.checkout_redirect_url,
    }
