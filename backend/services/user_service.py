"""
User service — registration and profile updates for authenticated callers.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import User

logger = logging.getLogger(__name__)


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "auth0Id": user.auth0_id,
        "email": user.email,
        "name": user.name,
        "addressLine1": user.address_line1,
        "city": user.city,
        "country": user.country,
    }


async def get_by_auth0_id(db: AsyncSession, *, auth0_id: str) -> User | None:
    res = await db.execute(select(User).where(User.auth0_id == auth0_id))
    return res.scalar_one_or_none()


async def create_user(db: AsyncSession, *, auth0_id: str, email: str) -> tuple[User, bool]:
    """Return (user, created). Registering an existing auth0 id is a no-op."""
    existing = await get_by_auth0_id(db, auth0_id=auth0_id)
    if existing:
        return existing, False

    user = User(auth0_id=auth0_id, email=email)
    db.add(user)
    await db.flush()
    logger.info(f"Registered user {user.id}")
    return user, True


async def update_profile(
    db: AsyncSession,
    *,
    user: User,
    name: str,
    address_line1: str,
    city: str,
    country: str,
) -> User:
    user.name = name
    user.address_line1 = address_line1
    user.city = city
    user.country = country
    await db.flush()
    return user
