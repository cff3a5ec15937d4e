"""
Shared FastAPI dependencies.

Routers import the DB session and caller-identity guards from here.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import User
from domain.errors import UnauthorizedError
from middleware.auth import require_token_subject


async def require_current_user(
    subject: str = Depends(require_token_subject),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the bearer token subject to a registered user.

    A valid token whose subject has no user record is treated as anonymous
    (401): clients register through POST /api/my/user first.
    """
    q = await db.execute(select(User).where(User.auth0_id == subject))
    user = q.scalar_one_or_none()
    if not user:
        raise UnauthorizedError("No user registered for this access token.")
    return user
