"""
Current-user profile endpoints.
"""
import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import User
from deps import require_current_user
from domain.errors import PermissionDeniedError
from middleware.auth import require_token_subject
from middleware.rate_limit import rate_limit
from models import CreateUserRequest, UpdateUserRequest
from services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/my/user", tags=["user"])


@router.get("")
async def get_current_user(user: User = Depends(require_current_user)):
    return user_service.serialize_user(user)


@router.post("")
async def create_current_user(
    request: CreateUserRequest,
    subject: str = Depends(require_token_subject),
    db: AsyncSession = Depends(get_db),
    _rate=Depends(rate_limit(max_requests=10, window_seconds=60)),
):
    """
    Register the caller after their first Auth0 login.

    Returns 201 with the new user, or an empty 200 if already registered.
    """
    if request.auth0_id != subject:
        raise PermissionDeniedError("auth0Id does not match the access token subject.")

    user, created = await user_service.create_user(
        db, auth0_id=request.auth0_id, email=request.email
    )
    await db.commit()
    if not created:
        return Response(status_code=status.HTTP_200_OK)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=user_service.serialize_user(user))


@router.put("")
async def update_current_user(
    request: UpdateUserRequest,
    user: User = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.update_profile(
        db,
        user=user,
        name=request.name,
        address_line1=request.address_line1,
        city=request.city,
        country=request.country,
    )
    await db.commit()
    return user_service.serialize_user(user)
