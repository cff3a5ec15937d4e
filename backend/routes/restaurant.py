"""
Public restaurant endpoints — detail page and city search.
"""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from domain.errors import NotFoundError
from services import restaurant_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/restaurant", tags=["restaurant"])


@router.get("/search/{city}")
async def search_restaurants(
    city: str,
    search_query: str = Query("", alias="searchQuery", max_length=100),
    selected_cuisines: str = Query("", alias="selectedCuisines", max_length=500),
    sort_option: str = Query("lastUpdated", alias="sortOption"),
    page: int = Query(1, ge=1, le=10_000),
    db: AsyncSession = Depends(get_db),
):
    cuisines = [c for c in selected_cuisines.split(",") if c.strip()]
    return await restaurant_service.search_restaurants(
        db,
        city=city,
        search_query=search_query,
        selected_cuisines=cuisines,
        sort_option=sort_option,
        page=page,
        page_size=settings.search_page_size,
    )


@router.get("/{restaurant_id}")
async def get_restaurant(
    restaurant_id: str,
    db: AsyncSession = Depends(get_db),
):
    restaurant = await restaurant_service.get_restaurant(db, restaurant_id=restaurant_id)
    if not restaurant:
        raise NotFoundError("Restaurant", restaurant_id)
    return restaurant_service.serialize_restaurant(restaurant)
