"""
Public catalog endpoints with Redis caching.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.config import get_settings
from cabservice.core.logging import get_logger
from cabservice.db.session import get_db
from cabservice.schemas.catalog import CabTypeListResponse, CabTypeResponse, CityListResponse, CityResponse
from cabservice.services.cache_service import CAB_TYPES_KEY, city_search_key, get_cached, set_cached
from cabservice.services.catalog_service import list_public_cab_types, search_cities

logger = get_logger(__name__)
settings = get_settings()
router = APIRouter(tags=["Catalog"])


@router.get("/cities", response_model=CityListResponse)
async def list_cities_endpoint(
    search: str = Query("", max_length=100),
    db: AsyncSession = Depends(get_db),
):
    """
    Active cities matching the search text in name or state, ordered by name.
    Cached in Redis; invalidated when staff edit cities.
    """
    key = city_search_key(search, settings.CITY_SEARCH_LIMIT)
    cached = await get_cached(key)
    if cached is not None:
        return CityListResponse(data=cached, cached=True)

    cities = await search_cities(db, search, settings.CITY_SEARCH_LIMIT)
    data = [CityResponse.model_validate(c).model_dump(mode="json") for c in cities]
    await set_cached(key, data)
    return CityListResponse(data=data)


@router.get("/cab-types", response_model=CabTypeListResponse)
async def list_cab_types_endpoint(db: AsyncSession = Depends(get_db)):
    """Active cab types customers can book at a fixed price (never "Custom")."""
    cached = await get_cached(CAB_TYPES_KEY)
    if cached is not None:
        return CabTypeListResponse(data=cached, cached=True)

    cab_types = await list_public_cab_types(db)
    data = [CabTypeResponse.model_validate(c).model_dump(mode="json") for c in cab_types]
    await set_cached(CAB_TYPES_KEY, data)
    return CabTypeListResponse(data=data)
