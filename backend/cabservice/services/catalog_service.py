"""
Cities and cab types: the public catalog plus admin create/update/delete.

Deletes go through the referential-integrity guard first; every write
invalidates the matching Redis catalog keys once the request commits.
"""

from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.logging import get_logger
from cabservice.db.session import after_commit
from cabservice.models import CabType, City, CUSTOM_CAB_TYPE_NAME
from cabservice.schemas.catalog import CabTypeCreate, CabTypeUpdate, CityCreate, CityUpdate
from cabservice.services.cache_service import invalidate_cab_types, invalidate_cities
from cabservice.services.integrity_service import (
    cab_type_dependents,
    city_dependents,
    refuse_if_blocked,
)

logger = get_logger(__name__)

DUPLICATE_CAB_TYPE = "Cab type name already exists"


# --- Cities ----------------------------------------------------------------

def _city_search_filter(search: str):
    pattern = f"%{search.strip()}%"
    return or_(City.name.ilike(pattern), City.state.ilike(pattern))


async def search_cities(db: AsyncSession, search: str = "", limit: int = 50) -> list[City]:
    """Active cities whose name or state contains the text, ordered by name."""
    query = select(City).where(City.active.is_(True))
    if search.strip():
        query = query.where(_city_search_filter(search))
    result = await db.execute(query.order_by(City.name.asc(), City.id.asc()).limit(limit))
    return list(result.scalars().all())


async def list_cities_admin(db: AsyncSession, search: str = "") -> list[City]:
    """Every city, including inactive ones."""
    query = select(City)
    if search.strip():
        query = query.where(_city_search_filter(search))
    result = await db.execute(query.order_by(City.name.asc(), City.id.asc()))
    return list(result.scalars().all())


async def get_city(db: AsyncSession, city_id: int) -> City:
    city = await db.get(City, city_id)
    if not city:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"City {city_id} not found",
        )
    return city


async def create_city(db: AsyncSession, data: CityCreate) -> City:
    city = City(
        name=data.name,
        state=data.state,
        is_airport=data.is_airport,
        active=data.active,
    )
    db.add(city)
    await db.flush()
    await db.refresh(city)
    after_commit(db, invalidate_cities)

    logger.info("city_created", city_id=city.id, name=city.name, state=city.state)
    return city


async def update_city(db: AsyncSession, city_id: int, data: CityUpdate) -> City:
    city = await get_city(db, city_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(city, field, value.strip() if isinstance(value, str) else value)
    await db.flush()
    await db.refresh(city)
    after_commit(db, invalidate_cities)

    logger.info("city_updated", city_id=city.id)
    return city


async def delete_city(db: AsyncSession, city_id: int) -> None:
    city = await get_city(db, city_id)
    refuse_if_blocked("city", city_id, await city_dependents(db, city_id))

    await db.delete(city)
    await db.flush()
    after_commit(db, invalidate_cities)
    logger.info("city_deleted", city_id=city_id)


# --- Cab types -------------------------------------------------------------

async def list_public_cab_types(db: AsyncSession) -> list[CabType]:
    """Active, instantly priceable cab types ordered by name."""
    result = await db.execute(
        select(CabType)
        .where(CabType.active.is_(True), CabType.name != CUSTOM_CAB_TYPE_NAME)
        .order_by(CabType.name.asc())
    )
    return list(result.scalars().all())


async def list_cab_types_admin(db: AsyncSession) -> list[CabType]:
    result = await db.execute(select(CabType).order_by(CabType.name.asc()))
    return list(result.scalars().all())


async def get_cab_type(db: AsyncSession, cab_type_id: int) -> CabType:
    cab_type = await db.get(CabType, cab_type_id)
    if not cab_type:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cab type {cab_type_id} not found",
        )
    return cab_type


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> None:
    query = select(CabType.id).where(CabType.name == name)
    if exclude_id is not None:
        query = query.where(CabType.id != exclude_id)
    if (await db.execute(query)).first():
        logger.warning("cab_type_name_taken", name=name)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_CAB_TYPE)


async def _flush_cab_type(db: AsyncSession) -> None:
    # Backstop for a concurrent insert racing past the name check
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_CAB_TYPE) from e


async def create_cab_type(db: AsyncSession, data: CabTypeCreate) -> CabType:
    await _ensure_name_free(db, data.name)

    cab_type = CabType(
        name=data.name,
        seats=data.seats,
        luggage=data.luggage,
        active=data.active,
        features=data.features,
        image=data.image,
    )
    db.add(cab_type)
    await _flush_cab_type(db)
    await db.refresh(cab_type)
    after_commit(db, invalidate_cab_types)

    logger.info("cab_type_created", cab_type_id=cab_type.id, name=cab_type.name)
    return cab_type


async def update_cab_type(db: AsyncSession, cab_type_id: int, data: CabTypeUpdate) -> CabType:
    cab_type = await get_cab_type(db, cab_type_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("name"):
        changes["name"] = changes["name"].strip()
        await _ensure_name_free(db, changes["name"], exclude_id=cab_type_id)
    if changes.get("features") is not None:
        changes["features"] = [tag.strip() for tag in changes["features"] if tag and tag.strip()]

    for field, value in changes.items():
        if value is None and field != "image":
            continue
        setattr(cab_type, field, value)

    await _flush_cab_type(db)
    await db.refresh(cab_type)
    after_commit(db, invalidate_cab_types)

    logger.info("cab_type_updated", cab_type_id=cab_type.id)
    return cab_type


async def delete_cab_type(db: AsyncSession, cab_type_id: int) -> None:
    cab_type = await get_cab_type(db, cab_type_id)
    refuse_if_blocked("cab_type", cab_type_id, await cab_type_dependents(db, cab_type_id))

    await db.delete(cab_type)
    await db.flush()
    after_commit(db, invalidate_cab_types)
    logger.info("cab_type_deleted", cab_type_id=cab_type_id)
