"""
Idempotent starter data: the admin account, a few cities, the reserved
Custom cab type and an empty payment settings record.

    python -m cabservice.db.seed
"""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.config import get_settings
from cabservice.core.logging import get_logger, setup_logging
from cabservice.core.security import hash_password
from cabservice.db.session import AsyncSessionLocal
from cabservice.models import CabType, City, Setting, User, UserRole, CUSTOM_CAB_TYPE_NAME, PAYMENT_SETTING_KEY

logger = get_logger(__name__)

STARTER_CITIES = [
    ("Mumbai", "Maharashtra"),
    ("Pune", "Maharashtra"),
    ("Delhi", "Delhi"),
    ("Jaipur", "Rajasthan"),
    ("Bengaluru", "Karnataka"),
    ("Mysuru", "Karnataka"),
]


async def seed_admin(db: AsyncSession) -> None:
    settings = get_settings()
    email = settings.SEED_ADMIN_EMAIL.strip().lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        return
    db.add(User(
        name="Admin",
        email=email,
        role=UserRole.ADMIN,
        hashed_password=hash_password(settings.SEED_ADMIN_PASSWORD),
    ))
    logger.info("seed_admin_created", email=email)


async def seed_cities(db: AsyncSession) -> None:
    # Name+state pairs are not unique in the schema; match on both before inserting
    for name, state in STARTER_CITIES:
        result = await db.execute(select(City.id).where(City.name == name, City.state == state))
        if result.first() is None:
            db.add(City(name=name, state=state))
            logger.info("seed_city_created", name=name, state=state)


async def seed_custom_cab_type(db: AsyncSession) -> None:
    result = await db.execute(select(CabType.id).where(CabType.name == CUSTOM_CAB_TYPE_NAME))
    if result.first() is None:
        db.add(CabType(name=CUSTOM_CAB_TYPE_NAME, seats=0, luggage=0, active=True, features=[]))
        logger.info("seed_custom_cab_type_created")


async def seed_payment_setting(db: AsyncSession) -> None:
    result = await db.execute(select(Setting.id).where(Setting.key == PAYMENT_SETTING_KEY))
    if result.first() is None:
        db.add(Setting(key=PAYMENT_SETTING_KEY, value_json={"keyId": "", "keySecret": ""}))


async def seed(db: AsyncSession) -> None:
    await seed_admin(db)
    await seed_cities(db)
    await seed_custom_cab_type(db)
    await seed_payment_setting(db)
    await db.flush()


async def main() -> None:
    setup_logging()
    async with AsyncSessionLocal() as db:
        await seed(db)
        await db.commit()
    logger.info("seed_completed", admin=get_settings().SEED_ADMIN_EMAIL)


if __name__ == "__main__":
    asyncio.run(main())
