"""
Authentication service handling customer registration and login.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from cabservice.models import User, UserRole
from cabservice.schemas.user import UserCreate, UserLogin
from cabservice.core.security import hash_password, verify_password, create_access_token
from cabservice.core.logging import get_logger

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new customer account with a hashed password.
    Raises 409 if the email is already registered.
    """
    email = normalize_email(user_data.email)
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        logger.warning("registration_failed", reason="email_exists", email=email)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    user = User(
        name=user_data.name.strip(),
        email=email,
        phone=user_data.phone,
        role=UserRole.CUSTOMER,
        hashed_password=hash_password(user_data.password),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id, email=user.email)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> str:
    """
    Authenticate user and return a JWT access token whose subject is the email.
    Raises 401 if credentials are invalid.
    """
    email = normalize_email(login_data.email)
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    token = create_access_token(data={"sub": user.email, "role": user.role.value})
    logger.info("user_logged_in", user_id=user.id)
    return token
