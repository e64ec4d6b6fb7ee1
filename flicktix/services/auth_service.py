"""
Authentication service handling sign-up, sign-in and profile lookup.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from flicktix.core.config import get_settings
from flicktix.core.exceptions import NotFoundError, translate_store_errors
from flicktix.models.user import User
from flicktix.schemas.user import UserCreate, UserLogin
from flicktix.core.security import hash_password, verify_password, create_access_token
from flicktix.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new user with hashed password.
    Raises 409 if the email is already registered, including when a
    concurrent sign-up with the same email wins the unique index.
    """
    email = _normalize_email(user_data.email)
    duplicate = HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Email already registered",
    )

    with translate_store_errors(settings.STORE_RETRY_AFTER_SECONDS):
        result = await db.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none():
            logger.warning("registration_failed", reason="email_exists", email=email)
            raise duplicate

        user = User(
            email=email,
            hashed_password=hash_password(user_data.password),
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.warning("registration_failed", reason="email_race", email=email)
            raise duplicate
        await db.refresh(user)

    logger.info("user_registered", user_id=user.id, email=user.email)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> str:
    """
    Authenticate user and return a bearer access token.
    Raises 401 if credentials are invalid.
    """
    email = _normalize_email(login_data.email)

    with translate_store_errors(settings.STORE_RETRY_AFTER_SECONDS):
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

    token = create_access_token(data={"sub": user.id})
    logger.info("user_logged_in", user_id=user.id)
    return token


async def get_user(db: AsyncSession, user_id: str) -> User:
    with translate_store_errors(settings.STORE_RETRY_AFTER_SECONDS):
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

    if not user:
        raise NotFoundError("User not found")
    return user
