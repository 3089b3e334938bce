"""
Authentication service handling user signup and login.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.schemas.user import UserCreate, UserLogin
from app.core.exceptions import AuthenticationError, DuplicateKeyError
from app.core.security import hash_password, verify_password, create_access_token
from app.core.logging import get_logger

logger = get_logger(__name__)

EMAIL_EXISTS_MESSAGE = "User with this email already exists"


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Create a user with a hashed password.
    Raises DuplicateKeyError if the email is already registered.
    """
    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalar_one_or_none():
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        raise DuplicateKeyError(EMAIL_EXISTS_MESSAGE)

    user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent signup for the same email
        await db.rollback()
        raise DuplicateKeyError(EMAIL_EXISTS_MESSAGE) from e
    await db.refresh(user)

    logger.info("user_registered", user_id=str(user.id), email=user.email)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> str:
    """
    Check credentials and return a JWT access token.
    Raises AuthenticationError if they are invalid.
    """
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        raise AuthenticationError("Invalid email or password")

    token = create_access_token(data={"sub": str(user.id)})
    logger.info("user_logged_in", user_id=str(user.id))
    return token
