import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shared_todos.models.user import User
from shared_todos.schemas.user import UserCreate, UserLogin
from shared_todos.utils.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)


async def get_user_by_id(db: AsyncSession, user_id: str | None) -> User | None:
    if not user_id:
        return None
    result = await db.execute(select(User).filter(User.id == user_id))
    return result.scalars().first()


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).filter(User.username_key == username.lower()))
    return result.scalars().first()


async def create_user(db: AsyncSession, user_data: UserCreate) -> User:
    if await get_user_by_username(db, user_data.username):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")

    new_user = User(
        id=str(uuid.uuid4()),
        username=user_data.username,
        username_key=user_data.username.lower(),
        hashed_password=get_password_hash(user_data.password),
        created_at=datetime.now(timezone.utc),
    )
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")

    logger.info("Registered user %s", new_user.id)
    return new_user


async def authenticate(db: AsyncSession, credentials: UserLogin) -> User:
    user = await get_user_by_username(db, credentials.username)
    # Same answer for unknown users and wrong passwords
    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
        )
    return user
