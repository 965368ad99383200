import logging
from typing import Optional

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import generate_password_hash, check_password_hash

from pocketguard.core.errors import AuthError, ValidationFailed
from pocketguard.core.seed import default_categories_for
from pocketguard.models.budget import Category
from pocketguard.models.user import User
from pocketguard.schemas.budget import CategoryCreate
from pocketguard.schemas.user import RegisterRequest, ProfileUpdate

logger = logging.getLogger(__name__)


class UserService:
    @staticmethod
    async def get_by_username(db: AsyncSession, username: str) -> Optional[User]:
        res = await db.execute(select(User).where(User.username == username))
        return res.scalar_one_or_none()

    @staticmethod
    async def register(db: AsyncSession, data: RegisterRequest) -> User:
        if await UserService.get_by_username(db, data.username):
            raise ValidationFailed("Username already exists")

        user = User(
            username=data.username,
            password_hash=generate_password_hash(data.password),
            name=data.name,
            email=data.email,
            upi_id=data.upi_id
        )
        db.add(user)
        await db.flush()

        db.add_all(default_categories_for(user.id))
        await db.commit()
        await db.refresh(user)

        logger.info("Registered user %s (%s)", user.id, user.username)
        return user

    @staticmethod
    async def authenticate(db: AsyncSession, username: str, password: str) -> User:
        user = await UserService.get_by_username(db, username)
        if not user or not check_password_hash(user.password_hash, password):
            raise AuthError("Invalid username or password")
        return user

    @staticmethod
    async def update_profile(db: AsyncSession, user: User, data: ProfileUpdate) -> User:
        # Settings are independent flags; only apply what was sent
        for field, value in data.model_dump(exclude_unset=True).items():
            if field == "name" and value is None:
                continue
            setattr(user, field, value)
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def get_categories(db: AsyncSession, user_id: int) -> list[Category]:
        res = await db.execute(select(Category).where(Category.user_id == user_id).order_by(Category.id))
        return list(res.scalars().all())

    @staticmethod
    async def get_category(db: AsyncSession, user_id: int, category_id: int) -> Optional[Category]:
        res = await db.execute(
            select(Category).where(and_(Category.id == category_id, Category.user_id == user_id))
        )
        return res.scalar_one_or_none()

    @staticmethod
    async def create_category(db: AsyncSession, user_id: int, data: CategoryCreate) -> Category:
        category = Category(user_id=user_id, **data.model_dump())
        db.add(category)
        await db.commit()
        await db.refresh(category)
        return category
