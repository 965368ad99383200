from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from pocketguard.config import settings

# SQLite connections are not shared between event loops
engine = create_async_engine(settings.DATABASE_URL, poolclass=NullPool)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def init_db():
    # Register every model on the metadata before create_all
    from pocketguard.models import user, budget, expense, quiz, bank  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
