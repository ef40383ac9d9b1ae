from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from facility_ops.core.config import settings

# SQLite connections must not be shared across event loops
_engine_kwargs: dict = (
    {"poolclass": NullPool}
    if settings.DATABASE_URL.startswith("sqlite")
    else {"pool_pre_ping": True}
)

engine = create_async_engine(settings.DATABASE_URL, echo=False, **_engine_kwargs)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session
