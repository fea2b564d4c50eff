import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from geophoto.core.config import configs

logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> dict:
    """Pool settings for server databases; SQLite gets the driver defaults."""
    if make_url(database_url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": configs.DB_POOL_SIZE,
        "max_overflow": configs.DB_MAX_OVERFLOW,
        "pool_recycle": configs.DB_POOL_RECYCLE_SECONDS,
        # feeds fan out over fresh sessions; drop connections the server closed
        "pool_pre_ping": True,
    }


# SQL statements are logged through the "sqlalchemy.engine" logger (LOG_SQL), not echo
engine = create_async_engine(configs.DATABASE_URL, **engine_options(configs.DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session
