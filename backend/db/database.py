from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from config import get_settings

settings = get_settings()

# connections are not shared across event loops
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    poolclass=NullPool if settings.DATABASE_URL.startswith("sqlite") else None,
)

async_session = async_sessionmaker(engine, expire_on_commit=False)

Base = declarative_base()


async def init_db():
    """Create all tables."""
    import db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
