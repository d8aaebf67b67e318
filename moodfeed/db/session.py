"""Async engine, session factory and the request-scoped session dependency."""
import logging
from collections.abc import AsyncGenerator

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from moodfeed.core.config import settings

logger = logging.getLogger(__name__)

_url = make_url(settings.DATABASE_URL)
# password stays out of the log
logger.info("Database: %s://...@%s/%s", _url.drivername, _url.host or "local", _url.database or "")


def _engine_options(backend: str) -> dict:
    if backend != "postgresql":
        return {}
    return {"pool_size": 10, "max_overflow": 20, "connect_args": {"timeout": 10}}


engine = create_async_engine(
    _url,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    **_engine_options(_url.get_backend_name()),
)


class Base(DeclarativeBase):
    pass


async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One transaction per request: commit on success, roll back on any error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def insert_ignore(db: AsyncSession, model, **values) -> bool:
    """INSERT ... ON CONFLICT DO NOTHING. Returns True if a row was written."""
    insert = pg_insert if db.get_bind().dialect.name == "postgresql" else sqlite_insert
    result = await db.execute(insert(model).values(**values).on_conflict_do_nothing())
    return (result.rowcount or 0) > 0
