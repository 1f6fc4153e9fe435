import logging

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


# Base class for declarative models
class Base(DeclarativeBase):
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Owns the async engine and session factory for one application instance.

    Constructed by the app factory and stored on ``app.state.database`` so
    request handlers receive sessions through ``api.dependencies.get_db``.
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int | None = None,
        max_overflow: int | None = None,
    ):
        self.url = make_url(url)
        engine_kwargs: dict = {"echo": echo}
        if self.url.get_backend_name() != "sqlite":
            if pool_size is not None:
                engine_kwargs["pool_size"] = pool_size
            if max_overflow is not None:
                engine_kwargs["max_overflow"] = max_overflow
            engine_kwargs["pool_pre_ping"] = True

        self.engine: AsyncEngine = create_async_engine(self.url, **engine_kwargs)
        if self.url.get_backend_name() == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.sessionmaker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def init(self) -> None:
        """Create all tables that don't exist yet."""
        # Models register themselves on Base.metadata when imported
        from database.models import applications, candidates, jobs, recruiters  # noqa: F401

        logger.info(f"Initializing database schema on {self.url.render_as_string(hide_password=True)}")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def close(self) -> None:
        """Close database engine and connections."""
        await self.engine.dispose()
