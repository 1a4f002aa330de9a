import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the async engine and session factory for one application.

    Created by the app lifespan and stored on ``app.state.database``;
    handlers get sessions from it through ``dependencies.get_db``.
    """

    def __init__(self, url: str, **engine_kwargs):
        self.engine = create_async_engine(url, echo=False, **engine_kwargs)

        # Async session factory
        self.sessionmaker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )

    async def create_all(self):
        # Imported for their side effect of registering tables on Base
        from taskboard.models import task, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self):
        """Open a fresh connection and run a trivial query."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def count_users(self) -> int:
        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT COUNT(*) FROM users"))
            return result.scalar_one()

    async def dispose(self):
        await self.engine.dispose()
        logger.info("Database engine disposed")
