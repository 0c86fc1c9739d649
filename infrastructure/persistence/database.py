from contextlib import asynccontextmanager

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from infrastructure.persistence.models.swap import Base


def is_memory_sqlite(db_url: str) -> bool:
    url = make_url(db_url)
    return url.get_backend_name() == 'sqlite' and url.database in (None, '', ':memory:')


class Database:
    """Async engine and session factory for the swap rate store.

    An in-memory sqlite URL gets a single shared connection, otherwise every
    session would see its own empty database.
    """

    def __init__(self, db_url: str):
        self.db_url = db_url
        engine_kwargs = {}
        if is_memory_sqlite(db_url):
            engine_kwargs = {'poolclass': StaticPool, 'connect_args': {'check_same_thread': False}}

        self.engine = create_async_engine(db_url, **engine_kwargs)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self):
        """Session that commits on success and rolls back on any error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
