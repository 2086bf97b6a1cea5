from typing import Optional
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from .base import BaseDatabaseDriver, SessionProvider

class SQLDriver(BaseDatabaseDriver, SessionProvider):
    def __init__(self, url: Optional[str] = None, echo: bool = False, engine: Optional[AsyncEngine] = None, **engine_kwargs):
        if engine is None:
            if url is None:
                raise ValueError("Either url or engine must be provided.")
            engine = create_async_engine(url, echo=echo, **engine_kwargs)
        self.engine = engine
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def connect(self):
        """Check the database is reachable (the engine manages connections)."""
        from sqlalchemy import text
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))

    async def disconnect(self):
        """Disconnect from database."""
        await self.engine.dispose()

    def acquire(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self, metadata=None):
        """Create tables for every registered SQLModel table (or the given metadata)."""
        metadata = metadata or SQLModel.metadata
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def drop_all(self, metadata=None):
        metadata = metadata or SQLModel.metadata
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.drop_all)
