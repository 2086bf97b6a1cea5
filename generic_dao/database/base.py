from abc import ABC, abstractmethod
from sqlmodel.ext.asyncio.session import AsyncSession

class BaseDatabaseDriver(ABC):
    @abstractmethod
    async def connect(self):
        pass

    @abstractmethod
    async def disconnect(self):
        pass


class SessionProvider(ABC):
    """Hands out a fresh, unopened session for each unit of work."""

    @abstractmethod
    def acquire(self) -> AsyncSession:
        pass
