"""
Repository abstract base class and generic implementation.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Type, Any, Callable
from sqlalchemy import inspect as sa_inspect
from sqlmodel import SQLModel, select, delete, func
from generic_dao.database.base import SessionProvider
from generic_dao.exceptions.errors import EntityNotFoundError, InvalidArgumentError
from generic_dao.logging.logger import get_logger
from .unit_of_work import UnitOfWork

T = TypeVar("T", bound=SQLModel)
R = TypeVar("R")

logger = get_logger("repository")


class IRepository(ABC, Generic[T]):
    """Repository interface; defines standard data access API."""

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Create entity."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Update entity."""
        pass

    @abstractmethod
    async def find_by_id(self, id: Any) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    async def find_all(self, limit: Optional[int] = None, offset: int = 0) -> List[T]:
        """Get all entities."""
        pass

    @abstractmethod
    async def delete_by_id(self, id: Any) -> None:
        """Delete entity by ID."""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every entity of the type."""
        pass

    @abstractmethod
    async def search_by_field(self, field_name: str, value: Any) -> List[T]:
        """Find entities whose field equals value."""
        pass

    @abstractmethod
    async def run_custom(self, operation: Callable[[UnitOfWork], Any]) -> Any:
        """Run an arbitrary operation against the live unit of work."""
        pass


class GenericRepository(IRepository[T]):
    """Generic repository implementation with SQLModel CRUD; subclasses can add custom queries.

    Every call runs in its own unit of work opened from ``provider``; no
    entity is kept between calls. Subclasses usually pin the model::

        class HeroRepository(GenericRepository[Hero]):
            def __init__(self, provider):
                super().__init__(provider, Hero)
    """

    def __init__(self, provider: SessionProvider, model: Type[T]):
        """Initialize repository with session provider and model."""
        self.provider = provider
        self.model = model
        mapper = sa_inspect(model)
        self._columns = {attr.key for attr in mapper.column_attrs}
        self._primary_key = [mapper.get_property_by_column(column).key for column in mapper.primary_key]

    async def _execute(self, work, action: str):
        return await UnitOfWork.execute(self.provider, work, action=f"{action} {self.model.__name__}")

    def _column(self, field_name: str):
        """Resolve a mapped column attribute; only mapped fields may be queried."""
        if field_name not in self._columns:
            raise InvalidArgumentError(
                f"{self.model.__name__} has no field {field_name!r}",
                detail={"field": field_name},
            )
        return getattr(self.model, field_name)

    def _filtered(self, statement, filters: dict):
        for key, value in filters.items():
            statement = statement.where(self._column(key) == value)
        return statement

    async def create(self, entity: T) -> T:
        """Create entity; its generated identifier is populated on return."""
        async def work(uow: UnitOfWork) -> T:
            if entity is None:
                raise InvalidArgumentError("Entity to create must not be None.")
            uow.session.add(entity)
            await uow.flush()
            return entity

        return await self._execute(work, "saving")

    def _identity_of(self, entity: T) -> Any:
        """Primary key value of entity (a tuple for composite keys); None if any part is unset."""
        values = tuple(getattr(entity, key) for key in self._primary_key)
        if any(value is None for value in values):
            return None
        return values[0] if len(values) == 1 else values

    async def update(self, entity: T) -> T:
        """
        Update an existing row from entity; the detached instance is merged into the session.

        Never inserts: an entity without identifier raises InvalidArgumentError,
        one whose row does not exist raises EntityNotFoundError.
        """
        async def work(uow: UnitOfWork) -> T:
            if entity is None:
                raise InvalidArgumentError("Entity to update must not be None.")
            id = self._identity_of(entity)
            if id is None:
                raise InvalidArgumentError(
                    f"{self.model.__name__} to update has no identifier.",
                    detail={"primary_key": self._primary_key},
                )
            if await uow.session.get(self.model, id) is None:
                raise EntityNotFoundError(self.model, id)
            return await uow.session.merge(entity)

        return await self._execute(work, "updating")

    async def find_by_id(self, id: Any) -> Optional[T]:
        """Get entity by ID."""
        async def work(uow: UnitOfWork) -> Optional[T]:
            return await uow.session.get(self.model, id)

        return await self._execute(work, "finding by ID")

    async def find_all(self, limit: Optional[int] = None, offset: int = 0) -> List[T]:
        """Get all entities, optionally paginated."""
        async def work(uow: UnitOfWork) -> List[T]:
            statement = select(self.model)
            if offset:
                statement = statement.offset(offset)
            if limit is not None:
                statement = statement.limit(limit)
            result = await uow.session.exec(statement)
            return list(result.all())

        return await self._execute(work, "finding all")

    async def delete_by_id(self, id: Any) -> None:
        """Delete entity by ID; raises EntityNotFoundError when absent."""
        async def work(uow: UnitOfWork) -> None:
            entity = await uow.session.get(self.model, id)
            if entity is None:
                raise EntityNotFoundError(self.model, id)
            await uow.session.delete(entity)
            logger.debug(f"Deleting {self.model.__name__} {id!r}")

        await self._execute(work, "deleting by ID")

    async def delete_all(self) -> int:
        """Delete all rows of the model; returns the number of rows removed."""
        async def work(uow: UnitOfWork) -> int:
            result = await uow.session.exec(delete(self.model))
            logger.debug(f"Deleting {result.rowcount} {self.model.__name__} row(s)")
            return result.rowcount

        return await self._execute(work, "deleting all")

    async def search_by_field(self, field_name: str, value: Any) -> List[T]:
        """Find entities by a single field (e.g. name='x')."""
        async def work(uow: UnitOfWork) -> List[T]:
            statement = select(self.model).where(self._column(field_name) == value)
            result = await uow.session.exec(statement)
            return list(result.all())

        return await self._execute(work, "searching by field")

    async def run_custom(self, operation: Callable[[UnitOfWork], R]) -> R:
        """
        Run ``operation`` with the live unit of work and return its result.

        The operation may be sync or async. It gets one commit on success or
        one rollback on failure around everything it does; there is no finer
        grained rollback for multi-step work inside it.
        """
        return await self._execute(operation, "executing custom query on")

    async def find_one(self, **filters) -> Optional[T]:
        """Find one entity by filters (e.g. username='admin')."""
        async def work(uow: UnitOfWork) -> Optional[T]:
            statement = self._filtered(select(self.model), filters)
            result = await uow.session.exec(statement)
            return result.first()

        return await self._execute(work, "finding one")

    async def search_by_fields(self, **filters) -> List[T]:
        """Find entities matching every filter."""
        async def work(uow: UnitOfWork) -> List[T]:
            statement = self._filtered(select(self.model), filters)
            result = await uow.session.exec(statement)
            return list(result.all())

        return await self._execute(work, "searching by fields")

    async def count(self, **filters) -> int:
        """Count entities matching filters."""
        async def work(uow: UnitOfWork) -> int:
            statement = self._filtered(select(func.count()).select_from(self.model), filters)
            result = await uow.session.exec(statement)
            return result.one()

        return await self._execute(work, "counting")

    async def exists_by_id(self, id: Any) -> bool:
        """Check whether a row with this ID exists."""
        return await self.find_by_id(id) is not None
