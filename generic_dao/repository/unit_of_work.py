"""
Unit of Work: owns one session and its transaction boundary.
"""

import inspect
import uuid
from typing import Any, Awaitable, Callable, List, Optional, TypeVar, Union
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession
from generic_dao.database.base import SessionProvider
from generic_dao.exceptions.errors import DaoError, OperationFailedError, attach_supplementary
from generic_dao.logging.logger import get_logger, trace_context

R = TypeVar("R")

Work = Callable[["UnitOfWork"], Union[Awaitable[R], R]]


class UnitOfWork:
    """Wraps a single session: begin, commit or rollback, then close exactly once.

    Used as an async context manager the transaction is begun on enter,
    committed on a clean exit, rolled back otherwise, and the session is
    always closed. A failure while rolling back or closing never replaces the
    error already propagating; it is attached to it instead.
    """

    def __init__(self, session: Optional[AsyncSession] = None):
        """Initialize UnitOfWork; session must be provided (e.g. UnitOfWork.from_provider())."""
        if session is None:
            raise ValueError("Session must be provided. Use UnitOfWork.from_provider() or pass session explicitly.")

        self.session = session
        self.trace_id = uuid.uuid4().hex[:12]
        # Rollback/close failures recorded while unwinding another error
        self.cleanup_errors: List[BaseException] = []
        self._closed = False
        self._trace = None
        self._logger = get_logger("unit_of_work", trace_id=self.trace_id)

    @classmethod
    def from_provider(cls, provider: SessionProvider) -> "UnitOfWork":
        """Create UnitOfWork around a freshly acquired session."""
        return cls(session=provider.acquire())

    @property
    def is_open(self) -> bool:
        return not self._closed

    async def begin(self) -> None:
        """Begin the transaction."""
        await self.session.begin()
        self._logger.debug("Transaction begun")

    async def commit(self) -> None:
        """Commit all changes."""
        await self.session.commit()
        self._logger.debug("Transaction committed")

    async def rollback(self) -> None:
        """Rollback all changes."""
        await self.session.rollback()
        self._logger.debug("Transaction rolled back")

    async def flush(self) -> None:
        """Flush session (e.g. to get auto-increment IDs)."""
        await self.session.flush()

    async def close(self) -> None:
        """Close the session; later calls are no-ops, even if the first one failed."""
        if self._closed:
            return
        self._closed = True
        await self.session.close()

    async def _rollback_after(self, failure: BaseException) -> None:
        if self._closed:
            return
        try:
            await self.rollback()
        except SQLAlchemyError as exc:
            self._logger.opt(exception=exc).error(f"Rollback failed while handling {type(failure).__name__}")
            self.cleanup_errors.append(exc)
            attach_supplementary(failure, exc, "rollback failed")

    async def _release(self, failure: Optional[BaseException]) -> None:
        try:
            await self.close()
        except SQLAlchemyError as exc:
            if failure is None:
                raise OperationFailedError(f"Error closing session: {exc}") from exc
            # Keep the original failure as the primary error
            self._logger.warning(f"Error closing session while handling {type(failure).__name__}: {exc}")
            self.cleanup_errors.append(exc)
            attach_supplementary(failure, exc, "closing session failed")

    async def __aenter__(self):
        self._trace = trace_context(self.trace_id)
        self._trace.__enter__()
        try:
            await self.begin()
        except BaseException as exc:
            try:
                await self._release(exc)
            finally:
                self._trace.__exit__(None, None, None)
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        failure = exc_val
        try:
            if exc_val is None:
                try:
                    await self.commit()
                except BaseException as exc:
                    failure = exc
                    await self._rollback_after(exc)
                    raise
            else:
                await self._rollback_after(exc_val)
        finally:
            try:
                await self._release(failure)
            finally:
                self._trace.__exit__(None, None, None)
        return False

    @classmethod
    async def execute(
        cls,
        provider: SessionProvider,
        work: Work,
        action: str = "executing operation",
    ) -> Any:
        """Run ``work`` inside a fresh unit of work and return its result.

        ``work`` receives the live UnitOfWork and may be sync or async.
        SQLAlchemy failures are logged and re-raised as OperationFailedError
        chained to the original; DaoError subclasses and any other exception
        propagate unchanged. Either way the transaction is rolled back first
        and the session is closed exactly once.
        """
        uow = cls.from_provider(provider)
        try:
            async with uow:
                result = work(uow)
                if inspect.isawaitable(result):
                    result = await result
            return result
        except SQLAlchemyError as exc:
            uow._logger.opt(exception=exc).error(f"Error {action}: {exc}")
            error = OperationFailedError(f"Error {action}: {exc}")
            error.supplementary.extend(uow.cleanup_errors)
            raise error from exc
        except OperationFailedError as exc:
            # Session close failed after the work itself succeeded
            uow._logger.opt(exception=exc).error(f"Error {action}: {exc.message}")
            raise
        except DaoError as exc:
            uow._logger.warning(f"Error {action}: {exc.message}")
            raise
