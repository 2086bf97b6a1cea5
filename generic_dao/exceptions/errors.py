"""
Error kinds raised by repositories and units of work.
"""

from typing import Any, List


class DaoError(Exception):
    """Base class for data-access errors."""
    def __init__(self, message: str, detail: Any = None):
        super().__init__(message)
        self.message = message
        self.detail = detail
        # Failures raised while cleaning up after this error (rollback, close)
        self.supplementary: List[BaseException] = []

    def __str__(self) -> str:
        return self.message


class InvalidArgumentError(DaoError):
    """Raised for a null entity or a field the model does not map."""


class EntityNotFoundError(DaoError):
    """Raised when no row exists for the requested identifier."""
    def __init__(self, model: type, id: Any):
        super().__init__(f"{model.__name__} with ID {id!r} not found", detail={"id": id})
        self.model = model
        self.id = id


class OperationFailedError(DaoError):
    """Wraps an infrastructure failure from the mapping layer or session release.

    The original exception is kept as ``__cause__``.
    """


def attach_supplementary(error: BaseException, extra: BaseException, context: str) -> None:
    """Record a secondary failure on the primary error without replacing it."""
    if isinstance(error, DaoError):
        error.supplementary.append(extra)
    error.add_note(f"{context}: {type(extra).__name__}: {extra}")
