"""
Generic async data-access objects over SQLModel.
"""

from generic_dao.database.base import SessionProvider
from generic_dao.database.manager import DatabaseManager
from generic_dao.database.sql_driver import SQLDriver
from generic_dao.exceptions.errors import (
    DaoError,
    EntityNotFoundError,
    InvalidArgumentError,
    OperationFailedError,
)
from generic_dao.repository import GenericRepository, IRepository, UnitOfWork

__all__ = [
    "DaoError",
    "DatabaseManager",
    "EntityNotFoundError",
    "GenericRepository",
    "IRepository",
    "InvalidArgumentError",
    "OperationFailedError",
    "SQLDriver",
    "SessionProvider",
    "UnitOfWork",
]
