"""
Repository pattern: data access abstraction; each call runs in its own unit of work.
"""

from .base import GenericRepository, IRepository
from .unit_of_work import UnitOfWork

__all__ = ["GenericRepository", "IRepository", "UnitOfWork"]
