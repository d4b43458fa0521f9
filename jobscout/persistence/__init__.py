"""Persistence layer: SQLite-backed job and company store.

Example usage:
    >>> from jobscout.persistence import init_database, get_session, JobRepository
    >>> init_database("sqlite:///./data/jobscout.db")
    >>> with get_session() as session:
    ...     job = JobRepository(session).get_by_id("3f1c0e...")
"""

from .database import (
    DEFAULT_DATABASE_URL,
    close_database,
    get_engine,
    get_session,
    init_database,
)
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    JobNotFoundError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import CompanyRepository, JobRepository

__all__ = [
    "DEFAULT_DATABASE_URL",
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    "JobRepository",
    "CompanyRepository",
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "JobNotFoundError",
    "DataIntegrityError",
]
