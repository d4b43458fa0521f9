"""Persistence layer exceptions.

Every error raised by the store derives from PersistenceError so callers can
treat storage failures uniformly.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when the database cannot be opened, validated or initialised."""

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an operation requires a record that does not exist.

    Optional lookups (``get_by_id``, ``get_by_name``) return None instead.
    """

    pass


class JobNotFoundError(RecordNotFoundError):
    """Raised when an operation targets a job id that is not stored."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job with id {job_id} not found")


class DataIntegrityError(PersistenceError):
    """Raised on constraint violations, e.g. inserting an identity twice."""

    pass
