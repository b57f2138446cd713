class TodoError(Exception):
    """Base class for errors raised by the todo store."""


class ValidationError(TodoError):
    """Raised when a request carries invalid input (e.g. a blank title)."""


class NotFoundError(TodoError):
    """Raised when no todo exists with the requested id."""


class StorageError(TodoError):
    """Raised when the database fails unexpectedly."""
