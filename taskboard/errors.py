"""
TaskBoard error taxonomy.

Service-level errors never escape TaskManagerAPI: they are converted into
ApiResponse failures carrying the exception message.
"""


class TaskBoardError(Exception):
    """Base class for all TaskBoard errors."""
    pass


class ValidationError(TaskBoardError):
    """Raised on duplicate usernames, bad credentials, or bad field values."""
    pass


class AuthorizationError(TaskBoardError):
    """Raised when a session token is missing, malformed or expired."""
    pass


class NotFoundError(TaskBoardError):
    """Raised when a task does not exist or belongs to another account."""
    pass


class StorageParseError(TaskBoardError):
    """Raised when a persisted blob cannot be decoded."""
    pass


class ConfigError(TaskBoardError):
    """Raised when configuration is invalid or unreadable."""
    pass
