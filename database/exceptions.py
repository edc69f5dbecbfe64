class DatabaseError(Exception):
    """Base for all database errors."""


class NotFoundError(DatabaseError):
    """Entity not found."""


class PersistenceError(DatabaseError):
    """An aggregate write failed; derived state is stale until retried."""


class UpstreamUnavailableError(DatabaseError):
    """A historical or reference lookup could not be served."""
