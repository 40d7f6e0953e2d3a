"""Exception types shared across linkshelf."""


class BackendError(RuntimeError):
    """The backend could not be reached or returned something unreadable."""
