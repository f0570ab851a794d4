"""Errors surfaced to callers of the store, auth and form layers.

The rule engine itself never raises.
"""


class CareError(Exception):
    """Base class; ``message`` is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CareError, ValueError):
    """Required form input missing or malformed. Raised before any store call."""

    def __init__(self, title: str, description: str = "", field: str | None = None):
        super().__init__(title)
        self.title = title
        self.description = description
        self.field = field


class RemoteWriteError(CareError):
    """The backing store rejected or failed a write; local state is unchanged."""


class RecordNotFound(RemoteWriteError):
    pass


class RemoteReadError(CareError):
    """The initial fetch failed; callers show an empty state."""


class AuthError(CareError):
    """Sign-in/sign-up rejected, or an operation attempted without a session."""
