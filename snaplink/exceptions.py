"""Exceptions raised by the URL shortener core.

Every exception carries the HTTP status it maps to so the web layer can
translate it without inspecting messages.

Classes:
    ShortenerError:
        Generic base class for URL shortener errors.

    InvalidUrlError:
        Raised when a long URL is not a valid absolute http(s) URL.

    InvalidSlugError:
        Raised when a custom slug has characters outside [A-Za-z0-9_-].

    SlugTakenError:
        Raised when a custom slug is already held by an entry.

    NotFoundError:
        Raised when a short id is not in the registry.

    ExpiredError:
        Raised when a short id is accessed after its TTL elapsed.

    InternalError:
        Catch-all for unexpected failures.

    StorageError:
        Raised when the backing document cannot be initialized or read.
"""


class ShortenerError(Exception):
    """Generic base class for URL shortener errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidUrlError(ShortenerError):
    """Exception raised when a long URL fails validation."""

    status_code = 400
    default_message = "Invalid URL format"


class InvalidSlugError(ShortenerError):
    """Exception raised when a custom slug fails validation."""

    status_code = 400
    default_message = "Invalid custom slug format"


class SlugTakenError(ShortenerError):
    """Exception raised when a custom slug is already in use."""

    status_code = 409
    default_message = "Custom slug already in use"


class NotFoundError(ShortenerError):
    """Exception raised when a short id does not exist."""

    status_code = 404
    default_message = "URL not found"


class ExpiredError(ShortenerError):
    """Exception raised when a short id has expired.

    The entry has already been removed from the registry when this is raised.
    """

    status_code = 404
    default_message = "URL has expired"


class InternalError(ShortenerError):
    """Exception raised for unexpected failures."""

    pass


class StorageError(ShortenerError):
    """Exception raised when the backing document cannot be loaded."""

    default_message = "Storage initialization failed"
