"""
Application errors.

Each error carries the HTTP status it maps to, so routes can let them
propagate and the exception handler in main.py renders {"error": message}.
"""


class ShortenerError(Exception):
    """Base exception for all short link errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidUrlError(ShortenerError):
    """Raised when the submitted URL is missing or not an absolute URL."""

    status_code = 400
    default_message = "Invalid URL format"


class InvalidValidityError(ShortenerError):
    """Raised when validity is not a positive number of minutes."""

    status_code = 400
    default_message = "Validity must be a positive number"


class InvalidShortcodeError(ShortenerError):
    """Raised in strict mode when a requested shortcode is malformed or reserved."""

    status_code = 400
    default_message = "Shortcode must be 3-20 alphanumeric characters"


class ShortcodeCollisionError(ShortenerError):
    status_code = 409
    default_message = "Shortcode already exists"


class NotFoundError(ShortenerError):
    status_code = 404
    default_message = "Shortcode not found"


class ExpiredError(ShortenerError):
    status_code = 410
    default_message = "URL has expired"


class InternalFailureError(ShortenerError):
    """Unexpected fault on the registry/ledger path."""

    status_code = 500


class ShortcodeExhaustedError(InternalFailureError):
    """Raised when no free shortcode could be generated."""

    default_message = "Could not generate a unique shortcode"
