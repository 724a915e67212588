"""Exception hierarchy for clientsynth.

All exceptions inherit from :class:`ClientsynthError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`clientsynth.exit_codes`.
The top-level error handler in :func:`clientsynth.app.main` catches
``ClientsynthError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The resolution core (:mod:`clientsynth.generator`) raises none of these: it
touches no I/O, and shapes it does not understand resolve to an unknown type
instead of failing.

Subclass hierarchy::

    ClientsynthError           (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- FetchError             (exit 6)
    +-- MalformedDocumentError (exit 7)
    +-- ConfigError            (exit 1)
"""

from clientsynth.exit_codes import (
    EXIT_FETCH_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MALFORMED_DOCUMENT,
)


class ClientsynthError(Exception):
    """Base exception for all clientsynth errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ClientsynthError):
    """Raised for invalid CLI arguments (e.g. a ``-H`` value without a colon)."""

    exit_code = EXIT_INVALID_USAGE


class FetchError(ClientsynthError):
    """Raised when a remote document cannot be fetched.

    Covers timeouts, DNS and connection failures, and non-2xx responses
    after redirects have been followed.
    """

    exit_code = EXIT_FETCH_ERROR


class MalformedDocumentError(ClientsynthError):
    """Raised when the input is not a usable OpenAPI/Swagger document."""

    exit_code = EXIT_MALFORMED_DOCUMENT


class ConfigError(ClientsynthError):
    """Raised for configuration problems (missing or invalid ``clientsynth.json``)."""

    exit_code = EXIT_GENERIC_FAILURE
