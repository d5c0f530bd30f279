"""Exception hierarchy for restwrap.

All exceptions inherit from :class:`RestwrapError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`restwrap.exit_codes`.
Generated route functions never raise for request failures: transport and
decode errors travel through the callback as its first argument. The CLI
entry point in :func:`restwrap.app.main` catches ``RestwrapError`` and exits
with the matching code.

Subclass hierarchy::

    RestwrapError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- TransportError      (exit 6)
    +-- ConfigError         (exit 7)
    +-- ResponseParseError  (exit 8)
"""

from restwrap.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONFIG_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_RESPONSE_PARSE_ERROR,
    EXIT_SERVER_ERROR,
    EXIT_TRANSPORT_ERROR,
)

JSON_PARSE_ERROR_MESSAGE = "Could not parse JSON"


class RestwrapError(Exception):
    """Base exception for all restwrap errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(RestwrapError):
    """Raised when a generated function or CLI command gets the wrong arguments."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(RestwrapError):
    """Raised by the CLI when the API answers 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(RestwrapError):
    """Raised by the CLI when the API answers 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(RestwrapError):
    """Raised by the CLI for any other HTTP error status."""

    exit_code = EXIT_SERVER_ERROR


class TransportError(RestwrapError):
    """Network-level failure reported by :class:`~restwrap.transport.HttpxTransport`.

    Handed to the route callback as the error value rather than raised.
    The underlying :mod:`httpx` exception is kept on ``__cause__``.
    """

    exit_code = EXIT_TRANSPORT_ERROR


class ConfigError(RestwrapError):
    """Raised for configuration problems (missing root, invalid file, bad transport)."""

    exit_code = EXIT_CONFIG_ERROR


class ResponseParseError(RestwrapError):
    """The fixed error delivered to a callback when a body is not valid JSON."""

    exit_code = EXIT_RESPONSE_PARSE_ERROR

    def __init__(self, message: str = JSON_PARSE_ERROR_MESSAGE):
        super().__init__(message)
