"""Numeric process exit codes used by the ``restwrap`` CLI.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~restwrap.exceptions.RestwrapError` subclass.
Shell scripts can inspect the exit code to tell a bad configuration from
a failed request without parsing stderr.

Example::

    $ restwrap call search -a zc=11746
    $ echo $?
    4   # EXIT_NOT_FOUND -- the API answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""A generated function or CLI command was invoked with the wrong arguments."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the request with HTTP 401 or 403."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The API answered with an HTTP error status other than 401, 403 or 404."""

EXIT_TRANSPORT_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_CONFIG_ERROR = 7
"""The client configuration could not be loaded or validated."""

EXIT_RESPONSE_PARSE_ERROR = 8
"""A response body could not be decoded as JSON."""
