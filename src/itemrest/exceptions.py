"""Exception hierarchy for itemrest.

All exceptions inherit from :class:`ItemRestError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`itemrest.exit_codes`.
The CLI entry point :func:`itemrest.app.main` catches ``ItemRestError``
and exits with the appropriate code.

Subclass hierarchy::

    ItemRestError (exit 1)
    +-- InvalidUsageError       (exit 2)
    |   +-- LocationOrderError  (exit 2)
    +-- AuthError               (exit 3)
    +-- NotFoundError           (exit 4)
    +-- ServerError             (exit 5)
    +-- ConnectionError_        (exit 6)
    +-- InvalidResponseError    (exit 7)
    +-- ConfigError             (exit 1)

The item clients never catch transport errors: whatever the
:class:`~itemrest.client.HttpApi` implementation raises reaches the
caller unchanged.
"""

from __future__ import annotations

from typing import Optional, Sequence

from itemrest.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_RESPONSE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class ItemRestError(Exception):
    """Base exception for all itemrest errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ItemRestError):
    """Raised for invalid CLI arguments or malformed keys."""

    exit_code = EXIT_INVALID_USAGE


class LocationOrderError(InvalidUsageError):
    """Raised when location keys do not follow the hierarchy root-to-leaf.

    Raised by :class:`~itemrest.paths.PathBuilder` before any request is
    made. It signals a caller bug and must not be retried.

    Args:
        message: Diagnostic naming the hierarchy and the offending key type.
        path_names: The configured collection segments, root-first.
        received: Key types of the supplied chain, in the order given.
        offending: The key type(s) that broke the ordering.
    """

    def __init__(
        self,
        message: str,
        path_names: Sequence[str] = (),
        received: Sequence[str] = (),
        offending: Optional[Sequence[str]] = None,
    ):
        super().__init__(message)
        self.path_names = list(path_names)
        self.received = list(received)
        self.offending = list(offending or [])


class AuthError(ItemRestError):
    """Raised when the API rejects credentials (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ItemRestError):
    """Raised when the API returns HTTP 404 (item or collection not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(ItemRestError):
    """Raised when the API returns any other HTTP error status."""

    exit_code = EXIT_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConnectionError_(ItemRestError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class InvalidResponseError(ItemRestError):
    """Raised when a response body is not an item, an item list, or has the wrong key type."""

    exit_code = EXIT_INVALID_RESPONSE


class ConfigError(ItemRestError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
