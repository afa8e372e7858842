"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~itemrest.exceptions.ItemRestError` subclass.
Shell wrappers can inspect the exit code to tell an ordering mistake from
a missing item without parsing stderr.

Example::

    $ itemrest get orders,orderPhases --pk 9 --loc order:404
    $ echo $?
    4   # EXIT_NOT_FOUND -- the server answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, including location keys given out of hierarchy order."""

EXIT_AUTH_FAILURE = 3
"""Authentication or authorisation failed."""

EXIT_NOT_FOUND = 4
"""The requested item was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP error other than 401/403/404."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_INVALID_RESPONSE = 7
"""The server answered with a payload that is not a valid item or item list."""
