"""The HTTP capability consumed by the item clients."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

RequestOptions = Mapping[str, Any]
"""Request-level options passed through to the transport untouched.

Keys understood by :class:`~itemrest.client.SyncClient`: ``params``
(query parameters), ``headers``, and ``is_authenticated``.
"""


@runtime_checkable
class HttpApi(Protocol):
    """Four-verb HTTP capability.

    Each method sends one request to *path* (relative to the API root) and
    returns the decoded response body: a dict, a list, a scalar, or
    ``None`` for an empty body. Failures are raised as transport errors;
    the item clients let them propagate unchanged.
    """

    def get(self, path: str, options: Optional[RequestOptions] = None) -> Any:
        """Send a GET request and return the decoded body."""
        ...

    def post(self, path: str, body: Any = None, options: Optional[RequestOptions] = None) -> Any:
        """Send a POST request with a JSON *body* and return the decoded body."""
        ...

    def put(self, path: str, body: Any = None, options: Optional[RequestOptions] = None) -> Any:
        """Send a PUT request with a JSON *body* and return the decoded body."""
        ...

    def delete(self, path: str, options: Optional[RequestOptions] = None) -> Any:
        """Send a DELETE request and return the decoded body."""
        ...
