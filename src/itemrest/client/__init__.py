"""HTTP transport for itemrest.

The item clients depend only on the :class:`HttpApi` protocol: four
methods (``get``, ``post``, ``put``, ``delete``) that take a path and
request options and return a decoded body. :class:`SyncClient` is the
bundled implementation, a blocking client backed by :class:`httpx.Client`
that injects profile auth and maps HTTP errors onto the
:mod:`itemrest.exceptions` hierarchy.

Example::

    from itemrest.client import SyncClient

    with SyncClient(profile) as http:
        body = http.get("/orders/1", {"params": {"expand": "phases"}})
"""

from itemrest.client.protocol import HttpApi, RequestOptions
from itemrest.client.sync_client import SyncClient

__all__ = ["HttpApi", "RequestOptions", "SyncClient"]
