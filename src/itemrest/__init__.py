"""itemrest -- Typed REST clients for hierarchically contained resources.

This package turns typed item keys into REST calls against APIs whose
resources nest inside one another (``/orders/1/orderPhases/2/orderSteps``).
A client is configured with an item type and the collection segments from
the hierarchy root down to that type; every operation then builds its path
from the key or location chain it is given, validating that ancestors are
ordered from parent to child.

Typical usage::

    from itemrest import SyncClient, create_contained_api
    from itemrest.models import ComKey, LocKey

    with SyncClient(profile) as http:
        steps = create_contained_api(
            http, "orderStep", ["orders", "orderPhases", "orderSteps"]
        )
        step = steps.get(ComKey(kt="orderStep", pk=7, loc=[
            LocKey(kt="order", lk=1), LocKey(kt="orderPhase", lk=3),
        ]))

Modules:
    models: Pydantic key, item, and configuration models.
    paths: Location ordering validation and REST path rendering.
    items: Primary and contained item clients.
    client: The HTTP capability protocol and the httpx-backed client.
    config: XDG-aware profile management.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
    app: Typer application and CLI entry point.
"""

__version__ = "0.3.0"

from itemrest.client import HttpApi, SyncClient  # noqa: E402
from itemrest.items import (  # noqa: E402
    ContainedItemApi,
    PrimaryItemApi,
    create_contained_api,
    create_primary_api,
)
from itemrest.paths import PathBuilder  # noqa: E402

__all__ = [
    "ContainedItemApi",
    "HttpApi",
    "PathBuilder",
    "PrimaryItemApi",
    "SyncClient",
    "create_contained_api",
    "create_primary_api",
]
