"""Item clients: one bound operation set per item type.

* :class:`PrimaryItemApi` -- operations for an item type, with paths
  built from its collection segments.
* :class:`ContainedItemApi` -- the same operations for a nested type,
  forwarded to a :class:`PrimaryItemApi` configured with the full ancestor
  chain.

Both expose ``get``, ``all``, ``one``, ``find``, ``find_one``, ``facet``,
``all_facet``, ``action``, ``all_action``, ``create``, ``update``,
``upsert``, and ``remove``.
"""

from itemrest.items.contained import ContainedItemApi, create_contained_api
from itemrest.items.params import finder_to_params, query_to_params
from itemrest.items.primary import PrimaryItemApi, create_primary_api

__all__ = [
    "ContainedItemApi",
    "PrimaryItemApi",
    "create_contained_api",
    "create_primary_api",
    "finder_to_params",
    "query_to_params",
]
