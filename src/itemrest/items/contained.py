"""Client for items nested under one or more ancestors.

:class:`ContainedItemApi` is configuration, not behaviour: it builds a
:class:`~itemrest.items.PrimaryItemApi` from the full ancestor chain of
collection segments and forwards every call to it with the same
arguments, in the same order, returning the result unchanged.

Example::

    steps = ContainedItemApi(http, "orderStep", ["orders", "orderPhases", "orderSteps"])
    steps.all({}, None, [LocKey(kt="order", lk=26513), LocKey(kt="orderPhase", lk=25826)])
    # GET /orders/26513/orderPhases/25826/orderSteps
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from itemrest.client.protocol import HttpApi, RequestOptions
from itemrest.items.params import FinderParams, ItemQuery
from itemrest.items.primary import Locations, PrimaryItemApi
from itemrest.models import ClientApiOptions, Item, ItemKey
from itemrest.output import get_output


class ContainedItemApi:
    """Operations for a contained item type, keyed by :class:`~itemrest.models.ComKey`.

    Args:
        api: The HTTP capability requests are sent through.
        key_type: Type name of the contained items.
        path_names: Ancestor collection segments, root-first, followed by
            this type's own segment. At least one ancestor is expected.
        options: Request defaults passed to the underlying primary client.
    """

    def __init__(
        self,
        api: HttpApi,
        key_type: str,
        path_names: Sequence[str],
        options: Optional[ClientApiOptions] = None,
    ) -> None:
        self._primary = PrimaryItemApi(api, key_type, path_names, options)
        get_output().debug(f"ContainedItemApi {key_type}: {list(path_names)}")

    @property
    def primary(self) -> PrimaryItemApi:
        """The primary client every call is forwarded to."""
        return self._primary

    @property
    def key_type(self) -> str:
        return self._primary.key_type

    @property
    def path_names(self) -> tuple[str, ...]:
        return self._primary.path_names

    def get_path(self, key: Any) -> str:
        return self._primary.get_path(key)

    def get(self, key: ItemKey, options: Optional[RequestOptions] = None) -> Item:
        return self._primary.get(key, options)

    def all(
        self,
        query: Optional[ItemQuery] = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> list[Item]:
        return self._primary.all(query, options, locations)

    def one(
        self,
        query: Optional[ItemQuery] = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> Optional[Item]:
        return self._primary.one(query, options, locations)

    def find(
        self,
        finder: str,
        finder_params: Optional[FinderParams] = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> list[Item]:
        return self._primary.find(finder, finder_params, options, locations)

    def find_one(
        self,
        finder: str,
        finder_params: Optional[FinderParams] = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> Optional[Item]:
        return self._primary.find_one(finder, finder_params, options, locations)

    def facet(
        self,
        key: ItemKey,
        facet: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[RequestOptions] = None,
    ) -> Any:
        return self._primary.facet(key, facet, params, options)

    def all_facet(
        self,
        facet: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> Any:
        return self._primary.all_facet(facet, params, options, locations)

    def action(
        self,
        key: ItemKey,
        action: str,
        body: Any = None,
        options: Optional[RequestOptions] = None,
    ) -> Item:
        return self._primary.action(key, action, body, options)

    def all_action(
        self,
        action: str,
        body: Any = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> list[Item]:
        return self._primary.all_action(action, body, options, locations)

    def create(
        self,
        item: Any,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> Item:
        return self._primary.create(item, options, locations)

    def update(
        self,
        key: ItemKey,
        item: Any,
        options: Optional[RequestOptions] = None,
    ) -> Item:
        return self._primary.update(key, item, options)

    def upsert(
        self,
        key: ItemKey,
        item: Any,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> Item:
        return self._primary.upsert(key, item, options, locations)

    def remove(self, key: ItemKey, options: Optional[RequestOptions] = None) -> bool:
        return self._primary.remove(key, options)

    def __repr__(self) -> str:
        return f"ContainedItemApi({self.key_type!r}, {list(self.path_names)!r})"


def create_contained_api(
    api: HttpApi,
    key_type: str,
    path_names: Sequence[str],
    options: Optional[ClientApiOptions] = None,
) -> ContainedItemApi:
    """Create a client for a contained item type from its full chain of segments."""
    return ContainedItemApi(api, key_type, path_names, options)
