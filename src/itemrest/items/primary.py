"""Operations for one item type, bound to its place in the hierarchy.

:class:`PrimaryItemApi` maps each operation onto exactly one HTTP call:

=================  ======  ==========================================
Operation          Verb    Path
=================  ======  ==========================================
``get``            GET     ``path(key)``
``all``, ``one``   GET     ``path(locations)`` + query params
``find``           GET     ``path(locations)`` + finder params
``find_one``       GET     as ``find``, plus ``one=true``
``facet``          GET     ``path(key)/<facet>``
``all_facet``      GET     ``path(locations)/<facet>``
``action``         POST    ``path(key)/<action>``
``all_action``     POST    ``path(locations)/<action>``
``create``         POST    ``path(locations)``
``update``         PUT     ``path(key)``
``upsert``         PUT     ``path(key)`` with ``upsert: true`` in the body
``remove``         DELETE  ``path(key)``
=================  ======  ==========================================

Paths are built by :class:`~itemrest.paths.PathBuilder` before the
request is sent, so location ordering errors never reach the network.
Transport errors propagate unchanged.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Union

from itemrest.client.protocol import HttpApi, RequestOptions
from itemrest.items.params import (
    FinderParams,
    ItemQuery,
    encode_value,
    finder_to_params,
    query_to_params,
    to_body,
)
from itemrest.items.results import process_array, process_one, unwrap_action_result
from itemrest.models import ClientApiOptions, Item, ItemKey, LocKey, LocKeyArray
from itemrest.output import get_output
from itemrest.paths import PathBuilder, as_locations

Locations = Union[LocKeyArray, Sequence[LocKey], None]


class PrimaryItemApi:
    """Client for one item type.

    Used directly for root-level items (``path_names`` holds one segment)
    and, through :class:`~itemrest.items.ContainedItemApi`, for nested
    items whose ``path_names`` lists every ancestor collection first.

    Args:
        api: The HTTP capability requests are sent through.
        key_type: Type name of the items (``key.kt``), e.g. ``"orderStep"``.
        path_names: Collection segments from the hierarchy root down to this
            type, e.g. ``["orders", "orderPhases", "orderSteps"]``.
        options: Request defaults; see :class:`~itemrest.models.ClientApiOptions`.

    Example::

        orders = PrimaryItemApi(http, "order", ["orders"])
        order = orders.get(PriKey(kt="order", pk=26513))
    """

    def __init__(
        self,
        api: HttpApi,
        key_type: str,
        path_names: Union[str, Sequence[str]],
        options: Optional[ClientApiOptions] = None,
    ) -> None:
        self._api = api
        self._paths = PathBuilder(key_type, path_names)
        self._options = options or ClientApiOptions()
        get_output().debug(f"PrimaryItemApi {key_type}: {list(self._paths.path_names)}")

    @property
    def key_type(self) -> str:
        return self._paths.key_type

    @property
    def path_names(self) -> tuple[str, ...]:
        return self._paths.path_names

    @property
    def options(self) -> ClientApiOptions:
        return self._options

    def get_path(self, key: Union[ItemKey, LocKeyArray]) -> str:
        """Render the REST path for *key* (see :meth:`~itemrest.paths.PathBuilder.get_path`)."""
        return self._paths.get_path(key)

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def get(self, key: ItemKey, options: Optional[RequestOptions] = None) -> Item:
        """Fetch one item by key."""
        path = self._paths.get_path(key)
        request_options = self._request_options(
            self._options.get_options, self._options.read_authenticated, options,
        )
        return process_one(self._api.get(path, request_options), self.key_type)

    def all(
        self,
        query: Optional[ItemQuery] = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> list[Item]:
        """List the items under *locations* matching *query*."""
        path = self._paths.get_path(as_locations(locations))
        request_options = self._request_options(
            self._options.get_options,
            self._options.all_authenticated,
            options,
            query_to_params(query),
        )
        return process_array(self._api.get(path, request_options), self.key_type)

    def one(
        self,
        query: Optional[ItemQuery] = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> Optional[Item]:
        """Like :meth:`all`, returning the first item or ``None`` when nothing matches."""
        path = self._paths.get_path(as_locations(locations))
        request_options = self._request_options(
            self._options.get_options,
            self._options.read_authenticated,
            options,
            query_to_params(query),
        )
        items = process_array(self._api.get(path, request_options), self.key_type)
        if not items:
            get_output().debug(f"one {self.key_type}: no items at {path}")
            return None
        return items[0]

    def find(
        self,
        finder: str,
        finder_params: Optional[FinderParams] = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> list[Item]:
        """Run the server-side finder *finder* with *finder_params*.

        The parameters travel as one JSON string under the ``finderParams``
        query parameter; see :func:`~itemrest.items.params.finder_to_params`.
        """
        path = self._paths.get_path(as_locations(locations))
        request_options = self._request_options(
            self._options.get_options,
            self._options.all_authenticated,
            options,
            finder_to_params(finder, finder_params),
        )
        return process_array(self._api.get(path, request_options), self.key_type)

    def find_one(
        self,
        finder: str,
        finder_params: Optional[FinderParams] = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> Optional[Item]:
        """Like :meth:`find`, asking the server for one item and returning it or ``None``."""
        path = self._paths.get_path(as_locations(locations))
        params = finder_to_params(finder, finder_params)
        params["one"] = "true"
        request_options = self._request_options(
            self._options.get_options, self._options.all_authenticated, options, params,
        )
        items = process_array(self._api.get(path, request_options), self.key_type)
        return items[0] if items else None

    def facet(
        self,
        key: ItemKey,
        facet: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[RequestOptions] = None,
    ) -> Any:
        """Fetch the named facet of one item; the decoded body is returned as-is."""
        path = f"{self._paths.get_path(key)}/{facet}"
        request_options = self._request_options(
            self._options.get_options,
            self._options.read_authenticated,
            options,
            query_to_params(params),
        )
        return self._api.get(path, request_options)

    def all_facet(
        self,
        facet: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> Any:
        """Fetch the named facet of the collection under *locations*."""
        path = f"{self._paths.get_path(as_locations(locations))}/{facet}"
        request_options = self._request_options(
            self._options.get_options,
            self._options.all_authenticated,
            options,
            query_to_params(params),
        )
        return self._api.get(path, request_options)

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def action(
        self,
        key: ItemKey,
        action: str,
        body: Any = None,
        options: Optional[RequestOptions] = None,
    ) -> Item:
        """Run the item action *action* and return the item's resulting state."""
        path = f"{self._paths.get_path(key)}/{action}"
        request_options = self._request_options(
            self._options.post_options, self._options.write_authenticated, options,
        )
        result = self._api.post(path, to_body(body) if body is not None else {}, request_options)
        return process_one(result, self.key_type)

    def all_action(
        self,
        action: str,
        body: Any = None,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> list[Item]:
        """Run the collection action *action* under *locations*."""
        path = f"{self._paths.get_path(as_locations(locations))}/{action}"
        request_options = self._request_options(
            self._options.post_options, self._options.write_authenticated, options,
        )
        result = self._api.post(path, to_body(body) if body is not None else {}, request_options)
        return process_array(unwrap_action_result(result), self.key_type)

    def create(
        self,
        item: Any,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> Item:
        """Create an item under *locations* from the (partial) properties in *item*."""
        path = self._paths.get_path(as_locations(locations))
        request_options = self._request_options(
            self._options.post_options, self._options.write_authenticated, options,
        )
        return process_one(self._api.post(path, to_body(item), request_options), self.key_type)

    def update(
        self,
        key: ItemKey,
        item: Any,
        options: Optional[RequestOptions] = None,
    ) -> Item:
        """Apply the (partial) properties in *item* to the item at *key*."""
        path = self._paths.get_path(key)
        request_options = self._request_options(
            self._options.put_options, self._options.write_authenticated, options,
        )
        return process_one(self._api.put(path, to_body(item), request_options), self.key_type)

    def upsert(
        self,
        key: ItemKey,
        item: Any,
        options: Optional[RequestOptions] = None,
        locations: Locations = None,
    ) -> Item:
        """Update the item at *key*, asking the server to create it if missing.

        Non-empty *locations* (the parents to create the item under) are
        sent as JSON in the ``locations`` query parameter.
        """
        path = self._paths.get_path(key)
        extra: dict[str, str] = {}
        chain = as_locations(locations)
        if len(chain):
            extra["locations"] = encode_value([loc.model_dump(mode="json") for loc in chain.locs])
        request_options = self._request_options(
            self._options.put_options, self._options.write_authenticated, options, extra,
        )
        body = {**(to_body(item) or {}), "upsert": True}
        return process_one(self._api.put(path, body, request_options), self.key_type)

    def remove(self, key: ItemKey, options: Optional[RequestOptions] = None) -> bool:
        """Delete the item at *key*.

        Returns the server's boolean answer when it sends one, ``True``
        for any other successful response.
        """
        path = self._paths.get_path(key)
        request_options = self._request_options(
            self._options.delete_options, self._options.write_authenticated, options,
        )
        result = self._api.delete(path, request_options)
        return result if isinstance(result, bool) else True

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _request_options(
        self,
        defaults: Mapping[str, Any],
        is_authenticated: bool,
        options: Optional[RequestOptions],
        params: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        """Layer caller options over client defaults and merge query params.

        Precedence for each option key: caller > per-verb defaults. Query
        params are merged key by key: operation params > caller params >
        ``default_params``.
        """
        merged: dict[str, Any] = {"is_authenticated": is_authenticated, **defaults, **(options or {})}
        combined = {
            **self._options.default_params,
            **(defaults.get("params") or {}),
            **((options or {}).get("params") or {}),
            **(params or {}),
        }
        if combined:
            merged["params"] = combined
        get_output().debug(f"{self.key_type} request options: {merged}")
        return merged

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key_type!r}, {list(self.path_names)!r})"


def create_primary_api(
    api: HttpApi,
    key_type: str,
    path_name: str,
    options: Optional[ClientApiOptions] = None,
) -> PrimaryItemApi:
    """Create a client for a root-level item type living at ``/<path_name>``."""
    return PrimaryItemApi(api, key_type, [path_name], options)


__all__ = ["Locations", "PrimaryItemApi", "create_primary_api"]
