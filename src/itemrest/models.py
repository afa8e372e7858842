"""Canonical Pydantic models shared across all itemrest modules.

The models fall into two groups:

**Key and item models** -- the typed vocabulary the item clients speak:
    :class:`PriKey`, :class:`LocKey`, :class:`LocKeyArray`,
    :class:`ComKey`, :class:`Event`, :class:`ItemEvents`, and :class:`Item`.

**Configuration models** -- client options and the JSON profiles stored
in the user's config directory:
    :class:`ClientApiOptions`, :class:`AuthConfig`, :class:`RequestConfig`,
    and :class:`Profile`.

Keys are frozen. Each key model carries a ``kind`` discriminant
(``"pri"``, ``"loc"``, ``"com"``, ``"locs"``) that the path builder
dispatches on; it is excluded from serialisation so that dumped keys
match the wire shape ``{"kt": ..., "pk": ...}``. Payloads coming back from
a server carry no ``kind``, so :data:`AnyItemKey` tells a composite key
from a primary key by the presence of ``loc``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_serializer,
    field_validator,
)

Identifier = Union[int, str]
"""An item or location identifier. Integers render in decimal, strings as-is."""


# --- Keys ---


class PriKey(BaseModel):
    """Key of a root-level item: its type and its own identifier."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pri"] = Field(default="pri", exclude=True)
    kt: str
    pk: Identifier


class LocKey(BaseModel):
    """One ancestor's position in a containment chain."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["loc"] = Field(default="loc", exclude=True)
    kt: str
    lk: Identifier


class LocKeyArray(BaseModel):
    """Ordered ancestor chain, root-first and leaf-last.

    ``locs[0]`` is the most distant ancestor and ``locs[-1]`` the
    immediate parent of the item being addressed. An empty chain is valid
    and addresses a root collection.

    Example::

        LocKeyArray.of(LocKey(kt="order", lk=1), LocKey(kt="orderPhase", lk=3))
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["locs"] = Field(default="locs", exclude=True)
    locs: tuple[LocKey, ...] = ()

    @classmethod
    def of(cls, *locs: LocKey) -> LocKeyArray:
        """Build a chain from location keys given root-first."""
        return cls(locs=locs)

    def __len__(self) -> int:
        return len(self.locs)

    def key_types(self) -> list[str]:
        """Key types of the chain, in order."""
        return [loc.kt for loc in self.locs]


class ComKey(BaseModel):
    """Composite key: the item's own identifier plus its ancestor chain.

    ``loc`` accepts a :class:`LocKeyArray` or a plain list of location keys
    (as found in server payloads); it is always stored as a
    :class:`LocKeyArray` and dumped back to a plain list.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["com"] = Field(default="com", exclude=True)
    kt: str
    pk: Identifier
    loc: LocKeyArray = Field(default_factory=LocKeyArray)

    @field_validator("loc", mode="before")
    @classmethod
    def _wrap_loc_list(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return {"locs": value}
        return value

    @field_serializer("loc")
    def _dump_loc(self, loc: LocKeyArray) -> list[dict[str, Any]]:
        return [k.model_dump() for k in loc.locs]


def _item_key_tag(value: Any) -> str:
    """Pick the key variant for an item payload."""
    if isinstance(value, dict):
        return "com" if isinstance(value.get("loc"), (list, tuple, LocKeyArray)) else "pri"
    return getattr(value, "kind", "pri")


AnyItemKey = Annotated[
    Union[Annotated[PriKey, Tag("pri")], Annotated[ComKey, Tag("com")]],
    Discriminator(_item_key_tag),
]
"""Key of an item payload: :class:`ComKey` when it carries a ``loc`` list, else :class:`PriKey`."""

ItemKey = Union[PriKey, ComKey]
PathKey = Union[PriKey, ComKey, LocKeyArray]


# --- Items ---


class Event(BaseModel):
    """A lifecycle event timestamp; ``at`` is ``None`` until the event happens."""

    at: Optional[datetime] = None


class ItemEvents(BaseModel):
    """Creation, update, and deletion timestamps maintained by the server."""

    created: Event = Field(default_factory=Event)
    updated: Event = Field(default_factory=Event)
    deleted: Event = Field(default_factory=Event)


class Item(BaseModel):
    """An item envelope as returned by the server.

    Fields the server sends beyond ``key``, ``data``, and ``events`` are
    preserved and accessible via ``model_extra``.
    """

    model_config = ConfigDict(extra="allow")

    key: AnyItemKey
    data: dict[str, Any] = Field(default_factory=dict)
    events: ItemEvents = Field(default_factory=ItemEvents)


# --- Client options ---


class ClientApiOptions(BaseModel):
    """Per-client request defaults for :class:`~itemrest.items.PrimaryItemApi`.

    The ``*_options`` dicts are layered under the options passed to each
    call; ``default_params`` are merged under any explicitly passed query
    params. The ``*_authenticated`` flags set ``is_authenticated`` on
    reads (get, one), listings (all, find), and writes respectively.
    """

    model_config = ConfigDict(frozen=True)

    read_authenticated: bool = True
    all_authenticated: bool = True
    write_authenticated: bool = True
    default_params: dict[str, Any] = Field(default_factory=dict)
    get_options: dict[str, Any] = Field(default_factory=dict)
    post_options: dict[str, Any] = Field(default_factory=dict)
    put_options: dict[str, Any] = Field(default_factory=dict)
    delete_options: dict[str, Any] = Field(default_factory=dict)


# --- Profile config ---


class AuthConfig(BaseModel):
    """Authentication configuration embedded in a :class:`Profile`.

    Example::

        AuthConfig(type="api_key", header="X-API-Key", source="env:MY_API_KEY")
    """

    type: Literal["bearer", "api_key"] = Field(description="Auth type: bearer or api_key")
    header: Optional[str] = Field(
        default=None,
        description="Header name (defaults to Authorization for bearer, X-API-Key for api_key)",
    )
    source: str = Field(
        default="prompt",
        description="Credential source: env:VAR, file:/path, prompt",
    )


class RequestConfig(BaseModel):
    """HTTP request settings applied to every call made through a profile."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class Profile(BaseModel):
    """Per-API profile stored as JSON under the ``profiles/`` config directory.

    See Also:
        :func:`~itemrest.config.load_profile`: Deserialise a profile by name.
        :func:`~itemrest.config.save_profile`: Persist a profile to disk.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    base_url: Optional[str] = Field(default=None, description="API root URL")
    auth: Optional[AuthConfig] = None
    request: RequestConfig = Field(default_factory=RequestConfig)
    headers: dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
