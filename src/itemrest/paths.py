"""Location ordering validation and REST path rendering.

An item client is configured with its key type and the collection
segments of its hierarchy, root-first, ending with its own segment::

    PathBuilder("orderStep", ["orders", "orderPhases", "orderSteps"])

Every operation turns a key into a path through :meth:`PathBuilder.get_path`:

* a :class:`~itemrest.models.PriKey` renders as ``/<leaf>/<pk>``;
* a :class:`~itemrest.models.LocKeyArray` renders as
  ``/<seg0>/<lk0>/.../<segN>/<lkN>/<leaf>``;
* a :class:`~itemrest.models.ComKey` renders like its ``loc`` chain
  followed by ``/<pk>``.

Location chains are validated before rendering. A chain must be a
root-aligned prefix of the ancestor segments: entry *i* stands for
segment *i*, and trailing ancestors may be left out. Reversed, shuffled,
or over-long chains raise :class:`~itemrest.exceptions.LocationOrderError`.

A key type matches a segment when the segment (or its last ``/``-separated
part, for prefixed segments such as ``fjell/orders``) equals the key type,
its plural with ``s``, ``es``, or ``y`` -> ``ies``, or any of those ignoring
case. A key type that matches no segment (``person`` under ``people``) is
accepted at its position; one that matches a different segment is not.
"""

from __future__ import annotations

from typing import Sequence

from itemrest.exceptions import ConfigError, InvalidUsageError, LocationOrderError
from itemrest.models import Identifier, LocKey, LocKeyArray, PathKey
from itemrest.output import get_output


def segment_matches(segment: str, key_type: str) -> bool:
    """Return ``True`` if *key_type* names the items of collection *segment*.

    Example::

        segment_matches("orderPhases", "orderPhase")   # True
        segment_matches("fjell/matches", "match")      # True
        segment_matches("categories", "category")      # True
        segment_matches("orders", "orderPhase")        # False
    """
    name = segment.rsplit("/", 1)[-1]
    candidates = {key_type, f"{key_type}s", f"{key_type}es"}
    if key_type.endswith("y"):
        candidates.add(f"{key_type[:-1]}ies")
    if name in candidates:
        return True
    return name.lower() in {c.lower() for c in candidates}


def format_identifier(value: Identifier) -> str:
    """Render an identifier as a path segment (decimal for ints, as-is otherwise)."""
    if isinstance(value, bool):
        raise InvalidUsageError(f"Identifier must be a string or integer, got bool: {value}")
    return str(value)


def validate_location_order(
    locations: Sequence[LocKey],
    path_names: Sequence[str],
) -> None:
    """Check that *locations* is a root-aligned prefix of the ancestor segments.

    The ancestor segments are *path_names* without the final (leaf) segment.
    An entry is out of order when its key type matches a segment other than
    the ancestor at its position. A key type that matches no segment at all
    (an irregular plural such as ``person`` / ``people``) is taken to name
    the ancestor at its position.

    Args:
        locations: Location keys, expected root-first.
        path_names: Collection segments of the hierarchy, root-first.

    Raises:
        LocationOrderError: If the chain is longer than the ancestor list or
            any entry names a segment other than the one at its position.
    """
    ancestors = list(path_names[:-1])
    received = [loc.kt for loc in locations]

    if len(locations) > len(ancestors):
        extra = received[len(ancestors):]
        raise LocationOrderError(
            "Location keys must be ordered from parent to child (root to leaf) "
            "according to the entity hierarchy. "
            f"Expected at most {len(ancestors)} location key(s) for pathNames: "
            f"[{', '.join(path_names)}]. "
            f"Received key types in order: [{', '.join(received)}]. "
            f"Unexpected key type(s): [{', '.join(extra)}].",
            path_names=path_names,
            received=received,
            offending=extra,
        )

    for index, loc in enumerate(locations):
        segment = ancestors[index]
        if segment_matches(segment, loc.kt):
            continue
        misplaced = [
            name for position, name in enumerate(path_names)
            if position != index and segment_matches(name, loc.kt)
        ]
        if not misplaced:
            get_output().debug(
                f"Location key type '{loc.kt}' matches no segment; using \"{segment}\""
            )
            continue
        raise LocationOrderError(
            "Location keys must be ordered from parent to child (root to leaf) "
            "according to the entity hierarchy. "
            f"Expected order based on pathNames: [{', '.join(path_names)}]. "
            f"Received key types in order: [{', '.join(received)}]. "
            f"Key \"{loc.kt}\" at position {index} is out of order; "
            f"it belongs to \"{misplaced[0]}\", expected a key for \"{segment}\".",
            path_names=path_names,
            received=received,
            offending=[loc.kt],
        )


class PathBuilder:
    """Builds REST paths for one item type within its hierarchy.

    Instances are immutable and hold no per-call state, so one builder can
    be shared by concurrent callers.

    Args:
        key_type: The type name of the items this builder addresses.
        path_names: Collection segments from the hierarchy root down to this
            item type. Must not be empty.

    Raises:
        ConfigError: If *path_names* is empty.
    """

    __slots__ = ("_key_type", "_path_names")

    def __init__(self, key_type: str, path_names: Sequence[str]) -> None:
        if isinstance(path_names, str):
            path_names = [path_names]
        if not path_names:
            raise ConfigError(f"pathNames for '{key_type}' must contain at least one segment")
        self._key_type = key_type
        self._path_names = tuple(path_names)

    @property
    def key_type(self) -> str:
        return self._key_type

    @property
    def path_names(self) -> tuple[str, ...]:
        return self._path_names

    @property
    def leaf(self) -> str:
        """The collection segment of this builder's own item type."""
        return self._path_names[-1]

    def get_path(self, key: PathKey) -> str:
        """Render the REST path for a primary key, composite key, or location chain.

        Args:
            key: A :class:`~itemrest.models.PriKey`, :class:`~itemrest.models.ComKey`,
                or :class:`~itemrest.models.LocKeyArray`.

        Returns:
            An absolute path with no trailing slash.

        Raises:
            LocationOrderError: If the location chain is not a root-aligned
                prefix of the hierarchy.
            InvalidUsageError: If *key* is not one of the three key kinds.
        """
        kind = getattr(key, "kind", None)
        if kind == "pri":
            path = f"/{self.leaf}/{format_identifier(key.pk)}"
        elif kind == "locs":
            path = self._render_chain(key.locs)
        elif kind == "com":
            path = f"{self._render_chain(key.loc.locs)}/{format_identifier(key.pk)}"
        else:
            raise InvalidUsageError(
                f"Cannot build a path from {type(key).__name__}; "
                "expected PriKey, ComKey, or LocKeyArray"
            )
        get_output().debug(f"getPath {self._key_type}: {path}")
        return path

    def _render_chain(self, locations: Sequence[LocKey]) -> str:
        validate_location_order(locations, self._path_names)
        parts: list[str] = []
        for segment, loc in zip(self._path_names, locations):
            parts.append(f"/{segment}/{format_identifier(loc.lk)}")
        parts.append(f"/{self.leaf}")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"PathBuilder({self._key_type!r}, {list(self._path_names)!r})"


def as_locations(locations: LocKeyArray | Sequence[LocKey] | None) -> LocKeyArray:
    """Normalise an optional ancestor chain into a :class:`~itemrest.models.LocKeyArray`."""
    if locations is None:
        return LocKeyArray()
    if isinstance(locations, LocKeyArray):
        return locations
    return LocKeyArray(locs=tuple(locations))


__all__ = [
    "PathBuilder",
    "as_locations",
    "format_identifier",
    "segment_matches",
    "validate_location_order",
]
