"""Query-parameter and body encoding for item operations.

The transport only carries flat ``key=value`` query parameters, so
structured values are sent as compact JSON text:

* :func:`query_to_params` -- strings pass through, every other value is
  JSON-encoded (``10`` -> ``"10"``, ``True`` -> ``"true"``,
  ``["a", "b"]`` -> ``'["a","b"]'``). ``None`` values are dropped.
* :func:`finder_to_params` -- the whole finder parameter object becomes
  one JSON string under ``finderParams``, next to the finder name under
  ``finder``. Numbers, booleans, sequences, and nested objects decode
  back to themselves; datetimes are written as ISO-8601 strings.
* :func:`to_body` -- converts a request body (dict or pydantic model) into
  JSON-compatible Python data for the transport.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel
from pydantic_core import to_json, to_jsonable_python

ItemQuery = Mapping[str, Any]
FinderParams = Mapping[str, Any]


def encode_value(value: Any) -> str:
    """Encode one query value: strings as-is, everything else as compact JSON."""
    if isinstance(value, str):
        return value
    return to_json(value).decode("utf-8")


def query_to_params(query: Optional[ItemQuery]) -> dict[str, str]:
    """Flatten an item query into string query parameters."""
    if not query:
        return {}
    return {key: encode_value(value) for key, value in query.items() if value is not None}


def finder_to_params(finder: str, finder_params: Optional[FinderParams]) -> dict[str, str]:
    """Build the ``finder`` / ``finderParams`` query parameters for a named finder.

    Example::

        finder_to_params("byStatus", {"status": "open", "limit": 5})
        # {"finder": "byStatus", "finderParams": '{"status":"open","limit":5}'}
    """
    return {
        "finder": finder,
        "finderParams": to_json(dict(finder_params or {})).decode("utf-8"),
    }


def to_body(body: Any) -> Any:
    """Convert a request body into JSON-compatible data (``None`` stays ``None``)."""
    if body is None:
        return None
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", exclude_unset=True)
    return to_jsonable_python(body)
