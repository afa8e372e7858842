"""Validation of decoded response bodies into :class:`~itemrest.models.Item` objects."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from itemrest.exceptions import InvalidResponseError
from itemrest.models import Item
from itemrest.output import get_output


def process_one(result: Any, key_type: str) -> Item:
    """Validate a single item payload and check its key type.

    Raises:
        InvalidResponseError: If *result* is not an item or its ``key.kt``
            is not *key_type*.
    """
    if isinstance(result, Item):
        item = result
    else:
        try:
            item = Item.model_validate(result)
        except ValidationError as exc:
            raise InvalidResponseError(f"Response is not a valid '{key_type}' item: {exc}") from exc
    validate_pk(item, key_type)
    return item


def process_array(result: Any, key_type: str) -> list[Item]:
    """Validate an item list payload.

    Accepts a JSON array of items, or an object whose ``items`` field is
    one (the paged result envelope some servers return).

    Raises:
        InvalidResponseError: If *result* is neither, or any entry fails
            :func:`process_one`.
    """
    if isinstance(result, dict) and isinstance(result.get("items"), list):
        result = result["items"]
    if not isinstance(result, list):
        get_output().debug(f"Response was not an array: {type(result).__name__}")
        raise InvalidResponseError(
            f"Response was not an array of '{key_type}' items (got {type(result).__name__})"
        )
    return [process_one(entry, key_type) for entry in result]


def unwrap_action_result(result: Any) -> Any:
    """Strip the affected-keys half of an ``[items, affectedKeys]`` action response.

    Collection actions may answer with a two-element array whose first
    element is the list of resulting items. An empty object means no items.
    Any other payload is returned unchanged.
    """
    if isinstance(result, list) and len(result) == 2 and isinstance(result[0], list):
        return result[0]
    if result is None or result == {}:
        return []
    return result


def validate_pk(item: Item, key_type: str) -> Item:
    """Check that *item* is keyed by *key_type*.

    Raises:
        InvalidResponseError: On a key type mismatch.
    """
    if item.key.kt != key_type:
        raise InvalidResponseError(
            f"Item key type mismatch: expected '{key_type}', got '{item.key.kt}'"
        )
    return item
