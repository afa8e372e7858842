"""Item commands -- call one item operation from the shell.

Every command takes ``PATH_NAMES``, the comma-separated collection
segments from the hierarchy root down to the target type
(``orders,orderPhases,orderSteps``), and optional ``--loc kt:lk``
ancestors given root-first. The key type defaults to the leaf segment
without its trailing ``s``; pass ``--type`` when that guess is wrong.

Example::

    itemrest path orders,orderPhases,orderSteps --loc order:26513 --loc orderPhase:25826
    itemrest get orders,orderPhases --loc order:1 --pk 3 --json
    itemrest find orders byStatus --params '{"status": "open"}'
"""

from __future__ import annotations

import json
import re
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Union

import typer

from itemrest.client import SyncClient
from itemrest.config import resolve_profile
from itemrest.exceptions import ConfigError, InvalidUsageError, ItemRestError
from itemrest.items import ContainedItemApi, PrimaryItemApi, create_contained_api, create_primary_api
from itemrest.models import ComKey, Identifier, Item, LocKey, LocKeyArray, PriKey
from itemrest.output import error, format_response, get_output, print_data, success
from itemrest.paths import PathBuilder

_INT_RE = re.compile(r"^-?\d+$")
_SIBILANT_PLURALS = ("sses", "xes", "ches", "shes")

ItemApi = Union[PrimaryItemApi, ContainedItemApi]


def _loc_option() -> Any:
    return typer.Option(None, "--loc", help="Ancestor location as kt:lk, root-first. Repeatable.")


def _type_option() -> Any:
    return typer.Option(
        None, "--type", "-t", help="Key type (defaults to the leaf segment without trailing 's')."
    )


# ------------------------------------------------------------------ #
# Argument parsing
# ------------------------------------------------------------------ #


def parse_identifier(text: str) -> Identifier:
    """Parse an identifier: decimal text becomes an ``int``, anything else stays a string."""
    return int(text) if _INT_RE.match(text) else text


def parse_path_names(text: str) -> list[str]:
    names = [part.strip() for part in text.split(",") if part.strip()]
    if not names:
        raise InvalidUsageError("PATH_NAMES must list at least one collection segment")
    return names


def default_key_type(path_names: list[str]) -> str:
    """Guess the key type from the leaf segment (``orderSteps`` -> ``orderStep``).

    Handles ``ies`` (``categories``) and sibilant ``es`` plurals
    (``addresses``, ``matches``); irregular plurals need ``--type``.
    """
    leaf = path_names[-1].rsplit("/", 1)[-1]
    if leaf.endswith("ies") and len(leaf) > 3:
        return f"{leaf[:-3]}y"
    if leaf.endswith(_SIBILANT_PLURALS):
        return leaf[:-2]
    return leaf[:-1] if leaf.endswith("s") and len(leaf) > 1 else leaf


def parse_locations(values: Optional[List[str]]) -> LocKeyArray:
    """Parse repeated ``--loc kt:lk`` values into a chain, keeping the given order."""
    locs = []
    for value in values or []:
        kt, sep, lk = value.partition(":")
        if not sep or not kt or not lk:
            raise InvalidUsageError(f"Invalid --loc '{value}': expected kt:lk")
        locs.append(LocKey(kt=kt, lk=parse_identifier(lk)))
    return LocKeyArray(locs=tuple(locs))


def parse_json_option(value: Optional[str], option: str) -> Any:
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"{option} is not valid JSON: {exc}") from exc


def make_key(key_type: str, pk: str, locations: LocKeyArray) -> Union[PriKey, ComKey]:
    """Build a :class:`ComKey` when ancestors are given, a :class:`PriKey` otherwise."""
    if len(locations):
        return ComKey(kt=key_type, pk=parse_identifier(pk), loc=locations)
    return PriKey(kt=key_type, pk=parse_identifier(pk))


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


@contextmanager
def _cli_errors() -> Iterator[None]:
    """Print an :class:`ItemRestError` and exit with its code."""
    try:
        yield
    except ItemRestError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@contextmanager
def _item_api(ctx: typer.Context, path_names: list[str], key_type: str) -> Iterator[ItemApi]:
    """Open a :class:`SyncClient` for the active profile and bind an item client to it."""
    obj = ctx.obj or {}
    profile = resolve_profile(obj.get("profile"), obj.get("base_url"))
    if profile is None or not profile.base_url:
        raise ConfigError(
            "No API configured. Pass --base-url, set ITEMREST_BASE_URL, "
            "or add a profile with 'itemrest profile add'."
        )
    get_output().debug(f"Using profile '{profile.name}' at {profile.base_url}")
    with SyncClient(profile) as http:
        if len(path_names) > 1:
            yield create_contained_api(http, key_type, path_names)
        else:
            yield create_primary_api(http, key_type, path_names[0])


def _print_item(item: Item) -> None:
    format_response(item.model_dump(mode="json"))


def _print_items(items: list[Item]) -> None:
    format_response([item.model_dump(mode="json") for item in items])


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


def path_command(
    path_names: str = typer.Argument(help="Comma-separated collection segments, root-first."),
    pk: Optional[str] = typer.Option(None, "--pk", help="Item identifier."),
    loc: Optional[List[str]] = _loc_option(),
    key_type: Optional[str] = _type_option(),
) -> None:
    """Render the REST path for a key or location chain without calling the API.

    Example::

        itemrest path orders,orderPhases,orderSteps --loc order:26513 --loc orderPhase:25826 --pk 25825
    """
    with _cli_errors():
        names = parse_path_names(path_names)
        kt = key_type or default_key_type(names)
        locations = parse_locations(loc)
        builder = PathBuilder(kt, names)
        key = make_key(kt, pk, locations) if pk is not None else locations
        print_data(builder.get_path(key))


def get_command(
    ctx: typer.Context,
    path_names: str = typer.Argument(help="Comma-separated collection segments, root-first."),
    pk: str = typer.Option(..., "--pk", help="Item identifier."),
    loc: Optional[List[str]] = _loc_option(),
    key_type: Optional[str] = _type_option(),
) -> None:
    """Fetch one item by key."""
    with _cli_errors():
        names = parse_path_names(path_names)
        kt = key_type or default_key_type(names)
        key = make_key(kt, pk, parse_locations(loc))
        with _item_api(ctx, names, kt) as api:
            _print_item(api.get(key))


def all_command(
    ctx: typer.Context,
    path_names: str = typer.Argument(help="Comma-separated collection segments, root-first."),
    loc: Optional[List[str]] = _loc_option(),
    query: Optional[str] = typer.Option(None, "--query", help="Item query as a JSON object."),
    key_type: Optional[str] = _type_option(),
) -> None:
    """List the items of a collection."""
    with _cli_errors():
        names = parse_path_names(path_names)
        kt = key_type or default_key_type(names)
        item_query = parse_json_option(query, "--query")
        with _item_api(ctx, names, kt) as api:
            _print_items(api.all(item_query, None, parse_locations(loc)))


def one_command(
    ctx: typer.Context,
    path_names: str = typer.Argument(help="Comma-separated collection segments, root-first."),
    loc: Optional[List[str]] = _loc_option(),
    query: Optional[str] = typer.Option(None, "--query", help="Item query as a JSON object."),
    key_type: Optional[str] = _type_option(),
) -> None:
    """Fetch the first item of a collection matching a query."""
    with _cli_errors():
        names = parse_path_names(path_names)
        kt = key_type or default_key_type(names)
        item_query = parse_json_option(query, "--query")
        with _item_api(ctx, names, kt) as api:
            item = api.one(item_query, None, parse_locations(loc))
        if item is None:
            get_output().info("No matching item.")
            return
        _print_item(item)


def find_command(
    ctx: typer.Context,
    path_names: str = typer.Argument(help="Comma-separated collection segments, root-first."),
    finder: str = typer.Argument(help="Name of the server-side finder."),
    params: Optional[str] = typer.Option(None, "--params", help="Finder parameters as a JSON object."),
    loc: Optional[List[str]] = _loc_option(),
    key_type: Optional[str] = _type_option(),
) -> None:
    """Run a named finder."""
    with _cli_errors():
        names = parse_path_names(path_names)
        kt = key_type or default_key_type(names)
        finder_params = parse_json_option(params, "--params")
        with _item_api(ctx, names, kt) as api:
            _print_items(api.find(finder, finder_params, None, parse_locations(loc)))


def create_command(
    ctx: typer.Context,
    path_names: str = typer.Argument(help="Comma-separated collection segments, root-first."),
    body: str = typer.Option(..., "--body", help="Item properties as a JSON object."),
    loc: Optional[List[str]] = _loc_option(),
    key_type: Optional[str] = _type_option(),
) -> None:
    """Create an item."""
    with _cli_errors():
        names = parse_path_names(path_names)
        kt = key_type or default_key_type(names)
        item = parse_json_option(body, "--body")
        with _item_api(ctx, names, kt) as api:
            created = api.create(item, None, parse_locations(loc))
        success(f"Created {kt} {created.key.pk}")
        _print_item(created)


def update_command(
    ctx: typer.Context,
    path_names: str = typer.Argument(help="Comma-separated collection segments, root-first."),
    pk: str = typer.Option(..., "--pk", help="Item identifier."),
    body: str = typer.Option(..., "--body", help="Properties to change as a JSON object."),
    loc: Optional[List[str]] = _loc_option(),
    key_type: Optional[str] = _type_option(),
) -> None:
    """Update an item."""
    with _cli_errors():
        names = parse_path_names(path_names)
        kt = key_type or default_key_type(names)
        key = make_key(kt, pk, parse_locations(loc))
        item = parse_json_option(body, "--body")
        with _item_api(ctx, names, kt) as api:
            _print_item(api.update(key, item))


def remove_command(
    ctx: typer.Context,
    path_names: str = typer.Argument(help="Comma-separated collection segments, root-first."),
    pk: str = typer.Option(..., "--pk", help="Item identifier."),
    loc: Optional[List[str]] = _loc_option(),
    key_type: Optional[str] = _type_option(),
) -> None:
    """Delete an item."""
    with _cli_errors():
        names = parse_path_names(path_names)
        kt = key_type or default_key_type(names)
        key = make_key(kt, pk, parse_locations(loc))
        with _item_api(ctx, names, kt) as api:
            removed = api.remove(key)
        if removed:
            success(f"Removed {kt} {key.pk}")
        format_response({"removed": removed})


def action_command(
    ctx: typer.Context,
    path_names: str = typer.Argument(help="Comma-separated collection segments, root-first."),
    action: str = typer.Argument(help="Name of the item action."),
    pk: str = typer.Option(..., "--pk", help="Item identifier."),
    body: Optional[str] = typer.Option(None, "--body", help="Action body as a JSON object."),
    loc: Optional[List[str]] = _loc_option(),
    key_type: Optional[str] = _type_option(),
) -> None:
    """Run an action on one item."""
    with _cli_errors():
        names = parse_path_names(path_names)
        kt = key_type or default_key_type(names)
        key = make_key(kt, pk, parse_locations(loc))
        action_body = parse_json_option(body, "--body")
        with _item_api(ctx, names, kt) as api:
            _print_item(api.action(key, action, action_body))


def register_item_commands(app: typer.Typer) -> None:
    """Attach the item commands to the root application."""
    app.command("path")(path_command)
    app.command("get")(get_command)
    app.command("all")(all_command)
    app.command("one")(one_command)
    app.command("find")(find_command)
    app.command("create")(create_command)
    app.command("update")(update_command)
    app.command("remove")(remove_command)
    app.command("action")(action_command)
