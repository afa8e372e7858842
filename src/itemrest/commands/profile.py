"""Profile commands -- manage stored connection profiles.

Provides the ``itemrest profile`` sub-command group. Each profile is one
JSON file under the config directory naming an API root, its default
headers, and where to read its credential from.
"""

from __future__ import annotations

from typing import List, Optional

import typer

from itemrest.output import error, format_response, info, print_table, success

profile_app = typer.Typer(no_args_is_help=True)


def _parse_headers(values: Optional[List[str]]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values or []:
        name, sep, header_value = value.partition(":")
        if not sep or not name.strip():
            error(f"Invalid --header '{value}': expected Name: value")
            raise typer.Exit(code=2)
        headers[name.strip()] = header_value.strip()
    return headers


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    base_url: str = typer.Option(..., "--base-url", help="API root URL."),
    auth_type: Optional[str] = typer.Option(
        None, "--auth-type", help="Credential type: bearer or api_key."
    ),
    auth_header: Optional[str] = typer.Option(
        None, "--auth-header", help="Header carrying the credential."
    ),
    auth_source: str = typer.Option(
        "prompt", "--auth-source", help="Credential source: env:VAR, file:/path, prompt."
    ),
    header: Optional[List[str]] = typer.Option(
        None, "--header", "-H", help="Default header as 'Name: value'. Repeatable."
    ),
    timeout: float = typer.Option(30, "--timeout", help="Request timeout in seconds."),
    insecure: bool = typer.Option(False, "--insecure", help="Skip SSL verification."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing profile."),
) -> None:
    """Create or replace a profile.

    Example::

        itemrest profile add prod --base-url https://api.example.com \\
            --auth-type bearer --auth-source env:API_TOKEN
    """
    from itemrest.config import profile_exists, save_profile
    from itemrest.models import AuthConfig, Profile, RequestConfig

    if profile_exists(name) and not force:
        error(f"Profile '{name}' already exists. Use --force to overwrite.")
        raise typer.Exit(code=2)

    auth = None
    if auth_type is not None:
        if auth_type not in ("bearer", "api_key"):
            error(f"Unknown auth type '{auth_type}': expected bearer or api_key")
            raise typer.Exit(code=2)
        auth = AuthConfig(type=auth_type, header=auth_header, source=auth_source)

    profile = Profile(
        name=name,
        base_url=base_url,
        auth=auth,
        request=RequestConfig(timeout=timeout, verify_ssl=not insecure),
        headers=_parse_headers(header),
    )
    save_profile(profile)
    success(f"Saved profile '{name}'.")


@profile_app.command("list")
def profile_list() -> None:
    """List stored profiles."""
    from itemrest.config import list_profiles, load_profile

    names = list_profiles()
    if not names:
        info("No profiles configured.")
        return
    rows = []
    for name in names:
        profile = load_profile(name)
        rows.append([name, profile.base_url or "", profile.auth.type if profile.auth else ""])
    print_table(["name", "base_url", "auth"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Show a stored profile."""
    from itemrest.config import get_profiles_dir, load_profile
    from itemrest.exceptions import ConfigError

    try:
        profile = load_profile(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Profile directory: {get_profiles_dir()}")
    format_response(profile.model_dump(mode="json"))


@profile_app.command("remove")
def profile_remove(name: str = typer.Argument(help="Profile name.")) -> None:
    """Delete a stored profile."""
    from itemrest.config import delete_profile
    from itemrest.exceptions import ConfigError

    try:
        delete_profile(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    success(f"Removed profile '{name}'.")
