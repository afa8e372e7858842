"""Profile configuration with XDG paths, atomic writes, and precedence resolution.

A *profile* names one API: its base URL, default headers, credentials
source, and request settings. The CLI builds a
:class:`~itemrest.client.SyncClient` from the active profile; library
users can construct a :class:`~itemrest.models.Profile` directly and skip
this module entirely.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.itemrest/`` on macOS and Windows.
* **Profiles** -- one JSON file per API under ``<config_dir>/profiles/``.
* **Precedence** -- :func:`resolve_profile` picks the active profile from
  the CLI flag, ``ITEMREST_PROFILE``, or the only stored profile, and
  applies ``ITEMREST_BASE_URL`` / ``--base-url`` overrides.
* **Credentials** -- :func:`resolve_credential` reads secrets from env
  vars, files, or an interactive prompt.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from itemrest.exceptions import ConfigError
from itemrest.models import Profile

_APP_NAME = "itemrest"
ENV_PROFILE = "ITEMREST_PROFILE"
ENV_BASE_URL = "ITEMREST_BASE_URL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, falling back under ``$HOME``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/itemrest/`` (default ``~/.config/itemrest/``).
    On macOS/Windows: ``~/.itemrest/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/itemrest/`` (default ``~/.local/share/itemrest/``).
    On macOS/Windows: ``~/.itemrest/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_profiles_dir() -> Path:
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a temp file in the same directory and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Return all stored profile names, sorted alphabetically."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


def load_profile(name: str) -> Profile:
    """Load and validate a profile from disk.

    Raises:
        ConfigError: If the profile file does not exist, contains invalid
            JSON, or fails Pydantic validation.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Profile.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> None:
    """Persist *profile* atomically; the file name is derived from ``profile.name``."""
    data = profile.model_dump(mode="json")
    _atomic_write(_profile_path(profile.name), json.dumps(data, indent=2) + "\n")


def delete_profile(name: str) -> None:
    """Delete a stored profile.

    Raises:
        ConfigError: If the profile does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


# --- Precedence resolution ---


def resolve_profile(
    cli_profile: Optional[str] = None,
    cli_base_url: Optional[str] = None,
) -> Optional[Profile]:
    """Resolve the active profile.

    Profile name precedence (high to low):
        1. ``cli_profile``
        2. ``ITEMREST_PROFILE``
        3. the only stored profile, if exactly one exists

    Base URL precedence: ``cli_base_url`` > ``ITEMREST_BASE_URL`` > profile.
    When no profile resolves but a base URL is given, an ad-hoc profile
    named ``default`` is returned.

    Returns:
        The active :class:`~itemrest.models.Profile`, or ``None`` when
        neither a profile nor a base URL is available.
    """
    name = cli_profile or os.environ.get(ENV_PROFILE) or None
    if name is None:
        profiles = list_profiles()
        if len(profiles) == 1:
            name = profiles[0]

    profile: Optional[Profile] = load_profile(name) if name is not None else None

    base_url = cli_base_url or os.environ.get(ENV_BASE_URL) or None
    if base_url is not None:
        if profile is None:
            profile = Profile(name="default", base_url=base_url)
        else:
            profile = profile.model_copy(update={"base_url": base_url})

    return profile


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts the user interactively (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Enter credential: ")

    raise ConfigError(f"Unknown credential source format: {source}")
