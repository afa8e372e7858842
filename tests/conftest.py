"""Shared test fixtures for itemrest.

Provides a mocked :class:`~itemrest.client.HttpApi`, isolated config
environments, and CLI runners. These fixtures are automatically
discovered by pytest and available to all test modules without explicit
imports.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from itemrest.client import HttpApi
from itemrest.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test, the cached references become stale once the test finishes.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# HttpApi fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def http_api() -> MagicMock:
    """A MagicMock standing in for the HTTP capability.

    Each verb returns ``None`` until a test sets ``return_value``.
    """
    api = MagicMock(spec=HttpApi)
    api.get.return_value = None
    api.post.return_value = None
    api.put.return_value = None
    api.delete.return_value = None
    return api


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config, forces the XDG layout,
    and clears all ITEMREST_* environment variables.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("itemrest.config._is_xdg_platform", lambda: True)

    for var in ["ITEMREST_PROFILE", "ITEMREST_BASE_URL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
