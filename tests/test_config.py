"""Tests for itemrest.config -- XDG paths, atomic writes, profiles, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from itemrest.config import (
    _atomic_write,
    delete_profile,
    get_config_dir,
    get_data_dir,
    get_profiles_dir,
    list_profiles,
    load_profile,
    profile_exists,
    resolve_credential,
    resolve_profile,
    save_profile,
)
from itemrest.exceptions import ConfigError
from itemrest.models import AuthConfig, Profile


def _make_profile(name: str = "test", base_url: str = "https://api.example.com") -> Profile:
    return Profile(name=name, base_url=base_url)


# ---------------------------------------------------------------------------
# Directory layout
# ---------------------------------------------------------------------------


class TestDirectories:
    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("itemrest.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))

        result = get_config_dir()
        assert result == tmp_path / "cfg" / "itemrest"
        assert result.is_dir()

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("itemrest.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "itemrest"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("itemrest.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_data_dir() == tmp_path / ".local" / "share" / "itemrest"

    def test_fallback_layout(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("itemrest.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".itemrest"
        assert get_data_dir() == tmp_path / ".itemrest" / "logs"

    def test_profiles_dir(self, isolated_config: Path) -> None:
        assert get_profiles_dir() == isolated_config / "config" / "itemrest" / "profiles"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_parents_and_content(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "profile.json"
        _atomic_write(target, "{}")
        assert target.read_text(encoding="utf-8") == "{}"

    def test_overwrites_without_leftovers(self, tmp_path: Path) -> None:
        target = tmp_path / "profile.json"
        target.write_text("old", encoding="utf-8")
        _atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"
        assert list(tmp_path.iterdir()) == [target]

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "profile.json"
        with patch("itemrest.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


class TestProfiles:
    def test_list_empty(self, isolated_config: Path) -> None:
        assert list_profiles() == []

    def test_save_load_roundtrip(self, isolated_config: Path) -> None:
        profile = Profile(
            name="prod",
            base_url="https://api.example.com",
            auth=AuthConfig(type="api_key", header="X-Key", source="env:PROD_KEY"),
            headers={"X-Tenant": "acme"},
        )
        save_profile(profile)
        assert list_profiles() == ["prod"]
        assert profile_exists("prod")
        assert load_profile("prod") == profile

    def test_saved_file_is_json(self, isolated_config: Path) -> None:
        save_profile(_make_profile("dev"))
        data = json.loads((get_profiles_dir() / "dev.json").read_text(encoding="utf-8"))
        assert data["base_url"] == "https://api.example.com"

    def test_load_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_profile("nope")

    def test_load_invalid_json(self, isolated_config: Path) -> None:
        (get_profiles_dir() / "broken.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid profile"):
            load_profile("broken")

    def test_delete(self, isolated_config: Path) -> None:
        save_profile(_make_profile("dev"))
        delete_profile("dev")
        assert not profile_exists("dev")

    def test_delete_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            delete_profile("nope")

    def test_list_ignores_non_json(self, isolated_config: Path) -> None:
        save_profile(_make_profile("dev"))
        (get_profiles_dir() / "notes.txt").write_text("x", encoding="utf-8")
        assert list_profiles() == ["dev"]


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveProfile:
    def test_nothing_configured(self, isolated_config: Path) -> None:
        assert resolve_profile() is None

    def test_single_profile_auto_selected(self, isolated_config: Path) -> None:
        save_profile(_make_profile("only"))
        profile = resolve_profile()
        assert profile is not None and profile.name == "only"

    def test_multiple_profiles_not_auto_selected(self, isolated_config: Path) -> None:
        save_profile(_make_profile("a"))
        save_profile(_make_profile("b"))
        assert resolve_profile() is None

    def test_env_profile(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_profile(_make_profile("a"))
        save_profile(_make_profile("b"))
        monkeypatch.setenv("ITEMREST_PROFILE", "b")
        assert resolve_profile().name == "b"

    def test_cli_beats_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_profile(_make_profile("a"))
        save_profile(_make_profile("b"))
        monkeypatch.setenv("ITEMREST_PROFILE", "b")
        assert resolve_profile("a").name == "a"

    def test_unknown_profile(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_profile("ghost")

    def test_base_url_overrides(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_profile(_make_profile("only"))
        monkeypatch.setenv("ITEMREST_BASE_URL", "https://env.example.com")
        assert resolve_profile().base_url == "https://env.example.com"
        assert resolve_profile(cli_base_url="https://cli.example.com").base_url == "https://cli.example.com"
        assert load_profile("only").base_url == "https://api.example.com"

    def test_ad_hoc_profile_from_base_url(self, isolated_config: Path) -> None:
        profile = resolve_profile(cli_base_url="https://api.example.com")
        assert profile is not None
        assert profile.name == "default"
        assert profile.auth is None


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_TOKEN", "secret")
        assert resolve_credential("env:MY_TOKEN") == "secret"

    def test_env_source_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MY_TOKEN", raising=False)
        with pytest.raises(ConfigError, match="MY_TOKEN"):
            resolve_credential("env:MY_TOKEN")

    def test_file_source(self, tmp_path: Path) -> None:
        secret = tmp_path / "token"
        secret.write_text("  file-secret\n", encoding="utf-8")
        assert resolve_credential(f"file:{secret}") == "file-secret"

    def test_file_source_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'missing'}")

    def test_prompt_with_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin.isatty", lambda: True)
        monkeypatch.setattr("getpass.getpass", lambda prompt: "typed")
        assert resolve_credential("prompt") == "typed"

    def test_prompt_without_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin.isatty", lambda: False)
        with pytest.raises(ConfigError, match="not a TTY"):
            resolve_credential("prompt")

    def test_unknown_source(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("vault:secret/path")
