"""Tests for cordkit.config -- XDG paths, atomic writes, profiles, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from cordkit.config import (
    _atomic_write,
    delete_profile,
    get_cache_dir,
    get_config_dir,
    get_data_dir,
    get_profiles_dir,
    list_profiles,
    load_global_config,
    load_profile,
    load_project_config,
    profile_exists,
    resolve_config,
    resolve_credential,
    save_global_config,
    save_profile,
)
from cordkit.enums import Intents
from cordkit.exceptions import ConfigError
from cordkit.models.config import AuthConfig, GlobalConfig, Profile


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _make_profile(name: str = "mybot") -> Profile:
    return Profile(name=name, auth=AuthConfig(source=f"env:{name.upper()}_TOKEN"))


# ---------------------------------------------------------------------------
# Directory layout
# ---------------------------------------------------------------------------


class TestDirectories:
    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cordkit.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "cordkit"
        assert result.is_dir()

    def test_cache_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cordkit.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "c"))
        assert get_cache_dir() == tmp_path / "c" / "cordkit"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cordkit.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", "")
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_data_dir() == tmp_path / ".local" / "share" / "cordkit"

    def test_fallback_layout(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cordkit.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".cordkit"
        assert get_cache_dir() == tmp_path / ".cordkit" / "cache"
        assert get_data_dir() == tmp_path / ".cordkit" / "logs"

    def test_profiles_dir_is_under_config(self, isolated_config: Path) -> None:
        assert get_profiles_dir() == isolated_config / "config" / "cordkit" / "profiles"


class TestAtomicWrite:
    def test_writes_and_leaves_no_temp_files(self, tmp_path: Path) -> None:
        target = tmp_path / "sub" / "file.json"
        _atomic_write(target, '{"a": 1}')
        assert target.read_text() == '{"a": 1}'
        assert [p.name for p in target.parent.iterdir()] == ["file.json"]

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        target.write_text("old")
        _atomic_write(target, "new")
        assert target.read_text() == "new"

    def test_failed_write_keeps_old_content(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        target = tmp_path / "file.json"
        target.write_text("old")

        def refuse(src: str, dst: Any) -> None:
            raise OSError("disk full")

        monkeypatch.setattr("cordkit.config.os.replace", refuse)
        with pytest.raises(OSError, match="disk full"):
            _atomic_write(target, "new")
        assert target.read_text() == "old"
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config.default_profile is None
        assert config.cache.enabled is False

    def test_round_trip(self, isolated_config: Path) -> None:
        config = GlobalConfig(default_profile="mybot")
        config.cache.enabled = True
        save_global_config(config)
        loaded = load_global_config()
        assert loaded.default_profile == "mybot"
        assert loaded.cache.enabled is True

    def test_invalid_json(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{nope")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_values(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", {"cache": {"ttl_seconds": "soon"}})
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


class TestProfiles:
    def test_save_load_list(self, isolated_config: Path) -> None:
        save_profile(_make_profile("beta"))
        save_profile(_make_profile("alpha"))
        assert list_profiles() == ["alpha", "beta"]
        loaded = load_profile("alpha")
        assert loaded.auth.source == "env:ALPHA_TOKEN"
        assert loaded.intents == int(Intents.default())
        assert profile_exists("beta")

    def test_literal_token_is_never_written(self, isolated_config: Path) -> None:
        profile = Profile(name="mybot", auth=AuthConfig(token="s3cret"))
        save_profile(profile)
        raw = (get_profiles_dir() / "mybot.json").read_text()
        assert "s3cret" not in raw
        assert "token" not in json.loads(raw)["auth"]

    def test_load_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_profile("ghost")

    def test_load_invalid(self, isolated_config: Path) -> None:
        _write_json(get_profiles_dir() / "bad.json", {"intents": 1})
        with pytest.raises(ConfigError, match="Invalid profile 'bad'"):
            load_profile("bad")

    def test_delete(self, isolated_config: Path) -> None:
        save_profile(_make_profile())
        delete_profile("mybot")
        assert not profile_exists("mybot")
        with pytest.raises(ConfigError):
            delete_profile("mybot")


# ---------------------------------------------------------------------------
# Project config and precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_nothing_configured(self, isolated_config: Path) -> None:
        _, profile = resolve_config()
        assert profile is None

    def test_single_profile_is_auto_selected(self, isolated_config: Path) -> None:
        save_profile(_make_profile("only"))
        _, profile = resolve_config()
        assert profile.name == "only"

    def test_auto_select_can_be_disabled(self, isolated_config: Path) -> None:
        save_profile(_make_profile("only"))
        save_global_config(GlobalConfig(auto_select_single_profile=False))
        assert resolve_config()[1] is None

    def test_several_profiles_need_a_choice(self, isolated_config: Path) -> None:
        save_profile(_make_profile("a"))
        save_profile(_make_profile("b"))
        assert resolve_config()[1] is None

    def test_precedence_chain(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("glob", "proj", "env", "cli"):
            save_profile(_make_profile(name))
        save_global_config(GlobalConfig(default_profile="glob"))
        assert resolve_config()[1].name == "glob"

        _write_json(isolated_config / "cordkit.json", {"default_profile": "proj"})
        assert load_project_config() == {"default_profile": "proj"}
        assert resolve_config()[1].name == "proj"

        monkeypatch.setenv("CORDKIT_PROFILE", "env")
        assert resolve_config()[1].name == "env"

        assert resolve_config(cli_profile="cli")[1].name == "cli"

    def test_missing_named_profile(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_config(cli_profile="ghost")

    def test_api_url_overrides(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_profile(_make_profile())
        monkeypatch.setenv("CORDKIT_API_URL", "http://env.local/api")
        assert resolve_config()[1].base_url == "http://env.local/api/v10"
        assert resolve_config(cli_api_url="http://cli.local/api")[1].api_url == "http://cli.local/api"

    def test_cli_format(self, isolated_config: Path) -> None:
        config, _ = resolve_config(cli_format="json")
        assert config.output.format == "json"


# ---------------------------------------------------------------------------
# Credential sources
# ---------------------------------------------------------------------------


class _Stdin:
    def __init__(self, tty: bool) -> None:
        self.tty = tty

    def isatty(self) -> bool:
        return self.tty


class TestResolveCredential:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_TOKEN", "abc")
        assert resolve_credential("env:MY_TOKEN") == "abc"

    def test_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MY_TOKEN", raising=False)
        with pytest.raises(ConfigError, match="MY_TOKEN"):
            resolve_credential("env:MY_TOKEN")

    def test_file_is_stripped(self, tmp_path: Path) -> None:
        path = tmp_path / "token"
        path.write_text("abc\n")
        assert resolve_credential(f"file:{path}") == "abc"

    def test_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'nope'}")

    def test_prompt_without_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cordkit.config.sys.stdin", _Stdin(tty=False))
        with pytest.raises(ConfigError, match="TTY"):
            resolve_credential("prompt")

    def test_prompt_with_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cordkit.config.sys.stdin", _Stdin(tty=True))
        monkeypatch.setattr("cordkit.config.getpass.getpass", lambda prompt: "typed")
        assert resolve_credential("prompt") == "typed"

    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("vault:thing")
