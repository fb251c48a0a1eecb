"""On-disk state for cordkit: directories, global config, bot profiles.

Where files live
    Linux and the BSDs follow the XDG base directories
    (``$XDG_CONFIG_HOME/cordkit`` and friends). Everything else keeps a
    single ``~/.cordkit`` tree with ``cache/`` and ``logs/`` inside it.

What is stored
    ``config.json`` holds the :class:`~cordkit.models.config.GlobalConfig`.
    ``profiles/<name>.json`` holds one :class:`~cordkit.models.config.Profile`
    per bot. A repository may pin a profile in ``./cordkit.json``.

Tokens are never stored; profiles carry a token *source* which
:func:`resolve_credential` turns into the secret at run time.
"""

from __future__ import annotations

import contextlib
import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from cordkit.exceptions import ConfigError
from cordkit.models.config import GlobalConfig, Profile

_APP_NAME = "cordkit"
_PROJECT_CONFIG_FILENAME = "cordkit.json"

# kind -> (XDG variable, default under $HOME, subdirectory of ~/.cordkit)
_LAYOUT: dict[str, tuple[str, str, str]] = {
    "config": ("XDG_CONFIG_HOME", ".config", ""),
    "cache": ("XDG_CACHE_HOME", ".cache", "cache"),
    "data": ("XDG_DATA_HOME", ".local/share", "logs"),
}

_M = TypeVar("_M", bound=BaseModel)


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    env_var, home_default, fallback = _LAYOUT[kind]
    if _is_xdg_platform():
        root = Path(os.environ.get(env_var) or Path.home() / home_default)
        path = root / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/cordkit`` or ``~/.cordkit``; created on demand."""
    return _app_dir("config")


def get_cache_dir() -> Path:
    """Home of the GET response cache. Safe to delete at any time."""
    return _app_dir("cache")


def get_data_dir() -> Path:
    return _app_dir("data")


def get_profiles_dir() -> Path:
    path = get_config_dir() / "profiles"
    path.mkdir(exist_ok=True)
    return path


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never observe a partial file.

    The text goes to a sibling temp file which is fsynced and then renamed
    over *path*. The temp file is removed if anything fails on the way.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handle, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(handle, "w", encoding="utf-8") as stream:
            stream.write(data)
            stream.flush()
            os.fsync(stream.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


def _read_model(model: type[_M], path: Path, what: str) -> _M:
    data = _read_json(path, what)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


def _write_model(path: Path, model: BaseModel) -> None:
    _atomic_write(path, json.dumps(model.model_dump(mode="json"), indent=2) + "\n")


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


def load_global_config() -> GlobalConfig:
    """The stored global config, or the defaults when there is none.

    Raises:
        ConfigError: The file is not JSON or does not validate.
    """
    path = get_config_dir() / "config.json"
    if path.is_file():
        return _read_model(GlobalConfig, path, "global config")
    return GlobalConfig()


def save_global_config(config: GlobalConfig) -> None:
    _write_model(get_config_dir() / "config.json", config)


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


def list_profiles() -> list[str]:
    return sorted(entry.stem for entry in get_profiles_dir().glob("*.json") if entry.is_file())


def profile_exists(name: str) -> bool:
    return (get_profiles_dir() / f"{name}.json").is_file()


def load_profile(name: str) -> Profile:
    """Read ``profiles/<name>.json``.

    Raises:
        ConfigError: No such profile, or its file is not a valid profile.
    """
    path = get_profiles_dir() / f"{name}.json"
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    return _read_model(Profile, path, f"profile '{name}'")


def save_profile(profile: Profile) -> None:
    """Write *profile* under its name. A literal ``auth.token`` is excluded by the model."""
    _write_model(get_profiles_dir() / f"{profile.name}.json", profile)


def delete_profile(name: str) -> None:
    path = get_profiles_dir() / f"{name}.json"
    try:
        path.unlink()
    except FileNotFoundError:
        raise ConfigError(f"Profile '{name}' not found at {path}") from None


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def load_project_config() -> Optional[dict[str, Any]]:
    """``./cordkit.json`` if the working directory has one, else ``None``."""
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    return _read_json(path, "project config") if path.is_file() else None


def _pick_profile_name(cli_profile: Optional[str], global_cfg: GlobalConfig) -> Optional[str]:
    project = load_project_config() or {}
    candidates = (
        cli_profile,
        os.environ.get("CORDKIT_PROFILE"),
        project.get("default_profile"),
        global_cfg.default_profile,
    )
    chosen = next((name for name in candidates if name), None)
    if chosen is None and global_cfg.auto_select_single_profile:
        stored = list_profiles()
        if len(stored) == 1:
            chosen = stored[0]
    return chosen


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_api_url: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[Profile]]:
    """Work out the effective global config and active profile.

    The profile is the first one named by ``--profile``, ``CORDKIT_PROFILE``,
    ``./cordkit.json`` or the global ``default_profile``. With none named and
    exactly one profile stored, that one is used (unless
    ``auto_select_single_profile`` is off). The API root is taken from
    ``--api-url``, then ``CORDKIT_API_URL``, then the profile itself.
    """
    global_cfg = load_global_config()
    if cli_format is not None:
        global_cfg.output.format = cli_format

    name = _pick_profile_name(cli_profile, global_cfg)
    if name is None:
        return global_cfg, None

    profile = load_profile(name)
    api_url = cli_api_url or os.environ.get("CORDKIT_API_URL")
    if api_url:
        profile.api_url = api_url
    return global_cfg, profile


def resolve_credential(source: str) -> str:
    """Turn a token source into the token.

    ``env:NAME`` reads an environment variable, ``file:PATH`` reads a file
    (surrounding whitespace stripped) and ``prompt`` asks on the terminal.

    Raises:
        ConfigError: The source is malformed or yields nothing.
    """
    kind, _, target = source.partition(":")

    if kind == "env" and target:
        try:
            return os.environ[target]
        except KeyError:
            raise ConfigError(f"Environment variable '{target}' is not set (source: {source})") from None

    if kind == "file" and target:
        path = Path(target).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError("Cannot prompt for a token: stdin is not a TTY (source: prompt)")
        return getpass.getpass("Bot token: ")

    raise ConfigError(f"Unknown credential source format: {source}")
