from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .sources.crates import CRATES_API

MODES = {"test", "remote"}
LATEST = "latest"


@dataclass
class Settings:
    registry_url: str
    request_timeout_seconds: int
    user_agent: str
    include_optional: bool


@dataclass
class Config:
    name: str
    version: str | None
    mode: str
    repository: str | None
    max_depth: int | None
    ascii_tree: bool
    output_file: str | None
    settings: Settings
    used_legacy: bool = False

    @property
    def wants_latest(self) -> bool:
        return self.version is not None and self.version.lower() == LATEST


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: _expand_env(val) for key, val in value.items()}
    return value


def _require_dict(value: Any, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a mapping")
    return value


def _require_str(value: Any, name: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigError(f"{name} is required")
    if isinstance(value, (dict, list)):
        raise ConfigError(f"{name} must be a string")
    return str(value).strip()


def _optional_str(value: Any, name: str) -> str | None:
    if value is None or value == "":
        return None
    return _require_str(value, name)


def _pick(data: dict[str, Any], key: str, legacy_key: str) -> tuple[Any, bool]:
    if key in data:
        return data[key], False
    if legacy_key in data:
        return data[legacy_key], True
    return None, False


def load_config(path: str | Path) -> Config:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse config {path}: {exc}") from exc
    return parse_config(raw, base_dir=path.parent)


def parse_config(raw: Any, base_dir: Path | None = None) -> Config:
    data = _expand_env(raw)
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping")

    name = _require_str(data.get("name"), "name")

    mode_raw, legacy_mode = _pick(data, "mode", "test_repo_mode")
    mode = str(mode_raw or "remote").strip().lower()
    if mode not in MODES:
        raise ConfigError("mode must be 'test' or 'remote'")

    repository = _optional_str(data.get("repository"), "repository")
    if mode == "test":
        if repository is None:
            raise ConfigError("repository is required in test mode")
        repository = _resolve_path(repository, base_dir)

    if mode == "remote":
        version = _require_str(data.get("version"), "version")
    else:
        version = _optional_str(data.get("version"), "version")

    ascii_raw, legacy_ascii = _pick(data, "ascii_tree", "ascii_tree_mode")
    output_raw, legacy_output = _pick(data, "output_file", "output_filename")

    return Config(
        name=name,
        version=version,
        mode=mode,
        repository=repository,
        max_depth=_parse_max_depth(data.get("max_depth")),
        ascii_tree=True if ascii_raw is None else _parse_bool(ascii_raw, "ascii_tree"),
        output_file=_resolve_path(_optional_str(output_raw, "output_file"), base_dir),
        settings=_load_settings(_require_dict(data.get("settings"), "settings")),
        used_legacy=legacy_mode or legacy_ascii or legacy_output,
    )


def _load_settings(raw: dict[str, Any]) -> Settings:
    timeout = _parse_int(raw.get("request_timeout_seconds", 20), "settings.request_timeout_seconds")
    if timeout <= 0:
        raise ConfigError("settings.request_timeout_seconds must be > 0")

    registry_url = str(raw.get("registry_url", CRATES_API))
    if not (registry_url.startswith("http://") or registry_url.startswith("https://")):
        raise ConfigError("settings.registry_url must be an http(s) URL")

    return Settings(
        registry_url=registry_url,
        request_timeout_seconds=timeout,
        user_agent=str(raw.get("user_agent", "cratetree/0.1")),
        include_optional=_parse_bool(raw.get("include_optional", True), "settings.include_optional"),
    )


def _parse_max_depth(value: Any) -> int | None:
    if value is None:
        return None
    depth = _parse_int(value, "max_depth")
    if depth < 0:
        raise ConfigError("max_depth must be a non-negative integer or null")
    return depth


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "yes", "1"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"false", "no", "0"}:
        return False
    raise ConfigError(f"{name} must be a boolean")


def _parse_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ConfigError(f"{name} must be an integer")
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ConfigError(f"{name} must be an integer")
    raise ConfigError(f"{name} must be an integer")


def _resolve_path(value: str | None, base_dir: Path | None) -> str | None:
    """Paths in the config are relative to the config file's directory."""
    if value is None or base_dir is None:
        return value
    return str(base_dir / Path(value).expanduser())
