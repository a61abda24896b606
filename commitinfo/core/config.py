"""Resolution options and their optional YAML configuration file."""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml

from commitinfo.core.gitfiles import DEFAULT_GIT_DIRECTORY
from commitinfo.runners.git import DEFAULT_TIMEOUT

DEFAULT_CONFIG_NAME = ".commitinfo.yml"
DEFAULT_HASH_LENGTH = 7


class ConfigError(ValueError):
    """Raised for unreadable configuration files or invalid option values."""


@dataclass(frozen=True)
class ResolveOptions:
    hash_length: int = DEFAULT_HASH_LENGTH
    use_external_tool: bool = True
    skip_status: bool = False
    git_directory: str = DEFAULT_GIT_DIRECTORY
    timeout: float = DEFAULT_TIMEOUT
    git_executable: str = "git"

    def __post_init__(self) -> None:
        if isinstance(self.hash_length, bool) or not isinstance(self.hash_length, int):
            raise ConfigError(f"hash_length must be an integer, got {self.hash_length!r}")
        if self.hash_length < 1:
            raise ConfigError(f"hash_length must be at least 1, got {self.hash_length}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if not self.git_directory:
            raise ConfigError("git_directory must not be empty")

    def truncate(self, commit_hash: str) -> str:
        return commit_hash[: self.hash_length]

    def merged(self, **overrides: Any) -> "ResolveOptions":
        """Return a copy with every override that is not ``None`` applied."""

        updates = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **updates) if updates else self


def load_options(path: pathlib.Path, base: Optional[ResolveOptions] = None) -> ResolveOptions:
    """Load options from ``path``, falling back to ``base`` (or defaults) when absent."""

    options = base or ResolveOptions()
    if not path.exists():
        return options
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of options")
    return options.merged(**_options_from_mapping(data, path))


def _options_from_mapping(data: Dict[str, Any], path: pathlib.Path) -> Dict[str, Any]:
    known = {field.name for field in fields(ResolveOptions)}
    values: Dict[str, Any] = {}
    for key, value in data.items():
        name = str(key).replace("-", "_")
        if name == "no_git":
            values["use_external_tool"] = not _parse_bool(value, name, path)
        elif name in {"use_external_tool", "skip_status"}:
            values[name] = _parse_bool(value, name, path)
        elif name == "hash_length":
            values[name] = _parse_int(value, name, path)
        elif name == "timeout":
            values[name] = _parse_float(value, name, path)
        elif name in known:
            values[name] = str(value)
        else:
            raise ConfigError(f"Unknown option {key!r} in {path}")
    return values


def _parse_bool(value: object, name: str, path: pathlib.Path) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "yes", "on", "1"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"false", "no", "off", "0"}:
        return False
    raise ConfigError(f"{name} in {path} must be a boolean, got {value!r}")


def _parse_int(value: object, name: str, path: pathlib.Path) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} in {path} must be an integer, got {value!r}")
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} in {path} must be an integer, got {value!r}") from exc


def _parse_float(value: object, name: str, path: pathlib.Path) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} in {path} must be a number, got {value!r}") from exc
