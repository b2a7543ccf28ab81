"""Shared helpers for locating and loading configuration mappings."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

import json
import os
import tomllib

import yaml


ConfigLoader = Callable[[Any], Mapping[str, Any]]


FILE_LOADERS: Dict[str, ConfigLoader] = {
    ".toml": lambda stream: tomllib.load(stream),
    ".json": lambda stream: json.load(stream),
    ".yaml": lambda stream: yaml.safe_load(stream) or {},
    ".yml": lambda stream: yaml.safe_load(stream) or {},
}
"""Mapping of file suffixes to loader callables."""


def load_config_file(path: Path) -> Mapping[str, Any]:
    """Load and decode a configuration mapping from ``path``."""

    suffix = path.suffix.lower()
    loader = FILE_LOADERS.get(suffix)
    if loader is None:
        supported = ", ".join(sorted(FILE_LOADERS))
        raise ValueError(
            f"Unsupported configuration file extension: {suffix}. Supported: {supported}"
        )

    mode = "rb" if suffix == ".toml" else "r"
    kwargs: Dict[str, Any] = {}
    if mode == "r":
        kwargs["encoding"] = "utf-8"

    with path.open(mode, **kwargs) as handle:
        data = loader(handle)

    if not isinstance(data, Mapping):
        raise TypeError(f"Configuration file '{path}' must contain a mapping at the root")

    return data


def merge_mappings(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Deep merge two mapping objects."""

    result: Dict[str, Any] = dict(base)
    for key, value in overlay.items():
        existing = result.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            result[key] = merge_mappings(existing, value)
        else:
            result[key] = value
    return result


def load_config_path(path: Path) -> Dict[str, Any]:
    """
    Load configuration from a file or a directory of configuration files.
    A directory merges every supported file alphabetically, later files winning.
    """
    if not path.is_dir():
        return dict(load_config_file(path))

    config_files: List[Path] = sorted(
        p for p in path.iterdir() if p.is_file() and p.suffix.lower() in FILE_LOADERS
    )
    if not config_files:
        raise FileNotFoundError(f"No configuration files found in: {path}")

    config: Dict[str, Any] = {}
    for config_file in config_files:
        config = merge_mappings(config, load_config_file(config_file))
    return config


def resolve_config_path(
    explicit: Optional[Path],
    *,
    env_var: str,
    default: Path,
) -> Optional[Path]:
    """
    Pick the configuration location: explicit path > environment variable > default.

    The default is only returned when it exists; explicit and environment paths
    are returned as given so that a missing file is reported to the user.
    """
    if explicit is not None:
        return explicit
    from_env = os.environ.get(env_var)
    if from_env:
        return Path(os.path.expanduser(from_env))
    if default.exists():
        return default
    return None


__all__ = [
    "ConfigLoader",
    "FILE_LOADERS",
    "load_config_file",
    "load_config_path",
    "merge_mappings",
    "resolve_config_path",
]
