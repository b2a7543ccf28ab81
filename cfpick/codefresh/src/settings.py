"""
Settings for the codefresh pickers.

Settings come from an optional TOML, JSON or YAML file. Every key is optional:

    executable = "codefresh"
    host = "g.codefresh.io"
    timeout = 30
    picker = "auto"          # auto, fzf or prompt
    log_level = "none"
    fzf_command = ["fzf"]

    [keys]                   # used by the prompt picker
    terminate = "x"
    restart = "r"
    logs = "l"
    refresh = "R"

    [fzf_keys]               # used by fzf (bare letters would be typed into the query)
    terminate = "ctrl-x"
    restart = "ctrl-r"
    logs = "ctrl-l"
    refresh = "ctrl-f"
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from cfpick.core.command_runner import DEFAULT_TIMEOUT
from cfpick.core.config_loader import load_config_path, resolve_config_path

CONFIG_ENV_VAR = "CFPICK_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/cfpick/config.toml").expanduser()

PICKER_CHOICES = ("auto", "fzf", "prompt")
LOG_LEVELS = ("none", "error", "info", "debug")
KEY_ACTIONS = ("terminate", "restart", "logs", "refresh")

DEFAULT_KEYS = {"terminate": "x", "restart": "r", "logs": "l", "refresh": "R"}
DEFAULT_FZF_KEYS = {
    "terminate": "ctrl-x",
    "restart": "ctrl-r",
    "logs": "ctrl-l",
    "refresh": "ctrl-f",
}


class ConfigError(ValueError):
    """Raised when a configuration value has the wrong shape."""


@dataclass(frozen=True)
class Settings:
    executable: str = "codefresh"
    host: str = "g.codefresh.io"
    timeout: float = DEFAULT_TIMEOUT
    picker: str = "auto"
    log_level: str = "none"
    fzf_command: Tuple[str, ...] = ("fzf",)
    keys: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_KEYS))
    fzf_keys: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_FZF_KEYS))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        """Validate a decoded configuration mapping."""
        kwargs: Dict[str, Any] = {}

        for name in ("executable", "host"):
            if name in data:
                kwargs[name] = _require_str(data[name], name)

        if "timeout" in data:
            value = data["timeout"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigError("timeout must be a positive number of seconds")
            kwargs["timeout"] = float(value)

        if "picker" in data:
            kwargs["picker"] = _require_choice(data["picker"], "picker", PICKER_CHOICES)

        if "log_level" in data:
            kwargs["log_level"] = _require_choice(data["log_level"], "log_level", LOG_LEVELS)

        if "fzf_command" in data:
            value = data["fzf_command"]
            if isinstance(value, str):
                value = value.split()
            if not value or not all(isinstance(part, str) for part in value):
                raise ConfigError("fzf_command must be a string or a list of strings")
            kwargs["fzf_command"] = tuple(value)

        if "keys" in data:
            kwargs["keys"] = _merge_keys(DEFAULT_KEYS, data["keys"], "keys")
        if "fzf_keys" in data:
            kwargs["fzf_keys"] = _merge_keys(DEFAULT_FZF_KEYS, data["fzf_keys"], "fzf_keys")

        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with the non-None ``overrides`` applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def _require_str(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{name} must be a non-empty string")
    return value.strip()


def _require_choice(value: Any, name: str, choices: Tuple[str, ...]) -> str:
    text = _require_str(value, name).lower()
    if text not in choices:
        raise ConfigError(f"{name} must be one of: {', '.join(choices)}")
    return text


def _merge_keys(defaults: Mapping[str, str], value: Any, name: str) -> Dict[str, str]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"[{name}] must be a table")
    merged = dict(defaults)
    for action, key in value.items():
        if action not in KEY_ACTIONS:
            raise ConfigError(f"[{name}] has unknown action '{action}'")
        merged[action] = _require_str(key, f"{name}.{action}")
    if len(set(merged.values())) != len(merged):
        raise ConfigError(f"[{name}] maps the same key to more than one action")
    return merged


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load settings from ``path``, the ``CFPICK_CONFIG`` environment variable,
    or the default location, falling back to built-in defaults.
    """
    config_path = resolve_config_path(path, env_var=CONFIG_ENV_VAR, default=DEFAULT_CONFIG_PATH)
    if config_path is None:
        return Settings()
    if not config_path.exists():
        raise ConfigError(f"Configuration path not found: {config_path}")
    return Settings.from_mapping(load_config_path(config_path))
