"""Client configuration: built-in defaults, overridden by a YAML file.

Command-line options are applied on top by the caller.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .protocol import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SOCKET_PATH = "/tmp/dwm.sock"

_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass
class Config:
    socket_path: str = DEFAULT_SOCKET_PATH
    ignore_reply: bool = False
    log_level: str = "warning"


def default_config_path() -> Path:
    """$XDG_CONFIG_HOME/dwm-msg/config.yaml, or ~/.config/... when unset."""
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return Path(base) / "dwm-msg" / "config.yaml"


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from a YAML file.

    A missing file yields the defaults. Raises ConfigError if the file
    cannot be read, is not valid YAML, or holds values of the wrong type.
    """
    path = Path(path) if path is not None else default_config_path()
    if not path.exists():
        logger.debug("no config file at %s", path)
        return Config()

    try:
        content = path.read_text()
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return _from_dict(data, path)


def _from_dict(data: dict, path: Path) -> Config:
    config = Config()

    socket_path = data.get("socket")
    if socket_path is not None:
        if not isinstance(socket_path, str) or not socket_path:
            raise ConfigError(f"{path}: 'socket' must be a non-empty string")
        config.socket_path = os.path.expanduser(socket_path)

    ignore_reply = data.get("ignore_reply")
    if ignore_reply is not None:
        if not isinstance(ignore_reply, bool):
            raise ConfigError(f"{path}: 'ignore_reply' must be true or false")
        config.ignore_reply = ignore_reply

    log_level = data.get("log_level")
    if log_level is not None:
        if not isinstance(log_level, str) or log_level.lower() not in _LOG_LEVELS:
            raise ConfigError(
                f"{path}: 'log_level' must be one of {', '.join(_LOG_LEVELS)}"
            )
        config.log_level = log_level.lower()

    unknown = set(data) - {"socket", "ignore_reply", "log_level"}
    if unknown:
        logger.warning("%s: ignoring unknown keys: %s", path, ", ".join(sorted(map(str, unknown))))

    return config
