"""Runtime configuration and logging setup.

Settings are resolved in three layers: built-in defaults, an optional YAML
file (``~/.contentdesk/config.yaml`` unless a path is given), and finally
``CONTENTDESK_*`` environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_API_ORIGIN = "https://api.1ewis.com"
DEFAULT_POLL_INTERVAL_MS = 30_000
DEFAULT_TIMEOUT = 10.0

_ENV_PREFIX = "CONTENTDESK_"


def _default_home() -> Path:
    return Path.home() / ".contentdesk"


@dataclass
class Settings:
    """Resolved ContentDesk settings."""

    api_origin: str = DEFAULT_API_ORIGIN
    home: Path = field(default_factory=_default_home)
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.api_origin = str(self.api_origin).rstrip("/")
        self.home = Path(self.home).expanduser()
        self.poll_interval_ms = int(self.poll_interval_ms)
        self.timeout = float(self.timeout)
        self.log_level = str(self.log_level).upper()

    @property
    def config_path(self) -> Path:
        return self.home / "config.yaml"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a mapping", path)
        return {}
    return data


def _from_env(environ: dict[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for f in fields(Settings):
        raw = environ.get(f"{_ENV_PREFIX}{f.name.upper()}")
        if raw:
            values[f.name] = raw
    return values


def load_settings(
    path: str | Path | None = None,
    environ: Optional[dict[str, str]] = None,
) -> Settings:
    """Build :class:`Settings` from defaults, YAML file and environment."""
    environ = dict(os.environ) if environ is None else environ
    env_values = _from_env(environ)

    home = Path(env_values.get("home") or _default_home()).expanduser()
    config_path = Path(path) if path else home / "config.yaml"
    file_values = _read_yaml(config_path)

    known = {f.name for f in fields(Settings)}
    merged: dict[str, Any] = {k: v for k, v in file_values.items() if k in known}
    merged.update(env_values)
    return Settings(**merged)


def configure_logging(level: str = "WARNING") -> None:
    """Route ``contentdesk`` loggers through a rich console handler."""
    from rich.logging import RichHandler

    root = logging.getLogger("contentdesk")
    root.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(show_path=False, markup=False))
