"""Configuration system for pagecraft.

Manages site configuration via pagecraft.toml with typed dataclasses
and sensible defaults for all values.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

import tomli_w

if sys.version_info >= (3, 12):
    import tomllib
else:
    import tomli as tomllib

from pagecraft.exceptions import ConfigError
from pagecraft.files import DEFAULT_OUTPUT_DIR

_T = TypeVar("_T")

__all__ = [
    "CONFIG_FILE",
    "PagecraftConfig",
    "SiteConfig",
    "TemplatesConfig",
    "default_config",
    "find_config",
    "load_config",
    "save_config",
]

logger = logging.getLogger(__name__)

CONFIG_FILE = "pagecraft.toml"


@dataclass
class SiteConfig:
    """[site] section."""

    output_dir: str = DEFAULT_OUTPUT_DIR
    base_url: str = ""


@dataclass
class TemplatesConfig:
    """[templates] section."""

    default: list[str] = field(default_factory=lambda: ["templates/default.html"])


@dataclass
class PagecraftConfig:
    """Root configuration combining all sections."""

    site: SiteConfig = field(default_factory=SiteConfig)
    templates: TemplatesConfig = field(default_factory=TemplatesConfig)


def default_config() -> PagecraftConfig:
    """Return a config with all default values."""
    return PagecraftConfig()


def _config_to_dict(config: PagecraftConfig) -> dict[str, object]:
    """Convert PagecraftConfig to a nested dict suitable for TOML serialization."""
    return {
        "site": dict(vars(config.site)),
        "templates": dict(vars(config.templates)),
    }


def save_config(config: PagecraftConfig, path: Path) -> None:
    """Save configuration to a TOML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = _config_to_dict(config)
    try:
        with path.open("wb") as f:
            tomli_w.dump(data, f)
        logger.info("Saved config to %s", path)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise ConfigError(f"Failed to save config to {path}: {e}") from e


def _load_section(cls: type[_T], data: object) -> _T:
    """Load a dataclass section from a dict, ignoring unknown keys."""
    if not isinstance(data, dict):
        raise ConfigError(f"Section for {cls.__name__} must be a table, got {type(data).__name__}")
    known_fields = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
    filtered = {k: v for k, v in data.items() if k in known_fields}
    return cls(**filtered)


def load_config(path: Path) -> PagecraftConfig:
    """Load configuration from a TOML file.

    Missing sections or keys get default values.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_bytes()
        data = tomllib.loads(raw.decode("utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    config = PagecraftConfig()
    section_map: dict[str, type] = {
        "site": SiteConfig,
        "templates": TemplatesConfig,
    }

    for name, cls in section_map.items():
        if name in data:
            setattr(config, name, _load_section(cls, data[name]))

    logger.info("Loaded config from %s", path)
    return config


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` looking for pagecraft.toml.

    Returns the config file path or None if not found.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent
