from __future__ import annotations
import tomllib
from pathlib import Path
from typing import Any, Dict

from fin_core.errors import ConfigError

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / "config.toml"


def load_config(config_path: Path | str | None = None) -> Dict[str, Any]:
    """
    Load config.toml from repo root by default.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG
    if not path.exists():
        raise ConfigError(f"Config not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def section(cfg: Dict[str, Any] | None, name: str) -> Dict[str, Any]:
    """Return one [section] of a loaded config, or {} when absent."""
    value = (cfg or {}).get(name)
    return value if isinstance(value, dict) else {}
