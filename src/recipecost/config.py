"""Costing configuration loaded from TOML."""

import logging
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

from recipecost.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostingConfig:
    """Settings shared by every cost and margin calculation."""

    vat_rate: float = 0.2  # Fraction, 0.2 = 20%
    margin_target: float = 20.0  # Percent, used when a recipe sets none
    default_price_includes_vat: bool = True
    max_depth: int = 10  # Sub-recipe nesting circuit breaker

    def merged(self, overrides: dict) -> "CostingConfig":
        """Return a copy with known keys from ``overrides`` applied."""
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in overrides.items() if k in known})


def load_config(path: Path) -> CostingConfig:
    """Load config from a TOML file, falling back to defaults if it is missing."""
    defaults = CostingConfig()

    if not path.exists():
        logger.warning("No config file found at %s, using defaults", path)
        return defaults

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    config = defaults.merged(data)
    for f in fields(config):
        value = getattr(config, f.name)
        expected = type(getattr(defaults, f.name))
        if expected is float:
            ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        elif expected is int:
            ok = isinstance(value, int) and not isinstance(value, bool)
        else:
            ok = isinstance(value, expected)
        if not ok:
            raise ConfigError(
                f"{f.name} must be {expected.__name__}, got {type(value).__name__} in {path}"
            )

    if not 0 <= config.vat_rate < 1:
        raise ConfigError(f"vat_rate must be in [0, 1), got {config.vat_rate}")
    if config.max_depth < 1:
        raise ConfigError(f"max_depth must be positive, got {config.max_depth}")

    logger.debug("Loaded config from %s: %s", path, config)
    return config
