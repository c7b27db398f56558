"""YAML configuration for the prelude and its tooling.

Example ``leafprelude.yaml``::

    implementation: builtin   # or native
    conformance:
      trials: 200
      max_length: 12
      seed: 0
    logging:
      level: WARNING

Every key is optional.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from leafprelude.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LEAFPRELUDE_CONFIG"
DEFAULT_CONFIG_NAME = "leafprelude.yaml"
IMPLEMENTATIONS = ("native", "builtin")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ConformanceConfig:
    """Settings for randomised conformance checks.

    Attributes:
        trials: Random trials per function (edge cases are always added).
        max_length: Longest random sequence generated.
        seed: Seed for the trial generator.
    """

    trials: int = 200
    max_length: int = 12
    seed: int = 0


@dataclass(frozen=True)
class PreludeConfig:
    """Top-level configuration.

    Attributes:
        implementation: Default implementation, "native" or "builtin".
        conformance: Conformance check settings.
        log_level: Logging level used by the command line.
        source: File the configuration was loaded from, if any.
    """

    implementation: str = "builtin"
    conformance: ConformanceConfig = field(default_factory=ConformanceConfig)
    log_level: str = "WARNING"
    source: Path | None = None


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        msg = f"'{key}' must be a mapping, got {type(section).__name__}"
        raise ConfigError(msg)
    return section


def _int_field(section: dict[str, Any], key: str, default: int, minimum: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"'{key}' must be an integer, got {value!r}"
        raise ConfigError(msg)
    if value < minimum:
        msg = f"'{key}' must be at least {minimum}, got {value}"
        raise ConfigError(msg)
    return value


def parse_config(data: Any, source: Path | None = None) -> PreludeConfig:
    """Build a PreludeConfig from a parsed YAML document."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = "configuration must be a mapping"
        raise ConfigError(msg)

    implementation = str(data.get("implementation", "builtin")).lower()
    if implementation not in IMPLEMENTATIONS:
        msg = f"unknown implementation '{implementation}' (expected one of {', '.join(IMPLEMENTATIONS)})"
        raise ConfigError(msg)

    conformance_data = _section(data, "conformance")
    conformance = ConformanceConfig(
        trials=_int_field(conformance_data, "trials", ConformanceConfig.trials, 0),
        max_length=_int_field(
            conformance_data, "max_length", ConformanceConfig.max_length, 0
        ),
        seed=_int_field(conformance_data, "seed", ConformanceConfig.seed, 0),
    )

    log_level = str(_section(data, "logging").get("level", "WARNING")).upper()
    if log_level not in LOG_LEVELS:
        msg = f"unknown logging level '{log_level}'"
        raise ConfigError(msg)

    return PreludeConfig(
        implementation=implementation,
        conformance=conformance,
        log_level=log_level,
        source=source,
    )


def load_config(config_path: Path | str) -> PreludeConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Parsed configuration.

    Raises:
        ConfigError: If the file is not valid YAML or has bad values.
    """
    path = Path(config_path)
    with path.open() as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f"{path}: {e}"
            raise ConfigError(msg) from e

    logger.debug("Loaded configuration from %s", path)
    return parse_config(data, source=path)


def find_config(config_path: Path | str | None = None) -> Path | None:
    """Locate the configuration file.

    Checks, in order: the explicit path, ``$LEAFPRELUDE_CONFIG``, and
    ``leafprelude.yaml`` in the working directory.
    """
    if config_path is not None:
        return Path(config_path)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    local = Path.cwd() / DEFAULT_CONFIG_NAME
    if local.exists():
        return local
    return None


def get_config(config_path: Path | str | None = None) -> PreludeConfig:
    """Find and load the configuration, or return the defaults."""
    path = find_config(config_path)
    if path is None:
        return PreludeConfig()
    return load_config(path)
