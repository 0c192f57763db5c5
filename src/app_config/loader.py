"""Configuration loader with validation and singleton access."""

import logging
import yaml
from pathlib import Path
from typing import Optional

from .models import AppConfig

logger = logging.getLogger(__name__)

# Global config singleton
_config: Optional[AppConfig] = None


def load_config(config_path: str | Path) -> AppConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config validation fails
        yaml.YAMLError: If YAML parsing fails
    """
    global _config

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    with open(config_path, 'r') as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ValueError(f"Invalid configuration: expected a mapping, got {type(raw_config).__name__}")

    try:
        _config = AppConfig(**raw_config)
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ValueError(f"Invalid configuration: {e}") from e

    # Log loaded configuration for audit trail
    logger.info("Configuration loaded successfully:")
    logger.info(f"  Default strategy: {_config.rebalance.strategy}")
    logger.info(f"  Minimum trade size: {_config.rebalance.minimum_trade_size}")
    logger.info(f"  Tolerance: {_config.rebalance.tolerance_percent}%")
    logger.info(f"  Base currency: {_config.rebalance.base_currency}")
    logger.info(f"  Targets file: {_config.storage.targets_file_path}")

    return _config


def get_config() -> AppConfig:
    """
    Get the current loaded configuration.

    Falls back to defaults when no file has been loaded, so the calculator
    can be used as a plain library.
    """
    global _config

    if _config is None:
        logger.debug("No configuration loaded, using defaults")
        _config = AppConfig()
    return _config


def reset_config() -> None:
    """Forget the loaded configuration."""
    global _config
    _config = None
