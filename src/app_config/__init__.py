"""Application configuration management for the portfolio rebalance calculator."""

from .models import (
    AppConfig,
    RebalanceConfig,
    LoggingConfig,
    StorageConfig,
)
from .loader import load_config, get_config, reset_config

__all__ = [
    "AppConfig",
    "RebalanceConfig",
    "LoggingConfig",
    "StorageConfig",
    "load_config",
    "get_config",
    "reset_config",
]
