"""Pydantic models for application configuration with validation."""

import re
from typing import Literal
from pydantic import BaseModel, Field, field_validator


class RebalanceConfig(BaseModel):
    """Default rebalance calculation parameters."""

    strategy: str = Field(
        default="simple",
        min_length=1,
        description="Registered strategy used when a caller does not name one"
    )
    minimum_trade_size: float = Field(
        default=0.0,
        ge=0.0,
        description="Trades smaller than this amount (base currency) are held"
    )
    tolerance_percent: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="Skip trades if allocation within this many percentage points of target"
    )
    base_currency: str = Field(
        default="USD",
        description="ISO 4217 code reported in calculation metadata"
    )

    @field_validator("base_currency")
    @classmethod
    def validate_currency_code(cls, v: str) -> str:
        """Validate currency is a three letter upper-case code."""
        if not re.match(r'^[A-Z]{3}$', v):
            raise ValueError(
                f"Invalid currency code '{v}'. Must be three upper-case letters, e.g. USD"
            )
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level"
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="text=human readable lines, json=one JSON object per record"
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


class StorageConfig(BaseModel):
    """Target allocation storage settings."""

    targets_file_path: str = Field(
        default="data/rebalancer-targets.json",
        description="JSON file holding the saved target allocations"
    )
    targets_storage_key: str = Field(
        default="rebalancer_targets",
        min_length=1,
        description="Key the target list is stored under inside the JSON file"
    )


class AppConfig(BaseModel):
    """Root application configuration."""

    rebalance: RebalanceConfig = Field(
        default_factory=RebalanceConfig,
        description="Rebalance calculation defaults"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings"
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Target storage settings"
    )
