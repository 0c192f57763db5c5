from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with the camelCase keys used by stored targets and JSON output"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Input models
class AllocationData(CamelModel):
    """Current holding bucket: percent of portfolio and market value"""
    asset_class: str  # Display key: symbol/name, or "Cash"
    current: float = Field(ge=0, le=100)
    market_value: float = Field(ge=0)
    symbol: Optional[str] = None
    name: Optional[str] = None

class AllocationTarget(CamelModel):
    """User-defined target percent for an asset class"""
    asset_class: str
    target: float = Field(ge=0, le=100)

class RebalanceInput(CamelModel):
    """Everything a strategy needs to calculate recommendations"""
    allocations: List[AllocationData]
    targets: List[AllocationTarget]
    total_portfolio_value: float
    base_currency: str = 'USD'


# Options
class RebalanceOptions(CamelModel):
    """Caller overrides; unset fields fall back to defaults"""
    minimum_trade_size: Optional[float] = Field(default=None, ge=0)
    tolerance_percent: Optional[float] = Field(default=None, ge=0)
    strategy: Optional[str] = None

    def resolve(self, defaults: 'ResolvedRebalanceOptions') -> 'ResolvedRebalanceOptions':
        """Merge these options over defaults, key by key"""
        overrides = self.model_dump(exclude_none=True)
        return defaults.model_copy(update=overrides)

class ResolvedRebalanceOptions(CamelModel):
    """Fully-populated options handed to a strategy"""
    minimum_trade_size: float = Field(default=0, ge=0)
    tolerance_percent: float = Field(default=0, ge=0)
    strategy: str = 'simple'

DEFAULT_REBALANCE_OPTIONS = ResolvedRebalanceOptions()


# Output models
class TradeAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"

class WarningType(str, Enum):
    ASSET_NO_TARGET = "ASSET_NO_TARGET"
    TARGET_NO_ASSET = "TARGET_NO_ASSET"
    SMALL_TRADE = "SMALL_TRADE"

class TradeRecommendation(CamelModel):
    """One row of output; delta_value > 0 means buy, < 0 means sell"""
    asset_class: str
    symbol: Optional[str] = None
    name: Optional[str] = None
    action: TradeAction
    current_value: float
    target_value: float
    current_percent: float
    target_percent: float
    delta_value: float
    delta_percent: float

class RebalanceWarning(CamelModel):
    """Non-fatal data quality issue found during calculation"""
    type: WarningType
    asset_class: str
    message: str

class RebalanceSummary(CamelModel):
    """Aggregate trade totals"""
    total_buy_amount: float
    total_sell_amount: float
    net_cash_flow: float  # Positive when sells raise more cash than buys use
    trade_count: int
    is_balanced: bool

class RebalanceMetadata(CamelModel):
    calculated_at: datetime
    strategy_used: str
    base_currency: str
    total_portfolio_value: float

class RebalanceResult(CamelModel):
    """Result of a rebalance calculation"""
    recommendations: List[TradeRecommendation]
    summary: RebalanceSummary
    warnings: List[RebalanceWarning] = Field(default_factory=list)
    metadata: RebalanceMetadata


# Engine-internal
@dataclass
class MergedAssetData:
    """Current and target data for one asset class, rebuilt on every calculation"""
    current_percent: float
    target_percent: float
    current_value: float
    symbol: Optional[str] = None
    name: Optional[str] = None
