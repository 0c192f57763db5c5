from .calculator import (
    RebalanceCalculator,
    calculate_rebalance,
    get_available_strategies,
    get_strategy_description,
    register_strategy,
)
from .exceptions import RebalanceError, UnknownStrategyError, InvalidTargetsError
from .holdings import Holding, Instrument, HoldingsSource, StaticHoldingsSource, aggregate_holdings, load_portfolio_allocation
from .models import (
    AllocationData,
    AllocationTarget,
    RebalanceInput,
    RebalanceOptions,
    ResolvedRebalanceOptions,
    DEFAULT_REBALANCE_OPTIONS,
    TradeAction,
    TradeRecommendation,
    WarningType,
    RebalanceWarning,
    RebalanceSummary,
    RebalanceMetadata,
    RebalanceResult,
)
from .registry import StrategyRegistry, create_default_registry
from .strategies import RebalanceStrategy, SimpleRebalanceStrategy, simple_rebalance_strategy
from .targets import TargetStore, InMemoryTargetStore, JsonFileTargetStore, validate_target_set

__version__ = "1.0.0"

__all__ = [
    "RebalanceCalculator",
    "calculate_rebalance",
    "get_available_strategies",
    "get_strategy_description",
    "register_strategy",
    "RebalanceError",
    "UnknownStrategyError",
    "InvalidTargetsError",
    "Holding",
    "Instrument",
    "HoldingsSource",
    "StaticHoldingsSource",
    "aggregate_holdings",
    "load_portfolio_allocation",
    "AllocationData",
    "AllocationTarget",
    "RebalanceInput",
    "RebalanceOptions",
    "ResolvedRebalanceOptions",
    "DEFAULT_REBALANCE_OPTIONS",
    "TradeAction",
    "TradeRecommendation",
    "WarningType",
    "RebalanceWarning",
    "RebalanceSummary",
    "RebalanceMetadata",
    "RebalanceResult",
    "StrategyRegistry",
    "create_default_registry",
    "RebalanceStrategy",
    "SimpleRebalanceStrategy",
    "simple_rebalance_strategy",
    "TargetStore",
    "InMemoryTargetStore",
    "JsonFileTargetStore",
    "validate_target_set",
    "__version__",
]
