"""Rebalance calculation facade over the strategy registry"""

from typing import List, Optional
import logging
from app_config import get_config
from .models import (
    DEFAULT_REBALANCE_OPTIONS, AllocationData, AllocationTarget, RebalanceInput, RebalanceOptions, RebalanceResult,
    ResolvedRebalanceOptions,
)
from .registry import StrategyRegistry, default_registry
from .strategies import RebalanceStrategy

TARGET_SUM_TOLERANCE = 0.01


class RebalanceCalculator:
    """Resolve a strategy and calculate rebalance recommendations"""

    def __init__(self, registry: Optional[StrategyRegistry] = None,
                 defaults: Optional[ResolvedRebalanceOptions] = None,
                 base_currency: Optional[str] = None,
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.registry = registry if registry is not None else default_registry
        self.config = get_config()
        self.defaults = defaults or DEFAULT_REBALANCE_OPTIONS.model_copy(update={
            'minimum_trade_size': self.config.rebalance.minimum_trade_size,
            'tolerance_percent': self.config.rebalance.tolerance_percent,
            'strategy': self.config.rebalance.strategy
        })
        self.base_currency = base_currency or self.config.rebalance.base_currency

    def calculate(self, allocations: List[AllocationData], targets: List[AllocationTarget],
                  options: Optional[RebalanceOptions] = None) -> RebalanceResult:
        """
        Calculate the trades needed to move current allocations to their targets.

        Args:
            allocations: Current holdings, already aggregated and percent-normalized
            targets: User-defined target percentages, not required to sum to 100
            options: Caller overrides, merged over the defaults key by key

        Returns:
            RebalanceResult with recommendations, summary, warnings and metadata

        Raises:
            UnknownStrategyError: If the resolved strategy is not registered
        """
        opts = (options or RebalanceOptions()).resolve(self.defaults)
        strategy = self.registry.get(opts.strategy)

        total_portfolio_value = sum(a.market_value for a in allocations)

        if targets:
            total_target = sum(t.target for t in targets)
            if abs(total_target - 100) > TARGET_SUM_TOLERANCE:
                self.logger.warning(f"Total target allocation is {total_target:.2f}%, not 100%")

        self.logger.debug(
            f"Calculating rebalance with '{strategy.name}': {len(allocations)} allocations, "
            f"{len(targets)} targets, total value {total_portfolio_value:,.2f} {self.base_currency}"
        )

        result = strategy.calculate(
            RebalanceInput(
                allocations=allocations,
                targets=targets,
                total_portfolio_value=total_portfolio_value,
                base_currency=self.base_currency
            ),
            opts
        )

        self.logger.debug(
            f"Rebalance calculated: {result.summary.trade_count} trades, "
            f"{len(result.warnings)} warnings, balanced={result.summary.is_balanced}"
        )
        return result

    def get_available_strategies(self) -> List[str]:
        return self.registry.names()

    def get_strategy_description(self, name: str) -> Optional[str]:
        return self.registry.description(name)

    def register_strategy(self, name: str, strategy: RebalanceStrategy) -> None:
        self.registry.register(name, strategy)


def calculate_rebalance(allocations: List[AllocationData], targets: List[AllocationTarget],
                        options: Optional[RebalanceOptions] = None) -> RebalanceResult:
    """Calculate with the process-wide registry and configured defaults"""
    return RebalanceCalculator().calculate(allocations, targets, options)


def get_available_strategies() -> List[str]:
    return default_registry.names()


def get_strategy_description(name: str) -> Optional[str]:
    return default_registry.description(name)


def register_strategy(name: str, strategy: RebalanceStrategy) -> None:
    """Add a strategy to the process-wide registry; call at startup"""
    default_registry.register(name, strategy)
