"""Name -> strategy mapping used to resolve the configured rebalance strategy."""

from typing import Dict, List, Optional
import logging
from .exceptions import UnknownStrategyError
from .strategies import RebalanceStrategy, simple_rebalance_strategy

logger = logging.getLogger(__name__)


class StrategyRegistry:
    """
    Mapping from strategy name to strategy instance.

    Meant to be populated at process start. Reads are not guarded, so
    registering while calculations run on other threads is not supported.
    """

    def __init__(self, strategies: Optional[Dict[str, RebalanceStrategy]] = None):
        self._strategies: Dict[str, RebalanceStrategy] = dict(strategies or {})

    def register(self, name: str, strategy: RebalanceStrategy) -> None:
        """Register a strategy; an existing entry with the same name is replaced"""
        if not name:
            raise ValueError("Strategy name must not be empty")
        if name in self._strategies:
            logger.info(f"Replacing rebalance strategy '{name}' with {strategy!r}")
        else:
            logger.info(f"Registered rebalance strategy '{name}': {strategy!r}")
        self._strategies[name] = strategy

    def get(self, name: str) -> RebalanceStrategy:
        strategy = self._strategies.get(name)
        if strategy is None:
            logger.error(f"Unknown rebalance strategy '{name}', available: {', '.join(self.names())}")
            raise UnknownStrategyError(name, self.names())
        return strategy

    def names(self) -> List[str]:
        return list(self._strategies)

    def description(self, name: str) -> Optional[str]:
        strategy = self._strategies.get(name)
        return strategy.description if strategy else None

    def __contains__(self, name: object) -> bool:
        return name in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)


def create_default_registry() -> StrategyRegistry:
    """Registry seeded with the built-in strategies"""
    return StrategyRegistry({simple_rebalance_strategy.name: simple_rebalance_strategy})


default_registry = create_default_registry()
