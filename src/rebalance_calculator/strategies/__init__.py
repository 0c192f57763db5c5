from .base import RebalanceStrategy, Clock, utc_now
from .simple import SimpleRebalanceStrategy, simple_rebalance_strategy

__all__ = [
    "RebalanceStrategy",
    "Clock",
    "utc_now",
    "SimpleRebalanceStrategy",
    "simple_rebalance_strategy",
]
