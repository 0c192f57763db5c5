from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Optional
from ..models import RebalanceInput, RebalanceResult, ResolvedRebalanceOptions

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RebalanceStrategy(ABC):
    """Contract every rebalancing algorithm implements.

    Strategies are pure: no I/O, and identical input yields identical
    recommendations and summary. Only metadata.calculated_at depends on
    the clock, which can be injected for deterministic tests.
    """

    name: str = ""
    description: str = ""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or utc_now

    @abstractmethod
    def calculate(self, input: RebalanceInput, options: ResolvedRebalanceOptions) -> RebalanceResult:
        """Calculate trade recommendations to reach target allocations"""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
