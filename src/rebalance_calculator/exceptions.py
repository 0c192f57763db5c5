from typing import Iterable, Optional


class RebalanceError(Exception):
    """Base class for rebalance calculator errors"""
    pass

class UnknownStrategyError(RebalanceError, ValueError):
    """Raised when the requested strategy is not registered"""

    def __init__(self, strategy: str, available: Optional[Iterable[str]] = None):
        self.strategy = strategy
        self.available = list(available or [])
        super().__init__(f"Unknown rebalance strategy: {strategy}")

class InvalidTargetsError(RebalanceError, ValueError):
    """Raised when a target set fails validation before being saved"""

    def __init__(self, issues):
        self.issues = list(issues)
        details = "; ".join(issue.message for issue in self.issues)
        super().__init__(f"Invalid target allocations: {details}")
