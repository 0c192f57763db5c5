
import pytest

from app_config import reset_config
from rebalance_calculator import AllocationData, RebalanceCalculator, create_default_registry
from rebalance_calculator.strategies import SimpleRebalanceStrategy

from .helpers import FIXED_TIME

@pytest.fixture(autouse=True)
def _reset_config():
    reset_config()
    yield
    reset_config()

@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME

@pytest.fixture
def strategy(fixed_clock):
    return SimpleRebalanceStrategy(clock=fixed_clock)

@pytest.fixture
def registry(strategy):
    """Fresh registry so tests never touch the process-wide one"""
    registry = create_default_registry()
    registry.register("simple", strategy)
    return registry

@pytest.fixture
def calculator(registry):
    return RebalanceCalculator(registry=registry)

@pytest.fixture
def stocks_bonds():
    return [
        AllocationData(asset_class="Stocks", current=40, market_value=4000, symbol="VTI"),
        AllocationData(asset_class="Bonds", current=60, market_value=6000, symbol="BND"),
    ]
