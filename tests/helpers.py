from datetime import datetime, timezone

from rebalance_calculator import AllocationTarget

FIXED_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_targets(targets):
    """{"Stocks": 60, ...} -> list of AllocationTarget, in insertion order"""
    return [AllocationTarget(asset_class=name, target=value) for name, value in targets.items()]
