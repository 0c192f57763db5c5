"""Aggregate raw holdings into percent-normalized allocation buckets"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import logging
from dataclasses import dataclass
from .models import AllocationData, CamelModel

logger = logging.getLogger(__name__)

CASH_IDENTIFIER = "CASH"
CASH_DISPLAY_NAME = "Cash"
UNKNOWN_DISPLAY_NAME = "Unknown Asset"
MONEY_MARKET_ASSET_CLASS = "MONEY_MARKET"


class Instrument(CamelModel):
    symbol: Optional[str] = None
    name: Optional[str] = None
    asset_class: Optional[str] = None

class Holding(CamelModel):
    """Position as reported by the holdings source, valued in base currency"""
    id: str
    holding_type: str = 'security'
    market_value_base: Optional[float] = None
    instrument: Optional[Instrument] = None


class HoldingsSource(ABC):
    """Contract for whatever supplies per-account holdings"""

    @abstractmethod
    def get_account_ids(self) -> List[str]:
        pass

    @abstractmethod
    def get_holdings(self, account_id: str) -> List[Holding]:
        pass


class StaticHoldingsSource(HoldingsSource):
    """Holdings held in memory, keyed by account id"""

    def __init__(self, holdings_by_account: Dict[str, List[Holding]]):
        self._holdings = {account_id: list(holdings) for account_id, holdings in holdings_by_account.items()}

    def get_account_ids(self) -> List[str]:
        return list(self._holdings)

    def get_holdings(self, account_id: str) -> List[Holding]:
        return list(self._holdings.get(account_id, []))


@dataclass
class _Bucket:
    market_value: float = 0.0
    symbol: str = ""
    name: str = ""
    count: int = 0


def _is_cash(holding: Holding) -> bool:
    if holding.holding_type == "cash":
        return True
    return holding.instrument is not None and holding.instrument.asset_class == MONEY_MARKET_ASSET_CLASS


def aggregate_holdings(holdings: List[Holding]) -> List[AllocationData]:
    """
    Group holdings into one allocation per identifier.

    Cash and money market holdings share a single "Cash" bucket, instruments
    are grouped by symbol, and holdings without an instrument each get their
    own "Unknown Asset" bucket. Holdings without a positive base market value are
    skipped. The result is sorted by market value, largest first.
    """
    buckets: Dict[str, _Bucket] = {}
    total_market_value = 0.0

    for holding in holdings:
        if (holding.market_value_base or 0) <= 0:
            logger.debug(f"Skipping holding {holding.id}: no positive base market value")
            continue

        market_value = holding.market_value_base
        total_market_value += market_value
        symbol = ""

        if _is_cash(holding):
            identifier = CASH_IDENTIFIER
            display_name = CASH_DISPLAY_NAME
        elif holding.instrument is not None:
            symbol = holding.instrument.symbol or ""
            identifier = symbol
            display_name = holding.instrument.name or symbol or "Unknown"
        else:
            identifier = f"UNKNOWN_{holding.id}"
            display_name = UNKNOWN_DISPLAY_NAME

        bucket = buckets.setdefault(identifier, _Bucket())
        bucket.market_value += market_value
        bucket.symbol = symbol or bucket.symbol
        bucket.name = display_name
        bucket.count += 1

    allocations = [
        AllocationData(
            asset_class=bucket.name,
            current=(bucket.market_value / total_market_value * 100) if total_market_value > 0 else 0,
            market_value=bucket.market_value,
            symbol=bucket.symbol,
            name=bucket.name
        )
        for bucket in buckets.values()
    ]
    allocations.sort(key=lambda a: a.market_value, reverse=True)

    logger.debug(f"Aggregated {len(holdings)} holdings into {len(allocations)} allocations")
    return allocations


def load_portfolio_allocation(source: HoldingsSource) -> List[AllocationData]:
    """Collect holdings for every account and aggregate them"""
    all_holdings: List[Holding] = []
    for account_id in source.get_account_ids():
        holdings = source.get_holdings(account_id)
        logger.debug(f"Retrieved {len(holdings)} holdings for account {account_id}")
        all_holdings.extend(holdings)
    return aggregate_holdings(all_holdings)
