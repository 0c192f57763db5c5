"""Direct-delta rebalancing with tolerance and minimum trade size filtering"""

from typing import Dict, List, Optional
import logging
from ..models import (
    AllocationData, AllocationTarget, MergedAssetData, RebalanceInput, RebalanceMetadata,
    RebalanceResult, RebalanceSummary, RebalanceWarning, ResolvedRebalanceOptions,
    TradeAction, TradeRecommendation, WarningType,
)
from .base import Clock, RebalanceStrategy


class SimpleRebalanceStrategy(RebalanceStrategy):
    """
    Calculates the delta between current and target value for each asset class.

    Current allocations and targets are outer-joined on the asset_class string.
    The join is exact and case-sensitive: "US Stocks" and "US stocks" end up as
    two separate rows, each with its own warning.
    """

    name = "simple"
    description = "Calculate direct path to target allocations"

    def __init__(self, clock: Optional[Clock] = None, logger: Optional[logging.Logger] = None):
        super().__init__(clock)
        self.logger = logger or logging.getLogger(__name__)

    def calculate(self, input: RebalanceInput, options: ResolvedRebalanceOptions) -> RebalanceResult:
        warnings: List[RebalanceWarning] = []

        asset_map = self._build_asset_map(input.allocations, input.targets, warnings)

        recommendations = self._calculate_recommendations(
            asset_map=asset_map,
            total_value=input.total_portfolio_value,
            options=options,
            warnings=warnings
        )

        summary = self._build_summary(recommendations, options)

        return RebalanceResult(
            recommendations=recommendations,
            summary=summary,
            warnings=warnings,
            metadata=RebalanceMetadata(
                calculated_at=self.clock(),
                strategy_used=self.name,
                base_currency=input.base_currency,
                total_portfolio_value=input.total_portfolio_value
            )
        )

    def _build_asset_map(self, allocations: List[AllocationData], targets: List[AllocationTarget],
                         warnings: List[RebalanceWarning]) -> Dict[str, MergedAssetData]:
        """Merge current allocations and targets into one entry per asset class"""
        asset_map: Dict[str, MergedAssetData] = {}

        for allocation in allocations:
            asset_map[allocation.asset_class] = MergedAssetData(
                current_percent=allocation.current,
                target_percent=0,
                current_value=allocation.market_value,
                symbol=allocation.symbol,
                name=allocation.name
            )

        for target in targets:
            existing = asset_map.get(target.asset_class)
            if existing is not None:
                existing.target_percent = target.target
                continue

            asset_map[target.asset_class] = MergedAssetData(
                current_percent=0,
                target_percent=target.target,
                current_value=0,
                name=target.asset_class
            )
            warnings.append(RebalanceWarning(
                type=WarningType.TARGET_NO_ASSET,
                asset_class=target.asset_class,
                message=f'Target set for "{target.asset_class}" but no current holdings found'
            ))

        # Only holdings with value are worth warning about
        for asset_class, data in asset_map.items():
            if data.current_percent > 0 and data.target_percent == 0:
                warnings.append(RebalanceWarning(
                    type=WarningType.ASSET_NO_TARGET,
                    asset_class=asset_class,
                    message=f'"{asset_class}" has holdings but no target allocation set'
                ))

        return asset_map

    def _calculate_recommendations(self, asset_map: Dict[str, MergedAssetData], total_value: float,
                                   options: ResolvedRebalanceOptions,
                                   warnings: List[RebalanceWarning]) -> List[TradeRecommendation]:
        """Calculate one recommendation per asset class, largest trades first"""
        recommendations = []

        for asset_class, data in asset_map.items():
            current_value = data.current_value
            target_value = (data.target_percent / 100) * total_value if total_value > 0 else 0.0
            delta_value = target_value - current_value
            delta_percent = data.target_percent - data.current_percent

            if abs(delta_percent) <= options.tolerance_percent:
                self.logger.debug(
                    f"Holding {asset_class}: {abs(delta_percent):.2f}% difference within "
                    f"{options.tolerance_percent}% tolerance"
                )
                recommendations.append(self._hold(asset_class, data, target_value))
                continue

            if 0 < abs(delta_value) < options.minimum_trade_size:
                warnings.append(RebalanceWarning(
                    type=WarningType.SMALL_TRADE,
                    asset_class=asset_class,
                    message=(
                        f"Trade of ${abs(delta_value):.2f} is below minimum of "
                        f"${options.minimum_trade_size:.2f}"
                    )
                ))
                recommendations.append(self._hold(asset_class, data, target_value))
                continue

            if delta_value > 0:
                action = TradeAction.BUY
            elif delta_value < 0:
                action = TradeAction.SELL
            else:
                action = TradeAction.HOLD

            recommendations.append(TradeRecommendation(
                asset_class=asset_class,
                symbol=data.symbol,
                name=data.name,
                action=action,
                current_value=current_value,
                target_value=target_value,
                current_percent=data.current_percent,
                target_percent=data.target_percent,
                delta_value=delta_value,
                delta_percent=delta_percent
            ))

        return sorted(recommendations, key=lambda r: abs(r.delta_value), reverse=True)

    def _hold(self, asset_class: str, data: MergedAssetData, target_value: float) -> TradeRecommendation:
        """Suppressed trade: reported deltas are zeroed, not the true small delta"""
        return TradeRecommendation(
            asset_class=asset_class,
            symbol=data.symbol,
            name=data.name,
            action=TradeAction.HOLD,
            current_value=data.current_value,
            target_value=target_value,
            current_percent=data.current_percent,
            target_percent=data.target_percent,
            delta_value=0,
            delta_percent=0
        )

    def _build_summary(self, recommendations: List[TradeRecommendation],
                       options: ResolvedRebalanceOptions) -> RebalanceSummary:
        buys = [r for r in recommendations if r.action == TradeAction.BUY]
        sells = [r for r in recommendations if r.action == TradeAction.SELL]

        total_buy_amount = sum(r.delta_value for r in buys)
        total_sell_amount = abs(sum(r.delta_value for r in sells))

        return RebalanceSummary(
            total_buy_amount=total_buy_amount,
            total_sell_amount=total_sell_amount,
            net_cash_flow=total_sell_amount - total_buy_amount,
            trade_count=len(buys) + len(sells),
            is_balanced=all(
                r.action == TradeAction.HOLD or abs(r.delta_percent) <= options.tolerance_percent
                for r in recommendations
            )
        )


simple_rebalance_strategy = SimpleRebalanceStrategy()
