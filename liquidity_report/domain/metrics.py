"""Derived figures computed from raw venue and balance inputs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ReportData


def _ratio_pct(numerator: float, denominator: float) -> float:
    if denominator > 0:
        return (numerator / denominator) * 100
    return 0.0


def market_share(jpeg_volume: float, market_volume: float) -> float:
    return _ratio_pct(jpeg_volume, market_volume)


def liquidity_share(jpeg_liquidity: float, total_liquidity: float) -> float:
    return _ratio_pct(jpeg_liquidity, total_liquidity)


def notional(price: float, amount: float) -> float:
    return price * amount


@dataclass(frozen=True)
class ReportStatistics:
    """Report-level aggregates consumed by the renderer."""

    exchange_count: int
    global_avg_liquidity: float
    jpeg_avg_liquidity: float
    jpeg_liquidity_share: float
    global_total_volume: float
    jpeg_total_volume: float
    jpeg_market_share: float
    total_notional: float


def compute_statistics(data: "ReportData") -> ReportStatistics:
    """Aggregate liquidity and volume across venues.

    Shares are ratios of aggregates (mean JPEG depth over mean venue depth,
    total JPEG volume over total venue volume); per-venue shares are not
    averaged.
    """
    exchanges = list(data.exchanges)
    count = len(exchanges)

    if count:
        global_avg = sum(e.liquidity_2pct for e in exchanges) / count
        jpeg_avg = sum(e.jpeg_liquidity_2pct for e in exchanges) / count
    else:
        global_avg = 0.0
        jpeg_avg = 0.0

    global_total = sum(e.market_volume for e in exchanges)
    jpeg_total = sum(e.jpeg_volume for e in exchanges)

    return ReportStatistics(
        exchange_count=count,
        global_avg_liquidity=global_avg,
        jpeg_avg_liquidity=jpeg_avg,
        jpeg_liquidity_share=liquidity_share(jpeg_avg, global_avg),
        global_total_volume=float(global_total),
        jpeg_total_volume=float(jpeg_total),
        jpeg_market_share=market_share(jpeg_total, global_total),
        total_notional=float(sum(b.notional for b in data.balances)),
    )
