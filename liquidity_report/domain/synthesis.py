"""Price series used by the chart when no real history is available."""
from __future__ import annotations

import math
from datetime import date, timedelta

import pandas as pd

from .models import PriceOHLC, PricePoint, PriceSeries, ReportData, SeriesProvenance

MAX_SYNTHETIC_DAYS = 30
VARIATION_SCALE = 0.3


def _to_date(value: date | str) -> date | None:
    """Parse a report date; impossible or garbled dates give ``None``."""
    if isinstance(value, date):
        return value
    parsed = pd.to_datetime(str(value).strip(), errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date()


def one_month_before(as_of: date | str) -> date:
    """Calendar month subtraction; day-of-month is clamped to the target month."""
    parsed = _to_date(as_of)
    if parsed is None:
        raise ValueError(f"Invalid date: {as_of!r}")
    end = pd.Timestamp(parsed)
    return (end - pd.DateOffset(months=1)).date()


def _variation(i: int) -> float:
    return math.sin(i * 0.5) * 0.3 + math.sin(i * 0.3) * 0.2 + math.cos(i * 0.7) * 0.15


def synthesize_price_series(ohlc: PriceOHLC, as_of: date | str) -> PriceSeries:
    """Deterministic daily path from open to close over the month ending ``as_of``.

    A linear open->close trajectory carries a fixed sum of sinusoids scaled
    by the high/low range; every point is clamped into ``[low, high]`` and
    rounded to 6 decimals. Identical inputs always give identical output.
    An unparseable ``as_of`` gives an empty series.
    """
    end = _to_date(as_of)
    if end is None:
        return PriceSeries(provenance=SeriesProvenance.SYNTHETIC)
    start = one_month_before(end)
    days = (end - start).days
    steps = min(days, MAX_SYNTHETIC_DAYS)

    price_range = ohlc.high - ohlc.low
    points: list[PricePoint] = []
    for i in range(steps + 1):
        progress = i / steps if steps else 0.0
        base = ohlc.open + (ohlc.close - ohlc.open) * progress
        variation = _variation(i) * price_range * VARIATION_SCALE
        price = max(ohlc.low, min(ohlc.high, base + variation))
        points.append(
            PricePoint(
                date=(start + timedelta(days=i)).isoformat(),
                price=round(price, 6),
            )
        )
    return PriceSeries(points=tuple(points), provenance=SeriesProvenance.SYNTHETIC)


def resolve_price_series(data: ReportData) -> PriceSeries:
    """Real history when present, otherwise the synthesized path."""
    if not data.historical_prices.is_empty:
        return data.historical_prices
    return synthesize_price_series(data.prices, data.date)


def ohlc_from_series(series: PriceSeries) -> PriceOHLC:
    if series.is_empty:
        return PriceOHLC.empty()
    prices = [p.price for p in series.points]
    return PriceOHLC(open=prices[0], high=max(prices), low=min(prices), close=prices[-1])
