"""Domain models for the liquidity report pipeline.

These dataclasses capture the canonical schema for ingested venue data.
Derived figures (notional, shares) are properties so they always reflect the
current inputs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

import pandas as pd

from .metrics import liquidity_share, market_share, notional

STABLECOIN_ASSETS = frozenset({"STABLES", "USDC", "USDT"})


def is_stablecoin(asset: str) -> bool:
    return (asset or "").strip().upper() in STABLECOIN_ASSETS


@dataclass(frozen=True)
class Balance:
    """Holding of one asset; notional is always price * amount."""

    asset: str
    price: float = 0.0
    amount: float = 0.0

    @property
    def notional(self) -> float:
        return notional(self.price, self.amount)

    @property
    def is_stablecoin(self) -> bool:
        return is_stablecoin(self.asset)


@dataclass(frozen=True)
class ExchangeRecord:
    """Volume and 2%/1% depth figures of the tracked market maker on one venue."""

    venue: str
    symbol: str = ""
    jpeg_volume: float = 0.0
    market_volume: float = 0.0
    liquidity_2pct: float = 0.0
    jpeg_liquidity_2pct: float = 0.0
    avg_spread: float = 0.0
    liquidity_1pct: float = 0.0
    jpeg_liquidity_1pct: float = 0.0

    @property
    def market_share(self) -> float:
        return market_share(self.jpeg_volume, self.market_volume)

    @property
    def liquidity_share(self) -> float:
        return liquidity_share(self.jpeg_liquidity_2pct, self.liquidity_2pct)

    @property
    def share_1pct(self) -> float:
        return liquidity_share(self.jpeg_liquidity_1pct, self.liquidity_1pct)


@dataclass(frozen=True)
class PricePoint:
    date: str
    price: float


@dataclass(frozen=True)
class PriceOHLC:
    open: float
    high: float
    low: float
    close: float

    @classmethod
    def empty(cls) -> "PriceOHLC":
        return cls(open=0.0, high=0.0, low=0.0, close=0.0)

    def is_empty(self) -> bool:
        return not any((self.open, self.high, self.low, self.close))


class SeriesProvenance(str, Enum):
    REAL = "real"
    SYNTHETIC = "synthetic"


@dataclass(frozen=True)
class PriceSeries:
    """Chronological price points tagged with where they came from."""

    points: tuple[PricePoint, ...] = ()
    provenance: SeriesProvenance = SeriesProvenance.REAL

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def is_synthetic(self) -> bool:
        return self.provenance is SeriesProvenance.SYNTHETIC

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [{"date": p.date, "price": p.price} for p in self.points],
            columns=["date", "price"],
        )


@dataclass(frozen=True)
class ReportData:
    token: str
    date: str
    commentary: str = ""
    balances: Sequence[Balance] = field(default_factory=tuple)
    exchanges: Sequence[ExchangeRecord] = field(default_factory=tuple)
    prices: PriceOHLC = field(default_factory=PriceOHLC.empty)
    historical_prices: PriceSeries = field(default_factory=PriceSeries)
    balance_warning: str | None = None


def make_balance(asset: str, price: float = 0.0, amount: float = 0.0) -> Balance:
    """Build a balance, pinning stablecoins to a price of 1."""
    if is_stablecoin(asset):
        price = 1.0
    return Balance(asset=asset, price=price, amount=amount)

