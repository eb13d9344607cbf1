"""Interfaces for the external sources the ingestion layer depends on."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .models import PriceSeries


class SheetValuesSource(Protocol):
    """Returns the raw cell grid of one named tab of a spreadsheet."""

    def fetch_values(self, sheet_id: str, tab: str) -> list[list[str]]:
        ...


@dataclass(frozen=True)
class PriceQuote:
    asset: str
    price: float = 0.0
    coin_id: str | None = None
    history: PriceSeries = field(default_factory=PriceSeries)

    @property
    def matched(self) -> bool:
        return self.coin_id is not None


class PriceLookup(Protocol):
    """Current price and daily history for an asset ticker.

    An unknown ticker yields a quote with price 0 and an empty history;
    transport failures raise :class:`~liquidity_report.domain.errors.PriceLookupError`.
    """

    def quote(self, asset: str, *, with_history: bool = False) -> PriceQuote:
        ...
