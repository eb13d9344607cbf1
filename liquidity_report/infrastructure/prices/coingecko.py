"""CoinGecko-backed price lookup.

API details:
- Base URL: https://api.coingecko.com/api/v3
- ``/search`` resolves a ticker to a coin id
- ``/simple/price`` returns the current USD price
- ``/coins/{id}/market_chart`` returns the daily history
"""
from __future__ import annotations

import logging
from typing import Any

import pandas as pd
import requests

from liquidity_report.config import SETTINGS
from liquidity_report.domain.errors import PriceLookupError
from liquidity_report.domain.models import PricePoint, PriceSeries, SeriesProvenance
from liquidity_report.domain.repositories import PriceQuote
from liquidity_report.infrastructure.http.session import create_session

logger = logging.getLogger(__name__)


def history_to_series(raw_prices: list[list[float]]) -> PriceSeries:
    """Convert ``[[epoch_ms, price], ...]`` into one point per calendar day."""
    if not raw_prices:
        return PriceSeries()
    frame = pd.DataFrame(raw_prices, columns=["ts", "price"])
    frame["date"] = pd.to_datetime(frame["ts"], unit="ms", utc=True).dt.strftime("%Y-%m-%d")
    frame = frame[frame["price"] > 0]
    frame = frame.sort_values("ts").drop_duplicates(subset="date", keep="last")
    points = tuple(PricePoint(date=row.date, price=float(row.price)) for row in frame.itertuples(index=False))
    return PriceSeries(points=points, provenance=SeriesProvenance.REAL)


class CoinGeckoPriceLookup:
    """Resolve tickers through CoinGecko's public search index.

    Usage:
        lookup = CoinGeckoPriceLookup()
        quote = lookup.quote("BTC", with_history=True)
    """

    def __init__(
        self,
        api_key: str | None = None,
        session: requests.Session | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        history_days: int | None = None,
    ) -> None:
        self.session = session or create_session(retries=SETTINGS.request_retries)
        if api_key:
            self.session.headers["x-cg-demo-key"] = api_key
        self._base_url = (base_url or SETTINGS.coingecko_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else SETTINGS.request_timeout
        self._history_days = history_days or SETTINGS.history_days
        self._coin_ids: dict[str, str | None] = {}

    def _get(self, asset: str, path: str, params: dict[str, Any]) -> Any:
        try:
            resp = self.session.get(f"{self._base_url}{path}", params=params, timeout=self._timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            logger.error("CoinGecko request %s failed: %s", path, e)
            raise PriceLookupError(asset, f"CoinGecko: {e}") from e
        except ValueError as e:
            raise PriceLookupError(asset, "CoinGecko returned invalid JSON") from e

    def resolve_coin_id(self, asset: str) -> str | None:
        symbol = asset.strip().upper()
        if symbol in self._coin_ids:
            return self._coin_ids[symbol]
        data = self._get(asset, "/search", {"query": symbol})
        coin_id = None
        coins = data.get("coins") if isinstance(data, dict) else None
        for coin in coins or []:
            if not isinstance(coin, dict):
                continue
            if str(coin.get("symbol", "")).upper() == symbol:
                coin_id = coin.get("id")
                break
        if coin_id is None:
            logger.warning("No CoinGecko coin matches symbol %s", symbol)
        self._coin_ids[symbol] = coin_id
        return coin_id

    def current_price(self, asset: str, coin_id: str) -> float:
        data = self._get(asset, "/simple/price", {"ids": coin_id, "vs_currencies": "usd"})
        try:
            return float(data[coin_id]["usd"])
        except (KeyError, TypeError, ValueError):
            logger.warning("CoinGecko has no USD price for %s", coin_id)
            return 0.0

    def price_history(self, asset: str, coin_id: str) -> PriceSeries:
        data = self._get(
            asset,
            f"/coins/{coin_id}/market_chart",
            {"vs_currency": "usd", "days": self._history_days, "interval": "daily"},
        )
        raw_prices = data.get("prices") if isinstance(data, dict) else None
        return history_to_series(raw_prices or [])

    def quote(self, asset: str, *, with_history: bool = False) -> PriceQuote:
        coin_id = self.resolve_coin_id(asset)
        if coin_id is None:
            return PriceQuote(asset=asset)
        price = self.current_price(asset, coin_id)
        history = self.price_history(asset, coin_id) if with_history else PriceSeries()
        logger.info("Priced %s (%s) at %s", asset, coin_id, price)
        return PriceQuote(asset=asset, price=price, coin_id=coin_id, history=history)
