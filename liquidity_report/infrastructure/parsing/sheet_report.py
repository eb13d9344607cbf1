"""Google Sheet parser assembling a full report from the Liq, Bal and Blurb tabs."""
from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from liquidity_report.config import BAL_TAB, BLURB_TAB, LIQ_TAB, SETTINGS
from liquidity_report.domain.errors import (
    InvalidUrlError,
    MissingHeaderError,
    MissingTokenError,
    PriceLookupError,
    SheetFetchError,
)
from liquidity_report.domain.models import (
    Balance,
    PriceOHLC,
    PriceSeries,
    ReportData,
    is_stablecoin,
    make_balance,
)
from liquidity_report.domain.numbers import parse_number
from liquidity_report.domain.repositories import PriceLookup, PriceQuote, SheetValuesSource
from liquidity_report.domain.synthesis import ohlc_from_series
from liquidity_report.infrastructure.parsing.csv_report import ParsedExchanges
from liquidity_report.infrastructure.parsing.utils import (
    build_column_map,
    cell_text,
    frame_to_exchanges,
    is_header_row,
    rows_to_frame,
)

logger = logging.getLogger(__name__)

_SHEET_ID_PATTERN = re.compile(r"/d/([a-zA-Z0-9_-]+)")

# Bal tab columns (headerless): 0 is a free label such as the wallet name.
BAL_ASSET_COL = 1
BAL_AMOUNT_COL = 2
BAL_AS_OF_COL = 3


def extract_sheet_id(url: str) -> str:
    match = _SHEET_ID_PATTERN.search(url or "")
    if not match:
        raise InvalidUrlError(url)
    return match.group(1)


def parse_liquidity_tab(rows: Sequence[Sequence[str]]) -> ParsedExchanges:
    """Row 0 cell 0 is the token, row 1 the header, rows 2+ venues."""
    frame = rows_to_frame(rows)
    token = cell_text(frame.iloc[0], 0) if len(frame) else ""
    if not token:
        raise MissingTokenError(f"{LIQ_TAB} tab has no token in its first cell")
    if len(frame) < 2 or not is_header_row(frame.iloc[1]):
        raise MissingHeaderError(f"{LIQ_TAB} tab row 2 must be the 'Exchange'/'Symbol' header")
    col_map = build_column_map(frame.iloc[1])
    exchanges = frame_to_exchanges(frame.iloc[2:], col_map)
    logger.info("%s: token %s, %d exchanges", LIQ_TAB, token, len(exchanges))
    return ParsedExchanges(token=token, exchanges=tuple(exchanges))


@dataclass(frozen=True)
class BalanceRow:
    asset: str
    amount: float
    as_of: str


def read_balance_rows(rows: Sequence[Sequence[str]]) -> list[BalanceRow]:
    """Headerless positional layout: asset, amount and optional as-of date."""
    frame = rows_to_frame(rows)
    result: list[BalanceRow] = []
    for _, row in frame.iterrows():
        asset = cell_text(row, BAL_ASSET_COL)
        if not asset:
            continue
        result.append(
            BalanceRow(
                asset=asset,
                amount=parse_number(cell_text(row, BAL_AMOUNT_COL)),
                as_of=cell_text(row, BAL_AS_OF_COL),
            )
        )
    return result


def _normalize_date(value: str) -> str:
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return value.strip()
    return parsed.date().isoformat()


def balance_warning(rows: Sequence[BalanceRow], report_date: str) -> str | None:
    """Describe balance as-of dates that disagree with the report date."""
    report_day = _normalize_date(report_date)
    stale = sorted({_normalize_date(r.as_of) for r in rows if r.as_of} - {report_day})
    if not stale:
        return None
    return f"Balances are as of {', '.join(stale)} but the report date is {report_day}"


def parse_blurb_tab(rows: Sequence[Sequence[str]]) -> str:
    lines = (" ".join(str(cell) for cell in row).strip() for row in rows)
    return "\n".join(line for line in lines if line)


class SheetReportParser:
    """Assemble a :class:`ReportData` from a three-tab spreadsheet.

    The tab fetches are all-or-nothing; price lookups degrade per asset.
    """

    def __init__(
        self,
        source: SheetValuesSource,
        price_lookup: PriceLookup | None = None,
        max_workers: int | None = None,
    ) -> None:
        self._source = source
        self._price_lookup = price_lookup
        self._max_workers = max_workers or SETTINGS.max_workers

    def fetch_tabs(self, sheet_id: str) -> dict[str, list[list[str]]]:
        tabs = SETTINGS.sheet_tabs
        with ThreadPoolExecutor(max_workers=len(tabs)) as pool:
            futures = {tab: pool.submit(self._source.fetch_values, sheet_id, tab) for tab in tabs}
            results: dict[str, list[list[str]]] = {}
            for tab, future in futures.items():
                try:
                    results[tab] = future.result()
                except SheetFetchError:
                    raise
                except Exception as e:
                    raise SheetFetchError(tab, str(e)) from e
        return results

    def _quote(self, asset: str, with_history: bool) -> PriceQuote:
        try:
            return self._price_lookup.quote(asset, with_history=with_history)
        except PriceLookupError as e:
            logger.warning("%s; using price 0", e)
            return PriceQuote(asset=asset)
        except Exception:
            logger.exception("Unexpected price lookup failure for %s; using price 0", asset)
            return PriceQuote(asset=asset)

    def price_balances(self, rows: Sequence[BalanceRow], token: str) -> tuple[list[Balance], PriceSeries]:
        """Price every balance row and fetch the token history in one fan-out."""
        if self._price_lookup is None:
            return [make_balance(r.asset, amount=r.amount) for r in rows], PriceSeries()

        assets = sorted({r.asset.upper() for r in rows if not is_stablecoin(r.asset)})
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            history_future = pool.submit(self._quote, token, True)
            quote_futures = {asset: pool.submit(self._quote, asset, False) for asset in assets}
            prices = {asset: future.result().price for asset, future in quote_futures.items()}
            history = history_future.result().history

        balances = [make_balance(r.asset, price=prices.get(r.asset.upper(), 0.0), amount=r.amount) for r in rows]
        return balances, history

    def parse(self, url: str, report_date: str, commentary: str = "") -> ReportData:
        sheet_id = extract_sheet_id(url)
        logger.info("Parsing Google Sheet %s", sheet_id)
        tabs = self.fetch_tabs(sheet_id)

        liquidity = parse_liquidity_tab(tabs[LIQ_TAB])
        balance_rows = read_balance_rows(tabs[BAL_TAB])
        blurb = parse_blurb_tab(tabs[BLURB_TAB])

        balances, history = self.price_balances(balance_rows, liquidity.token)
        if not balances:
            balances = [make_balance("USDT")]
        prices = ohlc_from_series(history) if not history.is_empty else PriceOHLC.empty()

        logger.info(
            "Parsed sheet: %s, %d exchanges, %d balances",
            liquidity.token,
            len(liquidity.exchanges),
            len(balances),
        )
        return ReportData(
            token=liquidity.token,
            date=report_date,
            commentary=blurb or commentary,
            balances=tuple(balances),
            exchanges=liquidity.exchanges,
            prices=prices,
            historical_prices=history,
            balance_warning=balance_warning(balance_rows, report_date),
        )
