"""CSV parser producing exchange records for a single token."""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from liquidity_report.domain.errors import (
    EmptyDatasetError,
    MissingHeaderError,
    MissingTokenError,
    MultipleHeaderError,
)
from liquidity_report.domain.models import (
    ExchangeRecord,
    PriceOHLC,
    PriceSeries,
    ReportData,
    make_balance,
)
from liquidity_report.infrastructure.parsing.utils import (
    EXCHANGE_COLUMN,
    build_column_map,
    cell_text,
    find_header_rows,
    frame_to_exchanges,
    rows_to_frame,
    token_from_symbol,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedExchanges:
    token: str
    exchanges: Sequence[ExchangeRecord]


def read_csv_rows(text: str) -> list[list[str]]:
    """Split CSV text into rows of cells, dropping blank lines."""
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.reader(io.StringIO(text))
    return [row for row in reader if any(cell.strip() for cell in row)]


def _discover_token(frame: pd.DataFrame, header_pos: int, exchanges: Sequence[ExchangeRecord]) -> str:
    if header_pos > 0:
        token = cell_text(frame.iloc[0], 0)
        if token and EXCHANGE_COLUMN.lower() not in token.lower():
            return token
    for record in exchanges:
        if record.symbol:
            token = token_from_symbol(record.symbol)
            if token:
                logger.info("CSV has no token cell; using %s from symbol %s", token, record.symbol)
                return token
    raise MissingTokenError("Could not determine token name from CSV")


def parse_csv(text: str) -> ParsedExchanges:
    """Parse a single-dataset CSV: token cell, one header row, venue rows."""
    frame = rows_to_frame(read_csv_rows(text))
    header_rows = find_header_rows(frame)
    if not header_rows:
        raise MissingHeaderError()
    if len(header_rows) > 1:
        raise MultipleHeaderError(header_rows[0], header_rows[1])

    header_pos = header_rows[0]
    col_map = build_column_map(frame.iloc[header_pos])
    exchanges = frame_to_exchanges(frame.iloc[header_pos + 1 :], col_map)
    if not exchanges:
        raise EmptyDatasetError("No valid exchange data found in CSV")

    token = _discover_token(frame, header_pos, exchanges)
    logger.info("Parsed CSV for %s: %d exchanges", token, len(exchanges))
    return ParsedExchanges(token=token, exchanges=tuple(exchanges))


def csv_to_report_data(text: str, report_date: str, commentary: str = "") -> ReportData:
    parsed = parse_csv(text)
    return ReportData(
        token=parsed.token,
        date=report_date,
        commentary=commentary,
        balances=(make_balance("USDT", amount=0.0),),
        exchanges=parsed.exchanges,
        prices=PriceOHLC.empty(),
        historical_prices=PriceSeries(),
    )
