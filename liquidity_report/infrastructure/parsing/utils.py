"""Shared parsing utilities for CSV and sheet ingestion."""
from __future__ import annotations

from typing import Iterable, Mapping, Sequence

import pandas as pd

from liquidity_report.domain.models import ExchangeRecord
from liquidity_report.domain.numbers import parse_number

EXCHANGE_COLUMN = "Exchange"
SYMBOL_COLUMN = "Symbol"

# Header text -> ExchangeRecord field. "% Market Share", "2% Share" and
# "1% Share" are derived and therefore not read.
NUMERIC_COLUMNS = {
    "JPEG Volume ($)": "jpeg_volume",
    "Market Volume ($)": "market_volume",
    "2% Liquidity Avg ($)": "liquidity_2pct",
    "2% Liquidity": "jpeg_liquidity_2pct",
    "1% Liquidity Avg ($)": "liquidity_1pct",
    "1% Liquidity": "jpeg_liquidity_1pct",
    "Avg Spread (bps)": "avg_spread",
}


def rows_to_frame(rows: Iterable[Sequence[object]]) -> pd.DataFrame:
    """Pad ragged rows into a string-typed grid; missing cells become ``""``."""
    frame = pd.DataFrame([list(row) for row in rows], dtype=object)
    if frame.empty:
        return frame
    return frame.fillna("").astype(str)


def cell_text(row: pd.Series, index: int | None) -> str:
    if index is None or index >= len(row):
        return ""
    return str(row.iloc[index]).strip()


def is_header_row(row: pd.Series) -> bool:
    cells = [str(value) for value in row.tolist()]
    return any(EXCHANGE_COLUMN in c for c in cells) and any(SYMBOL_COLUMN in c for c in cells)


def find_header_rows(frame: pd.DataFrame) -> list[int]:
    return [pos for pos in range(len(frame)) if is_header_row(frame.iloc[pos])]


def build_column_map(header: pd.Series) -> dict[str, int]:
    col_map: dict[str, int] = {}
    for idx, value in enumerate(header.tolist()):
        name = str(value).strip()
        if name:
            col_map[name] = idx
    return col_map


def resolve_column(col_map: Mapping[str, int], name: str) -> int | None:
    """Exact header match first, then the first header containing ``name``."""
    if name in col_map:
        return col_map[name]
    for header, idx in sorted(col_map.items(), key=lambda item: item[1]):
        if name in header:
            return idx
    return None


def row_to_exchange(row: pd.Series, col_map: Mapping[str, int]) -> ExchangeRecord | None:
    venue = cell_text(row, resolve_column(col_map, EXCHANGE_COLUMN))
    if not venue:
        return None
    symbol = cell_text(row, resolve_column(col_map, SYMBOL_COLUMN))
    values = {
        field: parse_number(cell_text(row, col_map.get(header)))
        for header, field in NUMERIC_COLUMNS.items()
    }
    return ExchangeRecord(venue=venue, symbol=symbol, **values)


def frame_to_exchanges(frame: pd.DataFrame, col_map: Mapping[str, int]) -> list[ExchangeRecord]:
    """One record per row with a non-empty Exchange cell, in input order."""
    records: list[ExchangeRecord] = []
    for _, row in frame.iterrows():
        record = row_to_exchange(row, col_map)
        if record is not None:
            records.append(record)
    return records


def token_from_symbol(symbol: str) -> str:
    return symbol.split("/")[0].strip()
