"""HTML and CSV renderers for validated liquidity reports."""
from __future__ import annotations

import csv
import html
import io
import math
from typing import Sequence

from liquidity_report.domain.metrics import ReportStatistics
from liquidity_report.domain.models import ExchangeRecord, PriceSeries, ReportData

CHART_WIDTH = 1130
CHART_HEIGHT = 400
CHART_PADDING = 40


def format_number(num: float) -> str:
    return f"{round(num):,}"


def format_currency(num: float) -> str:
    sign = "-" if num < 0 else ""
    return f"{sign}${round(abs(num)):,}"


def format_percent(num: float) -> str:
    return f"{num:.2f}%"


def format_price(num: float) -> str:
    """Two to three decimals above $1, more significant digits below."""
    if num == 0:
        return "$0.00"
    sign = "-" if num < 0 else ""
    value = abs(num)
    if value >= 1:
        text = f"{value:,.3f}"
        if text.endswith("0"):
            text = text[:-1]
        return f"{sign}${text}"
    magnitude = math.floor(math.log10(value))
    places = max(3, -magnitude + 2)
    return f"{sign}${value:,.{places}f}"


def exchanges_to_rows(exchanges: Sequence[ExchangeRecord]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for item in exchanges:
        rows.append(
            {
                "exchange": item.venue,
                "symbol": item.symbol,
                "jpeg_volume": f"{item.jpeg_volume:.2f}",
                "market_volume": f"{item.market_volume:.2f}",
                "market_share": f"{item.market_share:.2f}",
                "liquidity_2pct": f"{item.liquidity_2pct:.2f}",
                "jpeg_liquidity_2pct": f"{item.jpeg_liquidity_2pct:.2f}",
                "liquidity_share": f"{item.liquidity_share:.2f}",
                "avg_spread_bps": f"{item.avg_spread:.2f}",
            }
        )
    return rows


def render_exchanges_csv(exchanges: Sequence[ExchangeRecord]) -> bytes:
    rows = exchanges_to_rows(exchanges)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()) if rows else [])
    if rows:
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def _table(headers: Sequence[str], body: Sequence[Sequence[str]]) -> str:
    head = "".join(f"<th>{html.escape(col)}</th>" for col in headers)
    rows = "".join("<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>" for row in body)
    return f"<table><thead><tr>{head}</tr></thead><tbody>{rows}</tbody></table>"


def render_price_chart(series: PriceSeries) -> str:
    if len(series) < 2:
        return ""
    prices = [p.price for p in series]
    low, high = min(prices), max(prices)
    span = (high - low) or 1
    inner_w = CHART_WIDTH - CHART_PADDING * 2
    inner_h = CHART_HEIGHT - CHART_PADDING * 2
    points = " ".join(
        f"{CHART_PADDING + i / (len(prices) - 1) * inner_w:.1f},"
        f"{CHART_PADDING + inner_h - (price - low) / span * inner_h:.1f}"
        for i, price in enumerate(prices)
    )
    labels = "".join(
        f'<text x="{CHART_PADDING - 10}" y="{CHART_PADDING + inner_h * ratio + 5:.1f}" text-anchor="end">'
        f"{html.escape(format_price(low + span * (1 - ratio)))}</text>"
        for ratio in (0, 0.5, 1)
    )
    caption = ""
    if series.is_synthetic:
        caption = '<p class="chart-note">Illustrative path derived from open/high/low/close; not historical data.</p>'
    return (
        f'<svg width="{CHART_WIDTH}" height="{CHART_HEIGHT}" xmlns="http://www.w3.org/2000/svg">'
        f'<polyline fill="none" stroke="#223FFA" stroke-width="2" points="{points}"/>{labels}</svg>'
        f"<p>{html.escape(series.points[0].date)} to {html.escape(series.points[-1].date)}</p>{caption}"
    )


def render_html(data: ReportData, statistics: ReportStatistics, series: PriceSeries) -> str:
    token = html.escape(data.token)
    commentary = html.escape(data.commentary).replace("\n", "<br>")
    warning = ""
    if data.balance_warning:
        warning = f'<p class="warning">{html.escape(data.balance_warning)}</p>'

    balances = _table(
        ["Asset", "Price", "Amount", "Notional"],
        [
            [html.escape(b.asset), format_price(b.price), format_number(b.amount), format_currency(b.notional)]
            for b in data.balances
        ]
        + [["Total", "", "", format_currency(statistics.total_notional)]],
    )
    liquidity = _table(
        ["Exchange", "Symbol", "2% Liquidity", "JPEG 2% Liquidity", "Liquidity Share"],
        [
            [
                html.escape(e.venue),
                html.escape(e.symbol),
                format_currency(e.liquidity_2pct),
                format_currency(e.jpeg_liquidity_2pct),
                format_percent(e.liquidity_share),
            ]
            for e in data.exchanges
        ],
    )
    volume = _table(
        ["Exchange", "Symbol", "JPEG Volume", "Market Volume", "Market Share"],
        [
            [
                html.escape(e.venue),
                html.escape(e.symbol),
                format_currency(e.jpeg_volume),
                format_currency(e.market_volume),
                format_percent(e.market_share),
            ]
            for e in data.exchanges
        ],
    )
    ohlc = data.prices
    summary = (
        "<ul>"
        f"<li>Global average 2% liquidity: {format_currency(statistics.global_avg_liquidity)}</li>"
        f"<li>JPEG average 2% liquidity: {format_currency(statistics.jpeg_avg_liquidity)}</li>"
        f"<li>JPEG liquidity share: {format_percent(statistics.jpeg_liquidity_share)}</li>"
        f"<li>Global volume: {format_currency(statistics.global_total_volume)}</li>"
        f"<li>JPEG volume: {format_currency(statistics.jpeg_total_volume)}</li>"
        f"<li>JPEG market share: {format_percent(statistics.jpeg_market_share)}</li>"
        "</ul>"
    )
    prices = (
        f"<p>Open {format_price(ohlc.open)} · High {format_price(ohlc.high)} · "
        f"Low {format_price(ohlc.low)} · Close {format_price(ohlc.close)}</p>"
    )
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="UTF-8">'
        f"<title>Monthly Liquidity Report - {token} - {html.escape(data.date)}</title></head>"
        f"<body><h1>{token} Monthly Liquidity Report</h1><p>{html.escape(data.date)}</p>"
        f"<section><h2>Commentary</h2><p>{commentary}</p></section>"
        f"<section><h2>Balances</h2>{warning}{balances}</section>"
        f"<section><h2>Summary</h2>{summary}</section>"
        f"<section><h2>Liquidity Statistics</h2>{liquidity}</section>"
        f"<section><h2>Volume Statistics</h2>{volume}</section>"
        f"<section><h2>Price</h2>{prices}{render_price_chart(series)}</section>"
        "</body></html>"
    )
