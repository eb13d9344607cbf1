import pytest

from liquidity_report.domain.errors import (
    EmptyDatasetError,
    MissingHeaderError,
    MissingTokenError,
    MultipleHeaderError,
)
from liquidity_report.infrastructure.parsing.csv_report import csv_to_report_data, parse_csv

HEADER = (
    "Exchange,Symbol,JPEG Volume ($),Market Volume ($),% Market Share,"
    "2% Liquidity Avg ($),2% Liquidity,2% Share,1% Liquidity Avg ($),1% Liquidity,1% Share,Avg Spread (bps)"
)


def test_minimal_csv_end_to_end():
    text = 'ABC\nExchange,Symbol,JPEG Volume ($),Market Volume ($)\nBinance,ABC/USDT,"$1,000","$10,000"\n'

    parsed = parse_csv(text)

    assert parsed.token == "ABC"
    assert len(parsed.exchanges) == 1
    record = parsed.exchanges[0]
    assert record.venue == "Binance"
    assert record.symbol == "ABC/USDT"
    assert record.jpeg_volume == 1000
    assert record.market_volume == 10000
    assert record.market_share == pytest.approx(10)


def test_full_header_maps_every_column():
    text = "\n".join(
        [
            "XYZ,,,",
            HEADER,
            'Bybit,XYZ/USDT,"$2,500","$50,000",99,"$80,000","$8,000",99,"$40,000","$2,000",99,12.5',
        ]
    )

    record = parse_csv(text).exchanges[0]

    assert record.liquidity_2pct == 80000
    assert record.jpeg_liquidity_2pct == 8000
    assert record.liquidity_1pct == 40000
    assert record.jpeg_liquidity_1pct == 2000
    assert record.avg_spread == 12.5
    # share columns in the file are ignored in favour of derived values
    assert record.market_share == pytest.approx(5)
    assert record.liquidity_share == pytest.approx(10)
    assert record.share_1pct == pytest.approx(5)


def test_rows_without_venue_are_skipped_and_order_is_kept():
    text = "\n".join(
        [
            "ABC",
            "Exchange,Symbol,JPEG Volume ($),Market Volume ($)",
            "Binance,ABC/USDT,1,10",
            ",,,",
            "",
            "  ,ABC/USDC,5,5",
            "OKX,ABC/USDT,2,20",
            "Gate,ABC/USDT,3,30",
        ]
    )

    parsed = parse_csv(text)

    assert [e.venue for e in parsed.exchanges] == ["Binance", "OKX", "Gate"]


def test_missing_numeric_columns_fall_back_to_zero():
    text = "ABC\nExchange,Symbol\nBinance,ABC/USDT\n"

    record = parse_csv(text).exchanges[0]

    assert record.jpeg_volume == 0
    assert record.market_volume == 0
    assert record.market_share == 0


def test_unparseable_cells_become_zero():
    text = "ABC\nExchange,Symbol,JPEG Volume ($),Market Volume ($)\nBinance,ABC/USDT,n/a,\n"

    record = parse_csv(text).exchanges[0]

    assert record.jpeg_volume == 0
    assert record.market_volume == 0


def test_missing_header_raises():
    with pytest.raises(MissingHeaderError):
        parse_csv("ABC\nVenue,Pair\nBinance,ABC/USDT\n")


def test_second_header_block_is_rejected():
    text = "\n".join(
        [
            "ABC",
            "Exchange,Symbol,JPEG Volume ($),Market Volume ($)",
            "Binance,ABC/USDT,1,10",
            "DEF",
            "Exchange,Symbol,JPEG Volume ($),Market Volume ($)",
            "OKX,DEF/USDT,1,10",
        ]
    )

    with pytest.raises(MultipleHeaderError) as excinfo:
        parse_csv(text)

    assert excinfo.value.first_row == 1
    assert excinfo.value.second_row == 4


def test_header_only_raises_empty_dataset():
    with pytest.raises(EmptyDatasetError):
        parse_csv("ABC\nExchange,Symbol,JPEG Volume ($)\n")


def test_token_falls_back_to_symbol_base_when_file_starts_with_header():
    parsed = parse_csv("Exchange,Symbol,JPEG Volume ($)\nBinance,PTB/USDT,5\n")

    assert parsed.token == "PTB"


def test_token_cannot_be_determined():
    with pytest.raises(MissingTokenError):
        parse_csv("Exchange,Symbol,JPEG Volume ($)\nBinance,,5\n")


def test_byte_order_mark_is_ignored():
    parsed = parse_csv("\ufeffABC\nExchange,Symbol\nBinance,ABC/USDT\n")

    assert parsed.token == "ABC"


def test_csv_to_report_data_defaults():
    text = "ABC\nExchange,Symbol,JPEG Volume ($),Market Volume ($)\nBinance,ABC/USDT,1,10\n"

    data = csv_to_report_data(text, "2025-02-01", "Quiet month")

    assert data.token == "ABC"
    assert data.date == "2025-02-01"
    assert data.commentary == "Quiet month"
    assert [(b.asset, b.price, b.amount) for b in data.balances] == [("USDT", 1.0, 0.0)]
    assert data.prices.is_empty()
    assert data.historical_prices.is_empty
