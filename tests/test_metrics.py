import pytest

from liquidity_report.domain.metrics import compute_statistics, liquidity_share, market_share
from liquidity_report.domain.models import Balance, ExchangeRecord, ReportData


def test_shares_are_zero_without_denominator():
    assert market_share(10.0, 0.0) == 0
    assert liquidity_share(10.0, 0.0) == 0


def test_record_shares_are_derived():
    record = ExchangeRecord(
        venue="Binance",
        jpeg_volume=25.0,
        market_volume=100.0,
        liquidity_2pct=400.0,
        jpeg_liquidity_2pct=100.0,
        liquidity_1pct=50.0,
        jpeg_liquidity_1pct=5.0,
    )

    assert record.market_share == pytest.approx(25)
    assert record.liquidity_share == pytest.approx(25)
    assert record.share_1pct == pytest.approx(10)


def test_statistics_use_ratio_of_aggregates():
    data = ReportData(
        token="ABC",
        date="2025-02-01",
        balances=(Balance("USDT", 1.0, 1000.0), Balance("BTC", 50000.0, 0.5)),
        exchanges=(
            ExchangeRecord(venue="A", jpeg_volume=10.0, market_volume=100.0, liquidity_2pct=1000.0, jpeg_liquidity_2pct=100.0),
            ExchangeRecord(venue="B", jpeg_volume=90.0, market_volume=100.0, liquidity_2pct=3000.0, jpeg_liquidity_2pct=900.0),
        ),
    )

    stats = compute_statistics(data)

    assert stats.exchange_count == 2
    assert stats.global_avg_liquidity == pytest.approx(2000)
    assert stats.jpeg_avg_liquidity == pytest.approx(500)
    # (100 + 900) / (1000 + 3000), not the mean of 10% and 30%
    assert stats.jpeg_liquidity_share == pytest.approx(25)
    assert stats.global_total_volume == pytest.approx(200)
    assert stats.jpeg_total_volume == pytest.approx(100)
    assert stats.jpeg_market_share == pytest.approx(50)
    assert stats.total_notional == pytest.approx(26000)


def test_statistics_for_empty_report():
    stats = compute_statistics(ReportData(token="ABC", date="2025-02-01"))

    assert stats.exchange_count == 0
    assert stats.global_avg_liquidity == 0
    assert stats.jpeg_liquidity_share == 0
    assert stats.jpeg_market_share == 0
    assert stats.total_notional == 0
