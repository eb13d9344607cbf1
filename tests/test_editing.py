import pytest

from liquidity_report.domain import editing
from liquidity_report.domain.models import Balance, ExchangeRecord, PriceOHLC, ReportData


def make_draft() -> editing.ReportDraft:
    return editing.set_header(editing.ReportDraft(), token="ABC", date="2025-02-01")


def test_new_draft_has_one_blank_row_each():
    draft = editing.ReportDraft()

    assert len(draft.balances) == 1
    assert len(draft.exchanges) == 1
    assert draft.date


def test_interim_numeric_text_is_kept_until_commit():
    draft = editing.set_exchange_field(make_draft(), 0, "jpeg_volume", "1.")

    assert draft.exchanges[0].jpeg_volume.text == "1."
    assert draft.exchanges[0].jpeg_volume.value == 1.0

    committed = editing.set_exchange_field(draft, 0, "jpeg_volume", "1.", commit=True)
    assert committed.exchanges[0].jpeg_volume.text == "1"


def test_decimal_comma_is_accepted_while_typing():
    draft = editing.set_balance_field(make_draft(), 0, "amount", "12,5")

    assert draft.balances[0].amount.text == "12.5"


def test_stablecoin_asset_locks_price():
    draft = editing.set_balance_field(make_draft(), 0, "asset", "usdc")
    draft = editing.set_balance_field(draft, 0, "price", "3")
    draft = editing.set_balance_field(draft, 0, "amount", "250")

    balance = draft.balances[0]
    assert balance.price_locked
    assert balance.price.text == "1"
    assert balance.notional == 250.0


def test_notional_follows_price_and_amount():
    draft = editing.set_balance_field(make_draft(), 0, "asset", "BTC")
    draft = editing.set_balance_field(draft, 0, "price", "50000")
    draft = editing.set_balance_field(draft, 0, "amount", "0.5")

    assert draft.balances[0].notional == 25000.0


def test_exchange_shares_update_with_inputs():
    draft = editing.set_exchange_field(make_draft(), 0, "venue", "Binance")
    draft = editing.set_exchange_field(draft, 0, "jpeg_volume", "25")
    draft = editing.set_exchange_field(draft, 0, "market_volume", "100")
    draft = editing.set_exchange_field(draft, 0, "liquidity_2pct", "1000")
    draft = editing.set_exchange_field(draft, 0, "jpeg_liquidity_2pct", "50")

    assert draft.exchanges[0].market_share == pytest.approx(25)
    assert draft.exchanges[0].liquidity_share == pytest.approx(5)


def test_rows_can_be_added_but_never_all_removed():
    draft = editing.add_balance(make_draft())
    draft = editing.add_exchange(draft)

    assert len(draft.balances) == 2
    assert draft.exchanges[1].symbol == "ABC"

    draft = editing.remove_balance(draft, 0)
    draft = editing.remove_balance(draft, 0)
    draft = editing.remove_exchange(draft, 1)
    draft = editing.remove_exchange(draft, 0)

    assert len(draft.balances) == 1
    assert len(draft.exchanges) == 1


def test_unknown_fields_are_rejected():
    draft = make_draft()

    with pytest.raises(KeyError):
        editing.set_header(draft, venue="x")
    with pytest.raises(KeyError):
        editing.set_balance_field(draft, 0, "notional", "5")
    with pytest.raises(KeyError):
        editing.set_exchange_field(draft, 0, "market_share", "5")
    with pytest.raises(KeyError):
        editing.set_price_field(draft, "mid", "5")


def test_commit_produces_report_data():
    draft = editing.set_header(make_draft(), commentary="Quiet month")
    draft = editing.set_balance_field(draft, 0, "asset", "USDT")
    draft = editing.set_balance_field(draft, 0, "amount", "1000")
    draft = editing.set_exchange_field(draft, 0, "venue", " Binance ")
    draft = editing.set_exchange_field(draft, 0, "market_volume", "")
    for name, raw in zip(editing.PRICE_FIELDS, ("1", "1.5", "0.8", "1.2")):
        draft = editing.set_price_field(draft, name, raw)

    data = draft.commit()

    assert data.token == "ABC"
    assert data.commentary == "Quiet month"
    assert data.balances == (Balance(asset="USDT", price=1.0, amount=1000.0),)
    assert data.exchanges[0].venue == "Binance"
    assert data.exchanges[0].market_volume == 0.0
    assert data.prices == PriceOHLC(open=1.0, high=1.5, low=0.8, close=1.2)


def test_draft_round_trips_imported_data():
    data = ReportData(
        token="ABC",
        date="2025-02-01",
        balances=(Balance(asset="BTC", price=50000.0, amount=0.5),),
        exchanges=(ExchangeRecord(venue="OKX", symbol="ABC/USDT", jpeg_volume=1000.0, market_volume=0.0),),
        balance_warning="Balances are as of 2025-01-01 but the report date is 2025-02-01",
    )

    draft = editing.ReportDraft.from_report(data)

    assert draft.balances[0].price.text == "50000"
    assert draft.exchanges[0].market_volume.text == ""
    assert draft.commit() == data


def test_committed_stablecoin_balance_is_pinned_regardless_of_buffer():
    draft = editing.set_balance_field(make_draft(), 0, "price", "7")
    draft = editing.set_balance_field(draft, 0, "amount", "3")
    draft = editing.set_balance_field(draft, 0, "asset", " Stables ")

    assert draft.commit().balances == (Balance(asset="Stables", price=1.0, amount=3.0),)


@pytest.mark.parametrize("value, text", [(1e-07, "0.0000001"), (1e16, "10000000000000000"), (1234.5, "1234.5")])
def test_imported_values_load_as_editable_text(value, text):
    buffer = editing.NumericBuffer.from_value(value)

    assert buffer.text == text
    assert buffer.edit(text + "5").text == text + "5"
