"""Form state for interactive report editing.

Numeric inputs live in :class:`NumericBuffer` instances holding the raw text
the user typed; floats only appear when a draft is committed into a
:class:`ReportData`. Every update function returns a new draft.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Sequence

from .models import (
    Balance,
    ExchangeRecord,
    PriceOHLC,
    PriceSeries,
    ReportData,
    is_stablecoin,
    make_balance,
)
from .numbers import commit_edit_input, normalize_edit_input, parse_number

BALANCE_NUMERIC_FIELDS = ("price", "amount")
EXCHANGE_NUMERIC_FIELDS = (
    "jpeg_volume",
    "market_volume",
    "liquidity_2pct",
    "jpeg_liquidity_2pct",
    "avg_spread",
    "liquidity_1pct",
    "jpeg_liquidity_1pct",
)
PRICE_FIELDS = ("open", "high", "low", "close")


@dataclass(frozen=True)
class NumericBuffer:
    text: str = ""

    @classmethod
    def from_value(cls, value: float) -> "NumericBuffer":
        if not value:
            return cls("")
        return cls(commit_edit_input(repr(float(value))))

    def edit(self, raw: str) -> "NumericBuffer":
        return NumericBuffer(normalize_edit_input(raw))

    def commit(self) -> "NumericBuffer":
        return NumericBuffer(commit_edit_input(self.text))

    @property
    def value(self) -> float:
        return parse_number(self.text)


@dataclass(frozen=True)
class BalanceDraft:
    asset: str = ""
    price: NumericBuffer = field(default_factory=NumericBuffer)
    amount: NumericBuffer = field(default_factory=NumericBuffer)

    @property
    def price_locked(self) -> bool:
        return is_stablecoin(self.asset)

    @property
    def notional(self) -> float:
        return self.to_balance().notional

    def to_balance(self) -> Balance:
        return make_balance(self.asset.strip(), price=self.price.value, amount=self.amount.value)

    @classmethod
    def from_balance(cls, balance: Balance) -> "BalanceDraft":
        return cls(
            asset=balance.asset,
            price=NumericBuffer.from_value(balance.price),
            amount=NumericBuffer.from_value(balance.amount),
        )


@dataclass(frozen=True)
class ExchangeDraft:
    venue: str = ""
    symbol: str = ""
    jpeg_volume: NumericBuffer = field(default_factory=NumericBuffer)
    market_volume: NumericBuffer = field(default_factory=NumericBuffer)
    liquidity_2pct: NumericBuffer = field(default_factory=NumericBuffer)
    jpeg_liquidity_2pct: NumericBuffer = field(default_factory=NumericBuffer)
    avg_spread: NumericBuffer = field(default_factory=NumericBuffer)
    liquidity_1pct: NumericBuffer = field(default_factory=NumericBuffer)
    jpeg_liquidity_1pct: NumericBuffer = field(default_factory=NumericBuffer)

    @property
    def market_share(self) -> float:
        return self.to_record().market_share

    @property
    def liquidity_share(self) -> float:
        return self.to_record().liquidity_share

    def to_record(self) -> ExchangeRecord:
        values = {name: getattr(self, name).value for name in EXCHANGE_NUMERIC_FIELDS}
        return ExchangeRecord(venue=self.venue.strip(), symbol=self.symbol.strip(), **values)

    @classmethod
    def from_record(cls, record: ExchangeRecord) -> "ExchangeDraft":
        buffers = {name: NumericBuffer.from_value(getattr(record, name)) for name in EXCHANGE_NUMERIC_FIELDS}
        return cls(venue=record.venue, symbol=record.symbol, **buffers)


@dataclass(frozen=True)
class ReportDraft:
    token: str = ""
    date: str = field(default_factory=lambda: date.today().isoformat())
    commentary: str = ""
    balances: tuple[BalanceDraft, ...] = (BalanceDraft(),)
    exchanges: tuple[ExchangeDraft, ...] = (ExchangeDraft(),)
    prices: dict[str, NumericBuffer] = field(
        default_factory=lambda: {name: NumericBuffer() for name in PRICE_FIELDS}
    )
    historical_prices: PriceSeries = field(default_factory=PriceSeries)
    balance_warning: str | None = None

    def commit(self) -> ReportData:
        """Freeze the draft into report data; the only string-to-float step."""
        return ReportData(
            token=self.token.strip(),
            date=self.date.strip(),
            commentary=self.commentary,
            balances=tuple(b.to_balance() for b in self.balances),
            exchanges=tuple(e.to_record() for e in self.exchanges),
            prices=PriceOHLC(**{name: self.prices[name].value for name in PRICE_FIELDS}),
            historical_prices=self.historical_prices,
            balance_warning=self.balance_warning,
        )

    @classmethod
    def from_report(cls, data: ReportData) -> "ReportDraft":
        return cls(
            token=data.token,
            date=data.date,
            commentary=data.commentary,
            balances=tuple(BalanceDraft.from_balance(b) for b in data.balances) or (BalanceDraft(),),
            exchanges=tuple(ExchangeDraft.from_record(e) for e in data.exchanges) or (ExchangeDraft(),),
            prices={name: NumericBuffer.from_value(getattr(data.prices, name)) for name in PRICE_FIELDS},
            historical_prices=data.historical_prices,
            balance_warning=data.balance_warning,
        )


def _replace_at(items: Sequence, index: int, item) -> tuple:
    updated = list(items)
    updated[index] = item
    return tuple(updated)


def set_header(draft: ReportDraft, **values: str) -> ReportDraft:
    """Update token, date or commentary."""
    unknown = set(values) - {"token", "date", "commentary"}
    if unknown:
        raise KeyError(f"Unknown report fields: {sorted(unknown)}")
    return replace(draft, **values)


def set_balance_field(draft: ReportDraft, index: int, name: str, raw: str, *, commit: bool = False) -> ReportDraft:
    """Apply one keystroke-level (or, with ``commit``, focus-loss) edit to a balance."""
    balance = draft.balances[index]
    if name == "asset":
        updated = replace(balance, asset=raw)
        if is_stablecoin(raw):
            updated = replace(updated, price=NumericBuffer("1"))
    elif name in BALANCE_NUMERIC_FIELDS:
        if name == "price" and balance.price_locked:
            return draft
        buffer = getattr(balance, name).edit(raw)
        if commit:
            buffer = buffer.commit()
        updated = replace(balance, **{name: buffer})
    else:
        raise KeyError(f"Unknown balance field: {name}")
    return replace(draft, balances=_replace_at(draft.balances, index, updated))


def add_balance(draft: ReportDraft) -> ReportDraft:
    return replace(draft, balances=draft.balances + (BalanceDraft(),))


def remove_balance(draft: ReportDraft, index: int) -> ReportDraft:
    if len(draft.balances) <= 1:
        return draft
    balances = draft.balances[:index] + draft.balances[index + 1 :]
    return replace(draft, balances=balances)


def set_exchange_field(draft: ReportDraft, index: int, name: str, raw: str, *, commit: bool = False) -> ReportDraft:
    exchange = draft.exchanges[index]
    if name in ("venue", "symbol"):
        updated = replace(exchange, **{name: raw})
    elif name in EXCHANGE_NUMERIC_FIELDS:
        buffer = getattr(exchange, name).edit(raw)
        if commit:
            buffer = buffer.commit()
        updated = replace(exchange, **{name: buffer})
    else:
        raise KeyError(f"Unknown exchange field: {name}")
    return replace(draft, exchanges=_replace_at(draft.exchanges, index, updated))


def add_exchange(draft: ReportDraft) -> ReportDraft:
    return replace(draft, exchanges=draft.exchanges + (ExchangeDraft(symbol=draft.token),))


def remove_exchange(draft: ReportDraft, index: int) -> ReportDraft:
    if len(draft.exchanges) <= 1:
        return draft
    exchanges = draft.exchanges[:index] + draft.exchanges[index + 1 :]
    return replace(draft, exchanges=exchanges)


def set_price_field(draft: ReportDraft, name: str, raw: str, *, commit: bool = False) -> ReportDraft:
    if name not in PRICE_FIELDS:
        raise KeyError(f"Unknown price field: {name}")
    buffer = draft.prices[name].edit(raw)
    if commit:
        buffer = buffer.commit()
    prices = dict(draft.prices)
    prices[name] = buffer
    return replace(draft, prices=prices)
