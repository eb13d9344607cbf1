"""Domain services implementing report validation rules."""
from __future__ import annotations

from .models import Balance, ExchangeRecord, ReportData
from .results import ValidationError

MARKET_SHARE_UPPER_BOUND = 200.0


class ReportValidator:
    """Collects every rule violation of a report; never raises."""

    def __init__(self, market_share_upper_bound: float | None = None) -> None:
        if market_share_upper_bound is None:
            market_share_upper_bound = MARKET_SHARE_UPPER_BOUND
        self._market_share_upper_bound = market_share_upper_bound

    def validate(self, data: ReportData) -> list[ValidationError]:
        errors: list[ValidationError] = []

        if not (data.token or "").strip():
            errors.append(ValidationError("token", "Token name is required"))
        if not (data.date or "").strip():
            errors.append(ValidationError("date", "Report date is required"))

        for idx, balance in enumerate(data.balances, start=1):
            errors.extend(self._check_balance(idx, balance))
        for idx, exchange in enumerate(data.exchanges, start=1):
            errors.extend(self._check_exchange(idx, exchange))

        return errors

    def is_valid(self, data: ReportData) -> bool:
        return not self.validate(data)

    @staticmethod
    def _check_balance(idx: int, balance: Balance) -> list[ValidationError]:
        field = f"balances[{idx - 1}]"
        errors: list[ValidationError] = []
        if balance.notional < 0:
            errors.append(ValidationError(f"{field}.notional", f"Balance #{idx}: Notional value cannot be negative"))
        if balance.price < 0:
            errors.append(ValidationError(f"{field}.price", f"Balance #{idx}: Price cannot be negative"))
        return errors

    def _check_exchange(self, idx: int, exchange: ExchangeRecord) -> list[ValidationError]:
        field = f"exchanges[{idx - 1}]"
        errors: list[ValidationError] = []
        if not (exchange.venue or "").strip():
            errors.append(ValidationError(f"{field}.venue", f"Exchange #{idx}: Venue name is required"))
        if exchange.market_volume < 0:
            errors.append(
                ValidationError(f"{field}.market_volume", f"Exchange #{idx}: Market volume cannot be negative")
            )
        if exchange.jpeg_volume < 0:
            errors.append(ValidationError(f"{field}.jpeg_volume", f"Exchange #{idx}: JPEG volume cannot be negative"))
        share = exchange.market_share
        if share < 0 or share > self._market_share_upper_bound:
            errors.append(
                ValidationError(
                    f"{field}.market_share",
                    f"Exchange #{idx}: Market share must be between 0% and {self._market_share_upper_bound:g}%",
                )
            )
        return errors
