"""Application-level DTOs for report generation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from liquidity_report.domain.metrics import ReportStatistics
from liquidity_report.domain.models import PriceSeries, ReportData
from liquidity_report.domain.results import ValidationError


@dataclass(slots=True, frozen=True)
class ReportGenerationResult:
    data: ReportData
    errors: Sequence[ValidationError] = field(default_factory=tuple)
    statistics: ReportStatistics | None = None
    price_series: PriceSeries | None = None
    document: str | None = None

    @property
    def ok(self) -> bool:
        return not self.errors and self.document is not None
