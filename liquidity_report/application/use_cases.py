"""Application services orchestrating ingestion and report generation."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from liquidity_report.application.dto import ReportGenerationResult
from liquidity_report.domain.metrics import ReportStatistics, compute_statistics
from liquidity_report.domain.models import PriceSeries, ReportData
from liquidity_report.domain.services import ReportValidator
from liquidity_report.domain.synthesis import resolve_price_series
from liquidity_report.infrastructure.parsing.csv_report import csv_to_report_data
from liquidity_report.infrastructure.parsing.sheet_report import SheetReportParser

logger = logging.getLogger(__name__)


class ReportRenderer(Protocol):
    def __call__(self, data: ReportData, statistics: ReportStatistics, series: PriceSeries) -> str:
        ...


@dataclass(slots=True)
class ReportGenerationContext:
    validator: ReportValidator
    renderer: ReportRenderer


class GenerateReportUseCase:
    """Validate a report and, only when it is clean, render it."""

    def __init__(self, context: ReportGenerationContext) -> None:
        self._context = context

    def execute(self, data: ReportData) -> ReportGenerationResult:
        errors = self._context.validator.validate(data)
        if errors:
            logger.warning("Report for %r has %d validation errors", data.token, len(errors))
            return ReportGenerationResult(data=data, errors=tuple(errors))

        statistics = compute_statistics(data)
        series = resolve_price_series(data)
        document = self._context.renderer(data, statistics, series)
        return ReportGenerationResult(
            data=data,
            statistics=statistics,
            price_series=series,
            document=document,
        )


class ImportCsvUseCase:
    def execute(self, text: str, report_date: str, commentary: str = "") -> ReportData:
        return csv_to_report_data(text, report_date, commentary)


class ImportSheetUseCase:
    def __init__(self, parser: SheetReportParser) -> None:
        self._parser = parser

    def execute(self, url: str, report_date: str, commentary: str = "") -> ReportData:
        return self._parser.parse(url, report_date, commentary)
