"""Monthly liquidity report toolkit."""
from liquidity_report.application.use_cases import (
    GenerateReportUseCase,
    ImportCsvUseCase,
    ImportSheetUseCase,
    ReportGenerationContext,
)
from liquidity_report.domain.models import Balance, ExchangeRecord, PriceOHLC, PriceSeries, ReportData
from liquidity_report.domain.services import ReportValidator
from liquidity_report.infrastructure.parsing.csv_report import parse_csv
from liquidity_report.infrastructure.parsing.sheet_report import SheetReportParser

__all__ = [
    "Balance",
    "ExchangeRecord",
    "GenerateReportUseCase",
    "ImportCsvUseCase",
    "ImportSheetUseCase",
    "PriceOHLC",
    "PriceSeries",
    "ReportData",
    "ReportGenerationContext",
    "ReportValidator",
    "SheetReportParser",
    "parse_csv",
]
