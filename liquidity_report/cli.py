"""Command-line entrypoint for liquidity report generation."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path

from liquidity_report.application.use_cases import (
    GenerateReportUseCase,
    ImportCsvUseCase,
    ImportSheetUseCase,
    ReportGenerationContext,
)
from liquidity_report.config import SETTINGS
from liquidity_report.domain.errors import ReportIngestionError
from liquidity_report.domain.models import ReportData
from liquidity_report.domain.services import ReportValidator
from liquidity_report.infrastructure.parsing.sheet_report import SheetReportParser
from liquidity_report.infrastructure.prices.coingecko import CoinGeckoPriceLookup
from liquidity_report.infrastructure.sheets.google_sheets import GoogleSheetsClient
from liquidity_report.presentation.report_html import render_html

API_KEY_ENV = "GOOGLE_SHEETS_API_KEY"


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a monthly liquidity report from a CSV export or Google Sheet")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log ingestion details")
    sub = parser.add_subparsers(dest="source", required=True)

    csv_parser = sub.add_parser("csv", help="Read exchanges from a CSV file")
    csv_parser.add_argument("path", type=str, help="Path to the CSV export")
    csv_parser.add_argument("--commentary", type=str, default="", help="Commentary text")

    sheet_parser = sub.add_parser("sheet", help="Read Liq/Bal/Blurb tabs from a Google Sheet")
    sheet_parser.add_argument("url", type=str, help="Google Sheets URL")
    sheet_parser.add_argument("--api-key", type=str, help=f"Sheets API key (defaults to ${API_KEY_ENV})")
    sheet_parser.add_argument("--no-prices", action="store_true", help="Skip CoinGecko price lookups")

    for sub_parser in (csv_parser, sheet_parser):
        sub_parser.add_argument("--date", type=str, help="Report date (YYYY-MM-DD), defaults to today")
        sub_parser.add_argument("--out", type=str, help="Write the HTML report to this file instead of stdout")
    return parser.parse_args(argv)


def load_report(args: argparse.Namespace, report_date: str) -> ReportData:
    if args.source == "csv":
        text = Path(args.path).read_text(encoding="utf-8")
        return ImportCsvUseCase().execute(text, report_date, args.commentary)

    api_key = args.api_key or os.environ.get(API_KEY_ENV, "")
    price_lookup = None if args.no_prices else CoinGeckoPriceLookup()
    parser = SheetReportParser(GoogleSheetsClient(api_key), price_lookup=price_lookup)
    return ImportSheetUseCase(parser).execute(args.url, report_date)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    report_date = args.date or date.today().isoformat()

    try:
        data = load_report(args, report_date)
    except ReportIngestionError as e:
        print(f"Import failed: {e}", file=sys.stderr)
        return 1

    print("Import Summary", file=sys.stderr)
    print("==============", file=sys.stderr)
    print(f"Token: {data.token}", file=sys.stderr)
    print(f"Exchanges: {len(data.exchanges)}", file=sys.stderr)
    print(f"Balances: {len(data.balances)}", file=sys.stderr)
    if data.balance_warning:
        print(f"Warning: {data.balance_warning}", file=sys.stderr)

    context = ReportGenerationContext(
        validator=ReportValidator(SETTINGS.market_share_upper_bound),
        renderer=render_html,
    )
    result = GenerateReportUseCase(context).execute(data)
    if result.errors:
        print("\nValidation errors:", file=sys.stderr)
        for error in result.errors:
            print(f"- {error.message}", file=sys.stderr)
        return 1

    if args.out:
        Path(args.out).write_text(result.document, encoding="utf-8")
        print(f"\nReport written to {args.out}", file=sys.stderr)
    else:
        sys.stdout.write(result.document)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
