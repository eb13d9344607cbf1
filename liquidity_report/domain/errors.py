"""Exceptions raised while ingesting report sources."""
from __future__ import annotations


class ReportIngestionError(Exception):
    """Base class for structural problems in CSV or sheet input."""


class MissingHeaderError(ReportIngestionError):
    def __init__(self, message: str = "Could not find header row with 'Exchange' and 'Symbol'") -> None:
        super().__init__(message)


class MultipleHeaderError(ReportIngestionError):
    """Raised when a CSV carries more than one Exchange/Symbol header block."""

    def __init__(self, first_row: int, second_row: int) -> None:
        self.first_row = first_row
        self.second_row = second_row
        super().__init__(
            f"Found a second header row at line {second_row + 1} (first at line {first_row + 1}); "
            "only one dataset per CSV is supported"
        )


class MissingTokenError(ReportIngestionError):
    def __init__(self, message: str = "Could not determine token name") -> None:
        super().__init__(message)


class EmptyDatasetError(ReportIngestionError):
    def __init__(self, message: str = "No valid exchange data found") -> None:
        super().__init__(message)


class InvalidUrlError(ReportIngestionError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Invalid Google Sheets URL: {url!r}")


class SheetFetchError(ReportIngestionError):
    """A single tab could not be fetched; the whole sheet import is aborted."""

    def __init__(self, tab: str, message: str) -> None:
        self.tab = tab
        super().__init__(f"Failed to fetch {tab}: {message}")


class PriceLookupError(Exception):
    """External price lookup failed for one asset."""

    def __init__(self, asset: str, message: str) -> None:
        self.asset = asset
        super().__init__(f"Price lookup for {asset} failed: {message}")
