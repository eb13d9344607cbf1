"""Google Sheets values API client."""
from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from liquidity_report.config import SETTINGS
from liquidity_report.domain.errors import SheetFetchError
from liquidity_report.infrastructure.http.session import create_session

logger = logging.getLogger(__name__)


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = (payload.get("error") or {}).get("message")
        if message:
            return str(message)
    return f"HTTP {response.status_code}"


class GoogleSheetsClient:
    """Key-authenticated ``values.get`` call per tab."""

    def __init__(
        self,
        api_key: str,
        session: requests.Session | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._api_key = api_key
        self.session = session or create_session(retries=SETTINGS.request_retries)
        self._base_url = (base_url or SETTINGS.sheets_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else SETTINGS.request_timeout

    def fetch_values(self, sheet_id: str, tab: str) -> list[list[str]]:
        url = f"{self._base_url}/spreadsheets/{sheet_id}/values/{quote(tab, safe='')}"
        logger.info("Fetching %s tab of sheet %s", tab, sheet_id)
        try:
            response = self.session.get(url, params={"key": self._api_key}, timeout=self._timeout)
        except requests.RequestException as e:
            logger.error("Sheets request for %s failed: %s", tab, e)
            raise SheetFetchError(tab, str(e)) from e

        if not response.ok:
            raise SheetFetchError(tab, _error_message(response))

        try:
            payload = response.json()
        except ValueError as e:
            raise SheetFetchError(tab, "response is not valid JSON") from e

        values = payload.get("values") or []
        rows = [["" if cell is None else str(cell) for cell in row] for row in values]
        logger.info("%s: %d rows", tab, len(rows))
        return rows
