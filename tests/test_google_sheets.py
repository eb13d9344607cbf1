from unittest.mock import MagicMock

import pytest
import requests

from liquidity_report.domain.errors import SheetFetchError
from liquidity_report.infrastructure.sheets.google_sheets import GoogleSheetsClient


def make_response(payload=None, status_code=200, json_error=False) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    if json_error:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


def make_client(response=None, error=None) -> tuple[GoogleSheetsClient, MagicMock]:
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return GoogleSheetsClient("secret", session=session, base_url="https://sheets.test/v4/", timeout=3), session


def test_fetch_values_requests_tab_with_key():
    client, session = make_client(make_response({"values": [["ABC"], ["Exchange", "Symbol", 5, None]]}))

    rows = client.fetch_values("sheet123", "Liq")

    assert rows == [["ABC"], ["Exchange", "Symbol", "5", ""]]
    session.get.assert_called_once_with(
        "https://sheets.test/v4/spreadsheets/sheet123/values/Liq",
        params={"key": "secret"},
        timeout=3,
    )


def test_tab_names_are_url_quoted():
    client, session = make_client(make_response({"values": []}))

    client.fetch_values("sheet123", "My Tab")

    assert session.get.call_args.args[0].endswith("/values/My%20Tab")


def test_empty_tab_returns_no_rows():
    client, _ = make_client(make_response({"range": "Blurb!A1:Z1000", "majorDimension": "ROWS"}))

    assert client.fetch_values("sheet123", "Blurb") == []


def test_api_error_message_is_surfaced():
    payload = {"error": {"code": 400, "message": "Unable to parse range: Bal"}}
    client, _ = make_client(make_response(payload, status_code=400))

    with pytest.raises(SheetFetchError, match="Failed to fetch Bal: Unable to parse range: Bal") as excinfo:
        client.fetch_values("sheet123", "Bal")

    assert excinfo.value.tab == "Bal"


def test_http_status_is_used_without_error_body():
    client, _ = make_client(make_response(status_code=403, json_error=True))

    with pytest.raises(SheetFetchError, match="HTTP 403"):
        client.fetch_values("sheet123", "Liq")


def test_transport_errors_become_fetch_errors():
    client, _ = make_client(error=requests.ConnectionError("connection refused"))

    with pytest.raises(SheetFetchError, match="connection refused"):
        client.fetch_values("sheet123", "Liq")


def test_invalid_json_body():
    client, _ = make_client(make_response(json_error=True))

    with pytest.raises(SheetFetchError, match="not valid JSON"):
        client.fetch_values("sheet123", "Liq")
