"""Streamlit front-end for the liquidity report pipeline."""
from __future__ import annotations

import os
from datetime import date

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from liquidity_report import (
    GenerateReportUseCase,
    ImportCsvUseCase,
    ImportSheetUseCase,
    ReportData,
    ReportGenerationContext,
    ReportValidator,
    SheetReportParser,
)
from liquidity_report.config import SETTINGS
from liquidity_report.domain import editing
from liquidity_report.domain.errors import ReportIngestionError
from liquidity_report.infrastructure.prices.coingecko import CoinGeckoPriceLookup
from liquidity_report.infrastructure.sheets.google_sheets import GoogleSheetsClient
from liquidity_report.presentation.report_html import exchanges_to_rows, render_exchanges_csv, render_html


st.set_page_config(page_title="Liquidity Report", layout="wide")
st.title("Monthly Liquidity Report")


def balances_to_dataframe(data: ReportData) -> pd.DataFrame:
    return pd.DataFrame(
        [{"asset": b.asset, "price": b.price, "amount": b.amount, "notional": b.notional} for b in data.balances],
        columns=["asset", "price", "amount", "notional"],
    )


def generate(data: ReportData) -> None:
    context = ReportGenerationContext(
        validator=ReportValidator(SETTINGS.market_share_upper_bound),
        renderer=render_html,
    )
    result = GenerateReportUseCase(context).execute(data)
    if result.errors:
        st.error("Validation errors:\n\n" + "\n".join(f"- {e.message}" for e in result.errors))
        return
    st.session_state["document"] = result.document
    st.session_state["report"] = data


def show_preview(data: ReportData, key: str) -> None:
    st.success(f"Loaded: {data.token} • {len(data.exchanges)} exchanges • {len(data.balances)} balances")
    if data.balance_warning:
        st.warning(data.balance_warning)
    if data.commentary:
        st.text(data.commentary)
    st.dataframe(balances_to_dataframe(data), hide_index=True)
    st.dataframe(pd.DataFrame(exchanges_to_rows(data.exchanges)), hide_index=True)
    if not data.historical_prices.is_empty:
        st.line_chart(data.historical_prices.to_frame().set_index("date"), y="price")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Edit in form", key=f"{key}_edit"):
            _reset_form_widgets()
            st.session_state["draft"] = editing.ReportDraft.from_report(data)
            st.rerun()
    with col2:
        if st.button("Generate report", key=f"{key}_generate"):
            generate(data)


FORM_WIDGET_PREFIXES = ("bal_", "ex_", "price_")


def _reset_form_widgets() -> None:
    for key in [k for k in st.session_state if str(k).startswith(FORM_WIDGET_PREFIXES)]:
        del st.session_state[key]


def _update(fn, *args, **kwargs) -> None:
    st.session_state["draft"] = fn(st.session_state["draft"], *args, **kwargs)


def _commit_text(widget_key: str, fn, *args) -> None:
    st.session_state["draft"] = fn(st.session_state["draft"], *args, st.session_state[widget_key], commit=True)


if "draft" not in st.session_state:
    st.session_state["draft"] = editing.ReportDraft()
if "document" not in st.session_state:
    st.session_state["document"] = None


form_tab, csv_tab, sheet_tab = st.tabs(["Form", "CSV", "Google Sheet"])

with form_tab:
    draft: editing.ReportDraft = st.session_state["draft"]
    col1, col2 = st.columns(2)
    with col1:
        token = st.text_input("Token", value=draft.token)
    with col2:
        report_date = st.text_input("Report date", value=draft.date)
    commentary = st.text_area("Commentary", value=draft.commentary)
    if (token, report_date, commentary) != (draft.token, draft.date, draft.commentary):
        _update(editing.set_header, token=token, date=report_date, commentary=commentary)
        draft = st.session_state["draft"]

    st.subheader("Balances")
    for i, balance in enumerate(draft.balances):
        cols = st.columns([2, 2, 2, 2, 1])
        cols[0].text_input(
            "Asset", value=balance.asset, key=f"bal_asset_{i}",
            on_change=_commit_text, args=(f"bal_asset_{i}", editing.set_balance_field, i, "asset"),
        )
        cols[1].text_input(
            "Price (fixed)" if balance.price_locked else "Price", value=balance.price.text, key=f"bal_price_{i}",
            disabled=balance.price_locked,
            on_change=_commit_text, args=(f"bal_price_{i}", editing.set_balance_field, i, "price"),
        )
        cols[2].text_input(
            "Amount", value=balance.amount.text, key=f"bal_amount_{i}",
            on_change=_commit_text, args=(f"bal_amount_{i}", editing.set_balance_field, i, "amount"),
        )
        cols[3].text_input("Notional (USD)", value=f"{balance.notional:.2f}", disabled=True, key=f"bal_notional_{i}")
        if len(draft.balances) > 1:
            cols[4].button("Remove", key=f"bal_remove_{i}", on_click=_update, args=(editing.remove_balance, i))
    st.button("+ Add balance", on_click=_update, args=(editing.add_balance,))

    st.subheader("Exchanges")
    for i, exchange in enumerate(draft.exchanges):
        with st.expander(f"Exchange #{i + 1}: {exchange.venue or 'new'}", expanded=not exchange.venue):
            cols = st.columns(2)
            for col, name, label in ((cols[0], "venue", "Venue"), (cols[1], "symbol", "Symbol")):
                col.text_input(
                    label, value=getattr(exchange, name), key=f"ex_{name}_{i}",
                    on_change=_commit_text, args=(f"ex_{name}_{i}", editing.set_exchange_field, i, name),
                )
            numeric = st.columns(4)
            for col, name, label in zip(
                numeric,
                ("liquidity_2pct", "jpeg_liquidity_2pct", "market_volume", "jpeg_volume"),
                ("2% Liquidity", "JPEG 2% Liquidity", "Market Volume", "JPEG Volume"),
            ):
                col.text_input(
                    label, value=getattr(exchange, name).text, key=f"ex_{name}_{i}",
                    on_change=_commit_text, args=(f"ex_{name}_{i}", editing.set_exchange_field, i, name),
                )
            st.caption(
                f"Market share {exchange.market_share:.2f}% · Liquidity share {exchange.liquidity_share:.2f}%"
            )
            if len(draft.exchanges) > 1:
                st.button("Remove", key=f"ex_remove_{i}", on_click=_update, args=(editing.remove_exchange, i))
    st.button("+ Add exchange", on_click=_update, args=(editing.add_exchange,))

    st.subheader("Prices (OHLC)")
    price_cols = st.columns(4)
    for col, name in zip(price_cols, editing.PRICE_FIELDS):
        col.text_input(
            name.title(), value=draft.prices[name].text, key=f"price_{name}",
            on_change=_commit_text, args=(f"price_{name}", editing.set_price_field, name),
        )

    if st.button("Generate report", key="form_generate", type="primary"):
        generate(st.session_state["draft"].commit())

with csv_tab:
    csv_date = st.date_input("Report date", value=date.today(), key="csv_date")
    csv_commentary = st.text_area("Commentary", key="csv_commentary")
    csv_file = st.file_uploader("Upload CSV file", type=["csv"])
    if csv_file is not None:
        try:
            data = ImportCsvUseCase().execute(
                csv_file.read().decode("utf-8"), csv_date.isoformat(), csv_commentary
            )
        except (ReportIngestionError, UnicodeDecodeError) as e:
            st.error(str(e))
        else:
            show_preview(data, key="csv")

with sheet_tab:
    sheet_url = st.text_input("Google Sheets URL", placeholder="https://docs.google.com/spreadsheets/d/...")
    api_key = st.text_input("API key", value=os.environ.get("GOOGLE_SHEETS_API_KEY", ""), type="password")
    sheet_date = st.date_input("Report date", value=date.today(), key="sheet_date")
    lookup_prices = st.checkbox("Look up prices on CoinGecko", value=True)
    st.caption('Make sure the spreadsheet is shared with "Anyone with the link"')
    if st.button("Load preview", disabled=not sheet_url.strip()):
        parser = SheetReportParser(
            GoogleSheetsClient(api_key),
            price_lookup=CoinGeckoPriceLookup() if lookup_prices else None,
        )
        with st.spinner("Loading..."):
            try:
                st.session_state["sheet_report"] = ImportSheetUseCase(parser).execute(
                    sheet_url, sheet_date.isoformat()
                )
            except ReportIngestionError as e:
                st.session_state["sheet_report"] = None
                st.error(str(e))
    if st.session_state.get("sheet_report"):
        show_preview(st.session_state["sheet_report"], key="sheet")


if st.session_state["document"]:
    report: ReportData = st.session_state["report"]
    st.divider()
    st.download_button(
        "Download report HTML",
        data=st.session_state["document"].encode("utf-8"),
        file_name=f"liquidity-report-{report.token}-{report.date}.html",
        mime="text/html",
    )
    st.download_button(
        "Download exchanges CSV",
        data=render_exchanges_csv(report.exchanges),
        file_name=f"exchanges-{report.token}-{report.date}.csv",
        mime="text/csv",
    )
    components.html(st.session_state["document"], height=900, scrolling=True)
