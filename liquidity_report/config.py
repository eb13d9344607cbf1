"""Central configuration for the liquidity report package."""
from __future__ import annotations

from dataclasses import dataclass

SHEETS_API_BASE_URL = "https://sheets.googleapis.com/v4"
COINGECKO_API_BASE_URL = "https://api.coingecko.com/api/v3"

LIQ_TAB = "Liq"
BAL_TAB = "Bal"
BLURB_TAB = "Blurb"


@dataclass(slots=True, frozen=True)
class Settings:
    sheet_tabs: tuple[str, str, str]
    sheets_base_url: str
    coingecko_base_url: str
    request_timeout: float
    request_retries: int
    max_workers: int
    history_days: int
    market_share_upper_bound: float


SETTINGS = Settings(
    sheet_tabs=(LIQ_TAB, BAL_TAB, BLURB_TAB),
    sheets_base_url=SHEETS_API_BASE_URL,
    coingecko_base_url=COINGECKO_API_BASE_URL,
    request_timeout=15.0,
    request_retries=3,
    max_workers=8,
    history_days=30,
    market_share_upper_bound=200.0,
)
