"""Portfolio holdings and their summaries."""

from .models import (
    HoldingCreate,
    HoldingResponse,
    HoldingValidationError,
    HoldingsWithSummary,
    PortfolioSummary,
    holdings_from_records,
    parse_holding_payload,
)
from .repository import HoldingRepository
from .summary import SummaryError, round_currency, summarize_holdings, with_summary

__all__ = [
    "HoldingCreate",
    "HoldingResponse",
    "HoldingValidationError",
    "HoldingsWithSummary",
    "PortfolioSummary",
    "SummaryError",
    "holdings_from_records",
    "parse_holding_payload",
    "HoldingRepository",
    "round_currency",
    "summarize_holdings",
    "with_summary",
]
