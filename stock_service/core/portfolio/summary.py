"""Summary statistics over holdings."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from stock_service.core.portfolio.models import HoldingResponse, HoldingsWithSummary, PortfolioSummary

CENTS = Decimal("0.01")


class SummaryError(ArithmeticError):
    """The holdings total cannot be represented."""


def round_currency(value: float) -> float:
    """Round to cents, halves away from zero.

    Rounds the shortest decimal form of the float, so 1.005 becomes 1.01
    and -0.125 becomes -0.13.
    """
    return float(Decimal(repr(value)).quantize(CENTS, rounding=ROUND_HALF_UP))


def summarize_holdings(holdings: Sequence[HoldingResponse]) -> PortfolioSummary:
    """Count holdings and total their cost.

    Raises:
        SummaryError: If the total overflows to a non-finite value
    """
    total_cost = sum(holding.total_cost for holding in holdings)
    if not math.isfinite(total_cost):
        raise SummaryError(f"Total cost of {len(holdings)} holdings is not finite")
    return PortfolioSummary(found=len(holdings), total_cost=round_currency(total_cost))


def with_summary(holdings: Iterable[HoldingResponse]) -> HoldingsWithSummary:
    """Bundle holdings with their summary for a listing response."""
    holdings = list(holdings)
    return HoldingsWithSummary(summary=summarize_holdings(holdings), holdings=holdings)
