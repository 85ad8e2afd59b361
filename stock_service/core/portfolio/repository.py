"""Portfolio repository for CRUD operations."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from stock_service.core.portfolio.models import HoldingCreate
from stock_service.db.models import Holding


def _escape_like_pattern(value: str) -> str:
    """Escape special characters in LIKE patterns."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class HoldingRepository:
    """Repository for Holding CRUD operations."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def get_all(self) -> List[Holding]:
        """Get all holdings."""
        return self.db.query(Holding).all()

    def get_by_id(self, holding_id: str) -> Optional[Holding]:
        """Get a holding by ID."""
        return self.db.query(Holding).filter_by(id=holding_id).first()

    def get_by_ticker(self, ticker: str) -> List[Holding]:
        """Get holdings whose ticker matches exactly."""
        return self.db.query(Holding).filter_by(ticker=ticker).all()

    def get_by_account(self, account: str) -> List[Holding]:
        """Get holdings whose account contains the given text.

        Matching is case-insensitive and literal; LIKE wildcards in the
        input are escaped.

        Args:
            account: Substring to look for in the account label

        Returns:
            List of holdings
        """
        pattern = f"%{_escape_like_pattern(account)}%"
        return (
            self.db.query(Holding)
            .filter(Holding.account.ilike(pattern, escape="\\"))
            .all()
        )

    def create(self, payload: HoldingCreate) -> Holding:
        """Create a new holding.

        Args:
            payload: Validated holding fields

        Returns:
            Created holding with its server-assigned ID
        """
        holding = Holding(
            ticker=payload.ticker,
            quantity=payload.quantity,
            total_cost=payload.total_cost,
            account=payload.account,
        )
        self.db.add(holding)
        self.db.commit()
        return holding

    def replace(self, holding_id: str, payload: HoldingCreate) -> Optional[Holding]:
        """Replace every field of a holding.

        Args:
            holding_id: Holding ID
            payload: Validated replacement fields

        Returns:
            Updated holding or None if not found
        """
        holding = self.get_by_id(holding_id)
        if not holding:
            return None

        holding.ticker = payload.ticker
        holding.quantity = payload.quantity
        holding.total_cost = payload.total_cost
        holding.account = payload.account

        self.db.commit()
        return holding

    def delete(self, holding_id: str) -> Optional[Holding]:
        """Delete a holding.

        Returns:
            The deleted holding, or None if not found
        """
        holding = self.get_by_id(holding_id)
        if not holding:
            return None

        self.db.delete(holding)
        self.db.commit()
        return holding
