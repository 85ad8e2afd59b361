"""Pydantic schemas for portfolio operations."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from stock_service.db.models import Holding

logger = logging.getLogger(__name__)

# Keys a client may send for a holding
HOLDING_FIELDS = frozenset({"ticker", "quantity", "totalCost", "account"})
ID_FIELDS = ("_id", "id")


class HoldingValidationError(ValueError):
    """A holding payload was rejected.

    Attributes:
        field: Name of the offending field, if one can be named
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class HoldingCreate(BaseModel):
    """Schema for creating or replacing a holding."""

    ticker: str = Field(..., min_length=1)
    quantity: float = Field(..., strict=True)
    total_cost: float = Field(..., alias="totalCost", strict=True)
    account: str = ""

    # JSON numbers only: no numeric strings, booleans, NaN or Infinity
    model_config = ConfigDict(populate_by_name=True, extra="forbid", allow_inf_nan=False)

    @field_validator("ticker")
    @classmethod
    def ticker_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("ticker must not be blank")
        return v.strip()


class HoldingResponse(BaseModel):
    """Schema for holding response."""

    id: str = Field(..., alias="_id")
    ticker: str
    quantity: float
    total_cost: float = Field(..., alias="totalCost")
    account: str = ""

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_record(cls, holding: Holding) -> "HoldingResponse":
        return cls.model_validate(
            {
                "_id": holding.id,
                "ticker": holding.ticker,
                "quantity": holding.quantity,
                "totalCost": holding.total_cost,
                "account": holding.account,
            }
        )


class PortfolioSummary(BaseModel):
    """Aggregated metrics over a set of holdings."""

    found: int
    total_cost: float = Field(..., alias="totalCost")

    model_config = ConfigDict(populate_by_name=True)


class HoldingsWithSummary(BaseModel):
    """Holdings listing together with its summary."""

    summary: PortfolioSummary
    holdings: List[HoldingResponse]


def parse_holding_payload(data: Any, holding_id: Optional[str] = None) -> HoldingCreate:
    """Decode an untyped JSON body into a HoldingCreate.

    The key set is checked against the allow-list before the typed decode,
    so unknown keys and identities are reported by name.

    Args:
        data: Parsed JSON body
        holding_id: Identity of the record being replaced. When None the
            payload is a creation and must not carry an identity.

    Returns:
        Validated HoldingCreate

    Raises:
        HoldingValidationError: If the payload is rejected
    """
    if not isinstance(data, dict):
        raise HoldingValidationError("Invalid input data")

    payload = dict(data)
    for key in ID_FIELDS:
        if key not in payload:
            continue
        if holding_id is None:
            raise HoldingValidationError("ID should not be provided for a new holding", field=key)
        if payload[key] != holding_id:
            raise HoldingValidationError("ID in body does not match the holding ID", field=key)
        del payload[key]

    for key in payload:
        if key not in HOLDING_FIELDS:
            raise HoldingValidationError(f"Unknown field: {key}", field=key)

    try:
        return HoldingCreate.model_validate(payload)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error.get("loc") else None
        if error.get("type") == "missing":
            raise HoldingValidationError(f"Missing required field: {field}", field=field)
        raise HoldingValidationError(
            f"Invalid value for field '{field}': {error.get('msg')}",
            field=field,
        )


def holdings_from_records(holdings: Iterable[Holding]) -> List[HoldingResponse]:
    """Convert rows to responses, skipping rows that fail to decode."""
    decoded: List[HoldingResponse] = []
    for holding in holdings:
        try:
            decoded.append(HoldingResponse.from_record(holding))
        except ValidationError as e:
            logger.warning(f"Failed to decode holding {getattr(holding, 'id', None)}: {e}")
            continue
    return decoded
