"""Holdings API routes."""

from __future__ import annotations

import logging
from typing import Any, List

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stock_service.api.deps import get_db, require_auth
from stock_service.core.portfolio import (
    HoldingRepository,
    HoldingResponse,
    HoldingValidationError,
    HoldingsWithSummary,
    SummaryError,
    holdings_from_records,
    parse_holding_payload,
    with_summary,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_auth)])


def _query_failed(message: str) -> HTTPException:
    logger.exception(message)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=message,
    )


def _bad_payload(e: HoldingValidationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _summarized(holdings: List[HoldingResponse]) -> HoldingsWithSummary:
    try:
        return with_summary(holdings)
    except SummaryError:
        raise _query_failed("Failed to summarize holdings")


def _holding_not_found(holding_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Holding ID: {holding_id} not found",
    )


@router.get("/", response_model=HoldingsWithSummary)
def list_holdings(db: Session = Depends(get_db)):
    """List all holdings with their summary."""
    try:
        records = HoldingRepository(db).get_all()
    except SQLAlchemyError:
        raise _query_failed("Failed to retrieve holdings")
    return _summarized(holdings_from_records(records))


@router.post("/", status_code=status.HTTP_201_CREATED)
def add_holding(data: Any = Body(...), db: Session = Depends(get_db)):
    """Add a new holding; the ID is assigned by the server."""
    try:
        payload = parse_holding_payload(data)
    except HoldingValidationError as e:
        raise _bad_payload(e)

    try:
        holding = HoldingRepository(db).create(payload)
    except SQLAlchemyError:
        raise _query_failed("Failed to add holding")

    logger.info(f"Added holding {holding.id} for {holding.ticker}")
    return {
        "message": f"Successfully added holdings for ticker {holding.ticker} with ID {holding.id}",
        "_id": holding.id,
    }


@router.get("/id/{holding_id}", response_model=HoldingResponse)
def get_holding(holding_id: str, db: Session = Depends(get_db)):
    """Fetch a holding by ID."""
    try:
        holding = HoldingRepository(db).get_by_id(holding_id)
    except SQLAlchemyError:
        raise _query_failed("Failed to retrieve holding")

    if not holding:
        raise _holding_not_found(holding_id)
    return HoldingResponse.from_record(holding)


@router.put("/id/{holding_id}")
def update_holding(holding_id: str, data: Any = Body(...), db: Session = Depends(get_db)):
    """Replace a holding by ID."""
    try:
        payload = parse_holding_payload(data, holding_id=holding_id)
    except HoldingValidationError as e:
        raise _bad_payload(e)

    try:
        holding = HoldingRepository(db).replace(holding_id, payload)
    except SQLAlchemyError:
        raise _query_failed("Failed to update holding")

    if not holding:
        raise _holding_not_found(holding_id)
    return {"message": f"Holdings for {holding.ticker} updated successfully!"}


@router.delete("/id/{holding_id}")
def delete_holding(holding_id: str, db: Session = Depends(get_db)):
    """Delete a holding by ID."""
    try:
        holding = HoldingRepository(db).delete(holding_id)
    except SQLAlchemyError:
        raise _query_failed("Failed to delete holding")

    if not holding:
        raise _holding_not_found(holding_id)
    return {"message": f"Holdings for {holding.ticker} deleted successfully!"}


@router.get("/ticker/{ticker}", response_model=List[HoldingResponse])
def get_holdings_by_ticker(ticker: str, db: Session = Depends(get_db)):
    """Filter holdings by exact ticker."""
    try:
        records = HoldingRepository(db).get_by_ticker(ticker)
    except SQLAlchemyError:
        raise _query_failed("Failed to retrieve holdings")

    holdings = holdings_from_records(records)
    if not holdings:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No holdings found for the given ticker",
        )
    return holdings


@router.get("/account/{account}", response_model=HoldingsWithSummary)
def get_holdings_by_account(account: str, db: Session = Depends(get_db)):
    """Filter holdings by account substring, with their summary."""
    try:
        records = HoldingRepository(db).get_by_account(account)
    except SQLAlchemyError:
        raise _query_failed("Failed to retrieve holdings")

    holdings = holdings_from_records(records)
    if not holdings:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No holdings found for the given account pattern",
        )
    return _summarized(holdings)
