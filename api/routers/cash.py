"""Cashier session endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from api.dependencies import get_repository
from kitchencogs.models.sales import (
    CashCloseRequest,
    CashOpenRequest,
    CashSession,
    CashSessionSummary,
)
from kitchencogs.services import cash_service
from kitchencogs.services.repository import Repository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[CashSession])
async def list_sessions(repo: Repository = Depends(get_repository)):
    """Session history, newest first."""
    return list(reversed(repo.list_cash_sessions()))


@router.get("/current", response_model=Optional[CashSessionSummary])
async def current_session(repo: Repository = Depends(get_repository)):
    """The open session with its running totals, or null when the drawer is closed."""
    session = cash_service.current_session(repo.list_cash_sessions())
    if session is None:
        return None
    return cash_service.session_summary(session, repo.list_sales())


@router.post("/open", response_model=CashSessionSummary, status_code=201)
async def open_session(request: CashOpenRequest, repo: Repository = Depends(get_repository)):
    """Open the drawer with a starting balance. Fails with 409 if one is already open."""
    session = cash_service.open_session(
        repo.list_cash_sessions(),
        request.initial_balance,
        notes=request.notes,
    )
    repo.save_cash_session(session)
    logger.info(f"Cash session {session.id} opened with {session.initial_balance:.2f}")
    return cash_service.session_summary(session, repo.list_sales())


@router.post("/close", response_model=CashSessionSummary)
async def close_session(request: CashCloseRequest, repo: Repository = Depends(get_repository)):
    """
    Close the drawer with the counted amount.

    The summary's `difference` is counted minus expected.
    """
    sales = repo.list_sales()
    session = cash_service.close_session(
        repo.list_cash_sessions(),
        request.final_balance,
        sales,
        notes=request.notes,
    )
    repo.save_cash_session(session)

    summary = cash_service.session_summary(session, sales)
    logger.info(f"Cash session {session.id} closed, difference {summary.difference:.2f}")
    return summary
