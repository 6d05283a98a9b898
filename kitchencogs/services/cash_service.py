"""Cashier sessions: open a drawer, count it at close."""

import uuid
from datetime import datetime
from typing import List, Optional

from kitchencogs.errors import ConflictError, NotFoundError
from kitchencogs.models.sales import (
    CashSession,
    CashSessionStatus,
    CashSessionSummary,
    Sale,
)


def current_session(sessions: List[CashSession]) -> Optional[CashSession]:
    """The open session, if any."""
    for session in sessions:
        if session.status == CashSessionStatus.OPEN:
            return session
    return None


def sales_since(sales: List[Sale], moment: datetime) -> float:
    return sum(s.total for s in sales if s.date >= moment)


def open_session(
    sessions: List[CashSession],
    initial_balance: float,
    now: Optional[datetime] = None,
    notes: Optional[str] = None,
) -> CashSession:
    """Open a new session. Only one session may be open at a time."""
    existing = current_session(sessions)
    if existing:
        raise ConflictError(
            "A cash session is already open",
            details={"session_id": existing.id},
        )

    return CashSession(
        id=f"cash_{uuid.uuid4().hex[:12]}",
        opened_at=now or datetime.utcnow(),
        initial_balance=initial_balance,
        notes=notes,
    )


def close_session(
    sessions: List[CashSession],
    final_balance: float,
    sales: List[Sale],
    now: Optional[datetime] = None,
    notes: Optional[str] = None,
) -> CashSession:
    """Close the open session with the amount counted in the drawer."""
    session = current_session(sessions)
    if session is None:
        raise NotFoundError("Cash session", "open")

    update = {
        "closed_at": now or datetime.utcnow(),
        "status": CashSessionStatus.CLOSED,
        "sales_total": sales_since(sales, session.opened_at),
        "final_balance": final_balance,
    }
    if notes:
        update["notes"] = notes
    return session.model_copy(update=update)


def session_summary(
    session: CashSession,
    sales: List[Sale],
    now: Optional[datetime] = None,
) -> CashSessionSummary:
    now = now or datetime.utcnow()

    if session.status == CashSessionStatus.OPEN:
        running = sales_since(sales, session.opened_at)
    else:
        running = session.sales_total

    expected = session.initial_balance + running
    difference = None
    if session.final_balance is not None:
        difference = session.final_balance - expected

    return CashSessionSummary(
        session=session,
        sales_since_open=running,
        sales_today=sum(s.total for s in sales if s.date.date() == now.date()),
        expected_balance=expected,
        difference=difference,
    )
