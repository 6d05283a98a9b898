"""Sales and cashier session models."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from kitchencogs.models.common import PaymentMethod, UtcDatetime


class SaleItem(BaseModel):
    """A sold line with the unit cost snapshotted at time of sale."""
    recipe_id: str
    quantity: float
    unit_price: float
    cost_price: float


class Sale(BaseModel):
    """A recorded sale."""
    id: str
    date: UtcDatetime
    items: List[SaleItem] = Field(default_factory=list)
    total: float = 0.0
    payment_method: PaymentMethod = PaymentMethod.CASH
    profit: float = 0.0


class CartLine(BaseModel):
    """A recipe and how many units of it go in the cart."""
    recipe_id: str
    quantity: float = Field(default=1, ge=0)


class SaleCreate(BaseModel):
    """Checkout request."""
    lines: List[CartLine]
    payment_method: PaymentMethod = PaymentMethod.CASH
    amount_given: Optional[float] = Field(default=None, ge=0)


class SaleReceipt(BaseModel):
    """Recorded sale plus change due."""
    sale: Sale
    change: float = 0.0


class CashSessionStatus(str, Enum):
    """Cashier session status."""
    OPEN = "open"
    CLOSED = "closed"


class CashSession(BaseModel):
    """A cashier drawer session."""
    id: str
    opened_at: UtcDatetime
    closed_at: Optional[UtcDatetime] = None
    initial_balance: float = 0.0
    final_balance: Optional[float] = None  # counted in the drawer at close
    sales_total: float = 0.0
    status: CashSessionStatus = CashSessionStatus.OPEN
    notes: Optional[str] = None


class CashOpenRequest(BaseModel):
    initial_balance: float = Field(..., ge=0)
    notes: Optional[str] = None


class CashCloseRequest(BaseModel):
    final_balance: float = Field(..., ge=0)
    notes: Optional[str] = None


class CashSessionSummary(BaseModel):
    """Live view of a cashier session."""
    session: CashSession
    sales_since_open: float
    sales_today: float
    expected_balance: float
    difference: Optional[float] = None


class TopProduct(BaseModel):
    name: str
    count: float


class DashboardStats(BaseModel):
    """Totals for a date range."""
    start: str
    end: str
    total_sales: float
    total_cost: float
    total_profit: float
    sales_count: int
    purchases_count: int
    top_products: List[TopProduct] = Field(default_factory=list)
