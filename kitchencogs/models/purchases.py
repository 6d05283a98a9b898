"""
Purchase Models

A purchase line linked to an ingredient moves stock and price; a line
with an empty ingredient reference is a plain expense.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from kitchencogs.models.common import UtcDatetime
from kitchencogs.models.inventory import Ingredient


class PurchaseItem(BaseModel):
    """One line of a purchase."""
    ingredient_id: str = Field(default="", description="Empty for expense lines")
    quantity: float = 0.0
    total_price: float = 0.0
    temp_name: Optional[str] = Field(
        default=None,
        description="Name as typed or read from the receipt",
    )

    @property
    def is_expense(self) -> bool:
        return not self.ingredient_id


class Purchase(BaseModel):
    """A recorded purchase."""
    id: str
    date: UtcDatetime
    items: List[PurchaseItem] = Field(default_factory=list)
    total: float = 0.0
    notes: Optional[str] = None


class PurchaseCreate(BaseModel):
    """Request model for recording a purchase."""
    date: UtcDatetime = Field(default_factory=datetime.utcnow)
    items: List[PurchaseItem] = Field(default_factory=list)
    total: Optional[float] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def default_total(self):
        if self.total is None:
            self.total = round(sum(i.total_price for i in self.items), 2)
        return self


class IgnoreReason(str, Enum):
    """Why a purchase line left stock untouched."""
    EXPENSE = "expense"
    UNKNOWN_INGREDIENT = "unknown_ingredient"


class LineOutcome(BaseModel):
    """What happened to one purchase line."""
    line_index: int
    ingredient_id: str = ""
    applied: bool
    reason: Optional[IgnoreReason] = None


class PurchaseResult(BaseModel):
    """Updated ingredient list plus a per-line audit trail."""
    ingredients: List[Ingredient] = Field(default_factory=list)
    outcomes: List[LineOutcome] = Field(default_factory=list)
    changed_ids: List[str] = Field(default_factory=list)

    @property
    def applied(self) -> List[LineOutcome]:
        return [o for o in self.outcomes if o.applied]

    @property
    def ignored(self) -> List[LineOutcome]:
        return [o for o in self.outcomes if not o.applied]


class ScannedReceiptItem(BaseModel):
    """One line read off a receipt image. Missing values fall back to defaults."""
    name: str = ""
    quantity: float = 1.0
    unit: Optional[str] = None
    total_price: float = Field(default=0.0, alias="totalPrice")

    class Config:
        populate_by_name = True

    @field_validator("name", mode="before")
    @classmethod
    def blank_name(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("quantity", mode="before")
    @classmethod
    def default_quantity(cls, v: Any) -> Any:
        return _number_or(v, 1.0)

    @field_validator("total_price", mode="before")
    @classmethod
    def default_total_price(cls, v: Any) -> Any:
        return _number_or(v, 0.0)


class ScannedReceipt(BaseModel):
    """Structured data extracted from a receipt image."""
    purchase_date: Optional[date] = Field(default=None, alias="date")
    total: Optional[float] = None
    items: List[ScannedReceiptItem] = Field(default_factory=list)

    class Config:
        populate_by_name = True

    @field_validator("purchase_date", mode="before")
    @classmethod
    def unreadable_date(cls, v: Any) -> Any:
        if v is None or isinstance(v, date):
            return v
        try:
            return date.fromisoformat(str(v).strip()[:10])
        except ValueError:
            return None

    @field_validator("total", mode="before")
    @classmethod
    def unreadable_total(cls, v: Any) -> Any:
        return _number_or(v, None)


def _number_or(value: Any, default: Optional[float]) -> Optional[float]:
    """Read a number the model may have sent as null or text."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(str(value).replace(",", ".")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
