"""Common types used across kitchenCOGS."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field


def _naive_utc(value: datetime) -> datetime:
    """Store every timestamp as naive UTC so they compare safely."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_naive_utc)]


class Unit(str, Enum):
    """Unit of measure for an ingredient."""
    KG = "kg"
    G = "g"
    L = "l"
    ML = "ml"
    UN = "un"


class PaymentMethod(str, Enum):
    """Accepted payment methods at the counter."""
    CASH = "Dinheiro"
    PIX = "Pix"
    DEBIT = "Débito"
    CREDIT = "Crédito"


class DateRange(BaseModel):
    """An inclusive calendar date range."""
    start: date
    end: date

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment.date() <= self.end


class PaginationParams(BaseModel):
    """Pagination parameters."""
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=200)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size
