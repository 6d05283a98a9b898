"""
Inventory Data Models

Ingredients tracked in stock, valued at a weighted-average unit price.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from kitchencogs.models.common import Unit, UtcDatetime


class Ingredient(BaseModel):
    """An ingredient held in stock."""

    id: str = Field(..., description="Opaque identifier")
    name: str
    unit: Unit = Unit.UN

    # Normalized cost of one unit of measure (weighted average after purchases)
    price_per_unit: float = 0.0

    # Last package bought, for display only
    last_package_price: float = 0.0
    last_package_size: float = 1.0

    current_stock: float = 0.0
    min_stock_alert: float = 0.0
    updated_at: UtcDatetime = Field(default_factory=datetime.utcnow)

    # Optimistic concurrency stamp, bumped by the repository on every write
    version: int = 0

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_stock_alert


class IngredientCreate(BaseModel):
    """Manual ingredient entry, priced from the package bought."""
    name: str = Field(..., min_length=1)
    unit: Unit = Unit.KG
    last_package_price: float = Field(..., ge=0)
    last_package_size: float = Field(..., gt=0)
    current_stock: float = Field(default=0.0, ge=0)
    min_stock_alert: float = Field(default=1.0, ge=0)


class IngredientUpdate(BaseModel):
    """Manual edit of an ingredient. Omitted fields are left unchanged."""
    name: Optional[str] = Field(default=None, min_length=1)
    unit: Optional[Unit] = None
    last_package_price: Optional[float] = Field(default=None, ge=0)
    last_package_size: Optional[float] = Field(default=None, gt=0)
    current_stock: Optional[float] = Field(default=None, ge=0)
    min_stock_alert: Optional[float] = Field(default=None, ge=0)
    version: Optional[int] = Field(
        default=None,
        description="Version the edit was based on; stale edits are rejected",
    )


class LowStockAlert(BaseModel):
    """An ingredient at or below its alert threshold."""
    ingredient_id: str
    name: str
    unit: Unit
    current_stock: float
    min_stock_alert: float
