"""Recipe models and derived costing figures."""

from typing import List, Optional

from pydantic import BaseModel, Field

from kitchencogs.models.inventory import Ingredient


class RecipeItem(BaseModel):
    """One ingredient line of a recipe, quantity per batch."""
    ingredient_id: str
    quantity: float = Field(..., ge=0)


class Recipe(BaseModel):
    """A recipe producing `yield_amount` sellable units per batch."""
    id: str
    name: str
    items: List[RecipeItem] = Field(default_factory=list)
    yield_amount: float = 0.0
    yield_unit: str = "unidades"
    selling_price: float = 0.0  # per yielded unit
    indirect_costs: float = 0.0  # gas, energy, packaging per batch
    preparation_time_minutes: int = 0


class RecipeCreate(BaseModel):
    """Request model for creating or replacing a recipe."""
    name: str = Field(..., min_length=1)
    items: List[RecipeItem] = Field(default_factory=list)
    yield_amount: float = Field(..., gt=0)
    yield_unit: str = "unidades"
    selling_price: float = Field(default=0.0, ge=0)
    indirect_costs: float = Field(default=0.0, ge=0)
    preparation_time_minutes: int = Field(default=0, ge=0)


class RecipeCost(BaseModel):
    """Economics of one recipe at current ingredient prices."""
    recipe_id: str
    direct_cost: float
    total_batch_cost: float
    cost_per_unit: float
    profit_per_unit: float
    margin_percent: float
    missing_ingredient_ids: List[str] = Field(default_factory=list)


class ProductionRequest(BaseModel):
    """Request to produce a number of batches."""
    batch_count: float = Field(default=1, gt=0)


class Shortage(BaseModel):
    """An ingredient that blocks a production run."""
    ingredient_id: str
    name: Optional[str] = None
    required: float
    available: float


class ProductionResult(BaseModel):
    """Outcome of a production run. `ingredients` is unchanged on failure."""
    success: bool
    ingredients: List[Ingredient] = Field(default_factory=list)
    shortages: List[Shortage] = Field(default_factory=list)
    changed_ids: List[str] = Field(default_factory=list)
