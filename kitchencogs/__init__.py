"""
kitchenCOGS Core Package

Costing, inventory and sales logic for small food businesses.
No framework dependencies (FastAPI, Supabase) in this package.
"""

__version__ = "0.1.0"

from kitchencogs.models.inventory import Ingredient
from kitchencogs.models.purchases import Purchase, PurchaseItem
from kitchencogs.models.recipes import Recipe, RecipeItem
from kitchencogs.services.costing import (
    compute_recipe_cost,
    deduct_for_production,
    process_purchase,
)

__all__ = [
    "Ingredient",
    "Recipe",
    "RecipeItem",
    "Purchase",
    "PurchaseItem",
    "process_purchase",
    "deduct_for_production",
    "compute_recipe_cost",
]
