"""
Costing - weighted-average purchasing, production deduction, recipe economics

Pure functions over snapshots of the ingredient list. Nothing here persists
anything; the caller saves the ingredients reported as changed.
"""

import logging
from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Optional

from kitchencogs.models.inventory import Ingredient
from kitchencogs.models.purchases import (
    IgnoreReason,
    LineOutcome,
    Purchase,
    PurchaseResult,
)
from kitchencogs.models.recipes import ProductionResult, Recipe, RecipeCost, Shortage

logger = logging.getLogger(__name__)


def initial_unit_price(package_price: float, package_size: float) -> float:
    """Unit price at manual entry: package price over package size."""
    if package_size <= 0:
        return 0.0
    return package_price / package_size


def weighted_average_price(
    stock: float,
    price_per_unit: float,
    quantity: float,
    total_price: float,
) -> float:
    """
    Blend the value of stock on hand with a new purchase.

    Returns the old price when the resulting stock is not positive.
    """
    total_stock = stock + quantity
    if total_stock <= 0:
        return price_per_unit
    return (stock * price_per_unit + total_price) / total_stock


def process_purchase(
    purchase: Purchase,
    ingredients: List[Ingredient],
    now: Optional[datetime] = None,
) -> PurchaseResult:
    """
    Apply a purchase to the ingredient list.

    Expense lines (no ingredient reference) and lines pointing at unknown
    ingredients are skipped and reported as ignored. The input list is not
    modified; a new list in the same order is returned.
    """
    now = now or datetime.utcnow()
    updated = list(ingredients)
    index = {ing.id: i for i, ing in enumerate(updated)}

    outcomes = []
    changed = []

    for line_index, item in enumerate(purchase.items):
        if item.is_expense:
            outcomes.append(LineOutcome(
                line_index=line_index,
                applied=False,
                reason=IgnoreReason.EXPENSE,
            ))
            continue

        pos = index.get(item.ingredient_id)
        if pos is None:
            logger.info(
                f"Purchase {purchase.id}: ingredient {item.ingredient_id} not found, line skipped"
            )
            outcomes.append(LineOutcome(
                line_index=line_index,
                ingredient_id=item.ingredient_id,
                applied=False,
                reason=IgnoreReason.UNKNOWN_INGREDIENT,
            ))
            continue

        ing = updated[pos]
        updated[pos] = ing.model_copy(update={
            "current_stock": ing.current_stock + item.quantity,
            "price_per_unit": weighted_average_price(
                ing.current_stock, ing.price_per_unit, item.quantity, item.total_price
            ),
            "last_package_price": item.total_price,
            "last_package_size": item.quantity,
            "updated_at": now,
        })

        outcomes.append(LineOutcome(
            line_index=line_index,
            ingredient_id=item.ingredient_id,
            applied=True,
        ))
        if item.ingredient_id not in changed:
            changed.append(item.ingredient_id)

    return PurchaseResult(ingredients=updated, outcomes=outcomes, changed_ids=changed)


def required_quantities(recipe: Recipe, batch_count: float) -> Dict[str, float]:
    """Total quantity needed per ingredient for `batch_count` batches."""
    required: Dict[str, float] = OrderedDict()
    for item in recipe.items:
        required[item.ingredient_id] = required.get(item.ingredient_id, 0.0) + item.quantity * batch_count
    return required


def deduct_for_production(
    recipe: Recipe,
    batch_count: float,
    ingredients: List[Ingredient],
    now: Optional[datetime] = None,
) -> ProductionResult:
    """
    Deduct the ingredients for a production run, all or nothing.

    Every required ingredient must exist with enough stock; otherwise the
    original list comes back untouched with `success=False` and the
    shortages that blocked the run.
    """
    if batch_count <= 0:
        raise ValueError(f"batch_count must be positive, got {batch_count}")

    required = required_quantities(recipe, batch_count)
    by_id = {ing.id: ing for ing in ingredients}

    # Feasibility pass, read-only
    shortages = []
    for ingredient_id, quantity in required.items():
        ing = by_id.get(ingredient_id)
        if ing is None:
            shortages.append(Shortage(
                ingredient_id=ingredient_id,
                required=quantity,
                available=0.0,
            ))
        elif ing.current_stock < quantity:
            shortages.append(Shortage(
                ingredient_id=ingredient_id,
                name=ing.name,
                required=quantity,
                available=ing.current_stock,
            ))

    if shortages:
        logger.info(
            f"Production of {recipe.name} x{batch_count} refused: "
            f"{len(shortages)} ingredient(s) short"
        )
        return ProductionResult(success=False, ingredients=list(ingredients), shortages=shortages)

    # Commit pass
    now = now or datetime.utcnow()
    updated = [
        ing.model_copy(update={
            "current_stock": ing.current_stock - required[ing.id],
            "updated_at": now,
        }) if ing.id in required else ing
        for ing in ingredients
    ]

    return ProductionResult(success=True, ingredients=updated, changed_ids=list(required))


def compute_recipe_cost(recipe: Recipe, ingredients: List[Ingredient]) -> RecipeCost:
    """
    Derive cost and margin figures for a recipe.

    Ingredients that are no longer in the list contribute zero and are
    listed in `missing_ingredient_ids`.
    """
    by_id = {ing.id: ing for ing in ingredients}

    direct_cost = 0.0
    missing = []
    for item in recipe.items:
        ing = by_id.get(item.ingredient_id)
        if ing is None:
            missing.append(item.ingredient_id)
            continue
        direct_cost += item.quantity * ing.price_per_unit

    total_batch_cost = direct_cost + recipe.indirect_costs
    cost_per_unit = total_batch_cost / recipe.yield_amount if recipe.yield_amount > 0 else 0.0
    profit_per_unit = recipe.selling_price - cost_per_unit
    margin_percent = (profit_per_unit / recipe.selling_price * 100) if recipe.selling_price else 0.0

    return RecipeCost(
        recipe_id=recipe.id,
        direct_cost=direct_cost,
        total_batch_cost=total_batch_cost,
        cost_per_unit=cost_per_unit,
        profit_per_unit=profit_per_unit,
        margin_percent=margin_percent,
        missing_ingredient_ids=missing,
    )
