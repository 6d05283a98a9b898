"""
Sales Service

Builds sales from a cart, snapshotting each recipe's unit cost at the
moment of sale so later price changes never rewrite historical profit.
"""

import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from kitchencogs.errors import InsufficientPaymentError, NotFoundError, ValidationError
from kitchencogs.models.common import PaymentMethod
from kitchencogs.models.inventory import Ingredient
from kitchencogs.models.recipes import Recipe
from kitchencogs.models.sales import CartLine, Sale, SaleItem, SaleReceipt
from kitchencogs.services.costing import compute_recipe_cost

logger = logging.getLogger(__name__)


def merge_cart(lines: List[CartLine]) -> List[CartLine]:
    """Merge repeated recipes and drop lines with nothing in them."""
    merged: Dict[str, float] = {}
    for line in lines:
        merged[line.recipe_id] = merged.get(line.recipe_id, 0) + line.quantity
    return [
        CartLine(recipe_id=recipe_id, quantity=qty)
        for recipe_id, qty in merged.items()
        if qty > 0
    ]


def build_sale(
    lines: List[CartLine],
    recipes: List[Recipe],
    ingredients: List[Ingredient],
    payment_method: PaymentMethod = PaymentMethod.CASH,
    amount_given: Optional[float] = None,
    now: Optional[datetime] = None,
) -> SaleReceipt:
    """
    Turn a cart into a sale.

    Raises:
        ValidationError: the cart is empty
        NotFoundError: a line references an unknown recipe
        InsufficientPaymentError: cash handed over is below the total
    """
    cart = merge_cart(lines)
    if not cart:
        raise ValidationError("Cart is empty")

    recipes_by_id = {r.id: r for r in recipes}

    items = []
    for line in cart:
        recipe = recipes_by_id.get(line.recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe", line.recipe_id)

        cost = compute_recipe_cost(recipe, ingredients)
        items.append(SaleItem(
            recipe_id=recipe.id,
            quantity=line.quantity,
            unit_price=recipe.selling_price,
            cost_price=cost.cost_per_unit,
        ))

    total = sum(i.quantity * i.unit_price for i in items)
    total_cost = sum(i.quantity * i.cost_price for i in items)

    change = 0.0
    if payment_method == PaymentMethod.CASH and amount_given is not None:
        if amount_given < total:
            raise InsufficientPaymentError(total, amount_given)
        change = amount_given - total

    sale = Sale(
        id=f"sale_{uuid.uuid4().hex[:12]}",
        date=now or datetime.utcnow(),
        items=items,
        total=total,
        payment_method=payment_method,
        profit=total - total_cost,
    )

    logger.info(f"Built sale {sale.id}: {len(items)} line(s), total {total:.2f}")
    return SaleReceipt(sale=sale, change=change)
