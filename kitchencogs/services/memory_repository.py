"""
In-memory repository

Backs local development and tests when Supabase is not configured.
Seeded with a small demo kitchen.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from kitchencogs.errors import ConflictError, NotFoundError
from kitchencogs.models.common import Unit
from kitchencogs.models.inventory import Ingredient
from kitchencogs.models.purchases import Purchase
from kitchencogs.models.recipes import Recipe, RecipeItem
from kitchencogs.models.sales import CashSession, Sale
from kitchencogs.models.subscription import UserProfile
from kitchencogs.services.repository import Repository


def demo_ingredients() -> List[Ingredient]:
    return [
        Ingredient(id="1", name="Farinha de Trigo", unit=Unit.KG, price_per_unit=5.50,
                   last_package_price=5.50, last_package_size=1, current_stock=10, min_stock_alert=5),
        Ingredient(id="2", name="Frango Desfiado", unit=Unit.KG, price_per_unit=22.00,
                   last_package_price=22.00, last_package_size=1, current_stock=2, min_stock_alert=2),
        Ingredient(id="3", name="Óleo de Soja", unit=Unit.L, price_per_unit=8.00,
                   last_package_price=8.00, last_package_size=1, current_stock=5, min_stock_alert=2),
        Ingredient(id="4", name="Fermento Químico", unit=Unit.G, price_per_unit=18.99 / 500,
                   last_package_price=18.99, last_package_size=500, current_stock=500, min_stock_alert=50),
        Ingredient(id="5", name="Ovos", unit=Unit.UN, price_per_unit=0.75,
                   last_package_price=14.99, last_package_size=20, current_stock=40, min_stock_alert=12),
    ]


def demo_recipes() -> List[Recipe]:
    return [
        Recipe(
            id="1",
            name="Coxinha de Frango",
            yield_amount=20,
            yield_unit="unidades",
            selling_price=8.00,
            indirect_costs=5.00,
            preparation_time_minutes=60,
            items=[
                RecipeItem(ingredient_id="1", quantity=0.5),
                RecipeItem(ingredient_id="2", quantity=0.4),
                RecipeItem(ingredient_id="3", quantity=0.1),
            ],
        )
    ]


class MemoryRepository(Repository):
    """Dict-backed repository."""

    def __init__(self, seed: bool = True):
        self._ingredients: Dict[str, Ingredient] = {}
        self._recipes: Dict[str, Recipe] = {}
        self._purchases: Dict[str, Purchase] = {}
        self._sales: Dict[str, Sale] = {}
        self._cash_sessions: Dict[str, CashSession] = {}
        self._profiles: Dict[str, UserProfile] = {}

        if seed:
            self._ingredients = {i.id: i for i in demo_ingredients()}
            self._recipes = {r.id: r for r in demo_recipes()}

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex[:12]

    # =========================================================================
    # Ingredients
    # =========================================================================

    def list_ingredients(self) -> List[Ingredient]:
        return list(self._ingredients.values())

    def get_ingredient(self, ingredient_id: str) -> Optional[Ingredient]:
        return self._ingredients.get(ingredient_id)

    def create_ingredient(self, ingredient: Ingredient) -> Ingredient:
        stored = ingredient.model_copy(update={"id": ingredient.id or self._new_id(), "version": 1})
        self._ingredients[stored.id] = stored
        return stored

    def update_ingredient(self, ingredient: Ingredient, expected_version: Optional[int] = None) -> Ingredient:
        current = self._ingredients.get(ingredient.id)
        if current is None:
            raise NotFoundError("Ingredient", ingredient.id)

        if expected_version is not None and current.version != expected_version:
            raise ConflictError(
                f"Ingredient {ingredient.id} was modified concurrently",
                details={
                    "ingredient_id": ingredient.id,
                    "expected_version": expected_version,
                    "current_version": current.version,
                },
            )

        stored = ingredient.model_copy(update={
            "version": current.version + 1,
            "updated_at": datetime.utcnow(),
        })
        self._ingredients[stored.id] = stored
        return stored

    def delete_ingredient(self, ingredient_id: str) -> bool:
        return self._ingredients.pop(ingredient_id, None) is not None

    # =========================================================================
    # Recipes
    # =========================================================================

    def list_recipes(self) -> List[Recipe]:
        return list(self._recipes.values())

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return self._recipes.get(recipe_id)

    def create_recipe(self, recipe: Recipe) -> Recipe:
        stored = recipe.model_copy(update={"id": recipe.id or self._new_id()})
        self._recipes[stored.id] = stored
        return stored

    def update_recipe(self, recipe: Recipe) -> Recipe:
        if recipe.id not in self._recipes:
            raise NotFoundError("Recipe", recipe.id)
        self._recipes[recipe.id] = recipe
        return recipe

    def delete_recipe(self, recipe_id: str) -> bool:
        return self._recipes.pop(recipe_id, None) is not None

    # =========================================================================
    # Purchases / Sales
    # =========================================================================

    def list_purchases(self) -> List[Purchase]:
        return sorted(self._purchases.values(), key=lambda p: p.date)

    def create_purchase(self, purchase: Purchase) -> Purchase:
        stored = purchase.model_copy(update={"id": purchase.id or self._new_id()})
        self._purchases[stored.id] = stored
        return stored

    def delete_purchase(self, purchase_id: str) -> bool:
        return self._purchases.pop(purchase_id, None) is not None

    def list_sales(self) -> List[Sale]:
        return sorted(self._sales.values(), key=lambda s: s.date)

    def create_sale(self, sale: Sale) -> Sale:
        stored = sale.model_copy(update={"id": sale.id or self._new_id()})
        self._sales[stored.id] = stored
        return stored

    def delete_sale(self, sale_id: str) -> bool:
        return self._sales.pop(sale_id, None) is not None

    # =========================================================================
    # Cash Sessions
    # =========================================================================

    def list_cash_sessions(self) -> List[CashSession]:
        return sorted(self._cash_sessions.values(), key=lambda s: s.opened_at)

    def save_cash_session(self, session: CashSession) -> CashSession:
        self._cash_sessions[session.id] = session
        return session

    # =========================================================================
    # Profiles
    # =========================================================================

    def add_profile(self, profile: UserProfile) -> UserProfile:
        self._profiles[profile.id] = profile
        return profile

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return self._profiles.get(user_id)

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Optional[UserProfile]:
        profile = self._profiles.get(user_id)
        if profile is None:
            return None
        profile = profile.model_copy(update=updates)
        self._profiles[user_id] = profile
        return profile

    def list_profiles(self) -> List[UserProfile]:
        return list(self._profiles.values())
