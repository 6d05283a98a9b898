"""
Supabase Repository

PostgreSQL database operations via Supabase.
All queries are scoped by user_id; each account sees only its own kitchen.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from supabase import Client

from api.supabase.client import kitchen_data_client
from kitchencogs.errors import ConflictError, NotFoundError
from kitchencogs.models.inventory import Ingredient
from kitchencogs.models.purchases import Purchase
from kitchencogs.models.recipes import Recipe
from kitchencogs.models.sales import CashSession, Sale
from kitchencogs.models.subscription import UserProfile
from kitchencogs.services.repository import Repository

logger = logging.getLogger(__name__)


def _num(value: Any, default: float = 0.0) -> float:
    """Coerce a numeric column, treating NULL and junk as the default."""
    try:
        return float(value) if value is not None else default
    except (TypeError, ValueError):
        return default


class SupabaseRepository(Repository):
    """
    Supabase PostgreSQL repository.

    All operations are scoped by user_id.
    """

    def __init__(self, user_id: str, client: Optional[Client] = None):
        """
        Initialize repository with user context.

        Args:
            user_id: Auth user ID owning the rows
            client: Supabase client, defaults to the kitchen data client
        """
        self.user_id = str(user_id)
        self.client = client or kitchen_data_client()

    def _table(self, name: str):
        return self.client.table(name)

    def _delete(self, table: str, row_id: str) -> bool:
        result = self._table(table).delete().eq("id", row_id).eq("user_id", self.user_id).execute()
        return bool(result.data)

    # =========================================================================
    # Ingredients
    # =========================================================================

    def _row_to_ingredient(self, row: Dict[str, Any]) -> Ingredient:
        return Ingredient(
            id=str(row["id"]),
            name=row.get("name") or "Sem Nome",
            unit=row.get("unit") or "un",
            price_per_unit=_num(row.get("price_per_unit")),
            last_package_price=_num(row.get("last_package_price")),
            last_package_size=_num(row.get("last_package_size"), 1.0) or 1.0,
            current_stock=_num(row.get("current_stock")),
            min_stock_alert=_num(row.get("min_stock_alert")),
            updated_at=row.get("updated_at") or datetime.utcnow(),
            version=int(row.get("version") or 0),
        )

    def _ingredient_payload(self, ingredient: Ingredient) -> Dict[str, Any]:
        return {
            "name": ingredient.name,
            "unit": ingredient.unit.value,
            "price_per_unit": ingredient.price_per_unit,
            "last_package_price": ingredient.last_package_price,
            "last_package_size": ingredient.last_package_size,
            "current_stock": ingredient.current_stock,
            "min_stock_alert": ingredient.min_stock_alert,
            "updated_at": datetime.utcnow().isoformat(),
        }

    def list_ingredients(self) -> List[Ingredient]:
        result = self._table("ingredients").select("*").eq("user_id", self.user_id).order("name").execute()
        return [self._row_to_ingredient(row) for row in result.data or []]

    def _ingredient_row(self, ingredient_id: str) -> Optional[Dict[str, Any]]:
        result = self._table("ingredients").select("*").eq("id", ingredient_id).eq("user_id", self.user_id).execute()
        return result.data[0] if result.data else None

    def get_ingredient(self, ingredient_id: str) -> Optional[Ingredient]:
        row = self._ingredient_row(ingredient_id)
        return self._row_to_ingredient(row) if row else None

    def create_ingredient(self, ingredient: Ingredient) -> Ingredient:
        payload = self._ingredient_payload(ingredient)
        payload["user_id"] = self.user_id
        payload["version"] = 1

        result = self._table("ingredients").insert(payload).execute()
        created = self._row_to_ingredient(result.data[0])
        logger.info(f"Created ingredient {created.id} for user {self.user_id}")
        return created

    def update_ingredient(self, ingredient: Ingredient, expected_version: Optional[int] = None) -> Ingredient:
        row = self._ingredient_row(ingredient.id)
        if row is None:
            raise NotFoundError("Ingredient", ingredient.id)
        current = self._row_to_ingredient(row)

        base_version = current.version if expected_version is None else expected_version
        payload = self._ingredient_payload(ingredient)
        payload["version"] = base_version + 1

        # Compare-and-set on the version column
        query = (
            self._table("ingredients")
            .update(payload)
            .eq("id", ingredient.id)
            .eq("user_id", self.user_id)
        )
        if row.get("version") is None and base_version == 0:
            # Rows written before versioning read back as 0; NULL never equals 0
            query = query.is_("version", "null")
        else:
            query = query.eq("version", base_version)
        result = query.execute()

        if not result.data:
            raise ConflictError(
                f"Ingredient {ingredient.id} was modified concurrently",
                details={
                    "ingredient_id": ingredient.id,
                    "expected_version": base_version,
                    "current_version": current.version,
                },
            )

        return self._row_to_ingredient(result.data[0])

    def delete_ingredient(self, ingredient_id: str) -> bool:
        return self._delete("ingredients", ingredient_id)

    # =========================================================================
    # Recipes
    # =========================================================================

    def _row_to_recipe(self, row: Dict[str, Any]) -> Recipe:
        return Recipe(
            id=str(row["id"]),
            name=row.get("name") or "",
            items=[
                {"ingredient_id": str(i.get("ingredient_id", i.get("ingredientId", ""))),
                 "quantity": _num(i.get("quantity"))}
                for i in row.get("items") or []
            ],
            yield_amount=_num(row.get("yield_amount")),
            yield_unit=row.get("yield_unit") or "unidades",
            selling_price=_num(row.get("selling_price")),
            indirect_costs=_num(row.get("indirect_costs")),
            preparation_time_minutes=int(_num(row.get("preparation_time_minutes"))),
        )

    def _recipe_payload(self, recipe: Recipe) -> Dict[str, Any]:
        return {
            "name": recipe.name,
            "items": [i.model_dump() for i in recipe.items],
            "yield_amount": recipe.yield_amount,
            "yield_unit": recipe.yield_unit,
            "selling_price": recipe.selling_price,
            "indirect_costs": recipe.indirect_costs,
            "preparation_time_minutes": recipe.preparation_time_minutes,
        }

    def list_recipes(self) -> List[Recipe]:
        result = self._table("recipes").select("*").eq("user_id", self.user_id).order("name").execute()
        return [self._row_to_recipe(row) for row in result.data or []]

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        result = self._table("recipes").select("*").eq("id", recipe_id).eq("user_id", self.user_id).execute()
        if not result.data:
            return None
        return self._row_to_recipe(result.data[0])

    def create_recipe(self, recipe: Recipe) -> Recipe:
        payload = self._recipe_payload(recipe)
        payload["user_id"] = self.user_id
        result = self._table("recipes").insert(payload).execute()
        return self._row_to_recipe(result.data[0])

    def update_recipe(self, recipe: Recipe) -> Recipe:
        result = (
            self._table("recipes")
            .update(self._recipe_payload(recipe))
            .eq("id", recipe.id)
            .eq("user_id", self.user_id)
            .execute()
        )
        if not result.data:
            raise NotFoundError("Recipe", recipe.id)
        return self._row_to_recipe(result.data[0])

    def delete_recipe(self, recipe_id: str) -> bool:
        return self._delete("recipes", recipe_id)

    # =========================================================================
    # Purchases
    # =========================================================================

    def _row_to_purchase(self, row: Dict[str, Any]) -> Purchase:
        return Purchase(
            id=str(row["id"]),
            date=row["date"],
            items=row.get("items") or [],
            total=_num(row.get("total")),
            notes=row.get("notes"),
        )

    def list_purchases(self) -> List[Purchase]:
        result = self._table("purchases").select("*").eq("user_id", self.user_id).order("date").execute()
        return [self._row_to_purchase(row) for row in result.data or []]

    def create_purchase(self, purchase: Purchase) -> Purchase:
        payload = {
            "user_id": self.user_id,
            "date": purchase.date.isoformat(),
            "items": [i.model_dump() for i in purchase.items],
            "total": purchase.total,
            "notes": purchase.notes,
        }
        result = self._table("purchases").insert(payload).execute()
        return self._row_to_purchase(result.data[0])

    def delete_purchase(self, purchase_id: str) -> bool:
        return self._delete("purchases", purchase_id)

    # =========================================================================
    # Sales
    # =========================================================================

    def _row_to_sale(self, row: Dict[str, Any]) -> Sale:
        return Sale(
            id=str(row["id"]),
            date=row["date"],
            items=row.get("items") or [],
            total=_num(row.get("total")),
            payment_method=row.get("payment_method") or "Dinheiro",
            profit=_num(row.get("profit")),
        )

    def list_sales(self) -> List[Sale]:
        result = self._table("sales").select("*").eq("user_id", self.user_id).order("date").execute()
        return [self._row_to_sale(row) for row in result.data or []]

    def create_sale(self, sale: Sale) -> Sale:
        payload = {
            "user_id": self.user_id,
            "date": sale.date.isoformat(),
            "items": [i.model_dump() for i in sale.items],
            "total": sale.total,
            "payment_method": sale.payment_method.value,
            "profit": sale.profit,
        }
        result = self._table("sales").insert(payload).execute()
        return self._row_to_sale(result.data[0])

    def delete_sale(self, sale_id: str) -> bool:
        return self._delete("sales", sale_id)

    # =========================================================================
    # Cash Sessions
    # =========================================================================

    def list_cash_sessions(self) -> List[CashSession]:
        result = self._table("cash_sessions").select("*").eq("user_id", self.user_id).order("opened_at").execute()
        return [CashSession.model_validate(row) for row in result.data or []]

    def save_cash_session(self, session: CashSession) -> CashSession:
        payload = session.model_dump(mode="json")
        payload["user_id"] = self.user_id
        self._table("cash_sessions").upsert(payload, on_conflict="id").execute()
        return session

    # =========================================================================
    # Profiles
    # =========================================================================

    def _row_to_profile(self, row: Dict[str, Any]) -> UserProfile:
        return UserProfile(
            id=str(row["id"]),
            email=row.get("email") or "",
            full_name=row.get("full_name"),
            phone=row.get("phone"),
            subscription_status=row.get("subscription_status") or "active",
            subscription_expires_at=row.get("subscription_expires_at") or None,
            is_admin=bool(row.get("is_admin")),
        )

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        result = self._table("profiles").select("*").eq("id", str(user_id)).execute()
        if not result.data:
            return None
        return self._row_to_profile(result.data[0])

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Optional[UserProfile]:
        payload = {
            k: (v.isoformat() if isinstance(v, datetime) else getattr(v, "value", v))
            for k, v in updates.items()
        }
        result = self._table("profiles").update(payload).eq("id", str(user_id)).execute()
        if not result.data:
            return None
        return self._row_to_profile(result.data[0])

    def list_profiles(self) -> List[UserProfile]:
        result = self._table("profiles").select("*").order("email").execute()
        return [self._row_to_profile(row) for row in result.data or []]
