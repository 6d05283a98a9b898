"""
Repository interface

Storage contract the application layer talks to. The costing functions
never see it: they take and return snapshots, and the caller persists the
ingredients they report as changed.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from kitchencogs.errors import ConflictError, KitchenError, NotFoundError
from kitchencogs.models.inventory import Ingredient
from kitchencogs.models.purchases import Purchase
from kitchencogs.models.recipes import Recipe
from kitchencogs.models.sales import CashSession, Sale
from kitchencogs.models.subscription import UserProfile

logger = logging.getLogger(__name__)


class Repository:
    """Base storage interface. Subclasses implement the primitives."""

    # =========================================================================
    # Ingredients
    # =========================================================================

    def list_ingredients(self) -> List[Ingredient]:
        raise NotImplementedError

    def get_ingredient(self, ingredient_id: str) -> Optional[Ingredient]:
        return next((i for i in self.list_ingredients() if i.id == ingredient_id), None)

    def create_ingredient(self, ingredient: Ingredient) -> Ingredient:
        raise NotImplementedError

    def update_ingredient(self, ingredient: Ingredient, expected_version: Optional[int] = None) -> Ingredient:
        """
        Write an ingredient and bump its version.

        When `expected_version` is given and the stored row has moved on,
        raises ConflictError.
        """
        raise NotImplementedError

    def delete_ingredient(self, ingredient_id: str) -> bool:
        raise NotImplementedError

    def save_changed_ingredients(
        self,
        before: List[Ingredient],
        after: List[Ingredient],
        changed_ids: Iterable[str],
    ) -> List[Ingredient]:
        """
        Persist only the ingredients a core operation changed, all or none.

        Every stored version is checked against the snapshot the change was
        computed from before the first write. If a write still loses a race,
        the ingredients already written are put back to their snapshot and
        the ConflictError propagates.
        """
        before_by_id = {i.id: i for i in before}
        after_by_id = {i.id: i for i in after}
        changed_ids = list(changed_ids)

        for ingredient_id in changed_ids:
            old = before_by_id.get(ingredient_id)
            if old is None or ingredient_id not in after_by_id:
                raise NotFoundError("Ingredient", ingredient_id)
            current = self.get_ingredient(ingredient_id)
            if current is None:
                raise NotFoundError("Ingredient", ingredient_id)
            if current.version != old.version:
                raise ConflictError(
                    f"Ingredient {ingredient_id} was modified concurrently",
                    details={
                        "ingredient_id": ingredient_id,
                        "expected_version": old.version,
                        "current_version": current.version,
                    },
                )

        saved: List[Ingredient] = []
        try:
            for ingredient_id in changed_ids:
                saved.append(self.update_ingredient(
                    after_by_id[ingredient_id],
                    expected_version=before_by_id[ingredient_id].version,
                ))
        except ConflictError:
            self._restore_ingredients(saved, before_by_id)
            raise

        logger.info(f"Saved {len(saved)} changed ingredient(s)")
        return saved

    def _restore_ingredients(self, saved: List[Ingredient], before_by_id: Dict[str, Ingredient]):
        """Undo the writes of an interrupted save."""
        for written in saved:
            try:
                self.update_ingredient(before_by_id[written.id], expected_version=written.version)
            except KitchenError as e:
                logger.error(f"Could not restore ingredient {written.id} after conflict: {e.message}")
        logger.warning(f"Rolled back {len(saved)} ingredient write(s) after a conflict")

    # =========================================================================
    # Recipes
    # =========================================================================

    def list_recipes(self) -> List[Recipe]:
        raise NotImplementedError

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return next((r for r in self.list_recipes() if r.id == recipe_id), None)

    def create_recipe(self, recipe: Recipe) -> Recipe:
        raise NotImplementedError

    def update_recipe(self, recipe: Recipe) -> Recipe:
        raise NotImplementedError

    def delete_recipe(self, recipe_id: str) -> bool:
        raise NotImplementedError

    # =========================================================================
    # Purchases / Sales
    # =========================================================================

    def list_purchases(self) -> List[Purchase]:
        raise NotImplementedError

    def create_purchase(self, purchase: Purchase) -> Purchase:
        raise NotImplementedError

    def delete_purchase(self, purchase_id: str) -> bool:
        raise NotImplementedError

    def list_sales(self) -> List[Sale]:
        raise NotImplementedError

    def create_sale(self, sale: Sale) -> Sale:
        raise NotImplementedError

    def delete_sale(self, sale_id: str) -> bool:
        raise NotImplementedError

    # =========================================================================
    # Cash Sessions
    # =========================================================================

    def list_cash_sessions(self) -> List[CashSession]:
        raise NotImplementedError

    def save_cash_session(self, session: CashSession) -> CashSession:
        raise NotImplementedError

    # =========================================================================
    # Profiles
    # =========================================================================

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Optional[UserProfile]:
        raise NotImplementedError

    def list_profiles(self) -> List[UserProfile]:
        raise NotImplementedError
