"""Tests for the in-memory repository and version-checked writes."""

import pytest

from kitchencogs.errors import ConflictError, NotFoundError
from kitchencogs.models.inventory import Ingredient
from kitchencogs.models.subscription import SubscriptionStatus, UserProfile
from kitchencogs.services.costing import deduct_for_production
from kitchencogs.services.memory_repository import MemoryRepository


class TestSeed:
    def test_demo_data(self):
        repo = MemoryRepository()

        assert len(repo.list_ingredients()) == 5
        assert [r.name for r in repo.list_recipes()] == ["Coxinha de Frango"]

    def test_empty(self, memory_repo):
        assert memory_repo.list_ingredients() == []


class TestIngredientVersions:
    def test_create_assigns_id_and_version(self, memory_repo):
        created = memory_repo.create_ingredient(Ingredient(id="", name="Sal"))

        assert created.id
        assert created.version == 1
        assert memory_repo.get_ingredient(created.id) == created

    def test_update_bumps_version(self, memory_repo):
        created = memory_repo.create_ingredient(Ingredient(id="", name="Sal"))

        updated = memory_repo.update_ingredient(
            created.model_copy(update={"current_stock": 3}), expected_version=1
        )

        assert updated.version == 2
        assert updated.current_stock == 3

    def test_stale_write_conflicts(self, memory_repo):
        created = memory_repo.create_ingredient(Ingredient(id="", name="Sal"))
        memory_repo.update_ingredient(created.model_copy(update={"current_stock": 3}))

        with pytest.raises(ConflictError) as exc_info:
            memory_repo.update_ingredient(created.model_copy(update={"current_stock": 9}), expected_version=1)

        assert exc_info.value.details["current_version"] == 2
        assert memory_repo.get_ingredient(created.id).current_stock == 3

    def test_update_missing(self, memory_repo):
        with pytest.raises(NotFoundError):
            memory_repo.update_ingredient(Ingredient(id="nope", name="x"))

    def test_save_changed_only_writes_changed(self, sample_ingredients, sample_recipe):
        repo = MemoryRepository(seed=False)
        for ing in sample_ingredients:
            repo.create_ingredient(ing)
        before = repo.list_ingredients()

        recipe = sample_recipe.model_copy(update={"items": sample_recipe.items[:1]})
        result = deduct_for_production(recipe, 1, before)
        saved = repo.save_changed_ingredients(before, result.ingredients, result.changed_ids)

        assert [i.id for i in saved] == ["flour"]
        assert repo.get_ingredient("flour").version == 2
        assert repo.get_ingredient("chicken").version == 1

    def test_concurrent_production_second_writer_conflicts(self, sample_ingredients, sample_recipe):
        repo = MemoryRepository(seed=False)
        for ing in sample_ingredients:
            repo.create_ingredient(ing)

        snapshot_a = repo.list_ingredients()
        snapshot_b = repo.list_ingredients()

        first = deduct_for_production(sample_recipe, 1, snapshot_a)
        repo.save_changed_ingredients(snapshot_a, first.ingredients, first.changed_ids)

        second = deduct_for_production(sample_recipe, 1, snapshot_b)
        with pytest.raises(ConflictError):
            repo.save_changed_ingredients(snapshot_b, second.ingredients, second.changed_ids)

        assert repo.get_ingredient("flour").current_stock == pytest.approx(9.5)

    def test_stale_later_ingredient_writes_nothing(self):
        repo = MemoryRepository(seed=True)
        before = repo.list_ingredients()
        result = deduct_for_production(repo.get_recipe("1"), 1, before)
        assert result.success

        oil = repo.get_ingredient("3")
        repo.update_ingredient(oil.model_copy(update={"min_stock_alert": 3}))

        with pytest.raises(ConflictError) as exc_info:
            repo.save_changed_ingredients(before, result.ingredients, result.changed_ids)

        assert exc_info.value.details["ingredient_id"] == "3"
        assert repo.get_ingredient("1").current_stock == pytest.approx(10)
        assert repo.get_ingredient("2").current_stock == pytest.approx(2)
        assert repo.get_ingredient("3").current_stock == pytest.approx(5)
        assert repo.get_ingredient("1").version == 1

    def test_conflict_during_writes_restores_earlier_ones(self):
        class RacingRepository(MemoryRepository):
            """Another writer sneaks in right before the oil row is written."""

            def update_ingredient(self, ingredient, expected_version=None):
                if ingredient.id == "3" and not getattr(self, "raced", False):
                    self.raced = True
                    current = self.get_ingredient("3")
                    super().update_ingredient(current.model_copy(update={"min_stock_alert": 3}))
                return super().update_ingredient(ingredient, expected_version)

        repo = RacingRepository(seed=True)
        before = repo.list_ingredients()
        result = deduct_for_production(repo.get_recipe("1"), 1, before)

        with pytest.raises(ConflictError):
            repo.save_changed_ingredients(before, result.ingredients, result.changed_ids)

        assert repo.get_ingredient("1").current_stock == pytest.approx(10)
        assert repo.get_ingredient("2").current_stock == pytest.approx(2)
        assert repo.get_ingredient("3").current_stock == pytest.approx(5)
        assert repo.get_ingredient("3").min_stock_alert == 3


class TestProfiles:
    def test_update_missing_profile_returns_none(self, memory_repo):
        assert memory_repo.update_profile("ghost", {"full_name": "x"}) is None

    def test_update_profile(self, memory_repo):
        memory_repo.add_profile(UserProfile(id="u1", email="a@b.com"))

        updated = memory_repo.update_profile("u1", {"subscription_status": SubscriptionStatus.BLOCKED})

        assert updated.subscription_status == SubscriptionStatus.BLOCKED
        assert [p.id for p in memory_repo.list_profiles()] == ["u1"]
