"""Tests for the Supabase repository against a fake query builder."""

from types import SimpleNamespace

import pytest

from api.supabase.repository import SupabaseRepository
from kitchencogs.errors import ConflictError, NotFoundError
from kitchencogs.models.inventory import Ingredient


class FakeQuery:
    """Just enough of the PostgREST builder to run the repository against lists."""

    def __init__(self, rows: list):
        self.rows = rows
        self.filters = []
        self.action = "select"
        self.payload = None

    def select(self, *_):
        return self

    def order(self, *_):
        return self

    def eq(self, column, value):
        self.filters.append((column, str(value)))
        return self

    def is_(self, column, value):
        assert value == "null"
        self.filters.append((column, None))
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def _matches(self, row):
        return all(
            row.get(col) is None if val is None else str(row.get(col)) == val
            for col, val in self.filters
        )

    def execute(self):
        if self.action == "insert":
            row = dict(self.payload, id=len(self.rows) + 1)
            self.rows.append(row)
            return SimpleNamespace(data=[row])

        matched = [r for r in self.rows if self._matches(r)]
        if self.action == "update":
            for row in matched:
                row.update(self.payload)
        elif self.action == "delete":
            for row in matched:
                self.rows.remove(row)
        return SimpleNamespace(data=[dict(r) for r in matched])


class FakeClient:
    def __init__(self):
        self.tables = {}

    def table(self, name):
        return FakeQuery(self.tables.setdefault(name, []))


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def repo(client):
    return SupabaseRepository("user-1", client=client)


class TestSupabaseIngredients:
    def test_rows_are_scoped_and_coerced(self, client, repo):
        client.tables["ingredients"] = [
            {"id": 7, "user_id": "user-1", "name": None, "unit": "kg", "price_per_unit": None,
             "last_package_size": None, "current_stock": "3.5", "version": 2},
            {"id": 8, "user_id": "someone-else", "name": "Sal", "unit": "kg"},
        ]

        ingredients = repo.list_ingredients()

        assert len(ingredients) == 1
        ing = ingredients[0]
        assert ing.id == "7"
        assert ing.name == "Sem Nome"
        assert ing.price_per_unit == 0
        assert ing.last_package_size == 1
        assert ing.current_stock == 3.5
        assert ing.version == 2

    def test_create_starts_at_version_one(self, client, repo):
        created = repo.create_ingredient(Ingredient(id="", name="Farinha", current_stock=10))

        assert created.version == 1
        assert client.tables["ingredients"][0]["user_id"] == "user-1"

    def test_update_is_compare_and_set(self, repo):
        created = repo.create_ingredient(Ingredient(id="", name="Farinha", current_stock=10))

        updated = repo.update_ingredient(created.model_copy(update={"current_stock": 9}), expected_version=1)
        assert updated.version == 2
        assert updated.current_stock == 9

        with pytest.raises(ConflictError) as exc_info:
            repo.update_ingredient(created.model_copy(update={"current_stock": 1}), expected_version=1)
        assert exc_info.value.details["current_version"] == 2
        assert repo.get_ingredient(created.id).current_stock == 9

    def test_update_missing(self, repo):
        with pytest.raises(NotFoundError):
            repo.update_ingredient(Ingredient(id="99", name="x"))

    def test_row_without_version_can_be_updated(self, client, repo):
        client.tables["ingredients"] = [
            {"id": 5, "user_id": "user-1", "name": "Sal", "unit": "kg", "current_stock": 4, "version": None},
        ]
        loaded = repo.get_ingredient("5")
        assert loaded.version == 0

        updated = repo.update_ingredient(loaded.model_copy(update={"current_stock": 3}), expected_version=0)

        assert updated.version == 1
        assert client.tables["ingredients"][0]["current_stock"] == 3

    def test_row_without_version_still_rejects_other_versions(self, client, repo):
        client.tables["ingredients"] = [
            {"id": 5, "user_id": "user-1", "name": "Sal", "unit": "kg", "current_stock": 4, "version": None},
        ]

        with pytest.raises(ConflictError):
            repo.update_ingredient(Ingredient(id="5", name="Sal", current_stock=1), expected_version=2)
        assert client.tables["ingredients"][0]["current_stock"] == 4

    def test_save_changed_with_stale_second_ingredient_writes_nothing(self, client, repo):
        flour = repo.create_ingredient(Ingredient(id="", name="Farinha", current_stock=10))
        oil = repo.create_ingredient(Ingredient(id="", name="Oleo", current_stock=5))
        before = repo.list_ingredients()
        after = [i.model_copy(update={"current_stock": i.current_stock - 1}) for i in before]

        repo.update_ingredient(oil.model_copy(update={"min_stock_alert": 2}))

        with pytest.raises(ConflictError):
            repo.save_changed_ingredients(before, after, [flour.id, oil.id])

        assert repo.get_ingredient(flour.id).current_stock == 10
        assert repo.get_ingredient(flour.id).version == 1
        assert repo.get_ingredient(oil.id).current_stock == 5


class TestSupabaseProfiles:
    def test_update_missing_profile_returns_none(self, repo):
        assert repo.update_profile("ghost", {"full_name": "Ana"}) is None

    def test_profile_defaults(self, client, repo):
        client.tables["profiles"] = [{"id": "user-1", "email": "a@b.com", "subscription_status": None}]

        profile = repo.get_profile("user-1")

        assert profile.subscription_status.value == "active"
        assert profile.is_admin is False
