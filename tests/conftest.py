"""Pytest configuration and fixtures."""

import os
from datetime import datetime
from typing import Generator, List

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app
os.environ["DEBUG"] = "true"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_ANON_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""

from kitchencogs.models.common import Unit  # noqa: E402
from kitchencogs.models.inventory import Ingredient  # noqa: E402
from kitchencogs.models.recipes import Recipe, RecipeItem  # noqa: E402
from kitchencogs.services.memory_repository import MemoryRepository  # noqa: E402


@pytest.fixture
def api_client() -> Generator[TestClient, None, None]:
    """Create a FastAPI test client backed by a fresh in-memory repository."""
    from api.dependencies import get_memory_repository
    from api.main import app

    get_memory_repository.cache_clear()
    with TestClient(app) as client:
        yield client
    get_memory_repository.cache_clear()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 15, 14, 30)


@pytest.fixture
def sample_ingredients() -> List[Ingredient]:
    """Flour, chicken and oil, as used by the coxinha recipe."""
    return [
        Ingredient(id="flour", name="Farinha de Trigo", unit=Unit.KG, price_per_unit=5.50,
                   last_package_price=5.50, last_package_size=1, current_stock=10, min_stock_alert=5,
                   version=1),
        Ingredient(id="chicken", name="Frango Desfiado", unit=Unit.KG, price_per_unit=22.00,
                   last_package_price=22.00, last_package_size=1, current_stock=2, min_stock_alert=2,
                   version=1),
        Ingredient(id="oil", name="Óleo de Soja", unit=Unit.L, price_per_unit=8.00,
                   last_package_price=8.00, last_package_size=1, current_stock=5, min_stock_alert=2,
                   version=1),
    ]


@pytest.fixture
def sample_recipe() -> Recipe:
    """20 coxinhas per batch, sold at 8.00 each."""
    return Recipe(
        id="coxinha",
        name="Coxinha de Frango",
        yield_amount=20,
        selling_price=8.00,
        indirect_costs=5.00,
        preparation_time_minutes=60,
        items=[
            RecipeItem(ingredient_id="flour", quantity=0.5),
            RecipeItem(ingredient_id="chicken", quantity=0.4),
            RecipeItem(ingredient_id="oil", quantity=0.1),
        ],
    )


@pytest.fixture
def memory_repo() -> MemoryRepository:
    """Empty in-memory repository."""
    return MemoryRepository(seed=False)
