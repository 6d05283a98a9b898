"""Recipe endpoints: technical sheets, costing and production."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from api.dependencies import get_repository
from api.middleware.errors import InsufficientStockError
from kitchencogs.errors import NotFoundError
from kitchencogs.models.recipes import (
    ProductionRequest,
    ProductionResult,
    Recipe,
    RecipeCost,
    RecipeCreate,
)
from kitchencogs.services.costing import compute_recipe_cost, deduct_for_production
from kitchencogs.services.repository import Repository

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_or_404(repo: Repository, recipe_id: str) -> Recipe:
    recipe = repo.get_recipe(recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe", recipe_id)
    return recipe


@router.get("", response_model=List[Recipe])
async def list_recipes(repo: Repository = Depends(get_repository)):
    return repo.list_recipes()


@router.post("", response_model=Recipe, status_code=201)
async def create_recipe(request: RecipeCreate, repo: Repository = Depends(get_repository)):
    """Create a recipe (technical sheet)."""
    created = repo.create_recipe(Recipe(id="", **request.model_dump()))
    logger.info(f"Recipe created: {created.id} ({created.name})")
    return created


@router.get("/{recipe_id}", response_model=Recipe)
async def get_recipe(recipe_id: str, repo: Repository = Depends(get_repository)):
    return _get_or_404(repo, recipe_id)


@router.put("/{recipe_id}", response_model=Recipe)
async def update_recipe(
    recipe_id: str,
    request: RecipeCreate,
    repo: Repository = Depends(get_repository),
):
    _get_or_404(repo, recipe_id)
    return repo.update_recipe(Recipe(id=recipe_id, **request.model_dump()))


@router.delete("/{recipe_id}")
async def delete_recipe(recipe_id: str, repo: Repository = Depends(get_repository)):
    if not repo.delete_recipe(recipe_id):
        raise NotFoundError("Recipe", recipe_id)
    return {"message": "Recipe deleted", "id": recipe_id}


@router.get("/{recipe_id}/cost", response_model=RecipeCost)
async def get_recipe_cost(recipe_id: str, repo: Repository = Depends(get_repository)):
    """
    Cost breakdown at current ingredient prices.

    Returns direct cost, batch cost with indirect costs, cost and profit
    per yielded unit, and margin over the selling price.
    """
    recipe = _get_or_404(repo, recipe_id)
    return compute_recipe_cost(recipe, repo.list_ingredients())


@router.post("/{recipe_id}/produce", response_model=ProductionResult)
async def produce_recipe(
    recipe_id: str,
    request: Optional[ProductionRequest] = None,
    repo: Repository = Depends(get_repository),
):
    """
    Produce batches of a recipe, deducting ingredients from stock.

    All or nothing: if any ingredient is short nothing is deducted and the
    response is 409 INSUFFICIENT_STOCK listing the shortages.
    """
    recipe = _get_or_404(repo, recipe_id)
    batch_count = request.batch_count if request else 1
    before = repo.list_ingredients()

    result = deduct_for_production(recipe, batch_count, before)
    if not result.success:
        raise InsufficientStockError(
            recipe_id,
            [s.model_dump() for s in result.shortages],
        )

    saved = repo.save_changed_ingredients(before, result.ingredients, result.changed_ids)
    saved_by_id = {i.id: i for i in saved}

    logger.info(f"Produced {batch_count} batch(es) of {recipe.name}")
    return result.model_copy(update={
        "ingredients": [saved_by_id.get(i.id, i) for i in result.ingredients],
    })
