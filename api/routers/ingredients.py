"""Ingredient endpoints: stock, unit prices and low-stock alerts."""

import logging
from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_report_service, get_repository
from kitchencogs.errors import NotFoundError
from kitchencogs.models.inventory import (
    Ingredient,
    IngredientCreate,
    IngredientUpdate,
    LowStockAlert,
)
from kitchencogs.services.costing import initial_unit_price
from kitchencogs.services.report_service import ReportService
from kitchencogs.services.repository import Repository

logger = logging.getLogger(__name__)

router = APIRouter()

PACKAGE_FIELDS = ("last_package_price", "last_package_size")


@router.get("", response_model=List[Ingredient])
async def list_ingredients(repo: Repository = Depends(get_repository)):
    """List all ingredients."""
    return repo.list_ingredients()


@router.post("", response_model=Ingredient, status_code=201)
async def create_ingredient(
    request: IngredientCreate,
    repo: Repository = Depends(get_repository),
):
    """
    Register an ingredient by hand.

    The unit price starts as package price over package size; purchases
    move it by weighted average from then on.
    """
    ingredient = Ingredient(
        id="",
        name=request.name,
        unit=request.unit,
        price_per_unit=initial_unit_price(request.last_package_price, request.last_package_size),
        last_package_price=request.last_package_price,
        last_package_size=request.last_package_size,
        current_stock=request.current_stock,
        min_stock_alert=request.min_stock_alert,
    )
    created = repo.create_ingredient(ingredient)
    logger.info(f"Ingredient created: {created.id} ({created.name})")
    return created


@router.get("/alerts", response_model=List[LowStockAlert])
async def low_stock_alerts(
    repo: Repository = Depends(get_repository),
    reports: ReportService = Depends(get_report_service),
):
    """Ingredients at or below their minimum stock."""
    return reports.low_stock_alerts(repo.list_ingredients())


@router.get("/{ingredient_id}", response_model=Ingredient)
async def get_ingredient(ingredient_id: str, repo: Repository = Depends(get_repository)):
    ingredient = repo.get_ingredient(ingredient_id)
    if ingredient is None:
        raise NotFoundError("Ingredient", ingredient_id)
    return ingredient


@router.put("/{ingredient_id}", response_model=Ingredient)
async def update_ingredient(
    ingredient_id: str,
    request: IngredientUpdate,
    repo: Repository = Depends(get_repository),
):
    """
    Edit an ingredient.

    Editing the package price or size resets the unit price to package
    price over package size. Send `version` to reject the edit if the
    ingredient changed since it was read.
    """
    current = repo.get_ingredient(ingredient_id)
    if current is None:
        raise NotFoundError("Ingredient", ingredient_id)

    changes = request.model_dump(exclude_unset=True, exclude={"version"})
    updated = current.model_copy(update=changes)

    if any(field in changes for field in PACKAGE_FIELDS):
        updated = updated.model_copy(update={
            "price_per_unit": initial_unit_price(updated.last_package_price, updated.last_package_size),
        })

    expected = request.version if request.version is not None else current.version
    return repo.update_ingredient(updated, expected_version=expected)


@router.delete("/{ingredient_id}")
async def delete_ingredient(ingredient_id: str, repo: Repository = Depends(get_repository)):
    """
    Delete an ingredient.

    Recipes that use it keep the reference; it then costs zero and shows
    up in their `missing_ingredient_ids`.
    """
    if not repo.delete_ingredient(ingredient_id):
        raise NotFoundError("Ingredient", ingredient_id)
    return {"message": "Ingredient deleted", "id": ingredient_id}
