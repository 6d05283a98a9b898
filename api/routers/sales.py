"""Sales endpoints: point of sale checkout and history."""

import logging
from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_repository
from kitchencogs.errors import NotFoundError
from kitchencogs.models.common import PaginationParams
from kitchencogs.models.sales import Sale, SaleCreate, SaleReceipt
from kitchencogs.services.repository import Repository
from kitchencogs.services.sales_service import build_sale

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[Sale])
async def list_sales(
    pagination: PaginationParams = Depends(),
    repo: Repository = Depends(get_repository),
):
    """List sales, newest first."""
    sales = list(reversed(repo.list_sales()))
    return sales[pagination.offset:pagination.offset + pagination.page_size]


@router.post("", response_model=SaleReceipt, status_code=201)
async def create_sale(request: SaleCreate, repo: Repository = Depends(get_repository)):
    """
    Check out a cart.

    Each line snapshots the recipe's current unit cost, so profit on past
    sales does not move when ingredient prices change. For cash payments
    with `amount_given`, the change due is returned. Stock is not touched;
    it is deducted when batches are produced.
    """
    receipt = build_sale(
        request.lines,
        repo.list_recipes(),
        repo.list_ingredients(),
        payment_method=request.payment_method,
        amount_given=request.amount_given,
    )
    stored = repo.create_sale(receipt.sale)
    return SaleReceipt(sale=stored, change=receipt.change)


@router.delete("/{sale_id}")
async def delete_sale(sale_id: str, repo: Repository = Depends(get_repository)):
    if not repo.delete_sale(sale_id):
        raise NotFoundError("Sale", sale_id)
    return {"message": "Sale deleted", "id": sale_id}
