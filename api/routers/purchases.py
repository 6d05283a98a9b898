"""Purchase endpoints: record purchases and scan receipts."""

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from api.config import get_settings
from api.dependencies import get_receipt_service, get_repository
from api.middleware.errors import APIError, ProcessingError
from kitchencogs.errors import NotFoundError, ValidationError
from kitchencogs.models.common import PaginationParams
from kitchencogs.models.inventory import Ingredient
from kitchencogs.models.purchases import (
    LineOutcome,
    Purchase,
    PurchaseCreate,
    ScannedReceipt,
)
from kitchencogs.services.costing import process_purchase
from kitchencogs.services.receipt_service import ReceiptService
from kitchencogs.services.repository import Repository

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/heic"}


class PurchaseRecorded(BaseModel):
    """A recorded purchase and what it did to stock."""
    purchase: Purchase
    outcomes: List[LineOutcome]
    updated_ingredients: List[Ingredient]


class ReceiptScan(BaseModel):
    """Raw scan plus a draft purchase for the operator to review."""
    scanned: ScannedReceipt
    draft: PurchaseCreate


@router.get("", response_model=List[Purchase])
async def list_purchases(
    pagination: PaginationParams = Depends(),
    repo: Repository = Depends(get_repository),
):
    """List purchases, newest first."""
    purchases = list(reversed(repo.list_purchases()))
    return purchases[pagination.offset:pagination.offset + pagination.page_size]


@router.post("", response_model=PurchaseRecorded, status_code=201)
async def create_purchase(
    request: PurchaseCreate,
    repo: Repository = Depends(get_repository),
):
    """
    Record a purchase.

    Lines linked to an ingredient add to its stock and move its unit price
    by weighted average. Lines without an ingredient are plain expenses:
    they count toward the total and leave stock alone.
    """
    purchase = Purchase(
        id=f"pur_{uuid.uuid4().hex[:12]}",
        date=request.date,
        items=request.items,
        total=request.total,
        notes=request.notes,
    )

    before = repo.list_ingredients()
    result = process_purchase(purchase, before)

    # Stock first; a stale ingredient aborts before the purchase is stored
    saved = repo.save_changed_ingredients(before, result.ingredients, result.changed_ids)
    stored = repo.create_purchase(purchase)

    logger.info(
        f"Purchase {stored.id}: {len(result.applied)} line(s) applied, "
        f"{len(result.ignored)} ignored, total {stored.total:.2f}"
    )
    return PurchaseRecorded(purchase=stored, outcomes=result.outcomes, updated_ingredients=saved)


@router.delete("/{purchase_id}")
async def delete_purchase(purchase_id: str, repo: Repository = Depends(get_repository)):
    """
    Delete a purchase record.

    Stock and prices are not rolled back.
    """
    if not repo.delete_purchase(purchase_id):
        raise NotFoundError("Purchase", purchase_id)
    return {"message": "Purchase deleted", "id": purchase_id}


@router.post("/scan", response_model=ReceiptScan)
async def scan_receipt(
    image: UploadFile = File(..., description="Photo of the receipt"),
    repo: Repository = Depends(get_repository),
    receipts: ReceiptService = Depends(get_receipt_service),
):
    """
    Read a receipt photo into a draft purchase.

    Nothing is recorded; review the draft and POST it to /purchases.
    """
    settings = get_settings()

    if not receipts.enabled:
        raise APIError(
            code="RECEIPT_SCANNING_DISABLED",
            message="Receipt scanning is not configured. Set OPENAI_API_KEY.",
            status_code=503,
        )

    content_type = image.content_type or "image/jpeg"
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError(
            f"Unsupported image type: {content_type}",
            details={"allowed": sorted(ALLOWED_IMAGE_TYPES)},
        )

    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if image.size is not None and image.size > max_bytes:
        raise ValidationError(
            f"Image larger than {settings.max_upload_size_mb} MB",
            details={"size": image.size},
        )

    # Size is unknown for some clients until read
    content = await image.read()
    if len(content) > max_bytes:
        raise ValidationError(
            f"Image larger than {settings.max_upload_size_mb} MB",
            details={"size": len(content)},
        )

    scanned = receipts.scan_receipt(content, content_type)
    if scanned is None:
        raise ProcessingError("Could not read the receipt. Try a sharper photo or enter it by hand.")

    draft = receipts.draft_purchase(scanned, repo.list_ingredients())
    return ReceiptScan(scanned=scanned, draft=draft)
