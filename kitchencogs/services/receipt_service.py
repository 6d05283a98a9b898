"""
Receipt Service

Reads purchase receipts from photos with a multimodal model and links the
lines it finds to known ingredients.
"""

import base64
import json
import logging
import re
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError
from rapidfuzz import fuzz, process

from kitchencogs.models.inventory import Ingredient
from kitchencogs.models.purchases import PurchaseCreate, PurchaseItem, ScannedReceipt

logger = logging.getLogger(__name__)

RECEIPT_PROMPT = (
    "Analyze this receipt image. Extract the items purchased. For each item, identify "
    "the name, quantity (default to 1 if not specified), unit (kg, g, l, un, etc), and "
    "total price for that line item. Return ONLY a JSON object of the form "
    '{"date": "YYYY-MM-DD", "total": number, "items": '
    '[{"name": string, "quantity": number, "unit": string, "totalPrice": number}]}.'
)


class ReceiptService:
    """Service for scanning receipts into draft purchases."""

    def __init__(
        self,
        openai_api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        match_threshold: float = 80.0,
        client=None,
    ):
        self.openai_api_key = openai_api_key
        self.model = model
        self.match_threshold = match_threshold
        self._client = client

    @property
    def client(self):
        """Lazy-load the OpenAI client."""
        if self._client is None and self.openai_api_key:
            from openai import OpenAI
            self._client = OpenAI(api_key=self.openai_api_key)
        return self._client

    @property
    def enabled(self) -> bool:
        return self.client is not None

    # =========================================================================
    # Extraction
    # =========================================================================

    def scan_receipt(self, image: bytes, mime_type: str = "image/jpeg") -> Optional[ScannedReceipt]:
        """
        Extract purchase lines from a receipt image.

        Returns None when the model is not configured or its answer cannot
        be used.
        """
        if not self.enabled:
            logger.warning("No OpenAI key - receipt scanning unavailable")
            return None

        encoded = base64.b64encode(image).decode("ascii")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                response_format={"type": "json_object"},
                messages=[{
                    "role": "user",
                    "content": [
                        {"type": "text", "text": RECEIPT_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                        },
                    ],
                }],
            )
            text = response.choices[0].message.content
        except Exception as e:
            logger.error(f"Receipt extraction failed: {e}")
            return None

        return self.parse_response(text)

    def parse_response(self, text: Optional[str]) -> Optional[ScannedReceipt]:
        """Validate the model's JSON answer."""
        if not text:
            return None

        # Models occasionally wrap JSON in a markdown fence
        text = re.sub(r"^```(?:json)?\s*|\s*```$", "", text.strip())

        try:
            return ScannedReceipt.model_validate(json.loads(text))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.error(f"Unusable receipt response: {e}")
            return None

    # =========================================================================
    # Matching
    # =========================================================================

    def match_ingredient(self, name: str, ingredients: List[Ingredient]) -> Optional[Ingredient]:
        """
        Find the ingredient a receipt line refers to.

        Substring match on the ingredient name first, then fuzzy match.
        """
        needle = " ".join(name.lower().split())
        if not needle or not ingredients:
            return None

        for ing in ingredients:
            if needle in ing.name.lower():
                return ing

        choices = {ing.id: ing.name.lower() for ing in ingredients}
        best = process.extractOne(needle, choices, scorer=fuzz.token_set_ratio)
        if best and best[1] >= self.match_threshold:
            matched_id = best[2]
            return next(ing for ing in ingredients if ing.id == matched_id)

        return None

    def draft_purchase(self, scanned: ScannedReceipt, ingredients: List[Ingredient]) -> PurchaseCreate:
        """
        Build an editable purchase from a scanned receipt.

        Unmatched lines keep an empty ingredient reference and count as
        expenses unless the operator links them.
        """
        items = []
        for line in scanned.items:
            match = self.match_ingredient(line.name, ingredients)
            items.append(PurchaseItem(
                ingredient_id=match.id if match else "",
                quantity=line.quantity,
                total_price=line.total_price,
                temp_name=line.name,
            ))

        if scanned.purchase_date:
            purchase_date = datetime.combine(scanned.purchase_date, datetime.min.time())
        else:
            purchase_date = datetime.utcnow()

        matched = sum(1 for i in items if i.ingredient_id)
        logger.info(f"Drafted purchase from receipt: {matched}/{len(items)} lines matched")

        return PurchaseCreate(
            date=purchase_date,
            items=items,
            total=scanned.total,
        )
