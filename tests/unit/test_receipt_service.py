"""Tests for receipt scanning and ingredient matching."""

import json
from datetime import datetime
from types import SimpleNamespace

import pytest

from kitchencogs.services.receipt_service import ReceiptService

RECEIPT_JSON = {
    "date": "2024-03-14",
    "total": 61.9,
    "items": [
        {"name": "FRANGO", "quantity": 2, "unit": "kg", "totalPrice": 44.0},
        {"name": "farinha trigo", "quantity": 1, "unit": "kg", "totalPrice": 5.9},
        {"name": "Detergente", "quantity": 1, "unit": "un", "totalPrice": 12.0},
    ],
}


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(completions: FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


class TestScanReceipt:
    def test_disabled_without_key(self):
        service = ReceiptService()

        assert service.enabled is False
        assert service.scan_receipt(b"img") is None

    def test_sends_image_and_parses_answer(self):
        completions = FakeCompletions(content=json.dumps(RECEIPT_JSON))
        service = ReceiptService(client=fake_client(completions), model="vision-model")

        scanned = service.scan_receipt(b"\xff\xd8jpeg", "image/jpeg")

        assert scanned is not None
        assert scanned.purchase_date.isoformat() == "2024-03-14"
        assert [i.name for i in scanned.items] == ["FRANGO", "farinha trigo", "Detergente"]
        assert scanned.items[0].total_price == 44.0

        call = completions.calls[0]
        assert call["model"] == "vision-model"
        image_part = call["messages"][0]["content"][1]
        assert image_part["image_url"]["url"].startswith("data:image/jpeg;base64,")

    def test_client_failure_returns_none(self):
        completions = FakeCompletions(error=RuntimeError("rate limited"))
        service = ReceiptService(client=fake_client(completions))

        assert service.scan_receipt(b"img") is None


class TestParseResponse:
    def test_strips_markdown_fence(self):
        text = "```json\n" + json.dumps(RECEIPT_JSON) + "\n```"

        scanned = ReceiptService().parse_response(text)

        assert scanned.total == pytest.approx(61.9)

    def test_null_line_fields_keep_the_line(self):
        text = json.dumps({
            "date": "2024-03-15",
            "total": 12.0,
            "items": [
                {"name": "FRANGO", "quantity": 0.5, "unit": "kg", "totalPrice": 11.0},
                {"name": "Sacola", "quantity": None, "unit": None, "totalPrice": 1.0},
                {"name": "Brinde", "quantity": "2", "totalPrice": None},
            ],
        })

        scanned = ReceiptService().parse_response(text)

        assert len(scanned.items) == 3
        assert scanned.items[1].quantity == 1.0
        assert scanned.items[1].unit is None
        assert scanned.items[2].quantity == 2.0
        assert scanned.items[2].total_price == 0.0

    @pytest.mark.parametrize("raw_date", ["15/03/2024", "ontem", None])
    def test_unreadable_date_is_dropped(self, raw_date):
        text = json.dumps({"date": raw_date, "total": None, "items": RECEIPT_JSON["items"]})

        scanned = ReceiptService().parse_response(text)

        assert scanned.purchase_date is None
        assert scanned.total is None
        assert len(scanned.items) == 3

    @pytest.mark.parametrize("text", [None, "", "not json", '{"items": "nope"}'])
    def test_unusable_answers(self, text):
        assert ReceiptService().parse_response(text) is None


class TestMatching:
    def test_substring_match(self, sample_ingredients):
        match = ReceiptService().match_ingredient("FRANGO", sample_ingredients)
        assert match.id == "chicken"

    def test_fuzzy_match(self, sample_ingredients):
        match = ReceiptService().match_ingredient("farinha trigo", sample_ingredients)
        assert match.id == "flour"

    def test_no_match(self, sample_ingredients):
        assert ReceiptService().match_ingredient("Detergente", sample_ingredients) is None

    def test_draft_purchase(self, sample_ingredients):
        service = ReceiptService()
        scanned = service.parse_response(json.dumps(RECEIPT_JSON))

        draft = service.draft_purchase(scanned, sample_ingredients)

        assert [i.ingredient_id for i in draft.items] == ["chicken", "flour", ""]
        assert draft.items[2].temp_name == "Detergente"
        assert draft.items[2].is_expense
        assert draft.date == datetime(2024, 3, 14)
        assert draft.total == pytest.approx(61.9)

    def test_draft_total_defaults_to_line_sum(self, sample_ingredients):
        service = ReceiptService()
        scanned = service.parse_response(json.dumps({"items": RECEIPT_JSON["items"]}))

        draft = service.draft_purchase(scanned, sample_ingredients)

        assert draft.total == pytest.approx(61.9)
