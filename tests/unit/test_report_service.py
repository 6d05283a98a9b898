"""Tests for dashboard figures and exports."""

import io
from datetime import date, datetime

import pandas as pd
import pytest

from kitchencogs.errors import ValidationError
from kitchencogs.models.common import PaymentMethod
from kitchencogs.models.purchases import Purchase
from kitchencogs.models.sales import Sale, SaleItem
from kitchencogs.services.report_service import UNKNOWN_PRODUCT, ReportService


@pytest.fixture
def sales():
    return [
        Sale(id="s1", date=datetime(2024, 3, 1, 12), total=16.0, profit=14.0,
             items=[SaleItem(recipe_id="coxinha", quantity=2, unit_price=8.0, cost_price=1.0)]),
        Sale(id="s2", date=datetime(2024, 3, 10, 18), total=30.0, profit=20.0,
             payment_method=PaymentMethod.PIX,
             items=[SaleItem(recipe_id="coxinha", quantity=1, unit_price=8.0, cost_price=1.0),
                    SaleItem(recipe_id="gone", quantity=2, unit_price=11.0, cost_price=3.0)]),
        Sale(id="s3", date=datetime(2024, 4, 2, 9), total=8.0, profit=7.0,
             items=[SaleItem(recipe_id="coxinha", quantity=1, unit_price=8.0, cost_price=1.0)]),
    ]


@pytest.fixture
def purchases():
    return [
        Purchase(id="p1", date=datetime(2024, 3, 5), total=120.0),
        Purchase(id="p2", date=datetime(2024, 2, 28, 23, 59), total=40.0),
    ]


class TestDashboardStats:
    def test_totals_for_range(self, sales, purchases, sample_recipe):
        stats = ReportService().dashboard_stats(
            sales, purchases, [sample_recipe], date(2024, 3, 1), date(2024, 3, 31)
        )

        assert stats.total_sales == pytest.approx(46.0)
        assert stats.total_profit == pytest.approx(34.0)
        assert stats.total_cost == pytest.approx(120.0)
        assert stats.sales_count == 2
        assert stats.purchases_count == 1
        assert stats.start == "2024-03-01"

    def test_top_products(self, sales, purchases, sample_recipe):
        stats = ReportService(top_n=1).dashboard_stats(
            sales, purchases, [sample_recipe], date(2024, 3, 1), date(2024, 3, 31)
        )

        assert len(stats.top_products) == 1
        assert stats.top_products[0].name == "Coxinha de Frango"
        assert stats.top_products[0].count == 3

    def test_deleted_recipe_is_unknown(self, sales, sample_recipe):
        stats = ReportService().dashboard_stats(sales, [], [sample_recipe], date(2024, 3, 10), date(2024, 3, 10))

        names = {p.name for p in stats.top_products}
        assert UNKNOWN_PRODUCT in names

    def test_inverted_range_rejected(self, sales):
        with pytest.raises(ValidationError):
            ReportService().dashboard_stats(sales, [], [], date(2024, 3, 31), date(2024, 3, 1))


class TestLowStockAlerts:
    def test_at_or_below_threshold(self, sample_ingredients):
        alerts = ReportService().low_stock_alerts(sample_ingredients)

        # chicken sits exactly at its threshold
        assert [a.ingredient_id for a in alerts] == ["chicken"]


class TestExport:
    def test_csv_uses_semicolons(self, sales, sample_recipe):
        content = ReportService().export_sales(sales, [sample_recipe], fmt="csv")
        text = content.decode("utf-8-sig")

        header = text.splitlines()[0]
        assert header.split(";")[0] == "ID Venda"
        assert "2x Coxinha de Frango" in text

    def test_xlsx_has_one_row_per_sale(self, sales, sample_recipe):
        content = ReportService().export_sales(sales, [sample_recipe], fmt="xlsx")

        df = pd.read_excel(io.BytesIO(content), sheet_name="Vendas")
        assert list(df["ID Venda"]) == ["s1", "s2", "s3"]
        assert df["Total (R$)"].sum() == pytest.approx(54.0)

    def test_unknown_format_rejected(self, sales):
        with pytest.raises(ValidationError):
            ReportService().export_sales(sales, [], fmt="pdf")
