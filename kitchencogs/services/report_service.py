"""
Report Service - dashboard totals, stock alerts and sales exports

Computes summaries over sales and purchases for a date range and renders
the sales ledger as a spreadsheet.
"""

import io
import logging
from collections import Counter
from datetime import date
from typing import Dict, List

import pandas as pd

from kitchencogs.errors import ValidationError
from kitchencogs.models.common import DateRange
from kitchencogs.models.inventory import Ingredient, LowStockAlert
from kitchencogs.models.purchases import Purchase
from kitchencogs.models.recipes import Recipe
from kitchencogs.models.sales import DashboardStats, Sale, TopProduct

logger = logging.getLogger(__name__)

UNKNOWN_PRODUCT = "Desconhecido"

EXPORT_COLUMNS = [
    "ID Venda",
    "Data",
    "Itens",
    "Total (R$)",
    "Lucro (R$)",
    "Método Pagamento",
]


class ReportService:
    """Computes dashboard figures and exports."""

    def __init__(self, top_n: int = 5):
        self.top_n = top_n

    def sales_in_range(self, sales: List[Sale], start: date, end: date) -> List[Sale]:
        period = DateRange(start=start, end=end)
        return [s for s in sales if period.contains(s.date)]

    def purchases_in_range(self, purchases: List[Purchase], start: date, end: date) -> List[Purchase]:
        period = DateRange(start=start, end=end)
        return [p for p in purchases if period.contains(p.date)]

    def dashboard_stats(
        self,
        sales: List[Sale],
        purchases: List[Purchase],
        recipes: List[Recipe],
        start: date,
        end: date,
    ) -> DashboardStats:
        """Totals and best sellers for an inclusive date range."""
        if end < start:
            raise ValidationError(
                "End date is before start date",
                details={"start": str(start), "end": str(end)},
            )

        range_sales = self.sales_in_range(sales, start, end)
        range_purchases = self.purchases_in_range(purchases, start, end)

        names = {r.id: r.name for r in recipes}
        counts: Counter = Counter()
        for sale in range_sales:
            for item in sale.items:
                counts[names.get(item.recipe_id, UNKNOWN_PRODUCT)] += item.quantity

        return DashboardStats(
            start=start.isoformat(),
            end=end.isoformat(),
            total_sales=sum(s.total for s in range_sales),
            total_cost=sum(p.total for p in range_purchases),
            total_profit=sum(s.profit for s in range_sales),
            sales_count=len(range_sales),
            purchases_count=len(range_purchases),
            top_products=[
                TopProduct(name=name, count=count)
                for name, count in counts.most_common(self.top_n)
            ],
        )

    def low_stock_alerts(self, ingredients: List[Ingredient]) -> List[LowStockAlert]:
        """Ingredients at or below their alert threshold, lowest stock first."""
        alerts = [
            LowStockAlert(
                ingredient_id=ing.id,
                name=ing.name,
                unit=ing.unit,
                current_stock=ing.current_stock,
                min_stock_alert=ing.min_stock_alert,
            )
            for ing in ingredients
            if ing.is_low_stock
        ]
        return sorted(alerts, key=lambda a: a.current_stock - a.min_stock_alert)

    # =========================================================================
    # Export
    # =========================================================================

    def _describe_items(self, sale: Sale, names: Dict[str, str]) -> str:
        parts = []
        for item in sale.items:
            qty = int(item.quantity) if float(item.quantity).is_integer() else item.quantity
            parts.append(f"{qty}x {names.get(item.recipe_id, 'Item')}")
        return "; ".join(parts)

    def sales_dataframe(self, sales: List[Sale], recipes: List[Recipe]) -> pd.DataFrame:
        """One row per sale, ordered by date."""
        names = {r.id: r.name for r in recipes}
        rows = [
            {
                "ID Venda": s.id,
                "Data": s.date,
                "Itens": self._describe_items(s, names),
                "Total (R$)": round(s.total, 2),
                "Lucro (R$)": round(s.profit, 2),
                "Método Pagamento": s.payment_method.value,
            }
            for s in sorted(sales, key=lambda s: s.date)
        ]
        return pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    def export_sales(
        self,
        sales: List[Sale],
        recipes: List[Recipe],
        fmt: str = "xlsx",
    ) -> bytes:
        """Render the sales ledger as xlsx or csv bytes."""
        df = self.sales_dataframe(sales, recipes)

        if fmt == "csv":
            # pt-BR spreadsheet conventions
            return df.to_csv(index=False, sep=";", decimal=",").encode("utf-8-sig")

        if fmt == "xlsx":
            buffer = io.BytesIO()
            with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
                df.to_excel(writer, index=False, sheet_name="Vendas")
            logger.info(f"Exported {len(df)} sales to xlsx")
            return buffer.getvalue()

        raise ValidationError(f"Unsupported export format: {fmt}", details={"format": fmt})
