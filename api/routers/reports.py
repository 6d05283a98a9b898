"""Reporting endpoints: dashboard totals and sales export."""

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from api.dependencies import get_report_service, get_repository
from kitchencogs.models.sales import DashboardStats
from kitchencogs.services.report_service import ReportService
from kitchencogs.services.repository import Repository

router = APIRouter()

EXPORT_MEDIA_TYPES = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv; charset=utf-8",
}


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(
    start: Optional[date] = Query(None, description="First day, defaults to the first of this month"),
    end: Optional[date] = Query(None, description="Last day, defaults to today"),
    repo: Repository = Depends(get_repository),
    reports: ReportService = Depends(get_report_service),
):
    """
    Totals for a date range (inclusive).

    Sales, purchase spend, profit from snapshotted costs and the best
    selling products.
    """
    today = datetime.utcnow().date()
    end = end or today
    start = start or end.replace(day=1)

    return reports.dashboard_stats(
        repo.list_sales(),
        repo.list_purchases(),
        repo.list_recipes(),
        start,
        end,
    )


@router.get("/sales/export")
async def export_sales(
    fmt: str = Query("xlsx", description="xlsx or csv"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    repo: Repository = Depends(get_repository),
    reports: ReportService = Depends(get_report_service),
):
    """Download the sales ledger as a spreadsheet."""
    sales = repo.list_sales()
    if start or end:
        sales = reports.sales_in_range(sales, start or date.min, end or date.max)

    content = reports.export_sales(sales, repo.list_recipes(), fmt=fmt)
    filename = f"vendas_{datetime.utcnow().date().isoformat()}.{fmt}"

    return Response(
        content=content,
        media_type=EXPORT_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
