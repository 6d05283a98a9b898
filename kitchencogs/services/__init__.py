"""kitchenCOGS Services - Business Logic"""

from kitchencogs.services.costing import (
    compute_recipe_cost,
    deduct_for_production,
    initial_unit_price,
    process_purchase,
    weighted_average_price,
)
from kitchencogs.services.memory_repository import MemoryRepository
from kitchencogs.services.receipt_service import ReceiptService
from kitchencogs.services.report_service import ReportService
from kitchencogs.services.repository import Repository

__all__ = [
    "process_purchase",
    "deduct_for_production",
    "compute_recipe_cost",
    "initial_unit_price",
    "weighted_average_price",
    "Repository",
    "MemoryRepository",
    "ReceiptService",
    "ReportService",
]
