"""kitchenCOGS Data Models"""

from kitchencogs.models.common import (
    DateRange,
    PaginationParams,
    PaymentMethod,
    Unit,
)
from kitchencogs.models.inventory import (
    Ingredient,
    IngredientCreate,
    IngredientUpdate,
    LowStockAlert,
)
from kitchencogs.models.purchases import (
    IgnoreReason,
    LineOutcome,
    Purchase,
    PurchaseCreate,
    PurchaseItem,
    PurchaseResult,
    ScannedReceipt,
    ScannedReceiptItem,
)
from kitchencogs.models.recipes import (
    ProductionRequest,
    ProductionResult,
    Recipe,
    RecipeCost,
    RecipeCreate,
    RecipeItem,
    Shortage,
)
from kitchencogs.models.sales import (
    CartLine,
    CashCloseRequest,
    CashOpenRequest,
    CashSession,
    CashSessionStatus,
    CashSessionSummary,
    DashboardStats,
    Sale,
    SaleCreate,
    SaleItem,
    SaleReceipt,
    TopProduct,
)
from kitchencogs.models.subscription import (
    AccessDecision,
    AccessReason,
    SubscriptionStatus,
    SubscriptionUpdate,
    UserProfile,
)

__all__ = [
    # Common
    "Unit", "PaymentMethod", "DateRange", "PaginationParams",
    # Inventory
    "Ingredient", "IngredientCreate", "IngredientUpdate", "LowStockAlert",
    # Recipes
    "RecipeItem", "Recipe", "RecipeCreate", "RecipeCost",
    "ProductionRequest", "ProductionResult", "Shortage",
    # Purchases
    "PurchaseItem", "Purchase", "PurchaseCreate", "PurchaseResult", "LineOutcome",
    "IgnoreReason", "ScannedReceipt", "ScannedReceiptItem",
    # Sales
    "SaleItem", "Sale", "CartLine", "SaleCreate", "SaleReceipt",
    "CashSession", "CashSessionStatus", "CashOpenRequest", "CashCloseRequest",
    "CashSessionSummary", "DashboardStats", "TopProduct",
    # Subscription
    "UserProfile", "SubscriptionStatus", "SubscriptionUpdate", "AccessDecision", "AccessReason",
]
