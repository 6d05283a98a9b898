"""API Routers"""

from api.routers import admin, auth, cash, health, ingredients, purchases, recipes, reports, sales

__all__ = [
    "admin",
    "auth",
    "cash",
    "health",
    "ingredients",
    "purchases",
    "recipes",
    "reports",
    "sales",
]
