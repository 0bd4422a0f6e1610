from app.models.base import TimestampMixin
from app.models.ingredient import Ingredient
from app.models.inventory import InventoryLog
from app.models.menu import MenuItem, MenuItemIngredient, WeeklyMenuEntry
from app.models.order import Order, OrderItem
from app.models.financial import FinancialRecord

__all__ = [
    "TimestampMixin",
    "Ingredient",
    "InventoryLog",
    "MenuItem",
    "MenuItemIngredient",
    "WeeklyMenuEntry",
    "Order",
    "OrderItem",
    "FinancialRecord",
]
