from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID
from decimal import Decimal

from app.models.enums import MenuCategory


class RecipeLinkBase(BaseModel):
    ingredient_id: UUID
    quantity_needed: Decimal


class RecipeLinkCreate(RecipeLinkBase):
    pass


class RecipeLinkResponse(RecipeLinkBase):
    ingredient_name: Optional[str] = None
    unit: Optional[str] = None
    current_stock: Optional[Decimal] = None
    min_stock: Optional[Decimal] = None
    line_cost: Optional[Decimal] = None


class MenuItemBase(BaseModel):
    code: Optional[str] = None
    name: str
    description: Optional[str] = None
    price: Decimal
    category: MenuCategory
    is_available: bool = True


class MenuItemCreate(MenuItemBase):
    ingredients: List[RecipeLinkCreate] = []


class MenuItemUpdate(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    category: Optional[MenuCategory] = None
    is_available: Optional[bool] = None
    # None leaves links untouched, a list replaces them
    ingredients: Optional[List[RecipeLinkCreate]] = None


class MenuItemResponse(MenuItemBase):
    id: UUID
    user_id: UUID
    created_at: datetime
    category_label: Optional[str] = None
    ingredients: List[RecipeLinkResponse] = []
    recipe_cost: Optional[Decimal] = None
    profit_margin: Optional[Decimal] = None

    model_config = ConfigDict(from_attributes=True)


class WeeklyMenuEntryCreate(BaseModel):
    menu_item_id: UUID
    day_of_week: int


class WeeklyMenuPlan(BaseModel):
    entries: List[WeeklyMenuEntryCreate]


class WeeklyMenuDay(BaseModel):
    day_of_week: int
    date: date
    menu_items: List[dict] = []


class WeeklyMenuResponse(BaseModel):
    week_start_date: date
    days: List[WeeklyMenuDay]
