"""
Read-side status of ingredients: stock level, expiry and staleness.

All functions are pure and take ``today`` as a local calendar date so that
day differences never depend on the wall-clock hour or DST transitions.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from app.config import settings
from app.utils.timezone import to_local_date

OUT_OF_STOCK = "out_of_stock"
LOW_STOCK = "low_stock"
SUFFICIENT = "sufficient"

EXPIRED = "expired"
EXPIRING_SOON = "expiring_soon"
EXPIRY_OK = "ok"
EXPIRY_UNKNOWN = "unknown"


@dataclass(frozen=True)
class ExpiryStatus:
    status: str
    days_until: Optional[int] = None


@dataclass(frozen=True)
class IngredientClassification:
    stock_status: str
    expiry: ExpiryStatus
    days_since_purchase: int
    is_slow_moving: bool


def _stock(ingredient) -> Decimal:
    return Decimal(str(ingredient.current_stock))


def is_out_of_stock(ingredient) -> bool:
    return _stock(ingredient) == 0


def is_low_stock(ingredient) -> bool:
    stock = _stock(ingredient)
    return 0 < stock <= Decimal(str(ingredient.min_stock))


def stock_status(ingredient) -> str:
    # out-of-stock wins because zero also satisfies stock <= min_stock
    if is_out_of_stock(ingredient):
        return OUT_OF_STOCK
    if is_low_stock(ingredient):
        return LOW_STOCK
    return SUFFICIENT


def days_between(start: date, end: date) -> int:
    return (end - start).days


def reference_date(ingredient) -> date:
    """Last purchase date, falling back to the day the record was created"""
    if ingredient.last_purchase_date is not None:
        return to_local_date(ingredient.last_purchase_date)
    return to_local_date(ingredient.created_at)


def days_since_purchase(ingredient, today: date) -> int:
    return days_between(reference_date(ingredient), today)


def is_slow_moving(ingredient, today: date, threshold_days: Optional[int] = None) -> bool:
    if threshold_days is None:
        threshold_days = settings.SLOW_MOVING_DAYS
    return _stock(ingredient) > 0 and days_since_purchase(ingredient, today) > threshold_days


def expiry_status(ingredient, today: date, warning_days: Optional[int] = None) -> ExpiryStatus:
    if warning_days is None:
        warning_days = settings.EXPIRY_WARNING_DAYS
    if ingredient.expiration_date is None:
        return ExpiryStatus(EXPIRY_UNKNOWN)

    days_until = days_between(today, to_local_date(ingredient.expiration_date))
    if days_until < 0:
        return ExpiryStatus(EXPIRED, days_until)
    if days_until <= warning_days:
        return ExpiryStatus(EXPIRING_SOON, days_until)
    return ExpiryStatus(EXPIRY_OK, days_until)


def classify(ingredient, today: date) -> IngredientClassification:
    return IngredientClassification(
        stock_status=stock_status(ingredient),
        expiry=expiry_status(ingredient, today),
        days_since_purchase=days_since_purchase(ingredient, today),
        is_slow_moving=is_slow_moving(ingredient, today),
    )
