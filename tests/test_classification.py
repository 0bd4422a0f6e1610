from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services import classification

TODAY = date(2024, 3, 15)


def ingredient(stock="5", min_stock="2", last_purchase_date=TODAY, expiration_date=None,
               created_at=None):
    return SimpleNamespace(
        current_stock=Decimal(stock),
        min_stock=Decimal(min_stock),
        last_purchase_date=last_purchase_date,
        expiration_date=expiration_date,
        created_at=created_at or datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize(
    "stock, min_stock, expected",
    [
        ("0", "2", classification.OUT_OF_STOCK),
        ("0", "0", classification.OUT_OF_STOCK),
        ("1", "2", classification.LOW_STOCK),
        ("2", "2", classification.LOW_STOCK),
        ("2.5", "2", classification.SUFFICIENT),
    ],
)
def test_stock_status(stock, min_stock, expected):
    item = ingredient(stock=stock, min_stock=min_stock)

    assert classification.stock_status(item) == expected


def test_zero_stock_is_not_low_stock():
    item = ingredient(stock="0", min_stock="5")

    assert classification.is_out_of_stock(item)
    assert not classification.is_low_stock(item)


@pytest.mark.parametrize(
    "offset, expected",
    [
        (-1, classification.EXPIRED),
        (0, classification.EXPIRING_SOON),
        (7, classification.EXPIRING_SOON),
        (8, classification.EXPIRY_OK),
    ],
)
def test_expiry_boundaries(offset, expected):
    item = ingredient(expiration_date=TODAY + timedelta(days=offset))

    result = classification.expiry_status(item, TODAY)

    assert result.status == expected
    assert result.days_until == offset


def test_missing_expiration_date_is_unknown():
    result = classification.expiry_status(ingredient(), TODAY)

    assert result.status == classification.EXPIRY_UNKNOWN
    assert result.days_until is None


@pytest.mark.parametrize("days_ago, expected", [(10, False), (11, True)])
def test_slow_moving_boundary(days_ago, expected):
    item = ingredient(last_purchase_date=TODAY - timedelta(days=days_ago))

    assert classification.is_slow_moving(item, TODAY) is expected


def test_empty_stock_is_never_slow_moving():
    item = ingredient(stock="0", last_purchase_date=TODAY - timedelta(days=30))

    assert not classification.is_slow_moving(item, TODAY)


def test_created_at_is_used_without_purchase_date():
    # 20:00 UTC on the 1st is already the 2nd in Ho Chi Minh City
    item = ingredient(
        last_purchase_date=None,
        created_at=datetime(2024, 3, 1, 20, 0, tzinfo=timezone.utc),
    )

    assert classification.days_since_purchase(item, TODAY) == 13


def test_classify_combines_all_statuses():
    item = ingredient(
        stock="1",
        min_stock="3",
        last_purchase_date=TODAY - timedelta(days=12),
        expiration_date=TODAY + timedelta(days=3),
    )

    result = classification.classify(item, TODAY)

    assert result.stock_status == classification.LOW_STOCK
    assert result.expiry.status == classification.EXPIRING_SOON
    assert result.days_since_purchase == 12
    assert result.is_slow_moving
