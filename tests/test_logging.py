import logging

from app.logging_config import KeyValueFormatter


def test_extra_fields_are_appended_sorted():
    record = logging.makeLogRecord({
        "name": "app.services.restock",
        "levelname": "INFO",
        "msg": "ingredient restocked",
        "quantity": "5",
        "ingredient_id": "abc",
    })

    line = KeyValueFormatter().format(record)

    assert "INFO app.services.restock ingredient restocked" in line
    assert line.endswith("ingredient_id=abc quantity=5")
