from decimal import Decimal

import pytest

from receipt_processor import Item, Receipt, calculate_points, process_receipt, score_receipt
from receipt_processor.points import (
    score_items,
    score_purchase_date,
    score_purchase_time,
    score_retailer,
    score_total,
)


@pytest.mark.parametrize("retailer, expected", [
    ("Target", 6),
    ("123", 3),
    ("Walmart!", 7),
    ("M&M Corner Market", 14),
    ("Café Zürich", 10),
    ("", 0),
])
def test_score_retailer(retailer, expected):
    assert score_retailer(retailer) == expected


@pytest.mark.parametrize("total, expected", [
    ("10.00", 75),
    ("10.25", 25),
    ("10.50", 25),
    ("10.75", 25),
    ("10.99", 0),
    ("35.35", 0),
])
def test_score_total(total, expected):
    assert score_total(Decimal(total)) == expected


def test_score_total_unparsable():
    assert score_total(None) == 0


def test_score_items_pairs():
    # descriptions of length 1 never earn the description bonus
    def items(count):
        return [Item(short_description="A", price_paid="1.00") for _ in range(count)]
    assert score_items(items(1)) == 0
    assert score_items(items(3)) == 5
    assert score_items(items(4)) == 10
    assert score_items(items(5)) == 10


@pytest.mark.parametrize("description, price, expected", [
    ("Emils Cheese Pizza", "12.25", 3),
    ("Klarbrunn 12-PK 12 FL OZ", "12.00", 3),
    ("Dasani", "1.40", 1),
    ("abc", "1.05", 1),  # ceiling, not rounding
    ("Knorr Creamy Chicken", "1.26", 0),
    ("", "100.00", 0),
])
def test_score_item_description(description, price, expected):
    assert score_items([Item(short_description=description, price_paid=price)]) == expected


@pytest.mark.parametrize("date, expected", [
    ("2022-01-01", 6),
    ("2022-01-02", 0),
    ("2022-03-31", 6),
    ("not a date", 0),
])
def test_score_purchase_date(date, expected):
    assert score_purchase_date(date) == expected


@pytest.mark.parametrize("time, expected", [
    ("13:59", 0),
    ("14:00", 0),
    ("14:01", 10),
    ("15:59", 10),
    ("16:00", 0),
    ("02:30 PM", 0),
])
def test_score_purchase_time(time, expected):
    assert score_purchase_time(time) == expected


def test_single_item_receipt():
    receipt = Receipt(
        retailer="Target",
        purchase_date="2022-01-01",
        purchase_time="13:01",
        total="6.49",
        items=[Item(short_description="Mountain Dew 12PK", price_paid="6.49")],
    )
    process_receipt(receipt)
    assert receipt.points == 12


def test_target_receipt(target_receipt):
    receipt = Receipt.from_json(target_receipt)
    process_receipt(receipt)
    assert receipt.points == 28


def test_calculate_points_is_idempotent(target_receipt):
    receipt = Receipt.from_json(target_receipt)
    process_receipt(receipt)
    before = Receipt.from_json(target_receipt)
    process_receipt(before)
    assert calculate_points(receipt) == calculate_points(receipt) == 28
    assert receipt == before


def test_score_receipt_sets_points(make_receipt):
    receipt = make_receipt()
    assert receipt.points == 0
    assert score_receipt(receipt) == 31
    assert receipt.points == 31


def test_largest_total_and_price_are_scored():
    largest = "99999999999999999999999999.00"
    receipt = Receipt(
        retailer="A",
        purchase_date="2022-01-02",
        purchase_time="10:00",
        total=largest,
        items=[Item(short_description="abc", price_paid=largest)],
    )
    # 1 retailer + 75 whole-dollar total + ceil(price * 0.2)
    assert calculate_points(receipt) == 1 + 75 + 20000000000000000000000000
