from decimal import Decimal
from typing import Iterator, List

from receipt_processor.errors import (
    EmptyDescription,
    EmptyItems,
    EmptyPrice,
    EmptyRetailer,
    InvalidDate,
    InvalidPrice,
    InvalidTime,
    InvalidTotal,
    ReceiptError,
    TotalMismatch,
)
from receipt_processor.models import AMOUNT_CONTEXT, Item, Receipt, round_cents
from receipt_processor.normalize import parse_canonical_date, parse_canonical_time


def _item_violations(item: Item) -> Iterator[ReceiptError]:
    if not item.short_description.strip():
        yield EmptyDescription()
    if not item.price_paid:
        yield EmptyPrice()
    elif item.amount is None:
        yield InvalidPrice(f"item price {item.price_paid} is not a number")
    elif item.amount <= 0:
        yield InvalidPrice()


def _violations(receipt: Receipt) -> Iterator[ReceiptError]:
    """
    Yields every rule the receipt breaks, in the order the checks are made:
    retailer, items, each item (description then price), total, total
    against the item sum, purchase date and purchase time.
    """
    if not receipt.retailer.strip():
        yield EmptyRetailer()
    if not receipt.items:
        yield EmptyItems()

    items_total = Decimal(0)
    prices_valid = bool(receipt.items)
    for item in receipt.items:
        for violation in _item_violations(item):
            prices_valid = prices_valid and not isinstance(violation, (EmptyPrice, InvalidPrice))
            yield violation
        if item.amount is not None and item.amount > 0:
            items_total = AMOUNT_CONTEXT.add(items_total, item.amount)

    total = receipt.total_amount
    if total is None:
        yield InvalidTotal()
    elif prices_valid and round_cents(total) != round_cents(items_total):
        yield TotalMismatch(
            f"item calculated total {round_cents(items_total)} does not match total price {receipt.total}")

    try:
        parse_canonical_date(receipt.purchase_date)
    except ValueError:
        yield InvalidDate(f"invalid purchase date: date {receipt.purchase_date} is invalid")
    try:
        parse_canonical_time(receipt.purchase_time)
    except ValueError:
        yield InvalidTime(f"invalid purchase time: time {receipt.purchase_time} is invalid")


def validate_receipt(receipt: Receipt) -> None:
    """ Raises the first rule the receipt breaks, returns None for a valid receipt """
    for violation in _violations(receipt):
        raise violation


def collect_violations(receipt: Receipt) -> List[ReceiptError]:
    """ Every rule the receipt breaks; the first element is what validate_receipt raises """
    return list(_violations(receipt))
