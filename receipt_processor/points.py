import math
from datetime import time
from decimal import Decimal
from typing import Optional

from receipt_processor.models import AMOUNT_CONTEXT, Receipt
from receipt_processor.normalize import parse_canonical_date, parse_canonical_time

POINTS_RETAILER_NAME_ALPHANUM_CHARACTER = 1
POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS = 25
POINTS_TOTAL_HAS_NO_CENTS = 50
POINTS_ITEMS_PAIR = 5
POINTS_ITEM_DESCRIPTION = Decimal("0.2")
POINTS_ODD_PURCHASE_DAY = 6
POINTS_AFTERNOON_PURCHASE = 10
REWARD_TOTAL_MULTIPLE = Decimal("0.25")
REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR = 3
REWARD_WINDOW_START = time(14, 0)
REWARD_WINDOW_END = time(16, 0)


def score_retailer(retailer_name: str) -> int:
    """ One point per Unicode letter or digit in the retailer name """
    return sum(POINTS_RETAILER_NAME_ALPHANUM_CHARACTER
               for c in retailer_name if c.isalpha() or c.isdecimal())


def score_total(total: Optional[Decimal]) -> int:
    """ 25 points for a multiple of 0.25, plus 50 more when there are no cents """
    points = 0
    if total is None:
        return points
    if AMOUNT_CONTEXT.remainder(total, REWARD_TOTAL_MULTIPLE) == 0:
        points += POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS
        if AMOUNT_CONTEXT.remainder(total, 1) == 0:
            points += POINTS_TOTAL_HAS_NO_CENTS
    return points


def score_items(items) -> int:
    """ 5 points per pair of items plus the description-length bonus of each item """
    points = (len(items) // 2) * POINTS_ITEMS_PAIR
    for item in items:
        length = len(item.short_description)
        if length and length % REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR == 0 and item.amount is not None:
            points += max(math.ceil(AMOUNT_CONTEXT.multiply(item.amount, POINTS_ITEM_DESCRIPTION)), 0)
    return points


def score_purchase_date(date_text: str) -> int:
    """ 6 points for an odd day of the month """
    try:
        purchase_date = parse_canonical_date(date_text)
    except ValueError:
        return 0
    return POINTS_ODD_PURCHASE_DAY if purchase_date.day % 2 != 0 else 0


def score_purchase_time(time_text: str) -> int:
    """ 10 points for a purchase strictly after 14:00 and strictly before 16:00 """
    try:
        purchase_time = parse_canonical_time(time_text)
    except ValueError:
        return 0
    return POINTS_AFTERNOON_PURCHASE if REWARD_WINDOW_START < purchase_time < REWARD_WINDOW_END else 0


def calculate_points(receipt: Receipt) -> int:
    """
    Sums every scoring rule for a normalized, validated receipt. Nothing on
    the receipt is modified and each rule only ever adds points, so the
    result is a non-negative integer that is the same on every call.
    """
    points = 0
    points += score_retailer(receipt.retailer)
    points += score_total(receipt.total_amount)
    points += score_items(receipt.items)
    points += score_purchase_date(receipt.purchase_date)
    points += score_purchase_time(receipt.purchase_time)
    return points


def score_receipt(receipt: Receipt) -> int:
    """ Stores the receipt's points on it and returns them """
    receipt.points = calculate_points(receipt)
    return receipt.points
