"""
Validation and loyalty-points scoring for point-of-sale receipts.

The engine keeps no state and does no I/O: identifiers, storage and
logging belong to the caller.
"""
from typing import List

from receipt_processor.errors import (
    ERROR_PREFIX,
    EmptyDescription,
    EmptyItems,
    EmptyPrice,
    EmptyRetailer,
    InvalidDate,
    InvalidPrice,
    InvalidTime,
    InvalidTotal,
    MalformedReceipt,
    MalformedSKU,
    ParseError,
    ReceiptError,
    TotalMismatch,
)
from receipt_processor.models import Item, Receipt
from receipt_processor.normalize import normalize_receipt
from receipt_processor.points import calculate_points, score_receipt
from receipt_processor.sku import SKU
from receipt_processor.validation import collect_violations, validate_receipt


def process_receipt(receipt: Receipt) -> List[ParseError]:
    """
    Normalizes, validates and scores a receipt in place. Raises the first
    ReceiptError found; returns the date/time normalization failures that
    were recovered from.
    """
    failures = normalize_receipt(receipt)
    validate_receipt(receipt)
    score_receipt(receipt)
    return failures
