import re
from datetime import date, datetime, time
from typing import List

from receipt_processor.errors import ParseError

RECEIPT_DATE_FORMAT = '%Y-%m-%d'
RECEIPT_TIME_FORMAT = '%H:%M'
# tried in order, the first format that parses wins
ACCEPTED_DATE_FORMATS = (
    '%Y-%m-%d',  # YYYY-MM-DD
    '%d-%m-%Y',  # DD-MM-YYYY
    '%m/%d/%Y',  # MM/DD/YYYY
    '%Y/%m/%d',  # YYYY/MM/DD
)
ACCEPTED_TIME_FORMATS = (
    '%H:%M',        # 24-hour clock
    '%H:%M:%S',     # 24-hour clock with seconds
    '%I:%M %p',     # 12-hour clock
    '%I:%M:%S %p',  # 12-hour clock with seconds
)
CANONICAL_DATE_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$")
CANONICAL_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
WHITESPACE_PATTERN = re.compile(r"\s+")


def _parse_first(text: str, formats, kind: str) -> datetime:
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ParseError(text, kind)


def normalize_date(text: str) -> str:
    """ Re-renders a purchase date in YYYY-MM-DD, trying each accepted format in turn """
    if CANONICAL_DATE_PATTERN.match(text):
        return text
    return _parse_first(text, ACCEPTED_DATE_FORMATS, "date").strftime(RECEIPT_DATE_FORMAT)


def normalize_time(text: str) -> str:
    """ Re-renders a purchase time as 24-hour HH:MM, trying each accepted format in turn """
    if CANONICAL_TIME_PATTERN.match(text):
        return text
    return _parse_first(text, ACCEPTED_TIME_FORMATS, "time").strftime(RECEIPT_TIME_FORMAT)


def normalize_description(text: str) -> str:
    """ Trims a description and collapses inner whitespace runs into single spaces """
    return WHITESPACE_PATTERN.sub(" ", text.strip())


def parse_canonical_date(text: str) -> date:
    """ Strict YYYY-MM-DD parsing, raises ValueError otherwise """
    if not CANONICAL_DATE_PATTERN.match(text):
        raise ValueError(f"date {text} is not in YYYY-MM-DD format")
    return datetime.strptime(text, RECEIPT_DATE_FORMAT).date()


def parse_canonical_time(text: str) -> time:
    """ Strict HH:MM parsing, raises ValueError otherwise """
    if not CANONICAL_TIME_PATTERN.match(text):
        raise ValueError(f"time {text} is not in HH:MM format")
    return datetime.strptime(text, RECEIPT_TIME_FORMAT).time()


def normalize_receipt(receipt) -> List[ParseError]:
    """
    Normalizes a receipt in place: purchase date and time are re-rendered in
    their canonical formats and item descriptions have their whitespace
    cleaned up. A date or time that matches none of the accepted formats is
    left untouched; the errors are returned so the caller can report them,
    and strict validation decides later whether the receipt is rejected.
    """
    failures = []
    try:
        receipt.purchase_date = normalize_date(receipt.purchase_date)
    except ParseError as e:
        failures.append(e)
    try:
        receipt.purchase_time = normalize_time(receipt.purchase_time)
    except ParseError as e:
        failures.append(e)
    for item in receipt.items:
        item.short_description = normalize_description(item.short_description)
    return failures
