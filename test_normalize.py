import pytest

from receipt_processor import ParseError, Receipt
from receipt_processor.normalize import (
    normalize_date,
    normalize_description,
    normalize_receipt,
    normalize_time,
    parse_canonical_date,
    parse_canonical_time,
)


@pytest.mark.parametrize("raw, expected", [
    ("2022-01-01", "2022-01-01"),
    ("31-12-2022", "2022-12-31"),
    ("03/20/2022", "2022-03-20"),
    ("2022/03/20", "2022-03-20"),
])
def test_normalize_date(raw, expected):
    assert normalize_date(raw) == expected


def test_normalize_date_ambiguous_input_uses_first_matching_format():
    # DD-MM-YYYY is tried before MM/DD/YYYY, separators decide which one applies
    assert normalize_date("02-03-2022") == "2022-03-02"
    assert normalize_date("02/03/2022") == "2022-02-03"


@pytest.mark.parametrize("raw, expected", [
    ("13:01", "13:01"),
    ("14:33:59", "14:33"),
    ("02:30 PM", "14:30"),
    ("12:05 AM", "00:05"),
    ("11:59:30 PM", "23:59"),
])
def test_normalize_time(raw, expected):
    assert normalize_time(raw) == expected


@pytest.mark.parametrize("raw", ["test", "13/13/2023", "", "2023-15-15"])
def test_normalize_date_failure_carries_original(raw):
    with pytest.raises(ParseError) as exc_info:
        normalize_date(raw)
    assert exc_info.value.value == raw


@pytest.mark.parametrize("raw", ["24:01", "13:99", "13-13", ""])
def test_normalize_time_failure_carries_original(raw):
    with pytest.raises(ParseError) as exc_info:
        normalize_time(raw)
    assert exc_info.value.value == raw


def test_normalize_description():
    assert normalize_description("   Klarbrunn 12-PK 12 FL OZ  ") == "Klarbrunn 12-PK 12 FL OZ"
    assert normalize_description("Mountain \t Dew\n12PK") == "Mountain Dew 12PK"
    assert normalize_description("   ") == ""


def test_parse_canonical_is_strict():
    assert parse_canonical_date("2022-01-01").day == 1
    assert parse_canonical_time("15:59").minute == 59
    for text in ["2022/01/01", "2022-1-1", "2022-02-30"]:
        with pytest.raises(ValueError):
            parse_canonical_date(text)
    for text in ["3:05", "03:05 PM", "24:00"]:
        with pytest.raises(ValueError):
            parse_canonical_time(text)


def test_normalize_receipt_keeps_values_it_cannot_parse(target_receipt):
    target_receipt["purchaseDate"] = "not a date"
    target_receipt["purchaseTime"] = "03:15 PM"
    receipt = Receipt.from_json(target_receipt)
    failures = normalize_receipt(receipt)
    assert [failure.value for failure in failures] == ["not a date"]
    assert receipt.purchase_date == "not a date"
    assert receipt.purchase_time == "15:15"
    assert receipt.items[4].short_description == "Klarbrunn 12-PK 12 FL OZ"


def test_normalize_accepts_unpadded_fields():
    assert normalize_date("2022-1-1") == "2022-01-01"
    assert normalize_date("3/7/2022") == "2022-03-07"
    assert normalize_time("1:05 PM") == "13:05"
    assert normalize_time("9:15") == "09:15"
