import pytest

from receipt_processor import Receipt


@pytest.fixture
def simple_receipt_skeleton():
    return {
        "retailer": "Target",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "13:13",
        "total": "1.25",
        "items": [
            {"shortDescription": "Pepsi - 12-oz", "pricePaid": "1.25"}
        ]
    }


@pytest.fixture
def target_receipt():
    return {
        "retailer": "Target",
        "purchaseDate": "2022-01-01",
        "purchaseTime": "13:01",
        "items": [
            {"shortDescription": "Mountain Dew 12PK", "quantity": 1, "pricePaid": "6.49",
             "sku": "TGT-BVRG-MTNDEW-SODA-SIZE-12PK-00001"},
            {"shortDescription": "Emils Cheese Pizza", "quantity": 1, "pricePaid": "12.25",
             "sku": "TGT-FOOD-EMILS-PIZZA-TYPE-CHEESE-00002"},
            {"shortDescription": "Knorr Creamy Chicken", "quantity": 1, "pricePaid": "1.26",
             "sku": "TGT-FOOD-KNORR-SOUP-FLVR-CHICKEN-00003"},
            {"shortDescription": "Doritos Nacho Cheese", "quantity": 1, "pricePaid": "3.35",
             "sku": "TGT-SNCK-DORITOS-CHIPS-FLVR-NACHO-00004"},
            {"shortDescription": "   Klarbrunn 12-PK 12 FL OZ  ", "quantity": 1, "pricePaid": "12.00",
             "sku": "TGT-BVRG-KLARBRUNN-WATER-SIZE-12PK-00005"}
        ],
        "total": "35.35"
    }


@pytest.fixture
def make_receipt(simple_receipt_skeleton):
    """ Builds a Receipt from the simple skeleton with some fields overridden """
    def _make(**overrides):
        data = dict(simple_receipt_skeleton, **overrides)
        return Receipt.from_json(data)
    return _make
