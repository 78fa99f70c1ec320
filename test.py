import json
import uuid
import pytest
from concurrent.futures import ThreadPoolExecutor
from app import flask_app

valid_receipts = {
    json.dumps({
        "retailer": "Target",
        "purchaseDate": "2022-01-01",
        "purchaseTime": "13:01",
        "items": [
            {
                "shortDescription": "Mountain Dew 12PK",
                "price": "6.49"
            }, {
                "shortDescription": "Emils Cheese Pizza",
                "price": "12.25"
            }, {
                "shortDescription": "Knorr Creamy Chicken",
                "price": "1.26"
            }, {
                "shortDescription": "Doritos Nacho Cheese",
                "price": "3.35"
            }, {
                "shortDescription": "   Klarbrunn 12-PK 12 FL OZ  ",
                "price": "12.00"
            }
        ],
        "total": "35.35"
    }): 28,
    json.dumps({
        "retailer": "M&M Corner Market",
        "purchaseDate": "2022-03-20",
        "purchaseTime": "14:33",
        "items": [
            {
                "shortDescription": "Gatorade",
                "pricePaid": "2.25"
            }, {
                "shortDescription": "Gatorade",
                "pricePaid": "2.25"
            }, {
                "shortDescription": "Gatorade",
                "pricePaid": "2.25"
            }, {
                "shortDescription": "Gatorade",
                "pricePaid": "2.25"
            }
        ],
        "total": "9.00"
    }): 109,
    json.dumps({
        "retailer": "Walgreens",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "08:13",
        "total": "2.65",
        "items": [
            {"shortDescription": "Pepsi - 12-oz", "pricePaid": "1.25"},
            {"shortDescription": "Dasani", "pricePaid": "1.40"}
        ]
    }): 15,
    json.dumps({
        "retailer": "Target",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "13:13",
        "total": "1.25",
        "items": [
            {"shortDescription": "Pepsi - 12-oz", "pricePaid": "1.25"}
        ]
    }): 31,
    json.dumps({
        "retailer": "Target",
        "purchaseDate": "01/03/2022",
        "purchaseTime": "02:30 PM",
        "total": "1.25",
        "items": [
            {"shortDescription": "Pepsi - 12-oz", "quantity": 2, "pricePaid": "1.25",
             "sku": "WMT-BVRG-PEPSI-SODA-SIZE-12OZ-00001"}
        ]
    }): 47
}

string_receipt_attributes = ["retailer", "total", "purchaseDate", "purchaseTime"]
PREFIX = "error processing receipt: "


@pytest.fixture
def app():
    app = flask_app
    app.config['DEBUG'] = True
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def post_receipt(client, receipt):
    return client.post('/receipts/process', content_type='application/json', data=json.dumps(receipt))


def assert_rejected(response, message):
    assert response.status_code == 400
    assert json.loads(response.data) == {"error": PREFIX + message}


def test_process_valid_receipts(client):
    for test_json, expected_points in valid_receipts.items():
        expected = {"points": expected_points}
        process_response = client.post('/receipts/process', content_type='application/json', data=test_json)
        assert process_response.status_code == 200
        receipt_id = json.loads(process_response.data)["id"]
        uuid.UUID(receipt_id)
        get_response = client.get(f'/receipts/{receipt_id}/points')
        assert get_response.status_code == 200
        assert expected == json.loads(get_response.data)


def test_process_receipts_unique_ids(client, simple_receipt_skeleton):
    receipt_ids = []
    for i in range(10):
        process_response = post_receipt(client, simple_receipt_skeleton)
        receipt_ids.append(json.loads(process_response.data)["id"])
    assert len(set(receipt_ids)) == len(receipt_ids)


def test_get_receipt_returns_normalized_receipt(client, target_receipt):
    target_receipt["purchaseDate"] = "2022/01/01"
    receipt_id = json.loads(post_receipt(client, target_receipt).data)["id"]
    res = client.get(f'/receipts/{receipt_id}')
    assert res.status_code == 200
    body = json.loads(res.data)
    assert body["id"] == receipt_id
    assert body["points"] == 28
    assert body["purchaseDate"] == "2022-01-01"
    assert body["items"][4]["shortDescription"] == "Klarbrunn 12-PK 12 FL OZ"
    assert body["items"][4]["sku"] == "TGT-BVRG-KLARBRUNN-WATER-SIZE-12PK-00005"


def test_get_all_receipts_lists_processed_receipts(client, simple_receipt_skeleton):
    receipt_id = json.loads(post_receipt(client, simple_receipt_skeleton).data)["id"]
    res = client.get('/receipts/')
    assert res.status_code == 200
    assert receipt_id in [receipt["id"] for receipt in json.loads(res.data)]


def test_process_receipts_invalid_retailer_name(client, simple_receipt_skeleton):
    for name in ["   ", "", "             "]:
        simple_receipt_skeleton["retailer"] = name
        assert_rejected(post_receipt(client, simple_receipt_skeleton), "retailer cannot be empty")


def test_process_receipts_missing_retailer(client, simple_receipt_skeleton):
    del simple_receipt_skeleton["retailer"]
    assert_rejected(post_receipt(client, simple_receipt_skeleton), "retailer cannot be empty")


def test_process_receipts_invalid_purchase_date(client, simple_receipt_skeleton):
    invalid_dates = ["test", "0000-01-01", "2023-15-15", "2023-10-99", "dummydummydummy", "", '9999-99-99',
                     "13/13/2023"]
    for date in invalid_dates:
        simple_receipt_skeleton["purchaseDate"] = date
        assert_rejected(post_receipt(client, simple_receipt_skeleton),
                        f"invalid purchase date: date {date} is invalid")


def test_process_receipts_invalid_purchase_time(client, simple_receipt_skeleton):
    invalid_times = ["test", "13:99", "99:13", "99:99", "dummydummydummy", "", '13-13', "24:01"]
    for time in invalid_times:
        simple_receipt_skeleton["purchaseTime"] = time
        assert_rejected(post_receipt(client, simple_receipt_skeleton),
                        f"invalid purchase time: time {time} is invalid")


def test_process_receipts_invalid_attribute_formats_except_items(client, simple_receipt_skeleton):
    invalid_elements = [None, [], 25, 3.88, {}]
    for attribute in string_receipt_attributes:
        original = simple_receipt_skeleton[attribute]
        for elem in invalid_elements:
            simple_receipt_skeleton[attribute] = elem
            assert_rejected(post_receipt(client, simple_receipt_skeleton), f"invalid {attribute} format")
        simple_receipt_skeleton[attribute] = original


def test_process_receipts_invalid_items_format(client, simple_receipt_skeleton):
    for elem in [None, 25, 3.88, {}, ""]:
        simple_receipt_skeleton["items"] = elem
        assert_rejected(post_receipt(client, simple_receipt_skeleton), "invalid receipt items list format")


def test_process_receipts_invalid_items_list_length(client, simple_receipt_skeleton):
    simple_receipt_skeleton["items"] = []
    assert_rejected(post_receipt(client, simple_receipt_skeleton), "items cannot be empty")


def test_process_receipts_invalid_item_formats(client, simple_receipt_skeleton):
    for elem in [None, 25, 3.88, [], ""]:
        simple_receipt_skeleton["items"][0] = elem
        assert_rejected(post_receipt(client, simple_receipt_skeleton), "invalid receipt item format")
    for attribute in ["shortDescription", "pricePaid"]:
        for elem in [None, 25, 3.88, [], {}]:
            simple_receipt_skeleton["items"][0] = {"shortDescription": "Pepsi - 12-oz", "pricePaid": "1.25"}
            simple_receipt_skeleton["items"][0][attribute] = elem
            assert_rejected(post_receipt(client, simple_receipt_skeleton), f"invalid item {attribute} format")


def test_process_receipts_invalid_item_quantity(client, simple_receipt_skeleton):
    for quantity in [0, -1, "2", 1.5, True]:
        simple_receipt_skeleton["items"][0]["quantity"] = quantity
        assert_rejected(post_receipt(client, simple_receipt_skeleton), "invalid item quantity format")


def test_process_receipts_malformed_sku(client, simple_receipt_skeleton):
    simple_receipt_skeleton["items"][0]["sku"] = "TGT-GROC"
    assert_rejected(post_receipt(client, simple_receipt_skeleton), "malformed sku (TGT-GROC)")


def test_process_receipts_empty_item_description(client, simple_receipt_skeleton):
    for description in ["", "   "]:
        simple_receipt_skeleton["items"][0]["shortDescription"] = description
        assert_rejected(post_receipt(client, simple_receipt_skeleton), "item description cannot be empty")


def test_process_receipts_invalid_item_price(client, simple_receipt_skeleton):
    simple_receipt_skeleton["items"][0]["pricePaid"] = ""
    assert_rejected(post_receipt(client, simple_receipt_skeleton), "item price cannot be empty")
    for price in ["0", "0.00", "-1.25"]:
        simple_receipt_skeleton["items"][0]["pricePaid"] = price
        assert_rejected(post_receipt(client, simple_receipt_skeleton), "item price must be greater than zero")
    simple_receipt_skeleton["items"][0]["pricePaid"] = "test"
    assert_rejected(post_receipt(client, simple_receipt_skeleton), "item price test is not a number")


def test_process_receipts_invalid_total(client, simple_receipt_skeleton):
    for total in ["test", "", "1.2.5"]:
        simple_receipt_skeleton["total"] = total
        assert_rejected(post_receipt(client, simple_receipt_skeleton), "error on total price")


def test_process_receipts_total_mismatch(client, simple_receipt_skeleton):
    simple_receipt_skeleton["total"] = "1.26"
    assert_rejected(post_receipt(client, simple_receipt_skeleton),
                    "item calculated total 1.25 does not match total price 1.26")


def test_process_receipts_non_json_body(client):
    res = client.post('/receipts/process', content_type='application/json', data="not json")
    assert_rejected(res, "request body must be JSON")
    res = client.post('/receipts/process', content_type='application/json', data="[]")
    assert_rejected(res, "receipt must be a JSON object")


def test_get_points_nonexistent_id(client):
    res = client.get('/receipts/test/points')
    assert res.status_code == 404
    assert json.loads(res.data) == {'error': 'receipt id not found (test)'}
    res = client.get('/receipts/test')
    assert res.status_code == 404


def test_unknown_route_and_method(client):
    res = client.get('/nothing/here')
    assert res.status_code == 404
    assert json.loads(res.data) == {"error": "The requested resource was not found."}
    res = client.delete('/receipts/process')
    assert res.status_code == 405
    assert json.loads(res.data) == {"error": "The requested method is not allowed for this resource."}


def test_get_points_idempotency(client, simple_receipt_skeleton):
    receipt_id = json.loads(post_receipt(client, simple_receipt_skeleton).data)["id"]
    for i in range(5):
        get_response = client.get(f'/receipts/{receipt_id}/points')
        assert get_response.status_code == 200
        assert json.loads(get_response.data)["points"] == 31


def test_process_receipts_concurrency(client, simple_receipt_skeleton):
    params = [simple_receipt_skeleton] * 500

    def test_post(json_param):
        return client.post('/receipts/process', content_type='application/json', json=json_param).status_code

    with ThreadPoolExecutor(max_workers=50) as pool:
        assert set(pool.map(test_post, params)) == {200}


def test_get_points_concurrency(client, simple_receipt_skeleton):
    receipt_id = json.loads(post_receipt(client, simple_receipt_skeleton).data)["id"]
    params = [receipt_id] * 500

    def test_get(id_param):
        return json.loads(client.get(f'/receipts/{id_param}/points').data)["points"]

    with ThreadPoolExecutor(max_workers=50) as pool:
        assert set(pool.map(test_get, params)) == {31}


def test_process_receipts_out_of_range_amounts(client, simple_receipt_skeleton):
    for amount in ["1e30", "10000000000000000000000000000.00"]:
        simple_receipt_skeleton["total"] = amount
        simple_receipt_skeleton["items"][0]["pricePaid"] = amount
        assert_rejected(post_receipt(client, simple_receipt_skeleton), f"item price {amount} is not a number")
    simple_receipt_skeleton["items"][0]["pricePaid"] = "1.25"
    simple_receipt_skeleton["total"] = "1e30"
    assert_rejected(post_receipt(client, simple_receipt_skeleton), "error on total price")
