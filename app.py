import logging
import os
import threading
import time
from uuid import uuid4

from dotenv import load_dotenv
from flask import Flask, g, jsonify, request

from receipt_processor import MalformedReceipt, Receipt, ReceiptError, process_receipt

load_dotenv()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = os.getenv("FLASK_DEBUG", "0").lower() in ("1", "true", "yes")

logger = logging.getLogger(__name__)

flask_app = Flask(__name__)
flask_app.url_map.strict_slashes = False  # /receipts/ and /receipts are the same route

receipts = {}  # receipt id -> processed Receipt
receipts_lock = threading.Lock()


@flask_app.before_request
def start_timer():
    g.request_start = time.perf_counter()


@flask_app.after_request
def log_request(response):
    """ Logs method, path, status and duration of every request """
    started = g.get("request_start")
    duration_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
    logger.info("%s %s -> %d (%.2f ms)", request.method, request.full_path.rstrip("?"),
                response.status_code, duration_ms)
    return response


@flask_app.errorhandler(404)
def not_found(_error):
    return jsonify({"error": "The requested resource was not found."}), 404


@flask_app.errorhandler(405)
def method_not_allowed(_error):
    return jsonify({"error": "The requested method is not allowed for this resource."}), 405


@flask_app.route('/receipts/process', methods=['POST'])
def process():
    """
    Router for receipt processing requests. The JSON body is deserialized,
    normalized, validated and scored; a valid receipt gets a fresh id and is
    kept in the application's memory.

    Returns:
        400 Error if the body is not a receipt or the receipt is invalid
        200 OK and generated receipt id if the receipt is valid
    """
    payload = request.get_json(silent=True)
    try:
        if payload is None:
            raise MalformedReceipt("request body must be JSON")
        receipt = Receipt.from_json(payload)
        for failure in process_receipt(receipt):
            logger.warning("Left receipt value as received: %s", failure)
    except ReceiptError as e:
        logger.warning("Rejected receipt [%s]: %s", e.kind, e.detail)
        return jsonify({"error": str(e)}), 400

    receipt.id = str(uuid4())
    with receipts_lock:
        receipts[receipt.id] = receipt
    logger.info("Processed receipt %s for %d points", receipt.id, receipt.points)
    return jsonify({"id": receipt.id})


def _find_receipt(receipt_id: str):
    with receipts_lock:
        return receipts.get(receipt_id)


def _receipt_not_found(receipt_id: str):
    logger.info("Receipt not found: %s", receipt_id)
    return jsonify({"error": f"receipt id not found ({receipt_id})"}), 404


@flask_app.route('/receipts/<receipt_id>/points', methods=['GET'])
def get_points(receipt_id):
    """
    Returns:
        404 Error if the receipt id is not found
        200 OK and the points previously computed for the receipt
    """
    receipt = _find_receipt(receipt_id)
    if receipt is None:
        return _receipt_not_found(receipt_id)
    return jsonify({"points": receipt.points})


@flask_app.route('/receipts/<receipt_id>', methods=['GET'])
def get_receipt(receipt_id):
    """ Returns the normalized receipt, its id and points """
    receipt = _find_receipt(receipt_id)
    if receipt is None:
        return _receipt_not_found(receipt_id)
    return jsonify(receipt.to_json())


@flask_app.route('/receipts', methods=['GET'])
def get_all_receipts():
    with receipts_lock:
        stored = list(receipts.values())
    return jsonify([receipt.to_json() for receipt in stored])


if __name__ == '__main__':
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Server is running on %s:%d", HOST, PORT)
    flask_app.run(host=HOST, port=PORT, debug=DEBUG, threaded=True)
    # threaded=True lets Flask handle requests concurrently; the engine is stateless
