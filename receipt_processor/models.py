from dataclasses import dataclass, field
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, ROUND_HALF_UP, Context, Decimal, InvalidOperation
from functools import cached_property
from typing import List, Optional

from receipt_processor.errors import MalformedReceipt
from receipt_processor.sku import SKU

CENTS = Decimal("0.01")
# exact arithmetic for sums and cent rounding, whatever the thread's context is
AMOUNT_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)
PARSE_CONTEXT = Context(prec=28)  # bounds accepted amounts
RECEIPT_STRING_ATTRIBUTES = {
    "retailer": "retailer",
    "purchaseDate": "purchase_date",
    "purchaseTime": "purchase_time",
    "total": "total",
}
ITEM_PRICE_KEYS = ("pricePaid", "price")  # "price" is the legacy key


def parse_amount(text: str) -> Optional[Decimal]:
    """
    Parses a currency string into a Decimal. Returns None for anything that
    is not a plain finite number, including padded text, digit-group
    underscores and amounts too large to hold in cents under the default
    28 digit precision.
    """
    if not isinstance(text, str) or text != text.strip() or "_" in text:
        return None
    try:
        amount = Decimal(text)
        if not amount.is_finite():
            return None
        amount.quantize(CENTS, context=PARSE_CONTEXT)
    except (InvalidOperation, ValueError):
        return None
    return amount


def round_cents(amount: Decimal) -> Decimal:
    """ Rounds half away from zero to 2 decimal places """
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP, context=AMOUNT_CONTEXT)


def _string_field(data: dict, key: str, where: str) -> str:
    value = data.get(key, "")
    if not isinstance(value, str):
        raise MalformedReceipt(f"invalid {where}{key} format")
    return value


@dataclass
class Item:
    short_description: str = ""
    price_paid: str = ""
    quantity: Optional[int] = None
    sku: Optional[SKU] = None

    @cached_property
    def amount(self) -> Optional[Decimal]:
        return parse_amount(self.price_paid)

    @classmethod
    def from_json(cls, data: dict) -> "Item":
        """ Builds an item from its JSON object, checking only the types of the fields present """
        if not isinstance(data, dict):
            raise MalformedReceipt("invalid receipt item format")
        price_key = next((key for key in ITEM_PRICE_KEYS if key in data), ITEM_PRICE_KEYS[0])
        quantity = data.get("quantity")
        # bool is an int subclass and is not a quantity
        if quantity is not None and (isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1):
            raise MalformedReceipt("invalid item quantity format")
        sku = data.get("sku")
        if sku is not None and not isinstance(sku, str):
            raise MalformedReceipt("invalid item sku format")
        return cls(
            short_description=_string_field(data, "shortDescription", "item "),
            price_paid=_string_field(data, price_key, "item "),
            quantity=quantity,
            sku=SKU.parse(sku) if sku else None,
        )

    def to_json(self) -> dict:
        data = {"shortDescription": self.short_description, "pricePaid": self.price_paid}
        if self.quantity is not None:
            data["quantity"] = self.quantity
        if self.sku is not None:
            data["sku"] = str(self.sku)
        return data


@dataclass
class Receipt:
    retailer: str = ""
    purchase_date: str = ""
    purchase_time: str = ""
    total: str = ""
    items: List[Item] = field(default_factory=list)
    points: int = 0
    id: Optional[str] = None

    @cached_property
    def total_amount(self) -> Optional[Decimal]:
        return parse_amount(self.total)

    @classmethod
    def from_json(cls, data: dict) -> "Receipt":
        """
        Builds a receipt from a decoded point-of-sale JSON document.

        Present fields must have the right JSON type; missing ones are left
        empty for validation to reject. Client supplied ids and points are
        ignored.
        """
        if not isinstance(data, dict):
            raise MalformedReceipt("receipt must be a JSON object")
        receipt = cls()
        for key, attribute in RECEIPT_STRING_ATTRIBUTES.items():
            setattr(receipt, attribute, _string_field(data, key, ""))
        items = data.get("items", [])
        if not isinstance(items, list):
            raise MalformedReceipt("invalid receipt items list format")
        receipt.items = [Item.from_json(item) for item in items]
        return receipt

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "retailer": self.retailer,
            "purchaseDate": self.purchase_date,
            "purchaseTime": self.purchase_time,
            "total": self.total,
            "items": [item.to_json() for item in self.items],
            "points": self.points,
        }
