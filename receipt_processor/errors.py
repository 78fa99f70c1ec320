ERROR_PREFIX = "error processing receipt: "


class ReceiptError(ValueError):
    """
    Base class for every error that rejects a receipt. The message always
    starts with ERROR_PREFIX so it can be handed to API clients unchanged.
    """
    default_detail = "invalid receipt"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(ERROR_PREFIX + self.detail)

    @property
    def kind(self) -> str:
        return type(self).__name__


class MalformedReceipt(ReceiptError):
    default_detail = "malformed receipt document"


class EmptyRetailer(ReceiptError):
    default_detail = "retailer cannot be empty"


class EmptyItems(ReceiptError):
    default_detail = "items cannot be empty"


class EmptyDescription(ReceiptError):
    default_detail = "item description cannot be empty"


class EmptyPrice(ReceiptError):
    default_detail = "item price cannot be empty"


class InvalidPrice(ReceiptError):
    default_detail = "item price must be greater than zero"


class InvalidTotal(ReceiptError):
    default_detail = "error on total price"


class TotalMismatch(ReceiptError):
    default_detail = "item calculated total does not match total price"


class InvalidDate(ReceiptError):
    default_detail = "invalid purchase date"


class InvalidTime(ReceiptError):
    default_detail = "invalid purchase time"


class MalformedSKU(ReceiptError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"malformed sku ({value})")


class ParseError(ValueError):
    """ Raised by the normalizer when no accepted format matches; never terminal """

    def __init__(self, value: str, kind: str = "value"):
        self.value = value
        super().__init__(f"unable to parse {kind} ({value})")
