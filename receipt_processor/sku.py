from dataclasses import dataclass, field
from typing import Dict

from receipt_processor.errors import MalformedSKU

SKU_SEPARATOR = "-"
SKU_MIN_TOKENS = 5  # prefix, category, manufacturer, product line, unique identifier
SKU_ATTRIBUTES_START = 4


@dataclass
class SKU:
    """
    Structured product code, e.g. WMT-GROC-NESTLE-CHOC-WEIGHT-100G-67890:

        prefix-category-manufacturer-productLine-(key-value)*-uniqueIdentifier

    Attributes keep the order they were parsed in, so a parsed code
    serializes back to the same string.
    """
    prefix: str
    product_category: str
    manufacturer: str
    product_line: str
    unique_identifier: str
    attributes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str) -> "SKU":
        tokens = text.split(SKU_SEPARATOR)
        if len(tokens) < SKU_MIN_TOKENS:
            raise MalformedSKU(text)
        attributes = {}
        # an unpaired token just before the identifier is dropped
        for i in range(SKU_ATTRIBUTES_START, len(tokens) - 2, 2):
            attributes[tokens[i]] = tokens[i + 1]
        return cls(
            prefix=tokens[0],
            product_category=tokens[1],
            manufacturer=tokens[2],
            product_line=tokens[3],
            unique_identifier=tokens[-1],
            attributes=attributes,
        )

    def __str__(self) -> str:
        tokens = [self.prefix, self.product_category, self.manufacturer, self.product_line]
        for key, value in self.attributes.items():
            tokens.extend((key, value))
        tokens.append(self.unique_identifier)
        return SKU_SEPARATOR.join(tokens)
