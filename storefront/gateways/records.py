"""
Product Records - Wire/storage representation of products.

Both the API gateway and the cache gateways decode through ProductRecord,
so a malformed payload fails the same way wherever it comes from.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..domain.models import Product
from ..result import Err, Ok, Result
from .errors import GatewayError


class ProductRecord(BaseModel):
    """A product as it appears in JSON. Unknown keys are kept."""
    id: int
    title: str
    price: Decimal = Field(ge=0)
    category: str
    image: str
    description: str = ""

    model_config = ConfigDict(extra="allow")

    def to_product(self) -> Product:
        return Product(
            id=self.id,
            title=self.title,
            price=self.price,
            category=self.category,
            image=self.image,
            description=self.description,
        )

    @classmethod
    def from_product(cls, product: Product) -> ProductRecord:
        return cls(
            id=product.id,
            title=product.title,
            price=product.price,
            category=product.category,
            image=product.image,
            description=product.description,
        )


def decode_products(raw: Iterable[dict[str, Any]]) -> Result[list[Product], GatewayError]:
    """Decode raw JSON objects into products, or a DECODING error."""
    try:
        return Ok([ProductRecord.model_validate(item).to_product() for item in raw])
    except (ValidationError, TypeError) as e:
        return Err(GatewayError.decoding(str(e)))


def encode_product(product: Product) -> dict[str, Any]:
    """Encode a product as a JSON-ready dict."""
    return ProductRecord.from_product(product).model_dump(mode="json")
