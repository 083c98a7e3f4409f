"""
Domain Models - Product, Cart and AuthSession.

Design principles:
- Immutable: every change produces a new value
- Comparable: equality is structural, so reducers can be tested by value
- Transport-agnostic: decoding from JSON lives in the gateways
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class Product:
    """
    A catalog product.

    Created by the API or cache gateway when a response is decoded.
    Replaced wholesale on refresh, never edited in place.
    """
    id: int
    title: str
    price: Decimal
    category: str
    image: str  # URI of the product image
    description: str = ""

    def __post_init__(self):
        if not isinstance(self.price, Decimal):
            object.__setattr__(self, "price", Decimal(str(self.price)))
        if self.price < 0:
            raise ValueError(f"Product {self.id} has a negative price: {self.price}")


@dataclass(frozen=True)
class Cart:
    """
    Product id -> quantity.

    Invariant: every quantity is strictly positive. An entry whose last
    unit is removed disappears from the mapping.
    """
    items: dict[int, int] = field(default_factory=dict)

    @property
    def total_items(self) -> int:
        return sum(self.items.values())

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    def quantity(self, product_id: int) -> int:
        """Quantity for a product, 0 if it is not in the cart."""
        return self.items.get(product_id, 0)


@dataclass(frozen=True)
class AuthSession:
    """Opaque result of a successful authentication."""
    token: str
