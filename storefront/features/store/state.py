"""
Store State - Catalog, filters, cart and checkout.

Design principles:
- Only raw fields are stored
- Every derived view (categories, filtered list, cart lines, total)
  is a property recomputed on each read
- Updates go through _copy_with, never in-place mutation
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from decimal import Decimal
from string import capwords
from typing import NamedTuple

from ...domain.models import Cart, Product

ALL_CATEGORIES = "All"


class CartLine(NamedTuple):
    """A cart entry joined with its product."""
    product: Product
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity


def display_category(category: str) -> str:
    """Category as shown in the filter list ("men's clothing" -> "Men's Clothing")."""
    return capwords(category)


@dataclass
class StoreState:
    """
    Complete store screen state.

    The product list is replaced wholesale by whichever source wins
    reconciliation; network data always supersedes cached data.
    """
    search_text: str = ""
    selected_category: str = ALL_CATEGORIES
    products: tuple[Product, ...] = ()
    loading: bool = False
    cart: Cart = field(default_factory=Cart)
    show_order_success: bool = False

    # Connectivity
    is_connected: bool = True
    show_connectivity_banner: bool = False

    # Favorites
    favorites: tuple[Product, ...] = ()
    favorites_only: bool = False

    # Incremented per load; network results tagged with an older value are stale
    load_generation: int = 0

    @property
    def unique_categories(self) -> list[str]:
        """The "All" sentinel followed by every category present, sorted."""
        categories = sorted({display_category(p.category) for p in self.products})
        return [ALL_CATEGORIES] + categories

    @property
    def filtered_products(self) -> list[Product]:
        """Products matching favorites-only, category and search text."""
        base = self.favorites if self.favorites_only else self.products

        if self.selected_category != ALL_CATEGORIES:
            base = [
                p for p in base
                if display_category(p.category) == self.selected_category
            ]

        if not self.search_text:
            return list(base)
        needle = self.search_text.casefold()
        return [p for p in base if needle in p.title.casefold()]

    @property
    def cart_lines(self) -> list[CartLine]:
        """Cart entries joined with catalog products, sorted by title."""
        by_id = {p.id: p for p in self.products}
        lines = [
            CartLine(product=by_id[product_id], quantity=quantity)
            for product_id, quantity in self.cart.items.items()
            if product_id in by_id
        ]
        return sorted(lines, key=lambda line: line.product.title)

    @property
    def total_price(self) -> Decimal:
        return sum((line.subtotal for line in self.cart_lines), Decimal("0"))

    def is_favorite(self, product_id: int) -> bool:
        return any(p.id == product_id for p in self.favorites)

    def get_product(self, product_id: int) -> Product | None:
        for p in self.products:
            if p.id == product_id:
                return p
        return None

    def _copy_with(self, **kwargs) -> StoreState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
