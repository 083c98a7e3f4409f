"""
Domain - Value types shared by every feature.

Products come from the catalog gateways and are never mutated.
Carts are changed only through the cart engine.
"""

from .models import Product, Cart, AuthSession
from .cart import add_item, remove_item, clear

__all__ = [
    "Product",
    "Cart",
    "AuthSession",
    "add_item",
    "remove_item",
    "clear",
]
