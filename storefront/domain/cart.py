"""
Cart Engine - Pure quantity bookkeeping over Cart values.

All functions are total: they never raise and always return a new Cart.
"""

from __future__ import annotations

from .models import Cart


def add_item(cart: Cart, product_id: int) -> Cart:
    """Return a cart with one more unit of product_id."""
    new_items = cart.items.copy()
    new_items[product_id] = new_items.get(product_id, 0) + 1
    return Cart(items=new_items)


def remove_item(cart: Cart, product_id: int) -> Cart:
    """
    Return a cart with one unit of product_id removed.

    Removing the last unit deletes the entry. Removing a product
    that is not in the cart returns the cart unchanged.
    """
    current = cart.items.get(product_id, 0)
    if current <= 0:
        return cart

    new_items = cart.items.copy()
    if current == 1:
        del new_items[product_id]
    else:
        new_items[product_id] = current - 1
    return Cart(items=new_items)


def clear() -> Cart:
    """Return an empty cart."""
    return Cart()
