"""Store feature - catalog, cart, checkout and offline-first loading."""

from .state import StoreState, CartLine, ALL_CATEGORIES, display_category
from .actions import StoreAction, StoreActionType
from .reducer import StoreReducer, StoreEffectID, DEFAULT_CHECKOUT_DELAY

__all__ = [
    "StoreState",
    "CartLine",
    "ALL_CATEGORIES",
    "display_category",
    "StoreAction",
    "StoreActionType",
    "StoreReducer",
    "StoreEffectID",
    "DEFAULT_CHECKOUT_DELAY",
]
