"""
Store Actions - The closed set of events the store reducer accepts.
"""

from __future__ import annotations
from enum import Enum
from typing import Iterable

from ...domain.models import Product
from ...engine_core.action import Action, ActionPayload


class StoreActionType(Enum):
    """Types of store actions."""
    # Catalog browsing
    ON_APPEAR = "on_appear"
    SELECT_CATEGORY = "select_category"
    TEXT_CHANGED = "text_changed"
    TOGGLE_FAVORITE = "toggle_favorite"
    TOGGLE_FAVORITES_ONLY = "toggle_favorites_only"

    # Cart and checkout
    ADD_TO_CART = "add_to_cart"
    REMOVE_FROM_CART = "remove_from_cart"
    COMPLETE_ORDER = "complete_order"
    CLEAR_CART = "clear_cart"

    # Reconciliation
    LOAD_PRODUCTS_FROM_CACHE = "load_products_from_cache"
    CACHE_PRODUCTS_RECEIVED = "cache_products_received"
    LIST_OF_PRODUCTS_RECEIVED = "list_of_products_received"
    CATALOG_FETCH_FAILED = "catalog_fetch_failed"

    # Connectivity
    NETWORK_STATUS_CHANGED = "network_status_changed"
    START_NETWORK_MONITORING = "start_network_monitoring"
    STOP_NETWORK_MONITORING = "stop_network_monitoring"
    DISMISS_CONNECTIVITY_BANNER = "dismiss_connectivity_banner"


class StoreAction(Action):
    """Factories for store actions."""

    @classmethod
    def on_appear(cls) -> StoreAction:
        return cls(StoreActionType.ON_APPEAR)

    @classmethod
    def select_category(cls, category: str) -> StoreAction:
        return cls(StoreActionType.SELECT_CATEGORY, ActionPayload(category=category))

    @classmethod
    def text_changed(cls, text: str) -> StoreAction:
        return cls(StoreActionType.TEXT_CHANGED, ActionPayload(text=text))

    @classmethod
    def toggle_favorite(cls, product_id: int) -> StoreAction:
        return cls(StoreActionType.TOGGLE_FAVORITE, ActionPayload(product_id=product_id))

    @classmethod
    def toggle_favorites_only(cls) -> StoreAction:
        return cls(StoreActionType.TOGGLE_FAVORITES_ONLY)

    @classmethod
    def add_to_cart(cls, product_id: int) -> StoreAction:
        return cls(StoreActionType.ADD_TO_CART, ActionPayload(product_id=product_id))

    @classmethod
    def remove_from_cart(cls, product_id: int) -> StoreAction:
        return cls(StoreActionType.REMOVE_FROM_CART, ActionPayload(product_id=product_id))

    @classmethod
    def complete_order(cls) -> StoreAction:
        return cls(StoreActionType.COMPLETE_ORDER)

    @classmethod
    def clear_cart(cls) -> StoreAction:
        return cls(StoreActionType.CLEAR_CART)

    @classmethod
    def load_products_from_cache(cls) -> StoreAction:
        return cls(StoreActionType.LOAD_PRODUCTS_FROM_CACHE)

    @classmethod
    def cache_products_received(cls, products: Iterable[Product]) -> StoreAction:
        return cls(
            StoreActionType.CACHE_PRODUCTS_RECEIVED,
            ActionPayload(products=tuple(products)),
        )

    @classmethod
    def list_of_products_received(
        cls, products: Iterable[Product], generation: int | None = None
    ) -> StoreAction:
        """Factory for a network catalog result, tagged with its load generation."""
        return cls(
            StoreActionType.LIST_OF_PRODUCTS_RECEIVED,
            ActionPayload(products=tuple(products), generation=generation),
        )

    @classmethod
    def catalog_fetch_failed(cls, error, generation: int | None = None) -> StoreAction:
        """Factory for a failed network fetch; error is the GatewayError."""
        return cls(
            StoreActionType.CATALOG_FETCH_FAILED,
            ActionPayload(result=error, generation=generation),
        )

    @classmethod
    def network_status_changed(cls, is_connected: bool) -> StoreAction:
        return cls(
            StoreActionType.NETWORK_STATUS_CHANGED,
            ActionPayload(is_connected=is_connected),
        )

    @classmethod
    def start_network_monitoring(cls) -> StoreAction:
        return cls(StoreActionType.START_NETWORK_MONITORING)

    @classmethod
    def stop_network_monitoring(cls) -> StoreAction:
        return cls(StoreActionType.STOP_NETWORK_MONITORING)

    @classmethod
    def dismiss_connectivity_banner(cls) -> StoreAction:
        return cls(StoreActionType.DISMISS_CONNECTIVITY_BANNER)
