"""
Store Reducer - Catalog browsing, cart, checkout and reconciliation.

Reconciliation policy (order-tolerant):
- on_appear reads the cache and fetches the network concurrently
- Cache data is applied only while the product list is still empty
- Network data always overwrites the list and is then persisted
- A failed network fetch is logged and ends loading; listed products stay
- A cache failure is logged and treated as an empty cache

Whichever order the two results arrive in, the list converges to the
network result whenever the network succeeds.
"""

from __future__ import annotations

import structlog

from ...domain import cart as cart_engine
from ...domain.models import Product
from ...engine_core.action import Action, ActionResult
from ...engine_core.effect import Effect
from ...engine_core.reducer import Reducer
from ...gateways.api import APIGateway
from ...gateways.cache import CacheGateway
from ...gateways.connectivity import ConnectivitySource
from ...result import Err, Ok
from .actions import StoreAction, StoreActionType
from .state import ALL_CATEGORIES, StoreState

logger = structlog.get_logger(__name__)

DEFAULT_CHECKOUT_DELAY = 2.0


class StoreEffectID:
    """Stable identities of cancellable store effects."""
    NETWORK_MONITOR = "store.network_monitor"
    CHECKOUT_TIMER = "store.checkout_timer"


class StoreReducer(Reducer[StoreState]):
    """
    Reducer for the store screen.

    Gateways are injected; the reducer only captures them in effects.
    checkout_delay is how long the order confirmation shows before
    the cart is cleared.
    """

    def __init__(
        self,
        api: APIGateway,
        cache: CacheGateway,
        connectivity: ConnectivitySource,
        checkout_delay: float = DEFAULT_CHECKOUT_DELAY,
    ):
        self.api = api
        self.cache = cache
        self.connectivity = connectivity
        self.checkout_delay = checkout_delay

    def _handlers(self):
        return {
            StoreActionType.ON_APPEAR: self._handle_on_appear,
            StoreActionType.SELECT_CATEGORY: self._handle_select_category,
            StoreActionType.TEXT_CHANGED: self._handle_text_changed,
            StoreActionType.TOGGLE_FAVORITE: self._handle_toggle_favorite,
            StoreActionType.TOGGLE_FAVORITES_ONLY: self._handle_toggle_favorites_only,
            StoreActionType.ADD_TO_CART: self._handle_add_to_cart,
            StoreActionType.REMOVE_FROM_CART: self._handle_remove_from_cart,
            StoreActionType.COMPLETE_ORDER: self._handle_complete_order,
            StoreActionType.CLEAR_CART: self._handle_clear_cart,
            StoreActionType.LOAD_PRODUCTS_FROM_CACHE: self._handle_load_from_cache,
            StoreActionType.CACHE_PRODUCTS_RECEIVED: self._handle_cache_products,
            StoreActionType.LIST_OF_PRODUCTS_RECEIVED: self._handle_network_products,
            StoreActionType.CATALOG_FETCH_FAILED: self._handle_fetch_failed,
            StoreActionType.NETWORK_STATUS_CHANGED: self._handle_network_status,
            StoreActionType.START_NETWORK_MONITORING: self._handle_start_monitoring,
            StoreActionType.STOP_NETWORK_MONITORING: self._handle_stop_monitoring,
            StoreActionType.DISMISS_CONNECTIVITY_BANNER: self._handle_dismiss_banner,
        }

    # =========================================================================
    # Browsing
    # =========================================================================

    def _handle_select_category(self, state: StoreState, action: Action) -> ActionResult:
        category = action.payload.category or ALL_CATEGORIES
        return ActionResult.success_with_state(state._copy_with(selected_category=category))

    def _handle_text_changed(self, state: StoreState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(search_text=action.payload.text or "")
        )

    def _handle_toggle_favorite(self, state: StoreState, action: Action) -> ActionResult:
        product_id = action.payload.product_id
        if state.is_favorite(product_id):
            favorites = tuple(p for p in state.favorites if p.id != product_id)
            return ActionResult.success_with_state(
                state._copy_with(favorites=favorites),
                changes=[f"Product {product_id} removed from favorites"],
            )

        product = state.get_product(product_id)
        if product is None:
            return ActionResult.success_with_state(
                state, changes=[f"Product {product_id} not in catalog, favorite ignored"]
            )
        return ActionResult.success_with_state(
            state._copy_with(favorites=state.favorites + (product,)),
            changes=[f"Product {product_id} added to favorites"],
        )

    def _handle_toggle_favorites_only(self, state: StoreState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(favorites_only=not state.favorites_only)
        )

    # =========================================================================
    # Cart and checkout
    # =========================================================================

    def _handle_add_to_cart(self, state: StoreState, action: Action) -> ActionResult:
        new_cart = cart_engine.add_item(state.cart, action.payload.product_id)
        return ActionResult.success_with_state(state._copy_with(cart=new_cart))

    def _handle_remove_from_cart(self, state: StoreState, action: Action) -> ActionResult:
        new_cart = cart_engine.remove_item(state.cart, action.payload.product_id)
        return ActionResult.success_with_state(state._copy_with(cart=new_cart))

    def _handle_complete_order(self, state: StoreState, action: Action) -> ActionResult:
        # Checkout needs the network
        if not state.is_connected:
            return ActionResult.success_with_state(
                state, changes=["Checkout ignored while offline"]
            )

        return ActionResult.success_with_state(
            state._copy_with(show_order_success=True),
            effects=[Effect.delay(
                self.checkout_delay,
                StoreAction.clear_cart(),
                effect_id=StoreEffectID.CHECKOUT_TIMER,
            )],
            changes=[f"Order placed for {state.cart.total_items} item(s)"],
        )

    def _handle_clear_cart(self, state: StoreState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(show_order_success=False, cart=cart_engine.clear())
        )

    # =========================================================================
    # Catalog loading and reconciliation
    # =========================================================================

    def _handle_on_appear(self, state: StoreState, action: Action) -> ActionResult:
        generation = state.load_generation + 1
        new_state = state._copy_with(loading=True, load_generation=generation)

        api = self.api

        async def fetch_catalog(send):
            result = await api.fetch_products()
            if isinstance(result, Ok):
                send(StoreAction.list_of_products_received(result.value, generation=generation))
            else:
                logger.warning(
                    "catalog_fetch_failed",
                    generation=generation,
                    kind=result.error.kind.value,
                    error=str(result.error),
                )
                send(StoreAction.catalog_fetch_failed(result.error, generation=generation))

        # Cache read and network fetch race; neither waits for the other
        return ActionResult.success_with_state(
            new_state,
            effects=[
                Effect.send(StoreAction.load_products_from_cache()),
                Effect.run(fetch_catalog, description=f"fetch catalog (generation {generation})"),
            ],
            changes=[f"Catalog load {generation} started"],
        )

    def _handle_load_from_cache(self, state: StoreState, action: Action) -> ActionResult:
        cache = self.cache

        async def read_cache(send):
            result = await cache.read_all()
            if isinstance(result, Err):
                logger.warning("cache_read_failed", error=str(result.error))
                products = []
            else:
                products = result.value
            send(StoreAction.cache_products_received(products))

        return ActionResult.success_with_state(
            state, effects=[Effect.run(read_cache, description="read product cache")]
        )

    def _handle_cache_products(self, state: StoreState, action: Action) -> ActionResult:
        if state.products:
            return ActionResult.success_with_state(
                state, changes=["Cached products ignored, catalog already populated"]
            )

        products = action.payload.products or ()
        return ActionResult.success_with_state(
            state._copy_with(products=products, loading=False),
            changes=[f"Showing {len(products)} cached product(s)"],
        )

    def _handle_network_products(self, state: StoreState, action: Action) -> ActionResult:
        generation = action.payload.generation
        if generation is not None and generation != state.load_generation:
            logger.info(
                "stale_catalog_discarded",
                result_generation=generation,
                current_generation=state.load_generation,
            )
            return ActionResult.success_with_state(
                state, changes=[f"Discarded catalog from superseded load {generation}"]
            )

        products = action.payload.products or ()
        new_state = state._copy_with(products=products, loading=False)
        return ActionResult.success_with_state(
            new_state,
            effects=[self._persist_effect(list(products))],
            changes=[f"Showing {len(products)} product(s) from network"],
        )

    def _handle_fetch_failed(self, state: StoreState, action: Action) -> ActionResult:
        generation = action.payload.generation
        if generation is not None and generation != state.load_generation:
            return ActionResult.success_with_state(
                state, changes=[f"Ignored failure of superseded load {generation}"]
            )

        # Whatever is already listed stays on screen
        return ActionResult.success_with_state(
            state._copy_with(loading=False),
            changes=[f"Catalog fetch failed, keeping {len(state.products)} product(s)"],
        )

    def _persist_effect(self, products: list[Product]) -> Effect:
        cache = self.cache

        async def persist(send):
            result = await cache.write_all(products)
            if isinstance(result, Err):
                logger.warning("cache_write_failed", count=len(products), error=str(result.error))
            else:
                logger.debug("cache_written", count=len(products))

        return Effect.fire_and_forget(persist, description=f"cache {len(products)} product(s)")

    # =========================================================================
    # Connectivity
    # =========================================================================

    def _handle_network_status(self, state: StoreState, action: Action) -> ActionResult:
        is_connected = bool(action.payload.is_connected)
        was_disconnected = not state.is_connected
        new_state = state._copy_with(is_connected=is_connected)

        if not is_connected:
            new_state = new_state._copy_with(show_connectivity_banner=True, loading=False)
            return ActionResult.success_with_state(new_state)

        effects = []
        if was_disconnected:
            new_state = new_state._copy_with(show_connectivity_banner=False)
            if not state.products:
                effects.append(Effect.send(StoreAction.on_appear()))

        return ActionResult.success_with_state(
            new_state,
            effects=effects,
            changes=["Retrying catalog load after reconnect"] if effects else [],
        )

    def _handle_start_monitoring(self, state: StoreState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state,
            effects=[Effect.stream(
                self.connectivity.subscribe,
                StoreAction.network_status_changed,
                effect_id=StoreEffectID.NETWORK_MONITOR,
                description="store connectivity monitor",
            )],
        )

    def _handle_stop_monitoring(self, state: StoreState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state, effects=[Effect.cancel(StoreEffectID.NETWORK_MONITOR)]
        )

    def _handle_dismiss_banner(self, state: StoreState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(state._copy_with(show_connectivity_banner=False))
