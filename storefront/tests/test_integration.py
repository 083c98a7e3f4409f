"""
Integration tests - End-to-end workflow tests.

Tests the complete flow:
1. Create session
2. Log in
3. Load the catalog (cache, then network)
4. Fill the cart and check out
"""

from decimal import Decimal

import pytest

from ..config import Settings
from ..features.login import LoginAction
from ..features.store import StoreAction
from ..gateways.api import InMemoryAPIGateway
from ..gateways.cache import JSONFileCacheGateway
from ..gateways.connectivity import ManualConnectivitySource
from ..gateways.records import encode_product
from ..session import SessionManager


class TestShoppingFlow:
    """Tests for a complete shopping session."""

    @pytest.mark.asyncio
    async def test_cart_totals(self, product_a, product_b):
        """A x2 + B x1 totals $40.00."""
        api = InMemoryAPIGateway([encode_product(product_a), encode_product(product_b)])
        manager = SessionManager(Settings(checkout_delay=0.01))
        session = manager.create_session(api=api)
        store = session.store

        store.send(StoreAction.on_appear())
        await store.settle(timeout=1.0)
        assert store.state.cart.is_empty

        store.send(StoreAction.add_to_cart(product_a.id))
        store.send(StoreAction.add_to_cart(product_a.id))
        store.send(StoreAction.add_to_cart(product_b.id))
        await store.drain()

        state = store.state
        assert state.cart.items == {product_a.id: 2, product_b.id: 1}
        assert [(line.product.id, line.quantity) for line in state.cart_lines] == [
            (product_a.id, 2),
            (product_b.id, 1),
        ]
        assert state.total_price == Decimal("40.00")

        store.send(StoreAction.complete_order())
        await store.drain()
        assert store.state.show_order_success is True

        await store.settle(timeout=1.0)
        assert store.state.cart.is_empty
        assert store.state.show_order_success is False
        await manager.shutdown()

    @pytest.mark.asyncio
    async def test_login_then_shop(self):
        """Login with the sample credentials, then browse."""
        manager = SessionManager(Settings(checkout_delay=0.01))
        session = manager.create_session()
        session.start_monitoring()

        session.login.send(LoginAction.username_changed("mor_2314"))
        session.login.send(LoginAction.password_changed("wrong"))
        session.login.send(LoginAction.login_button_tapped())
        await session.login.settle(timeout=1.0)
        assert session.login.state.error_message == "Unauthorized access"

        session.login.send(LoginAction.password_changed("83r5^_"))
        session.login.send(LoginAction.login_button_tapped())
        await session.login.settle(timeout=1.0)
        assert session.login.state.error_message is None
        assert session.login.state.should_navigate_to_store is True

        session.store.send(StoreAction.on_appear())
        session.store.send(StoreAction.select_category("Jewelery"))
        await session.store.settle(timeout=1.0)
        assert [p.id for p in session.store.state.filtered_products] == [5]
        await manager.shutdown()


class TestOfflineFirst:
    """Tests for cache-backed loading across sessions."""

    @pytest.mark.asyncio
    async def test_offline_session_serves_previous_catalog(self, tmp_path, product_a, product_b):
        """A catalog fetched online is served from cache when offline later."""
        records = [encode_product(product_a), encode_product(product_b)]
        manager = SessionManager(Settings(cache_dir=tmp_path, checkout_delay=0.01))

        online = ManualConnectivitySource(connected=True)
        first = manager.create_session(
            api=InMemoryAPIGateway(records, connectivity=online), connectivity=online
        )
        first.store.send(StoreAction.on_appear())
        await first.store.settle(timeout=1.0)
        assert first.store.state.products == (product_a, product_b)

        offline = ManualConnectivitySource(connected=False)
        second = manager.create_session(
            api=InMemoryAPIGateway(records, connectivity=offline), connectivity=offline
        )
        second.start_monitoring()
        second.store.send(StoreAction.on_appear())
        await second.store.settle(timeout=1.0)

        state = second.store.state
        assert state.products == (product_a, product_b)
        assert state.is_connected is False
        assert state.show_connectivity_banner is True
        assert isinstance(second.cache, JSONFileCacheGateway)
        await manager.shutdown()
