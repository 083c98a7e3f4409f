"""
Tests for cache/network reconciliation through the engine.

The gated gateways hold each source until the test releases it, so both
arrival orders can be forced deterministically.
"""

import pytest

from ..engine_core.effect_engine import EffectEngine
from ..features.store import StoreAction, StoreReducer, StoreState
from ..gateways.errors import GatewayError
from ..result import Err, Ok
from .conftest import GatedAPIGateway, GatedCacheGateway, wait_until


def make_engine(api, cache, connectivity) -> EffectEngine:
    reducer = StoreReducer(api, cache, connectivity, checkout_delay=0.01)
    return EffectEngine(reducer, StoreState(), name="store-test")


class TestReconciliationOrder:
    """Cache yields [A], network yields [A, B]."""

    @pytest.mark.asyncio
    async def test_cache_first_then_network(self, product_a, product_b, connectivity):
        """Cache fills the screen early; network then overwrites it."""
        api = GatedAPIGateway(products=[Ok([product_a, product_b])])
        cache = GatedCacheGateway(products=[product_a])
        engine = make_engine(api, cache, connectivity)

        await engine.dispatch(StoreAction.on_appear())
        assert engine.state.loading is True

        cache.read_gate.set()
        await wait_until(lambda: engine.state.products == (product_a,))
        assert engine.state.loading is False

        api.gate.set()
        await engine.settle(timeout=1.0)

        assert engine.state.products == (product_a, product_b)
        assert engine.state.loading is False
        await engine.shutdown()

    @pytest.mark.asyncio
    async def test_network_first_then_cache(self, product_a, product_b, connectivity):
        """A late cache result never replaces network data."""
        api = GatedAPIGateway(products=[Ok([product_a, product_b])])
        cache = GatedCacheGateway(products=[product_a])
        engine = make_engine(api, cache, connectivity)

        await engine.dispatch(StoreAction.on_appear())

        api.gate.set()
        await wait_until(lambda: engine.state.products == (product_a, product_b))

        cache.read_gate.set()
        await engine.settle(timeout=1.0)

        assert engine.state.products == (product_a, product_b)
        assert engine.state.loading is False
        await engine.shutdown()

    @pytest.mark.asyncio
    async def test_network_result_is_persisted(self, product_a, product_b, connectivity):
        """Fetched products are written to the cache."""
        api = GatedAPIGateway(products=[Ok([product_a, product_b])])
        cache = GatedCacheGateway()
        engine = make_engine(api, cache, connectivity)

        api.gate.set()
        cache.read_gate.set()
        engine.send(StoreAction.on_appear())
        await engine.settle(timeout=1.0)

        assert cache.writes == [[product_a, product_b]]
        assert list(cache.records) == [product_a.id, product_b.id]
        await engine.shutdown()


class TestDegradedLoading:
    """Failures on either side."""

    @pytest.mark.asyncio
    async def test_network_failure_keeps_cache(self, product_a, connectivity):
        """Network fails, cache yields [A]: list is [A], nothing persisted."""
        api = GatedAPIGateway(products=[Err(GatewayError.transport("offline"))])
        cache = GatedCacheGateway(products=[product_a])
        engine = make_engine(api, cache, connectivity)

        api.gate.set()
        cache.read_gate.set()
        engine.send(StoreAction.on_appear())
        await engine.settle(timeout=1.0)

        assert engine.state.products == (product_a,)
        assert engine.state.loading is False
        assert cache.writes == []
        await engine.shutdown()

    @pytest.mark.asyncio
    async def test_cache_failure_does_not_block_network(self, product_a, connectivity):
        """A broken cache still lets network data through."""
        api = GatedAPIGateway(products=[Ok([product_a])])
        cache = GatedCacheGateway(read_error=GatewayError.storage("corrupt"))
        engine = make_engine(api, cache, connectivity)

        cache.read_gate.set()
        engine.send(StoreAction.on_appear())
        await wait_until(lambda: StoreAction.cache_products_received([]) in engine.history)

        # The empty cache result is applied and clears loading
        assert engine.state.products == ()
        assert engine.state.loading is False

        api.gate.set()
        await engine.settle(timeout=1.0)
        assert engine.state.products == (product_a,)
        await engine.shutdown()


    @pytest.mark.asyncio
    async def test_refresh_with_failing_network_ends_loading(self, product_a, connectivity):
        """Reloading a populated catalog while the fetch fails keeps it and stops loading."""
        api = GatedAPIGateway(products=[Ok([product_a]), Err(GatewayError.transport("offline"))])
        cache = GatedCacheGateway()
        engine = make_engine(api, cache, connectivity)
        api.gate.set()
        cache.read_gate.set()

        engine.send(StoreAction.on_appear())
        await engine.settle(timeout=1.0)
        assert engine.state.products == (product_a,)

        engine.send(StoreAction.on_appear())
        await engine.settle(timeout=1.0)

        assert engine.state.load_generation == 2
        assert engine.state.products == (product_a,)
        assert engine.state.loading is False
        assert cache.writes == [[product_a]]
        await engine.shutdown()


class TestGenerations:
    """Overlapping loads."""

    @pytest.mark.asyncio
    async def test_superseded_fetch_is_discarded(self, product_a, product_b, connectivity):
        """Only the latest on_appear's network result is applied."""
        api = GatedAPIGateway(products=[Ok([product_b]), Ok([product_a, product_b])])
        cache = GatedCacheGateway()
        engine = make_engine(api, cache, connectivity)
        cache.read_gate.set()

        engine.send(StoreAction.on_appear())
        engine.send(StoreAction.on_appear())
        await engine.drain()
        assert engine.state.load_generation == 2
        await wait_until(lambda: api.fetch_calls == 2)

        api.gate.set()
        await engine.settle(timeout=1.0)

        assert engine.state.products == (product_a, product_b)
        assert cache.writes == [[product_a, product_b]]
        await engine.shutdown()
