"""
Pytest fixtures for storefront tests.
"""

import asyncio
from decimal import Decimal

import pytest

from ..domain.models import AuthSession, Product
from ..gateways.api import APIGateway
from ..gateways.cache import CacheGateway, InMemoryCacheGateway
from ..gateways.connectivity import ManualConnectivitySource
from ..gateways.errors import GatewayError
from ..result import Err, Ok


def make_product(product_id: int, title: str, price: str, category: str = "electronics") -> Product:
    return Product(
        id=product_id,
        title=title,
        price=Decimal(price),
        category=category,
        image=f"https://example.com/{product_id}.png",
    )


@pytest.fixture
def product_a() -> Product:
    """Product A, $10."""
    return make_product(1, "Alpha Backpack", "10.00", "men's clothing")


@pytest.fixture
def product_b() -> Product:
    """Product B, $20."""
    return make_product(2, "Beta Bracelet", "20.00", "jewelery")


@pytest.fixture
def connectivity() -> ManualConnectivitySource:
    return ManualConnectivitySource(connected=True)


class GatedAPIGateway(APIGateway):
    """
    API gateway whose calls block until the test releases them.

    Each call takes the next scripted result. Release with
    `gate.set()`; calls made while the gate is open return at once.
    """

    def __init__(self, products=None, auth=None):
        self.product_results = list(products or [])
        self.auth_results = list(auth or [])
        self.gate = asyncio.Event()
        self.fetch_calls = 0
        self.auth_calls: list[tuple[str, str]] = []

    async def fetch_products(self):
        self.fetch_calls += 1
        result = self.product_results.pop(0) if self.product_results else Ok([])
        await self.gate.wait()
        return result

    async def authenticate(self, username, password):
        self.auth_calls.append((username, password))
        result = (
            self.auth_results.pop(0)
            if self.auth_results
            else Ok(AuthSession(token="token-123"))
        )
        await self.gate.wait()
        return result


class GatedCacheGateway(InMemoryCacheGateway):
    """In-memory cache whose reads block until the test releases them."""

    def __init__(self, products=None, read_error: GatewayError | None = None):
        super().__init__()
        self._seed = list(products or [])
        self.read_error = read_error
        self.read_gate = asyncio.Event()
        self.writes: list[list[Product]] = []

    async def read_all(self):
        await self.read_gate.wait()
        if self.read_error:
            return Err(self.read_error)
        return Ok(list(self._seed))

    async def write_all(self, products):
        self.writes.append(list(products))
        return await super().write_all(products)


class FailingCacheGateway(CacheGateway):
    """Cache whose every operation fails."""

    async def read_all(self):
        return Err(GatewayError.storage("disk unavailable"))

    async def write_all(self, products):
        return Err(GatewayError.storage("disk unavailable"))

    async def get_one(self, product_id):
        return Err(GatewayError.storage("disk unavailable"))

    async def delete_one(self, product_id):
        return Err(GatewayError.storage("disk unavailable"))

    async def clear(self):
        return Err(GatewayError.storage("disk unavailable"))


async def wait_until(predicate, timeout: float = 1.0):
    """Yield to the loop until predicate() holds."""
    async def _poll():
        while not predicate():
            await asyncio.sleep(0.001)
    await asyncio.wait_for(_poll(), timeout)
