"""
API Gateway - Contract for the remote catalog and authentication service.

The concrete HTTP transport is outside the engine. The engine only
depends on APIGateway; InMemoryAPIGateway serves a fixed catalog so
sessions, the CLI and the tests can run without a server.
"""

from __future__ import annotations
import asyncio
import uuid
from abc import ABC, abstractmethod
from typing import Any, TYPE_CHECKING

import structlog

from ..domain.models import AuthSession, Product
from ..result import Err, Ok, Result
from .errors import GatewayError
from .records import decode_products

if TYPE_CHECKING:
    from .connectivity import ConnectivitySource

logger = structlog.get_logger(__name__)


class APIGateway(ABC):
    """Remote catalog and authentication."""

    @abstractmethod
    async def fetch_products(self) -> Result[list[Product], GatewayError]:
        """Fetch the full product list."""

    @abstractmethod
    async def authenticate(
        self, username: str, password: str
    ) -> Result[AuthSession, GatewayError]:
        """Exchange credentials for an auth token."""


class InMemoryAPIGateway(APIGateway):
    """
    API gateway backed by raw product records held in memory.

    Records are decoded on every fetch, exactly as a response body would be.
    When a connectivity source is attached, requests fail with a transport
    error while it reports offline.
    """

    def __init__(
        self,
        records: list[dict[str, Any]],
        credentials: dict[str, str] | None = None,
        connectivity: ConnectivitySource | None = None,
        latency: float = 0.0,
    ):
        self.records = records
        self.credentials = credentials or {}
        self.connectivity = connectivity
        self.latency = latency

    async def fetch_products(self) -> Result[list[Product], GatewayError]:
        offline = await self._simulate_request()
        if offline:
            return Err(offline)
        return decode_products(self.records)

    async def authenticate(
        self, username: str, password: str
    ) -> Result[AuthSession, GatewayError]:
        offline = await self._simulate_request()
        if offline:
            return Err(offline)
        if self.credentials.get(username) != password:
            logger.info("authentication_rejected", username=username)
            return Err(GatewayError.unauthorized())
        return Ok(AuthSession(token=uuid.uuid4().hex))

    async def _simulate_request(self) -> GatewayError | None:
        if self.latency:
            await asyncio.sleep(self.latency)
        if self.connectivity is not None and not self.connectivity.is_connected:
            return GatewayError.transport("The Internet connection appears to be offline.")
        return None
