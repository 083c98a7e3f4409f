"""
Connectivity Source - Contract for the live online/offline signal.

subscribe() yields the current value immediately, then one value per
change. unsubscribe() ends every live subscription.
"""

from __future__ import annotations
import asyncio
from abc import ABC, abstractmethod
from typing import AsyncIterator

import structlog

logger = structlog.get_logger(__name__)

_CLOSED = object()


class ConnectivitySource(ABC):
    """Live stream of connectivity booleans."""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Last known connectivity."""

    @abstractmethod
    def subscribe(self) -> AsyncIterator[bool]:
        """Start a subscription."""

    @abstractmethod
    def unsubscribe(self):
        """Stop emitting to every subscriber."""


class ManualConnectivitySource(ConnectivitySource):
    """
    Connectivity driven by explicit set_connected() calls.

    Used by sessions (toggled through the API) and by tests.
    """

    def __init__(self, connected: bool = True):
        self._connected = connected
        self._subscribers: list[asyncio.Queue] = []

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def set_connected(self, connected: bool):
        """Record a new value; subscribers only hear about changes."""
        if connected == self._connected:
            return
        self._connected = connected
        logger.info("connectivity_changed", connected=connected)
        for queue in self._subscribers:
            queue.put_nowait(connected)

    async def subscribe(self) -> AsyncIterator[bool]:
        queue: asyncio.Queue = asyncio.Queue()
        queue.put_nowait(self._connected)
        self._subscribers.append(queue)
        try:
            while True:
                value = await queue.get()
                if value is _CLOSED:
                    return
                yield value
        finally:
            if queue in self._subscribers:
                self._subscribers.remove(queue)

    def unsubscribe(self):
        for queue in self._subscribers:
            queue.put_nowait(_CLOSED)
        self._subscribers.clear()
