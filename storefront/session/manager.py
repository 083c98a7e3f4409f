"""
Session Manager - Creates and manages client sessions.

LIFECYCLE:
1. Client starts a session -> login and store engines are created,
   wired to the session's gateways (in-memory only)
2. During the session:
   - Client dispatches user intents to either engine
   - Engines run effects and reconcile cache and network data
   - Connectivity changes reach both engines through their monitors
3. Session ends -> every outstanding effect is cancelled, state dropped

The only data that outlives a session is the product cache, when the
session was given a persistent cache gateway.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import time
import uuid

import structlog

from ..config import Settings
from ..engine_core.effect_engine import EffectEngine
from ..features.login import LoginAction, LoginReducer, LoginState
from ..features.store import StoreAction, StoreReducer, StoreState
from ..gateways.api import APIGateway, InMemoryAPIGateway
from ..gateways.cache import CacheGateway, InMemoryCacheGateway, JSONFileCacheGateway
from ..gateways.connectivity import ConnectivitySource, ManualConnectivitySource
from ..sample_catalog import SAMPLE_CREDENTIALS, SAMPLE_PRODUCTS

logger = structlog.get_logger(__name__)


class SessionState(Enum):
    """State of a client session."""
    ACTIVE = "active"
    ENDED = "ended"  # Closed by the client
    EXPIRED = "expired"  # Removed by stale-session cleanup


@dataclass
class Session:
    """
    A client session.

    Contains:
    - One engine per feature (login, store)
    - The gateways both engines share
    """
    session_id: str
    created_at: float
    login: EffectEngine[LoginState]
    store: EffectEngine[StoreState]

    # Gateways
    api: APIGateway
    cache: CacheGateway
    connectivity: ConnectivitySource

    state: SessionState = SessionState.ACTIVE

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state == SessionState.ACTIVE

    @property
    def is_logged_in(self) -> bool:
        return self.login.state.success

    def start_monitoring(self):
        """Subscribe both engines to connectivity. Must run inside the event loop."""
        self.login.send(LoginAction.start_network_monitoring())
        self.store.send(StoreAction.start_network_monitoring())

    async def close(self):
        """Cancel every outstanding effect of both engines."""
        await self.login.shutdown()
        await self.store.shutdown()


class SessionManager:
    """
    Manages client sessions.

    Responsibilities:
    - Create sessions with injected (or default in-memory) gateways
    - Track active sessions
    - Tear sessions down, cancelling their effects

    No persistence - sessions are in-memory only.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        api: APIGateway | None = None,
        cache: CacheGateway | None = None,
        connectivity: ConnectivitySource | None = None,
    ) -> Session:
        """
        Create a new session.

        Args:
            api: Catalog/auth gateway (defaults to the bundled sample catalog)
            cache: Product cache (JSON file if a cache dir is configured, else in-memory)
            connectivity: Connectivity source (defaults to a manual, online source)

        Returns:
            New Session; its engines start on the first dispatched action
        """
        connectivity = connectivity or ManualConnectivitySource()
        if api is None:
            api = InMemoryAPIGateway(
                SAMPLE_PRODUCTS,
                credentials=SAMPLE_CREDENTIALS,
                connectivity=connectivity,
            )
        if cache is None:
            if self.settings.cache_dir:
                cache = JSONFileCacheGateway(self.settings.cache_dir)
            else:
                cache = InMemoryCacheGateway()

        session_id = str(uuid.uuid4())
        session = Session(
            session_id=session_id,
            created_at=time.time(),
            login=EffectEngine(
                LoginReducer(api, connectivity),
                LoginState(),
                name=f"login-{session_id[:8]}",
            ),
            store=EffectEngine(
                StoreReducer(api, cache, connectivity, checkout_delay=self.settings.checkout_delay),
                StoreState(),
                name=f"store-{session_id[:8]}",
            ),
            api=api,
            cache=cache,
            connectivity=connectivity,
        )

        self._sessions[session_id] = session
        logger.info("session_created", session_id=session_id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    async def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        The session is removed from memory and its effects cancelled.
        Returns False if no such session exists.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False

        session.state = SessionState.ENDED if reason == "completed" else SessionState.EXPIRED
        await session.close()
        logger.info("session_ended", session_id=session_id, reason=reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    async def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        End sessions older than max_age.

        Returns the IDs that were removed.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds
        ]

        for session_id in to_remove:
            await self.end_session(session_id, reason="stale")
        return to_remove

    async def shutdown(self):
        """End every session."""
        for session_id in list(self._sessions):
            await self.end_session(session_id, reason="shutdown")
