"""
API Service - Business logic layer between the HTTP API and the engines.

The service:
1. Translates requests into feature actions
2. Manages sessions
3. Waits for the mutation lane (optionally for effects) before answering
4. Formats engine state, including derived views, as response models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass, field

import structlog

from ..engine_core.action import Action
from ..features.login import LoginAction, LoginState
from ..features.store import StoreAction, StoreState
from ..gateways.connectivity import ManualConnectivitySource
from ..session import Session, SessionManager
from .schemas import (
    # Requests
    LoginActionRequest,
    StoreActionRequest,
    ConnectivityRequest,
    # Responses
    LoginStateResponse,
    StoreStateResponse,
    SessionResponse,
    SessionListResponse,
    ErrorResponse,
    # Shared
    ProductInfo,
    CartLineInfo,
    # Enums
    ErrorCode,
    LoginActionName,
    SessionStatus,
    StoreActionName,
)

logger = structlog.get_logger(__name__)

DEFAULT_EFFECT_TIMEOUT = 10.0


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        session = await service.create_session()
        await service.dispatch_store(session.session_id, StoreActionRequest(type="on_appear"))
        state = service.get_store_state(session.session_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    effect_timeout: float = DEFAULT_EFFECT_TIMEOUT

    # =========================================================================
    # Sessions
    # =========================================================================

    async def create_session(self) -> SessionResponse:
        """Create a session and start connectivity monitoring for it."""
        session = self.session_manager.create_session()
        session.start_monitoring()
        await session.login.drain()
        await session.store.drain()
        return self._session_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._session_response(session)

    async def end_session(self, session_id: str) -> bool:
        return await self.session_manager.end_session(session_id)

    def list_sessions(self) -> SessionListResponse:
        sessions = self.session_manager.list_active_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    async def set_connectivity(
        self, session_id: str, request: ConnectivityRequest
    ) -> SessionResponse | ErrorResponse:
        """Flip a session's simulated connectivity and let both engines react."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        if not isinstance(session.connectivity, ManualConnectivitySource):
            return ErrorResponse(
                error="Session connectivity is not controllable",
                error_code=ErrorCode.INVALID_ACTION,
            )

        session.connectivity.set_connected(request.connected)
        # Let the monitors pick the value up before draining
        await asyncio.sleep(0)
        await session.login.drain()
        await session.store.drain()
        return self._session_response(session)

    # =========================================================================
    # Login
    # =========================================================================

    def get_login_state(self, session_id: str) -> LoginStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._login_response(session_id, session.login.state)

    async def dispatch_login(
        self,
        session_id: str,
        request: LoginActionRequest,
        wait_for_effects: bool = False,
    ) -> LoginStateResponse | ErrorResponse:
        """Dispatch a login intent."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)

        try:
            action = self._login_action(request)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_ACTION)

        await self._dispatch(session.login, action, wait_for_effects)
        return self._login_response(session_id, session.login.state)

    # =========================================================================
    # Store
    # =========================================================================

    def get_store_state(self, session_id: str) -> StoreStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._store_response(session_id, session.store.state)

    async def dispatch_store(
        self,
        session_id: str,
        request: StoreActionRequest,
        wait_for_effects: bool = False,
    ) -> StoreStateResponse | ErrorResponse:
        """Dispatch a store intent."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)

        try:
            action = self._store_action(request)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_ACTION)

        await self._dispatch(session.store, action, wait_for_effects)
        return self._store_response(session_id, session.store.state)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _dispatch(self, engine, action: Action, wait_for_effects: bool):
        engine.send(action)
        if wait_for_effects:
            await engine.settle(timeout=self.effect_timeout)
        else:
            await engine.drain()

    def _login_action(self, request: LoginActionRequest) -> Action:
        name = _parse_name(LoginActionName, request.type)
        if name in (LoginActionName.USERNAME_CHANGED, LoginActionName.PASSWORD_CHANGED):
            if request.text is None:
                raise ValueError(f"{name.value} requires 'text'")
            if name == LoginActionName.USERNAME_CHANGED:
                return LoginAction.username_changed(request.text)
            return LoginAction.password_changed(request.text)

        factories = {
            LoginActionName.TOGGLE_PASSWORD_VISIBILITY: LoginAction.toggle_password_visibility,
            LoginActionName.LOGIN_BUTTON_TAPPED: LoginAction.login_button_tapped,
            LoginActionName.DISMISS_ERROR: LoginAction.dismiss_error,
            LoginActionName.DISMISS_CONNECTIVITY_BANNER: LoginAction.dismiss_connectivity_banner,
        }
        return factories[name]()

    def _store_action(self, request: StoreActionRequest) -> Action:
        name = _parse_name(StoreActionName, request.type)
        if name == StoreActionName.SELECT_CATEGORY:
            if request.category is None:
                raise ValueError("select_category requires 'category'")
            return StoreAction.select_category(request.category)

        if name == StoreActionName.TEXT_CHANGED:
            return StoreAction.text_changed(request.text or "")

        with_product = {
            StoreActionName.ADD_TO_CART: StoreAction.add_to_cart,
            StoreActionName.REMOVE_FROM_CART: StoreAction.remove_from_cart,
            StoreActionName.TOGGLE_FAVORITE: StoreAction.toggle_favorite,
        }
        if name in with_product:
            if request.product_id is None:
                raise ValueError(f"{name.value} requires 'product_id'")
            return with_product[name](request.product_id)

        factories = {
            StoreActionName.ON_APPEAR: StoreAction.on_appear,
            StoreActionName.TOGGLE_FAVORITES_ONLY: StoreAction.toggle_favorites_only,
            StoreActionName.COMPLETE_ORDER: StoreAction.complete_order,
            StoreActionName.DISMISS_CONNECTIVITY_BANNER: StoreAction.dismiss_connectivity_banner,
        }
        return factories[name]()

    def _session_not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            created_at=session.created_at,
            is_logged_in=session.is_logged_in,
            is_connected=session.connectivity.is_connected,
        )

    def _login_response(self, session_id: str, state: LoginState) -> LoginStateResponse:
        return LoginStateResponse(
            session_id=session_id,
            username=state.username,
            has_password=bool(state.password),
            loading=state.loading,
            success=state.success,
            error_message=state.error_message,
            show_password=state.show_password,
            should_navigate_to_store=state.should_navigate_to_store,
            is_connected=state.is_connected,
            show_connectivity_banner=state.show_connectivity_banner,
        )

    def _store_response(self, session_id: str, state: StoreState) -> StoreStateResponse:
        def product_info(product) -> ProductInfo:
            return ProductInfo(
                id=product.id,
                title=product.title,
                price=product.price,
                category=product.category,
                image=product.image,
                description=product.description,
                is_favorite=state.is_favorite(product.id),
            )

        return StoreStateResponse(
            session_id=session_id,
            search_text=state.search_text,
            selected_category=state.selected_category,
            loading=state.loading,
            is_connected=state.is_connected,
            show_connectivity_banner=state.show_connectivity_banner,
            show_order_success=state.show_order_success,
            favorites_only=state.favorites_only,
            categories=state.unique_categories,
            products=[product_info(p) for p in state.products],
            filtered_products=[product_info(p) for p in state.filtered_products],
            cart=[
                CartLineInfo(
                    product=product_info(line.product),
                    quantity=line.quantity,
                    subtotal=line.subtotal,
                )
                for line in state.cart_lines
            ],
            cart_item_count=state.cart.total_items,
            total_price=state.total_price,
        )


def _parse_name(names, value: str):
    """Only user intents are accepted; effect results stay internal."""
    try:
        return names(value)
    except ValueError:
        raise ValueError(f"Unknown or internal action: {value}") from None
