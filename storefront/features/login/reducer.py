"""
Login Reducer - State machine for credential entry and authentication.

Transitions:
- Field edits clear any existing error
- Tapping login with an empty field sets a validation error, no request
- Tapping login otherwise starts one authentication effect
- A response clears loading; success schedules navigation
- Losing connectivity aborts an in-flight attempt locally
- Regaining connectivity clears network errors only
"""

from __future__ import annotations

import structlog

from ...engine_core.action import Action, ActionResult
from ...engine_core.effect import Effect
from ...engine_core.reducer import Reducer
from ...gateways.api import APIGateway
from ...gateways.connectivity import ConnectivitySource
from ...result import Err, Ok
from .actions import LoginAction, LoginActionType
from .state import (
    EMPTY_CREDENTIALS_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    LoginState,
    is_network_error,
)

logger = structlog.get_logger(__name__)


class LoginEffectID:
    """Stable identities of cancellable login effects."""
    NETWORK_MONITOR = "login.network_monitor"


class LoginReducer(Reducer[LoginState]):
    """
    Reducer for the login screen.

    Gateways are injected; the reducer only captures them in effects.
    """

    def __init__(self, api: APIGateway, connectivity: ConnectivitySource):
        self.api = api
        self.connectivity = connectivity

    def _handlers(self):
        return {
            LoginActionType.USERNAME_CHANGED: self._handle_username_changed,
            LoginActionType.PASSWORD_CHANGED: self._handle_password_changed,
            LoginActionType.TOGGLE_PASSWORD_VISIBILITY: self._handle_toggle_password,
            LoginActionType.LOGIN_BUTTON_TAPPED: self._handle_login_tapped,
            LoginActionType.LOGIN_RESPONSE: self._handle_login_response,
            LoginActionType.DISMISS_ERROR: self._handle_dismiss_error,
            LoginActionType.NAVIGATE_TO_STORE: self._handle_navigate,
            LoginActionType.NETWORK_STATUS_CHANGED: self._handle_network_status,
            LoginActionType.START_NETWORK_MONITORING: self._handle_start_monitoring,
            LoginActionType.STOP_NETWORK_MONITORING: self._handle_stop_monitoring,
            LoginActionType.DISMISS_CONNECTIVITY_BANNER: self._handle_dismiss_banner,
        }

    # =========================================================================
    # Credentials
    # =========================================================================

    def _handle_username_changed(self, state: LoginState, action: Action) -> ActionResult:
        new_state = state._copy_with(username=action.payload.text or "", error_message=None)
        return ActionResult.success_with_state(new_state)

    def _handle_password_changed(self, state: LoginState, action: Action) -> ActionResult:
        new_state = state._copy_with(password=action.payload.text or "", error_message=None)
        return ActionResult.success_with_state(new_state)

    def _handle_toggle_password(self, state: LoginState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(show_password=not state.show_password)
        )

    def _handle_dismiss_error(self, state: LoginState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(state._copy_with(error_message=None))

    # =========================================================================
    # Authentication
    # =========================================================================

    def _handle_login_tapped(self, state: LoginState, action: Action) -> ActionResult:
        if not state.username or not state.password:
            return ActionResult.success_with_state(
                state._copy_with(error_message=EMPTY_CREDENTIALS_MESSAGE),
                changes=["Rejected login with empty credentials"],
            )

        attempt = state.attempt + 1
        new_state = state._copy_with(loading=True, error_message=None, attempt=attempt)

        # Snapshot taken now; later edits do not affect this request
        username, password = state.username, state.password
        api = self.api

        async def authenticate(send):
            result = await api.authenticate(username, password)
            send(LoginAction.login_response(result, attempt=attempt))

        return ActionResult.success_with_state(
            new_state,
            effects=[Effect.run(
                authenticate,
                description=f"authenticate {username}",
            )],
            changes=[f"Login attempt {attempt} started for {username}"],
        )

    def _handle_login_response(self, state: LoginState, action: Action) -> ActionResult:
        attempt = action.payload.generation
        if not state.loading or (attempt is not None and attempt != state.attempt):
            logger.info(
                "stale_login_response_discarded",
                response_attempt=attempt,
                current_attempt=state.attempt,
                loading=state.loading,
            )
            return ActionResult.success_with_state(
                state, changes=[f"Discarded stale login response for attempt {attempt}"]
            )

        result = action.payload.result
        if isinstance(result, Ok):
            new_state = state._copy_with(
                loading=False,
                success=True,
                auth_token=result.value.token,
            )
            return ActionResult.success_with_state(
                new_state,
                effects=[Effect.send(LoginAction.navigate_to_store())],
                changes=["Login succeeded"],
            )

        if isinstance(result, Err):
            new_state = state._copy_with(loading=False, error_message=str(result.error))
            return ActionResult.success_with_state(
                new_state, changes=[f"Login failed: {result.error}"]
            )

        return ActionResult.failure(f"Login response carries no result: {result!r}")

    def _handle_navigate(self, state: LoginState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(state._copy_with(should_navigate_to_store=True))

    # =========================================================================
    # Connectivity
    # =========================================================================

    def _handle_network_status(self, state: LoginState, action: Action) -> ActionResult:
        is_connected = bool(action.payload.is_connected)
        was_disconnected = not state.is_connected
        new_state = state._copy_with(is_connected=is_connected)

        if not is_connected:
            new_state = new_state._copy_with(show_connectivity_banner=True)
            if state.loading:
                # The request keeps running; bumping the attempt makes its reply stale
                new_state = new_state._copy_with(
                    loading=False,
                    error_message=NETWORK_ERROR_MESSAGE,
                    attempt=state.attempt + 1,
                )
                return ActionResult.success_with_state(
                    new_state, changes=[f"Login attempt {state.attempt} aborted: offline"]
                )
        elif was_disconnected:
            new_state = new_state._copy_with(show_connectivity_banner=False)
            if is_network_error(state.error_message):
                new_state = new_state._copy_with(error_message=None)

        return ActionResult.success_with_state(new_state)

    def _handle_start_monitoring(self, state: LoginState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state,
            effects=[Effect.stream(
                self.connectivity.subscribe,
                LoginAction.network_status_changed,
                effect_id=LoginEffectID.NETWORK_MONITOR,
                description="login connectivity monitor",
            )],
        )

    def _handle_stop_monitoring(self, state: LoginState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            state, effects=[Effect.cancel(LoginEffectID.NETWORK_MONITOR)]
        )

    def _handle_dismiss_banner(self, state: LoginState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(state._copy_with(show_connectivity_banner=False))
