"""
Login Actions - The closed set of events the login reducer accepts.
"""

from __future__ import annotations
from enum import Enum

from ...engine_core.action import Action, ActionPayload
from ...result import Result


class LoginActionType(Enum):
    """Types of login actions."""
    # User intents
    USERNAME_CHANGED = "username_changed"
    PASSWORD_CHANGED = "password_changed"
    TOGGLE_PASSWORD_VISIBILITY = "toggle_password_visibility"
    LOGIN_BUTTON_TAPPED = "login_button_tapped"
    DISMISS_ERROR = "dismiss_error"
    DISMISS_CONNECTIVITY_BANNER = "dismiss_connectivity_banner"

    # Effect results
    LOGIN_RESPONSE = "login_response"
    NAVIGATE_TO_STORE = "navigate_to_store"

    # Connectivity
    NETWORK_STATUS_CHANGED = "network_status_changed"
    START_NETWORK_MONITORING = "start_network_monitoring"
    STOP_NETWORK_MONITORING = "stop_network_monitoring"


class LoginAction(Action):
    """Factories for login actions."""

    @classmethod
    def username_changed(cls, text: str) -> LoginAction:
        return cls(LoginActionType.USERNAME_CHANGED, ActionPayload(text=text))

    @classmethod
    def password_changed(cls, text: str) -> LoginAction:
        return cls(LoginActionType.PASSWORD_CHANGED, ActionPayload(text=text))

    @classmethod
    def toggle_password_visibility(cls) -> LoginAction:
        return cls(LoginActionType.TOGGLE_PASSWORD_VISIBILITY)

    @classmethod
    def login_button_tapped(cls) -> LoginAction:
        return cls(LoginActionType.LOGIN_BUTTON_TAPPED)

    @classmethod
    def login_response(cls, result: Result, attempt: int | None = None) -> LoginAction:
        """Factory for an authentication result, tagged with its attempt."""
        return cls(
            LoginActionType.LOGIN_RESPONSE,
            ActionPayload(result=result, generation=attempt),
        )

    @classmethod
    def dismiss_error(cls) -> LoginAction:
        return cls(LoginActionType.DISMISS_ERROR)

    @classmethod
    def navigate_to_store(cls) -> LoginAction:
        return cls(LoginActionType.NAVIGATE_TO_STORE)

    @classmethod
    def network_status_changed(cls, is_connected: bool) -> LoginAction:
        return cls(
            LoginActionType.NETWORK_STATUS_CHANGED,
            ActionPayload(is_connected=is_connected),
        )

    @classmethod
    def start_network_monitoring(cls) -> LoginAction:
        return cls(LoginActionType.START_NETWORK_MONITORING)

    @classmethod
    def stop_network_monitoring(cls) -> LoginAction:
        return cls(LoginActionType.STOP_NETWORK_MONITORING)

    @classmethod
    def dismiss_connectivity_banner(cls) -> LoginAction:
        return cls(LoginActionType.DISMISS_CONNECTIVITY_BANNER)
