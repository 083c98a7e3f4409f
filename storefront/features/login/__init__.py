"""Login feature - credential entry and authentication."""

from .state import (
    LoginState,
    EMPTY_CREDENTIALS_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    is_network_error,
)
from .actions import LoginAction, LoginActionType
from .reducer import LoginReducer, LoginEffectID

__all__ = [
    "LoginState",
    "EMPTY_CREDENTIALS_MESSAGE",
    "NETWORK_ERROR_MESSAGE",
    "is_network_error",
    "LoginAction",
    "LoginActionType",
    "LoginReducer",
    "LoginEffectID",
]
