"""
Login State - Credential entry and authentication outcome.
"""

from __future__ import annotations
from dataclasses import dataclass, replace

NETWORK_ERROR_MESSAGE = "No internet connection. Please check your network and try again."
EMPTY_CREDENTIALS_MESSAGE = "Please enter both username and password"

# Substrings that mark an error message as connectivity-related
NETWORK_ERROR_MARKERS = ("internet", "network")


def is_network_error(message: str | None) -> bool:
    """True if the message was produced by a connectivity problem."""
    if not message:
        return False
    lowered = message.lower()
    return any(marker in lowered for marker in NETWORK_ERROR_MARKERS)


@dataclass
class LoginState:
    """
    Complete login screen state.

    loading and error_message are exclusive outcomes of an attempt:
    every response clears loading.
    """
    username: str = ""
    password: str = ""
    loading: bool = False
    success: bool = False
    error_message: str | None = None
    show_password: bool = False
    auth_token: str = ""
    should_navigate_to_store: bool = False

    # Connectivity
    is_connected: bool = True
    show_connectivity_banner: bool = False

    # Incremented per attempt; responses tagged with an older value are stale
    attempt: int = 0

    def _copy_with(self, **kwargs) -> LoginState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
