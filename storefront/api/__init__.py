"""
API Module - HTTP interface to storefront sessions.

A client:
1. Creates a session (login and store engines)
2. Dispatches user intents to either screen
3. Reads back state, including derived views (filters, cart lines, totals)
4. Ends the session, cancelling outstanding effects

All state is session-scoped.
"""

from .schemas import (
    # Requests
    LoginActionRequest,
    StoreActionRequest,
    ConnectivityRequest,
    # Responses
    LoginStateResponse,
    StoreStateResponse,
    SessionResponse,
    ErrorResponse,
    # Shared
    ProductInfo,
    CartLineInfo,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "LoginActionRequest",
    "StoreActionRequest",
    "ConnectivityRequest",
    # Responses
    "LoginStateResponse",
    "StoreStateResponse",
    "SessionResponse",
    "ErrorResponse",
    # Shared
    "ProductInfo",
    "CartLineInfo",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
