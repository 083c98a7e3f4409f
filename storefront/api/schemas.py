"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a client and the engine.
Only user intents can be dispatched from outside; effect results
(network replies, cache reads, timers) are internal to the engines.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- INVALID_ACTION: Action is unknown, internal, or missing a parameter
- VALIDATION_ERROR: Request body failed validation
- INTERNAL_ERROR: Unexpected server failure
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    ENDED = "ended"
    EXPIRED = "expired"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_ACTION = "INVALID_ACTION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class LoginActionName(str, Enum):
    """Login intents a client may dispatch."""
    USERNAME_CHANGED = "username_changed"
    PASSWORD_CHANGED = "password_changed"
    TOGGLE_PASSWORD_VISIBILITY = "toggle_password_visibility"
    LOGIN_BUTTON_TAPPED = "login_button_tapped"
    DISMISS_ERROR = "dismiss_error"
    DISMISS_CONNECTIVITY_BANNER = "dismiss_connectivity_banner"


class StoreActionName(str, Enum):
    """Store intents a client may dispatch."""
    ON_APPEAR = "on_appear"
    SELECT_CATEGORY = "select_category"
    TEXT_CHANGED = "text_changed"
    TOGGLE_FAVORITE = "toggle_favorite"
    TOGGLE_FAVORITES_ONLY = "toggle_favorites_only"
    ADD_TO_CART = "add_to_cart"
    REMOVE_FROM_CART = "remove_from_cart"
    COMPLETE_ORDER = "complete_order"
    DISMISS_CONNECTIVITY_BANNER = "dismiss_connectivity_banner"


# =============================================================================
# Shared Models
# =============================================================================

class ProductInfo(BaseModel):
    """Product information for display."""
    id: int
    title: str
    price: Decimal
    category: str
    image: str
    description: str = ""
    is_favorite: bool = False

    model_config = {"from_attributes": True}


class CartLineInfo(BaseModel):
    """A cart entry joined with its product."""
    product: ProductInfo
    quantity: int = Field(gt=0)
    subtotal: Decimal


# =============================================================================
# Requests
# =============================================================================

class LoginActionRequest(BaseModel):
    """Dispatch one login intent."""
    type: str = Field(description="A LoginActionName value")
    text: Optional[str] = Field(default=None, description="For username/password changes")


class StoreActionRequest(BaseModel):
    """Dispatch one store intent."""
    type: str = Field(description="A StoreActionName value")
    text: Optional[str] = Field(default=None, description="Search text for text_changed")
    category: Optional[str] = Field(default=None, description="For select_category")
    product_id: Optional[int] = Field(default=None, description="For cart and favorite actions")


class ConnectivityRequest(BaseModel):
    """Simulate a connectivity change for a session."""
    connected: bool


# =============================================================================
# Responses
# =============================================================================

class LoginStateResponse(BaseModel):
    """Login screen state. The password itself is never returned."""
    session_id: str
    username: str
    has_password: bool
    loading: bool
    success: bool
    error_message: Optional[str] = None
    show_password: bool
    should_navigate_to_store: bool
    is_connected: bool
    show_connectivity_banner: bool


class StoreStateResponse(BaseModel):
    """Store screen state with every derived view."""
    session_id: str
    search_text: str
    selected_category: str
    loading: bool
    is_connected: bool
    show_connectivity_banner: bool
    show_order_success: bool
    favorites_only: bool

    categories: list[str] = Field(default_factory=list)
    products: list[ProductInfo] = Field(default_factory=list)
    filtered_products: list[ProductInfo] = Field(default_factory=list)
    cart: list[CartLineInfo] = Field(default_factory=list)
    cart_item_count: int = 0
    total_price: Decimal = Decimal("0")


class SessionResponse(BaseModel):
    """Session summary."""
    session_id: str
    status: SessionStatus
    created_at: float
    is_logged_in: bool
    is_connected: bool


class SessionListResponse(BaseModel):
    """Active session IDs."""
    sessions: list[str] = Field(default_factory=list)
    count: int = 0


class EndSessionResponse(BaseModel):
    """Result of ending a session."""
    session_id: str
    ended: bool


class ErrorResponse(BaseModel):
    """Standardized error."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class HealthResponse(BaseModel):
    """Service health."""
    status: str = "ok"
    version: str
    active_sessions: int = 0
