"""
Tests for API Pydantic schemas.

Validates that:
- Request/response models serialize correctly
- Error codes are properly structured
- Only user intents are listed as dispatchable actions
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError


class TestPydanticSchemas:
    """Tests for Pydantic schema validation."""

    def test_store_state_response_schema(self):
        """StoreStateResponse serializes products, cart and totals."""
        from storefront.api.schemas import CartLineInfo, ProductInfo, StoreStateResponse

        product = ProductInfo(
            id=1,
            title="Backpack",
            price=Decimal("109.95"),
            category="men's clothing",
            image="https://example.com/1.png",
        )
        response = StoreStateResponse(
            session_id="session-123",
            search_text="",
            selected_category="All",
            loading=False,
            is_connected=True,
            show_connectivity_banner=False,
            show_order_success=False,
            favorites_only=False,
            categories=["All", "Men's Clothing"],
            products=[product],
            filtered_products=[product],
            cart=[CartLineInfo(product=product, quantity=2, subtotal=Decimal("219.90"))],
            cart_item_count=2,
            total_price=Decimal("219.90"),
        )

        data = response.model_dump(mode="json")
        assert data["categories"] == ["All", "Men's Clothing"]
        assert data["cart"][0]["quantity"] == 2
        assert data["products"][0]["is_favorite"] is False
        assert Decimal(data["total_price"]) == Decimal("219.90")

    def test_cart_line_requires_positive_quantity(self):
        """Cart lines never carry a zero quantity."""
        from storefront.api.schemas import CartLineInfo, ProductInfo

        product = ProductInfo(id=1, title="t", price=Decimal("1"), category="c", image="i")
        with pytest.raises(ValidationError):
            CartLineInfo(product=product, quantity=0, subtotal=Decimal("0"))

    def test_login_state_response_has_no_password(self):
        """The password is never part of the login view."""
        from storefront.api.schemas import LoginStateResponse

        assert "password" not in LoginStateResponse.model_fields
        assert "has_password" in LoginStateResponse.model_fields

    def test_error_response_schema(self):
        """ErrorResponse carries a structured code."""
        from storefront.api.schemas import ErrorCode, ErrorResponse

        response = ErrorResponse(
            error="Session abc not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

        data = response.model_dump(mode="json")
        assert data["error_code"] == "SESSION_NOT_FOUND"
        assert data["details"] is None

    def test_connectivity_request_requires_bool(self):
        """Connectivity requests validate their flag."""
        from storefront.api.schemas import ConnectivityRequest

        assert ConnectivityRequest(connected=False).connected is False
        with pytest.raises(ValidationError):
            ConnectivityRequest()


class TestActionNames:
    """Tests for the dispatchable action lists."""

    def test_login_names_are_user_intents(self):
        """Effect results are not dispatchable login actions."""
        from storefront.api.schemas import LoginActionName
        from storefront.features.login import LoginActionType

        names = {name.value for name in LoginActionName}
        all_types = {t.value for t in LoginActionType}

        assert names <= all_types
        assert "login_response" not in names
        assert "navigate_to_store" not in names
        assert "start_network_monitoring" not in names

    def test_store_names_are_user_intents(self):
        """Reconciliation and timer actions stay internal."""
        from storefront.api.schemas import StoreActionName
        from storefront.features.store import StoreActionType

        names = {name.value for name in StoreActionName}
        all_types = {t.value for t in StoreActionType}

        assert names <= all_types
        for internal in (
            "cache_products_received",
            "list_of_products_received",
            "catalog_fetch_failed",
            "load_products_from_cache",
            "clear_cart",
        ):
            assert internal not in names
