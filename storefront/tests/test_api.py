"""
Tests for API layer.

Tests:
- API service methods
- Session lifecycle via API
- HTTP endpoints and error mapping
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    ConnectivityRequest,
    ErrorCode,
    ErrorResponse,
    LoginActionRequest,
    LoginStateResponse,
    SessionStatus,
    StoreActionRequest,
    StoreStateResponse,
)
from ..api.service import APIService
from ..config import Settings
from ..session import SessionManager


@pytest_asyncio.fixture
async def service():
    """Create a fresh API service."""
    service = APIService(session_manager=SessionManager(Settings(checkout_delay=0.01)))
    yield service
    await service.session_manager.shutdown()


async def logged_in_session(service: APIService) -> str:
    session = await service.create_session()
    sid = session.session_id
    await service.dispatch_login(sid, LoginActionRequest(type="username_changed", text="mor_2314"))
    await service.dispatch_login(sid, LoginActionRequest(type="password_changed", text="83r5^_"))
    await service.dispatch_login(
        sid, LoginActionRequest(type="login_button_tapped"), wait_for_effects=True
    )
    return sid


class TestAPIService:
    """Tests for APIService."""

    @pytest.mark.asyncio
    async def test_create_and_get_session(self, service):
        """A new session is active and online."""
        created = await service.create_session()
        fetched = service.get_session(created.session_id)

        assert fetched.status == SessionStatus.ACTIVE
        assert fetched.is_connected is True
        assert fetched.is_logged_in is False
        assert service.list_sessions().count == 1

    @pytest.mark.asyncio
    async def test_unknown_session(self, service):
        """Unknown sessions yield SESSION_NOT_FOUND."""
        response = service.get_store_state("missing")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    @pytest.mark.asyncio
    async def test_login_flow(self, service):
        """Credentials plus tap logs the session in."""
        sid = await logged_in_session(service)
        state = service.get_login_state(sid)

        assert isinstance(state, LoginStateResponse)
        assert state.success is True
        assert state.should_navigate_to_store is True
        assert state.has_password is True
        assert service.get_session(sid).is_logged_in is True

    @pytest.mark.asyncio
    async def test_empty_login_sets_message(self, service):
        """The empty-field guard surfaces its message."""
        session = await service.create_session()
        state = await service.dispatch_login(
            session.session_id, LoginActionRequest(type="login_button_tapped")
        )
        assert state.error_message == "Please enter both username and password"
        assert state.loading is False

    @pytest.mark.asyncio
    async def test_internal_actions_rejected(self, service):
        """Effect results cannot be dispatched from outside."""
        session = await service.create_session()

        login = await service.dispatch_login(
            session.session_id, LoginActionRequest(type="login_response")
        )
        store = await service.dispatch_store(
            session.session_id, StoreActionRequest(type="list_of_products_received")
        )

        assert login.error_code == ErrorCode.INVALID_ACTION
        assert store.error_code == ErrorCode.INVALID_ACTION

    @pytest.mark.asyncio
    async def test_missing_parameter_rejected(self, service):
        """Cart actions need a product id."""
        session = await service.create_session()
        response = await service.dispatch_store(
            session.session_id, StoreActionRequest(type="add_to_cart")
        )

        assert response.error_code == ErrorCode.INVALID_ACTION
        assert "product_id" in response.error

    @pytest.mark.asyncio
    async def test_store_catalog_and_cart(self, service):
        """Loading, filtering and cart totals are reflected in the view."""
        sid = await logged_in_session(service)
        state = await service.dispatch_store(
            sid, StoreActionRequest(type="on_appear"), wait_for_effects=True
        )

        assert isinstance(state, StoreStateResponse)
        assert len(state.products) == 5
        assert state.categories[0] == "All"
        assert "Men's Clothing" in state.categories

        await service.dispatch_store(sid, StoreActionRequest(type="add_to_cart", product_id=2))
        await service.dispatch_store(sid, StoreActionRequest(type="add_to_cart", product_id=2))
        state = await service.dispatch_store(
            sid, StoreActionRequest(type="select_category", category="Electronics")
        )

        assert [p.id for p in state.filtered_products] == [9]
        assert state.cart_item_count == 2
        assert state.cart[0].subtotal == Decimal("44.60")
        assert state.total_price == Decimal("44.60")

    @pytest.mark.asyncio
    async def test_offline_checkout_ignored(self, service):
        """Going offline blocks checkout."""
        sid = await logged_in_session(service)
        await service.dispatch_store(sid, StoreActionRequest(type="on_appear"), wait_for_effects=True)
        await service.dispatch_store(sid, StoreActionRequest(type="add_to_cart", product_id=1))

        session = await service.set_connectivity(sid, ConnectivityRequest(connected=False))
        assert session.is_connected is False

        state = await service.dispatch_store(sid, StoreActionRequest(type="complete_order"))
        assert state.is_connected is False
        assert state.show_connectivity_banner is True
        assert state.show_order_success is False

        await service.set_connectivity(sid, ConnectivityRequest(connected=True))
        state = await service.dispatch_store(
            sid, StoreActionRequest(type="complete_order"), wait_for_effects=True
        )
        assert state.show_order_success is False
        assert state.cart == []

    @pytest.mark.asyncio
    async def test_end_session(self, service):
        """Ended sessions disappear."""
        session = await service.create_session()

        assert await service.end_session(session.session_id) is True
        assert isinstance(service.get_session(session.session_id), ErrorResponse)


class TestHTTPEndpoints:
    """Tests for the FastAPI app."""

    @pytest.fixture
    def client(self):
        app = create_app(settings=Settings(checkout_delay=0.01))
        with TestClient(app) as client:
            yield client

    def test_health(self, client):
        """Health reports the session count."""
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["active_sessions"] == 0

    def test_session_lifecycle(self, client):
        """Create, read and delete a session."""
        created = client.post("/api/v1/sessions").json()
        sid = created["session_id"]

        assert client.get(f"/api/v1/sessions/{sid}").json()["status"] == "active"
        assert client.delete(f"/api/v1/sessions/{sid}").json() == {"session_id": sid, "ended": True}
        assert client.get(f"/api/v1/sessions/{sid}").status_code == 404

    def test_unknown_session_is_404(self, client):
        """Missing sessions map to 404 SESSION_NOT_FOUND."""
        response = client.get("/api/v1/sessions/missing/store")

        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_login_and_shop(self, client):
        """A full login and cart flow over HTTP."""
        sid = client.post("/api/v1/sessions").json()["session_id"]
        login_url = f"/api/v1/sessions/{sid}/login/actions"

        client.post(login_url, json={"type": "username_changed", "text": "johnd"})
        client.post(login_url, json={"type": "password_changed", "text": "m38rmF$"})
        login = client.post(
            login_url, params={"wait_for_effects": True}, json={"type": "login_button_tapped"}
        ).json()
        assert login["success"] is True
        assert "password" not in login

        store_url = f"/api/v1/sessions/{sid}/store/actions"
        store = client.post(
            store_url, params={"wait_for_effects": True}, json={"type": "on_appear"}
        ).json()
        assert len(store["products"]) == 5

        client.post(store_url, json={"type": "add_to_cart", "product_id": 9})
        store = client.post(store_url, json={"type": "text_changed", "text": "drive"}).json()

        assert [p["id"] for p in store["filtered_products"]] == [9]
        assert Decimal(store["total_price"]) == Decimal("64.00")

    def test_invalid_action_is_400(self, client):
        """Unknown action names map to 400 INVALID_ACTION."""
        sid = client.post("/api/v1/sessions").json()["session_id"]
        response = client.post(f"/api/v1/sessions/{sid}/store/actions", json={"type": "clear_cart"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_ACTION"

    def test_malformed_body_is_422(self, client):
        """Body validation failures map to VALIDATION_ERROR."""
        sid = client.post("/api/v1/sessions").json()["session_id"]
        response = client.post(f"/api/v1/sessions/{sid}/connectivity", json={"connected": "maybe"})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_connectivity_toggle(self, client):
        """Connectivity changes reach the store screen."""
        sid = client.post("/api/v1/sessions").json()["session_id"]

        session = client.post(f"/api/v1/sessions/{sid}/connectivity", json={"connected": False}).json()
        store = client.get(f"/api/v1/sessions/{sid}/store").json()

        assert session["is_connected"] is False
        assert store["is_connected"] is False
        assert store["show_connectivity_banner"] is True
