"""
FastAPI Application - REST API over storefront sessions.

Endpoints:
    GET    /api/v1/health                          Health check
    POST   /api/v1/sessions                        Create session
    GET    /api/v1/sessions                        List active sessions
    GET    /api/v1/sessions/{id}                   Get session status
    DELETE /api/v1/sessions/{id}                   End session
    GET    /api/v1/sessions/{id}/login             Get login state
    POST   /api/v1/sessions/{id}/login/actions     Dispatch a login intent
    GET    /api/v1/sessions/{id}/store             Get store state
    POST   /api/v1/sessions/{id}/store/actions     Dispatch a store intent
    POST   /api/v1/sessions/{id}/connectivity      Simulate going on/offline

Dispatch endpoints answer once the mutation lane is idle. Pass
`wait_for_effects=true` to also wait for one-shot effects (login
requests, catalog loads, cache reads) to complete.

All responses are JSON with explicit Pydantic schemas.
"""

from contextlib import asynccontextmanager
from typing import Annotated, Optional, Union

from .. import __version__
from ..config import Settings
from ..utils.logging import get_logger


def create_app(service=None, settings: Optional[Settings] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, Request
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from ..session import SessionManager
    from .service import APIService
    from .schemas import (
        # Request models
        LoginActionRequest,
        StoreActionRequest,
        ConnectivityRequest,
        # Response models
        LoginStateResponse,
        StoreStateResponse,
        SessionResponse,
        SessionListResponse,
        EndSessionResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    logger = get_logger(__name__)

    settings = settings or Settings.from_env()
    api_service = service or APIService(session_manager=SessionManager(settings))

    @asynccontextmanager
    async def lifespan(app):
        logger.info("api_started", env=settings.env)
        yield
        await api_service.session_manager.shutdown()
        logger.info("api_stopped")

    app = FastAPI(
        title="Storefront Engine API",
        description="""
Offline-first catalog and cart engine.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist or has ended |
| `INVALID_ACTION` | Action is not a user intent or lacks a parameter |
| `VALIDATION_ERROR` | Request body failed validation |
| `INTERNAL_ERROR` | Unexpected server failure |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def to_http(response):
        """Map service-level errors onto HTTP status codes."""
        if isinstance(response, ErrorResponse):
            status_code = 404 if response.error_code == ErrorCode.SESSION_NOT_FOUND else 400
            return make_error_response(
                response.error_code, response.error, status_code, response.details
            )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ]},
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("request_failed", path=request.url.path)
        return make_error_response(
            ErrorCode.INTERNAL_ERROR, "Internal server error", status_code=500
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Create a new session",
    )
    async def create_session() -> SessionResponse:
        """Create a session with fresh login and store engines."""
        return await api_service.create_session()

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        return api_service.list_sessions()

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current status of a session."""
        return to_http(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """End a session, cancelling every outstanding effect."""
        ended = await api_service.end_session(session_id)
        return EndSessionResponse(session_id=session_id, ended=ended)

    @app.post(
        "/api/v1/sessions/{session_id}/connectivity",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
        },
        tags=["Sessions"],
        summary="Simulate a connectivity change",
    )
    async def set_connectivity(
        session_id: str, request: ConnectivityRequest
    ) -> Union[SessionResponse, JSONResponse]:
        """Flip the session's connectivity; both screens observe the change."""
        return to_http(await api_service.set_connectivity(session_id, request))

    # =========================================================================
    # Login Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/login",
        response_model=LoginStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Login"],
        summary="Get login state",
    )
    async def get_login_state(session_id: str) -> Union[LoginStateResponse, JSONResponse]:
        return to_http(api_service.get_login_state(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/login/actions",
        response_model=LoginStateResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Missing action parameter"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Login"],
        summary="Dispatch a login intent",
    )
    async def dispatch_login(
        session_id: str,
        request: LoginActionRequest,
        wait_for_effects: Annotated[
            bool, Query(description="Also wait for the login request to complete")
        ] = False,
    ) -> Union[LoginStateResponse, JSONResponse]:
        """
        Dispatch one login intent.

        **Example:**
        ```json
        {"type": "username_changed", "text": "mor_2314"}
        ```
        """
        return to_http(
            await api_service.dispatch_login(session_id, request, wait_for_effects)
        )

    # =========================================================================
    # Store Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/store",
        response_model=StoreStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Store"],
        summary="Get store state",
    )
    async def get_store_state(session_id: str) -> Union[StoreStateResponse, JSONResponse]:
        return to_http(api_service.get_store_state(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/store/actions",
        response_model=StoreStateResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Missing action parameter"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Store"],
        summary="Dispatch a store intent",
    )
    async def dispatch_store(
        session_id: str,
        request: StoreActionRequest,
        wait_for_effects: Annotated[
            bool, Query(description="Also wait for catalog loads and cache reads")
        ] = False,
    ) -> Union[StoreStateResponse, JSONResponse]:
        """
        Dispatch one store intent.

        **Example:**
        ```json
        {"type": "add_to_cart", "product_id": 1}
        ```
        """
        return to_http(
            await api_service.dispatch_store(session_id, request, wait_for_effects)
        )

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="ok",
            version=__version__,
            active_sessions=len(api_service.list_sessions().sessions),
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Storefront Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn storefront.api.app:app
app = create_app()
