"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.endpoints.dfsp import dfsp_api
from src.api.endpoints.sdk import sdk_api
from src.domain.connector import CoreConnector, build_connector
from src.domain.errors import ConnectorError
from src.error_handler import ErrorHandler
from src.integrations.clients.mocks import MOCK_CBS_CLIENTS, MockSchemeAdapterClient
from src.utils.config_loader import ConnectorConfig, load_connector_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

error_handler = ErrorHandler()


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

def _should_use_real_integrations() -> bool:
    mode = os.getenv("INTEGRATIONS_MODE", "").strip().lower()
    if mode in {"real", "live"}:
        return True
    if mode in {"mock", "test"}:
        return False
    return bool(os.getenv("SDK_BASE_URL"))


def _select_pending_store(config: ConnectorConfig):
    # Use real Redis when REDIS_URL is set, else the in-memory stub
    if os.getenv("REDIS_URL"):
        from src.database.redis_real import PendingTransferStore

        return PendingTransferStore(url=os.environ["REDIS_URL"], default_ttl=config.pending_transfer_ttl_seconds)

    from src.database.redis import PendingTransferStore

    return PendingTransferStore()


def _select_sdk_client(config: ConnectorConfig):
    if _should_use_real_integrations():
        from src.integrations.clients.real_http.scheme_adapter import RealSchemeAdapterClient

        return RealSchemeAdapterClient(
            base_url=config.scheme_adapter.base_url,
            timeout_seconds=config.scheme_adapter.timeout_seconds,
        )
    return MockSchemeAdapterClient()


def _select_cbs_client(config: ConnectorConfig):
    if _should_use_real_integrations():
        from src.integrations.clients.real_http import REAL_CBS_CLIENTS

        client_cls = REAL_CBS_CLIENTS.get(config.operator)
        if client_cls is None:
            # A live scheme adapter must never be paired with a mock wallet ledger
            raise RuntimeError(
                f"No real CBS client registered for operator {config.operator!r}; "
                "refusing to start with real integrations"
            )
        return client_cls()
    return MOCK_CBS_CLIENTS[config.operator]()


def connector_from_config(config: ConnectorConfig) -> CoreConnector:
    cbs_client = _select_cbs_client(config)
    return build_connector(
        config.profile,
        cbs_client,
        _select_sdk_client(config),
        _select_pending_store(config),
        pending_ttl_seconds=config.pending_transfer_ttl_seconds,
    )


# ============================================================================
# APPLICATION
# ============================================================================

def create_app(connector: Optional[CoreConnector] = None) -> FastAPI:
    app = FastAPI(
        title="Mobile Money Core Connector",
        description="Bridges an operator core banking system and the Mojaloop SDK scheme adapter",
        version="1.0.0",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.connector = connector if connector is not None else connector_from_config(load_connector_config())

    app.include_router(sdk_api)
    app.include_router(dfsp_api)

    @app.exception_handler(ConnectorError)
    async def connector_error_handler(request: Request, exc: ConnectorError):
        status_code, body = error_handler.handle_exception(exc, {"operation": f"{request.method} {request.url.path}"})
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        status_code, body = error_handler.handle_exception(exc, {"operation": f"{request.method} {request.url.path}"})
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        status_code, body = error_handler.handle_exception(exc, {"operation": f"{request.method} {request.url.path}"})
        return JSONResponse(status_code=status_code, content=body)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Detailed health check (operator, pending-transfer store)."""
        current: CoreConnector = app.state.connector
        healthy = current.is_healthy()
        return JSONResponse(
            status_code=200 if healthy else 503,
            content={
                "status": "healthy" if healthy else "degraded",
                "operator": current.profile.name,
                "pendingStore": healthy,
                "timestamp": datetime.now().isoformat(),
            },
        )

    return app


app = create_app()
