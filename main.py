"""
Billing backend application.

Assembles the FastAPI app from the services. `create_app` takes already
built services (tests pass mocks); `build_app` wires the real clients from
Vault and is the uvicorn entry point:

    uvicorn main:build_app --factory
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.base import success_response
from api.company import create_company_router
from api.errors import register_error_handlers
from api.invoices import create_invoices_router
from api.middleware import RequestIDMiddleware
from api.parties import create_parties_router
from api.products import create_products_router
from auth import (
    AuthConfig,
    AuthMiddleware,
    AuthService,
    RateLimiter,
    SecurityLogger,
    SessionManager,
    create_auth_router,
)
from clients import PostgresClient, ValkeyClient, get_database_url, get_valkey_url
from core.audit import AuditLogger
from core.config import BillingConfig
from core.services.company_service import CompanyService
from core.services.invoice_service import InvoiceService
from core.services.party_service import PartyService
from core.services.product_service import ProductService

logger = logging.getLogger(__name__)


def create_app(
    services: dict,
    session_manager: SessionManager,
    auth_service: AuthService,
    lifespan=None,
) -> FastAPI:
    """
    Build the app around existing services.

    Args:
        services: Mapping with "party", "product", "invoice" and "company" services
        session_manager: Validates bearer tokens for the auth middleware
        auth_service: Backs the /api/auth routes
        lifespan: Optional lifespan handler (startup/shutdown)
    """
    app = FastAPI(title="Billing API", version="0.1.0", lifespan=lifespan)

    # Last added runs first: RequestID wraps auth so 401s carry an X-Request-ID
    app.add_middleware(AuthMiddleware, session_manager=session_manager)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    register_error_handlers(app)

    app.include_router(create_auth_router(auth_service), prefix="/api/auth")
    app.include_router(create_company_router(services["company"]), prefix="/api")
    app.include_router(create_parties_router(services["party"]), prefix="/api")
    app.include_router(create_products_router(services["product"]), prefix="/api")
    app.include_router(create_invoices_router(services["invoice"]), prefix="/api")

    @app.get("/health")
    async def health():
        return success_response({"status": "ok"}).model_dump(mode="json")

    return app


def build_app() -> FastAPI:
    """Wire real clients and services. Secrets come from Vault."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    postgres = PostgresClient(get_database_url())
    valkey = ValkeyClient(get_valkey_url())
    audit = AuditLogger(postgres)

    billing_config = BillingConfig()
    auth_config = AuthConfig()

    party_service = PartyService(postgres, audit)
    product_service = ProductService(postgres, audit, billing_config)
    company_service = CompanyService(postgres, audit)
    services = {
        "party": party_service,
        "product": product_service,
        "company": company_service,
        "invoice": InvoiceService(postgres, audit, party_service, product_service, billing_config),
    }

    session_manager = SessionManager(valkey, auth_config)
    auth_service = AuthService(
        config=auth_config,
        company_service=company_service,
        session_manager=session_manager,
        rate_limiter=RateLimiter(valkey, auth_config),
        security_logger=SecurityLogger(postgres),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        valkey.close()
        PostgresClient.close_all_pools()
        logger.info("Clients closed")

    app = create_app(services, session_manager, auth_service, lifespan=lifespan)
    logger.info("Billing API ready")
    return app
