"""
Application wiring for the package check-in API.

External clients are constructed once in build_app() and passed to every
service that needs them. Tests call create_app() with their own clients.

Run with:
    uvicorn main:build_app --factory --port 3000
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.employees import create_employees_router
from api.errors import register_error_handlers
from api.invoices import create_invoices_router
from api.middleware import RequestIDMiddleware
from api.orders import create_orders_router
from api.webhooks import create_webhooks_router
from clients.billing_client import BillingClient
from clients.record_store_client import RecordStoreClient
from clients.vault_client import get_billing_config, get_record_store_config
from core.config import AppConfig
from core.event_bus import EventBus
from core.handlers.invoice_payment_handler import handle_invoice_paid
from core.services.checkin_service import CheckInService
from core.services.completion_service import CompletionService
from core.services.employee_service import EmployeeService
from core.services.invoice_service import InvoiceService
from core.services.order_service import OrderService
from core.services.pay_period_service import PayPeriodService
from core.services.tracking_service import TrackingService
from utils.logging_config import configure_logging
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


def build_services(
    record_store: RecordStoreClient,
    billing: BillingClient,
    config: AppConfig,
) -> dict:
    """Construct every service with its injected dependencies."""
    orders = OrderService(record_store, config)
    invoices = InvoiceService(billing, config)
    pay_periods = PayPeriodService(record_store, config)

    return {
        "order": orders,
        "invoice": invoices,
        "pay_period": pay_periods,
        "tracking": TrackingService(record_store, config),
        "checkin": CheckInService(orders, invoices, config),
        "completion": CompletionService(orders, pay_periods, config),
        "employee": EmployeeService(record_store, orders, pay_periods, config),
    }


def build_event_bus(services: dict) -> EventBus:
    event_bus = EventBus()
    event_bus.subscribe("InvoicePaid", handle_invoice_paid(services["order"]))
    return event_bus


def create_app(
    record_store: RecordStoreClient,
    billing: BillingClient,
    webhook_secret: str,
    config: AppConfig | None = None,
) -> FastAPI:
    """FastAPI app with middleware, error handlers, and all routes under /api."""
    config = config or AppConfig()
    services = build_services(record_store, billing, config)
    event_bus = build_event_bus(services)

    app = FastAPI(
        title="Package Check-In API",
        description="Tracking lookup, check-in with overage invoicing, and employee views",
    )
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(create_orders_router(services), prefix="/api")
    app.include_router(create_employees_router(services), prefix="/api")
    app.include_router(create_invoices_router(services), prefix="/api")
    app.include_router(
        create_webhooks_router(event_bus, webhook_secret, config.webhook_tolerance_seconds),
        prefix="/api",
    )

    @app.get("/api/health", tags=["health"])
    def health():
        """Liveness only; does not touch the record store or billing provider."""
        return {"status": "ok", "timestamp": now_utc().isoformat()}

    app.state.services = services
    app.state.event_bus = event_bus
    return app


def build_app() -> FastAPI:
    """
    Production entry point: secrets from Vault, logging configured.

    Fails fast if Vault or any required secret is unavailable.
    """
    load_dotenv()
    config = AppConfig(log_level=os.getenv("LOG_LEVEL", "INFO").upper())
    configure_logging(config.log_level)

    store_config = get_record_store_config()
    billing_config = get_billing_config()

    record_store = RecordStoreClient(
        api_key=store_config["api_key"],
        base_id=store_config["base_id"],
        timeout=config.http_timeout_seconds,
    )
    billing = BillingClient(
        secret_key=billing_config["secret_key"],
        timeout=config.http_timeout_seconds,
    )

    app = create_app(record_store, billing, billing_config["webhook_secret"], config)
    logger.info("Package check-in API ready")
    return app
