"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from clients.billing_client import BillingError
from clients.record_store_client import RecordStoreError
from core.exceptions import AmbiguousTrackingError, OrderNotFoundError

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(OrderNotFoundError)
    async def not_found_handler(request: Request, exc: OrderNotFoundError):
        return JSONResponse(
            status_code=404,
            content=error_response(
                ErrorCodes.NOT_FOUND,
                str(exc),
                request_id=_request_id(request),
                trackingNumber=exc.tracking_number,
            ),
        )

    @app.exception_handler(AmbiguousTrackingError)
    async def ambiguous_handler(request: Request, exc: AmbiguousTrackingError):
        return JSONResponse(
            status_code=400,
            content=error_response(
                ErrorCodes.AMBIGUOUS_TRACKING,
                str(exc),
                request_id=_request_id(request),
                matches=exc.matches,
                trackingNumber=exc.tracking_number,
            ),
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content=error_response(
                ErrorCodes.INVALID_REQUEST, str(exc), request_id=_request_id(request)
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content=error_response(
                ErrorCodes.VALIDATION_ERROR,
                "Invalid request",
                details=str(exc.errors()),
                request_id=_request_id(request),
            ),
        )

    @app.exception_handler(ValidationError)
    async def model_error_handler(request: Request, exc: ValidationError):
        # Raised by record-store data that does not fit a model
        logger.error(f"Unexpected record data on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content=error_response(
                ErrorCodes.INTERNAL_ERROR,
                "An internal error occurred",
                request_id=_request_id(request),
            ),
        )

    @app.exception_handler(RecordStoreError)
    async def record_store_error_handler(request: Request, exc: RecordStoreError):
        logger.error(f"Record store failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content=error_response(
                ErrorCodes.UPSTREAM_FAILURE,
                "Record store request failed",
                details=str(exc),
                request_id=_request_id(request),
            ),
        )

    @app.exception_handler(BillingError)
    async def billing_error_handler(request: Request, exc: BillingError):
        logger.error(f"Billing failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=502,
            content=error_response(
                ErrorCodes.UPSTREAM_FAILURE,
                "Billing provider request failed",
                details=str(exc),
                request_id=_request_id(request),
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        request_id = _request_id(request)
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=error_response(
                ErrorCodes.INTERNAL_ERROR,
                "An internal error occurred",
                request_id=request_id,
            ),
            headers={"X-Request-ID": request_id} if request_id else None,
        )
