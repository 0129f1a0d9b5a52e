"""
Billing provider webhook receiver.

The raw body is verified against the signature header before anything is
parsed. Unverifiable deliveries are rejected with 400 and discarded. Verified
deliveries are always acknowledged, whether or not the follow-up changed any
order, so the provider never retries them.
"""

import logging

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from clients.billing_client import WebhookSignatureError, construct_event
from core.event_bus import EventBus
from core.events import InvoicePaid

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Stripe-Signature"


def create_webhooks_router(
    event_bus: EventBus,
    webhook_secret: str,
    tolerance_seconds: int = 300,
) -> APIRouter:
    router = APIRouter(tags=["webhooks"])

    @router.post("/webhooks/billing")
    async def billing_webhook(request: Request):
        payload = await request.body()
        signature = request.headers.get(SIGNATURE_HEADER)

        try:
            event = construct_event(payload, signature, webhook_secret, tolerance_seconds)
        except WebhookSignatureError as e:
            logger.error(f"Webhook signature verification failed: {e}")
            return JSONResponse(
                status_code=400,
                content=error_response(
                    ErrorCodes.INVALID_SIGNATURE,
                    f"Webhook Error: {e}",
                    request_id=getattr(request.state, "request_id", None),
                ),
            )

        event_type = event["type"]
        logger.info(f"Webhook received: {event_type} ({event.get('id')})")

        if event_type == "invoice.paid":
            await run_in_threadpool(event_bus.publish, InvoicePaid.from_provider(event))

        return {"received": True}

    return router
