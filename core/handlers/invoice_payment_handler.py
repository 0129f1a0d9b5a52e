"""
Handler for InvoicePaid events.

On invoice payment, flags the matching order's overage as paid. Invoices
without an order tag, or tagged with an unknown order, are dropped: the
provider has already been told the delivery was received.
"""

import logging
from typing import Callable

from core.events import InvoicePaid

logger = logging.getLogger(__name__)


def handle_invoice_paid(order_service) -> Callable:
    """
    Factory that returns an InvoicePaid handler.

    Args:
        order_service: OrderService instance

    Returns:
        Handler callable that marks the tagged order paid
    """

    def handler(event: InvoicePaid):
        order_number = event.order_number
        invoice_id = event.invoice.get("id")

        if not order_number:
            logger.warning(f"Paid invoice {invoice_id} has no order_number tag; ignoring")
            return

        order = order_service.mark_overage_paid(order_number)
        if order is None:
            logger.warning(f"Paid invoice {invoice_id}: no order {order_number}; ignoring")
            return

        logger.info(f"Updated payment status for order {order_number} (invoice {invoice_id})")

    return handler
