"""
Invoice service for overage billing.

Invoices are created on the billing provider during check-in when a package
holds more items than the order allows. The provider owns the invoice; the
order keeps only its id.
"""

import logging

from clients.billing_client import BillingClient, BillingError
from core.config import AppConfig
from core.models import InvoiceStatus, InvoiceSummary, Order

logger = logging.getLogger(__name__)


class InvoiceService:
    """Service for invoice operations."""

    def __init__(self, billing: BillingClient, config: AppConfig):
        self.billing = billing
        self.config = config

    def describe_overage(self, extra_items: int, order_number: str | None) -> str:
        """Line item description, e.g. '... (5 items @ $15.00/each) - Order HB-1001'."""
        unit = f"${self.config.extra_item_price_dollars:.2f}"
        return (
            f"Additional digitization items ({extra_items} items @ {unit}/each)"
            f" - Order {order_number}"
        )

    def create_overage_invoice(
        self,
        order: Order,
        extra_items: int,
        amount_cents: int,
    ) -> InvoiceSummary | None:
        """
        Bill a customer for extra items and email them the invoice.

        Steps run strictly in order: find-or-create customer, create invoice,
        attach line item, finalize, send.

        Args:
            order: Order being checked in
            extra_items: Items beyond the allowance (> 0)
            amount_cents: Charge for the extra items

        Returns:
            Summary of the sent invoice, or None if the order has no customer
            email or any billing call failed. Billing failures never block
            check-in.
        """
        email = order.customer_email
        order_number = order.order_number

        if not email:
            logger.warning(
                f"No customer email for order {order_number} ({order.id}); "
                f"skipping invoice for {extra_items} extra items"
            )
            return None

        logger.info(f"Creating invoice for {email}, order {order_number}")

        try:
            customer = self.billing.find_or_create_customer(
                email=email,
                name=order.customer_name or "Customer",
                metadata={"airtable_order": order_number},
            )

            invoice = self.billing.create_invoice(
                customer_id=customer["id"],
                days_until_due=self.config.invoice_days_until_due,
                metadata={
                    "order_number": order_number,
                    "extra_items": str(extra_items),
                },
            )

            self.billing.create_invoice_item(
                customer_id=customer["id"],
                invoice_id=invoice["id"],
                amount_cents=amount_cents,
                currency=self.config.currency,
                description=self.describe_overage(extra_items, order_number),
            )

            finalized = self.billing.finalize_invoice(invoice["id"])
            self.billing.send_invoice(finalized["id"])

        except (BillingError, KeyError) as e:
            logger.error(
                f"Invoice creation failed for order {order_number} ({order.id}), "
                f"{extra_items} extra items: {e}"
            )
            return None

        logger.info(f"Invoice created: {finalized['id']} for order {order_number}")

        return InvoiceSummary(
            id=finalized["id"],
            url=finalized.get("hosted_invoice_url"),
            amount_cents=amount_cents,
        )

    def get_status(self, invoice_id: str) -> InvoiceStatus:
        """
        Payment status of an invoice.

        Raises:
            BillingError: If the provider call fails (including unknown id)
        """
        invoice = self.billing.retrieve_invoice(invoice_id)
        return InvoiceStatus.from_provider(invoice)
