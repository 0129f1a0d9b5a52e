"""
Check-in service: record a received package and bill any overage.

Any employee may check in any order; the employee performing the check-in
becomes the assignee. Checking in the same order again overwrites the
previous result.
"""

import logging
from dataclasses import dataclass

from core.config import AppConfig
from core.models import InvoiceSummary, Order, OrderFields, cents_to_dollars
from core.services.invoice_service import InvoiceService
from core.services.order_service import OrderService

logger = logging.getLogger(__name__)


@dataclass
class CheckInResult:
    """Result of a check-in."""

    order: Order
    invoice: InvoiceSummary | None
    extra_items: int
    extra_charge_cents: int


def compute_overage(items_received: int, expected_items: int, unit_price_cents: int) -> tuple[int, int]:
    """
    Extra items and their charge in cents.

    extra = max(0, received - expected); charge = extra * unit price.
    """
    extra = max(0, items_received - expected_items)
    return extra, extra * unit_price_cents


class CheckInService:
    """Orchestrates package check-in."""

    def __init__(
        self,
        orders: OrderService,
        invoices: InvoiceService,
        config: AppConfig,
    ):
        self.orders = orders
        self.invoices = invoices
        self.config = config

    def check_in(
        self,
        order_id: str,
        items_received: int,
        employee_id: str,
        employee_name: str | None = None,
        notes: str | None = None,
    ) -> CheckInResult:
        """
        Check in a package.

        Args:
            order_id: Order record id
            items_received: Items counted in the package
            employee_id: Employee record id performing the check-in
            employee_name: Display name, used for logging only
            notes: Check-in notes; None or empty clears existing notes

        Returns:
            Updated order and the overage invoice (None if nothing was billed)

        Raises:
            ValueError: If items_received is negative or employee_id is empty
            OrderNotFoundError: If the order does not exist
            RecordStoreError: If reading or writing the order fails
        """
        if items_received < 0:
            raise ValueError("itemsReceived must be >= 0")
        if not employee_id:
            raise ValueError("employeeId is required")

        order = self.orders.get_by_id(order_id)
        expected = order.expected_items
        extra, charge_cents = compute_overage(
            items_received, expected, self.config.extra_item_price_cents
        )

        logger.info(
            f"Checking in order {order.order_number} ({order_id}) by "
            f"{employee_name or employee_id}: expected {expected}, "
            f"received {items_received}, extra {extra}"
        )

        invoice = None
        if extra > 0:
            invoice = self.invoices.create_overage_invoice(order, extra, charge_cents)

        fields = {
            OrderFields.ITEMS_RECEIVED: items_received,
            OrderFields.EXTRA_ITEMS: extra,
            OrderFields.EXTRA_CHARGE: cents_to_dollars(charge_cents),
            OrderFields.STATUS: self.config.received_status,
            OrderFields.ASSIGNED_EMPLOYEE: [employee_id],
            OrderFields.NOTES: notes or "",
        }
        if invoice is not None:
            fields[OrderFields.INVOICE_ID] = invoice.id

        updated = self.orders.update(order_id, fields)
        logger.info(f"Order {order_id} checked in successfully")

        return CheckInResult(
            order=updated,
            invoice=invoice,
            extra_items=extra,
            extra_charge_cents=charge_cents,
        )
