"""
Order service for record-store reads and writes on the Orders table.

Every read goes to the store; nothing is cached between requests.
"""

import logging

from clients.record_store_client import RecordStoreClient, RecordStoreError, quote_formula_value
from core.config import AppConfig
from core.exceptions import OrderNotFoundError
from core.models import Order, OrderFields
from utils.timezone import today_utc

logger = logging.getLogger(__name__)


class OrderService:
    """Service for order operations."""

    def __init__(self, record_store: RecordStoreClient, config: AppConfig):
        self.record_store = record_store
        self.config = config

    @property
    def table(self) -> str:
        return self.config.orders_table

    def get_by_id(self, order_id: str) -> Order:
        """
        Get order by record id.

        Raises:
            OrderNotFoundError: If the store has no such record
            RecordStoreError: On store failure
        """
        record = self.record_store.get_record(self.table, order_id)
        if record is None:
            raise OrderNotFoundError(f"Order {order_id} not found")
        return Order.from_record(record)

    def update(self, order_id: str, fields: dict) -> Order:
        """
        Write fields to an order and return the stored result.

        Raises:
            OrderNotFoundError: If the store reports the record does not exist
            RecordStoreError: On any other store failure
        """
        try:
            record = self.record_store.update_record(self.table, order_id, fields)
        except RecordStoreError as e:
            if e.status_code == 404:
                raise OrderNotFoundError(f"Order {order_id} not found")
            logger.error(f"Failed to update order {order_id} ({', '.join(fields)}): {e}")
            raise
        return Order.from_record(record)

    def update_notes(self, order_id: str, notes: str | None) -> Order:
        """Replace an order's notes. None clears them."""
        order = self.update(order_id, {OrderFields.NOTES: notes or ""})
        logger.info(f"Notes updated for order {order_id}")
        return order

    def find_by_order_number(self, order_number: str) -> Order | None:
        """Exact match on order number. Returns the first match or None."""
        formula = f"{{{OrderFields.ORDER_NUMBER}}}={quote_formula_value(order_number)}"
        records = self.record_store.list_records(self.table, formula=formula, max_records=1)
        if not records:
            return None
        return Order.from_record(records[0])

    def mark_overage_paid(self, order_number: str) -> Order | None:
        """
        Flag an order's overage invoice as paid today.

        Returns:
            The updated order, or None if no order has this number
        """
        order = self.find_by_order_number(order_number)
        if order is None:
            return None

        updated = self.update(order.id, {
            OrderFields.INVOICE_PAID: True,
            OrderFields.PAYMENT_DATE: today_utc(),
        })
        logger.info(f"Marked overage paid for order {order_number} ({order.id})")
        return updated

    def list_open(self) -> list[Order]:
        """Orders not yet in the completion status, oldest first."""
        formula = (
            f"{{{OrderFields.STATUS}}}!={quote_formula_value(self.config.completion_status)}"
        )
        records = self.record_store.list_records(self.table, formula=formula)
        orders = [Order.from_record(r) for r in records]
        # Stable: records without a creation time keep store order at the end
        return sorted(orders, key=lambda o: (o.created_time is None, o.created_time or 0))

    def list_completed(self) -> list[Order]:
        """Orders flagged as digitization complete, in store order."""
        formula = f"{{{OrderFields.DIGITIZATION_COMPLETE}}}"
        records = self.record_store.list_records(self.table, formula=formula)
        return [Order.from_record(r) for r in records]
