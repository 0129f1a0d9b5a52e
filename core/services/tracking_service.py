"""
Tracking resolver: scanned tracking code to a single order.

Operators scan a full tracking number or type the last few digits. Short
codes match the end of any of the order's three label tracking numbers;
longer codes must match one exactly. Ambiguous results are reported back,
never guessed.
"""

import logging

from clients.record_store_client import RecordStoreClient, RecordStoreError, quote_formula_value
from core.config import AppConfig
from core.exceptions import AmbiguousTrackingError, OrderNotFoundError
from core.models import (
    Order, OrderFields, OrderItemFields, CustomerFields, first_value, as_int,
)

logger = logging.getLogger(__name__)


class TrackingService:
    """Resolves tracking codes against the Orders table."""

    def __init__(self, record_store: RecordStoreClient, config: AppConfig):
        self.record_store = record_store
        self.config = config

    def build_formula(self, code: str) -> str:
        """
        Build the store filter for a tracking code.

        Codes up to suffix_match_max_length characters match the end of a
        tracking field; longer codes match a field exactly.
        """
        literal = quote_formula_value(code)
        if len(code) <= self.config.suffix_match_max_length:
            clauses = [f"RIGHT({{{field}}}, {len(code)})={literal}" for field in OrderFields.TRACKING]
        else:
            clauses = [f"{{{field}}}={literal}" for field in OrderFields.TRACKING]
        return f"OR({','.join(clauses)})"

    def resolve(self, code: str) -> dict:
        """
        Resolve a tracking code to one order.

        Args:
            code: Full tracking number or its last few characters

        Returns:
            {"id", "fields", "usbDriveCount"} with the customer name
            flattened to a scalar under "Customer"

        Raises:
            ValueError: If the code is empty
            OrderNotFoundError: No order matches
            AmbiguousTrackingError: More than one order matches
            RecordStoreError: On store failure
        """
        code = (code or "").strip()
        if not code:
            raise ValueError("Tracking number is required")

        formula = self.build_formula(code)
        logger.info(f"Looking up tracking number {code}")
        logger.debug(f"Tracking formula: {formula}")

        records = self.record_store.list_records(
            self.config.orders_table,
            formula=formula,
            max_records=self.config.tracking_max_matches,
        )
        orders = [Order.from_record(r) for r in records]

        if not orders:
            raise OrderNotFoundError("Order not found", tracking_number=code)

        if len(orders) > 1:
            logger.info(f"Tracking number {code} matched {len(orders)} orders")
            raise AmbiguousTrackingError(code, [o.match_summary() for o in orders])

        order = orders[0]
        logger.info(f"Tracking number {code} resolved to order {order.order_number} ({order.id})")

        fields = dict(order.fields)
        fields[OrderFields.CUSTOMER] = self._customer_name(order)
        return {
            "id": order.id,
            "fields": fields,
            "usbDriveCount": self._usb_drive_count(order),
        }

    def _customer_name(self, order: Order) -> str | None:
        """
        Customer name as a scalar.

        Prefers the name lookup field, then the linked customer record's
        name, then the raw first element of the link.
        """
        lookup = first_value(order.fields.get(OrderFields.CUSTOMER_NAME))
        if lookup:
            return lookup

        raw = order.fields.get(OrderFields.CUSTOMER)
        if not isinstance(raw, list):
            return raw
        if not raw:
            return None

        try:
            customer = self.record_store.get_record(self.config.customers_table, raw[0])
        except RecordStoreError as e:
            logger.warning(f"Could not fetch customer {raw[0]} for order {order.id}: {e}")
            return raw[0]

        if customer is None:
            return raw[0]
        customer_fields = customer.get("fields", {})
        return (
            customer_fields.get(CustomerFields.NAME)
            or customer_fields.get(CustomerFields.CUSTOMER_NAME)
            or raw[0]
        )

    def _usb_drive_count(self, order: Order) -> int:
        """Sum quantities of linked order items whose product name mentions USB."""
        item_ids = order.order_item_ids
        if not item_ids:
            return 0

        formula = "OR(" + ",".join(
            f"RECORD_ID()={quote_formula_value(item_id)}" for item_id in item_ids
        ) + ")"
        items = self.record_store.list_records(self.config.order_items_table, formula=formula)

        keyword = self.config.usb_product_keyword.casefold()
        total = 0
        for item in items:
            item_fields = item.get("fields", {})
            product = first_value(item_fields.get(OrderItemFields.PRODUCT_NAME)) or ""
            if keyword in str(product).casefold():
                total += as_int(item_fields.get(OrderItemFields.QUANTITY))
        return total
