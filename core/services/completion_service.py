"""
Completion service: mark an order digitized and record the employee's pay.

Pay is computed here and persisted on the order. Responses report the value
read back from the stored record, so the API never shows a number the store
does not hold.
"""

import logging
from dataclasses import dataclass

from core.config import AppConfig
from core.models import Order, OrderFields, PayBreakdown, calculate_pay, cents_to_dollars
from core.services.order_service import OrderService
from core.services.pay_period_service import PayPeriodService
from utils.timezone import today_utc

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    """Result of completing an order."""

    order: Order
    pay: PayBreakdown


class CompletionService:
    """Orchestrates order completion."""

    def __init__(
        self,
        orders: OrderService,
        pay_periods: PayPeriodService,
        config: AppConfig,
    ):
        self.orders = orders
        self.pay_periods = pay_periods
        self.config = config

    def pay_for(self, items_digitized: int) -> PayBreakdown:
        return calculate_pay(
            items_digitized,
            self.config.base_pay_cents,
            self.config.per_item_pay_cents,
        )

    def complete(
        self,
        order_id: str,
        items_digitized: int,
        employee_id: str | None = None,
    ) -> CompletionResult:
        """
        Complete an order.

        Args:
            order_id: Order record id
            items_digitized: Items digitized for this order
            employee_id: Employee record id credited with the completion

        Returns:
            Updated order and its pay breakdown

        Raises:
            ValueError: If items_digitized is negative
            OrderNotFoundError: If the order does not exist
            RecordStoreError: On store failure
        """
        pay = self.pay_for(items_digitized)
        self.orders.get_by_id(order_id)

        fields = {
            OrderFields.ITEMS_DIGITIZED: items_digitized,
            OrderFields.DIGITIZATION_COMPLETE: True,
            OrderFields.COMPLETION_DATE: today_utc(),
            OrderFields.STATUS: self.config.completion_status,
            OrderFields.EMPLOYEE_PAY: cents_to_dollars(pay.total_cents),
        }
        if employee_id:
            fields[OrderFields.COMPLETED_BY] = [employee_id]

        period = self.pay_periods.get_current()
        if period is not None and period.id:
            fields[OrderFields.PAY_PERIOD] = [period.id]

        updated = self.orders.update(order_id, fields)

        stored_total = updated.employee_pay_cents
        if stored_total is not None and stored_total != pay.total_cents:
            # The store's value is what gets paid out; report that one
            logger.warning(
                f"Stored pay for order {order_id} is {stored_total} cents, "
                f"computed {pay.total_cents} cents"
            )
            pay = PayBreakdown(
                base_cents=min(pay.base_cents, stored_total),
                per_item_cents=max(0, stored_total - pay.base_cents),
            )

        logger.info(
            f"Order {updated.order_number} ({order_id}) completed: "
            f"{items_digitized} items, pay {pay.total_cents} cents"
        )
        return CompletionResult(order=updated, pay=pay)
