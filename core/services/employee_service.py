"""
Employee views: active roster, work queue, and pay summary.

All three are read-only aggregations over the record store. Orders are
attributed to an employee through their assignment reference (linked record
id, or a legacy name string matched case-insensitively).
"""

import logging
from datetime import date

from clients.record_store_client import RecordStoreClient
from core.config import AppConfig
from core.models import Employee, Order, PayPeriod, calculate_pay, cents_to_dollars, ref_matches
from core.services.order_service import OrderService
from core.services.pay_period_service import PayPeriodService

logger = logging.getLogger(__name__)


class EmployeeService:
    """Service for employee-facing views."""

    def __init__(
        self,
        record_store: RecordStoreClient,
        orders: OrderService,
        pay_periods: PayPeriodService,
        config: AppConfig,
    ):
        self.record_store = record_store
        self.orders = orders
        self.pay_periods = pay_periods
        self.config = config

    def list_active(self) -> list[Employee]:
        """Active employees sorted by name. A missing Active flag counts as active."""
        records = self.record_store.list_records(self.config.employees_table)
        employees = [Employee.from_record(r) for r in records]
        active = [e for e in employees if e.active]
        return sorted(active, key=lambda e: e.name.casefold())

    def work_queue(self, employee_id: str, employee_name: str | None = None) -> list[Order]:
        """
        Open orders assigned to an employee, oldest first.

        Args:
            employee_id: Employee record id
            employee_name: Employee name, used only for legacy name-string assignments
        """
        queue = [
            order for order in self.orders.list_open()
            if ref_matches(order.assignment, employee_id, employee_name)
        ]
        logger.debug(f"Work queue for {employee_id}: {len(queue)} orders")
        return queue

    def order_pay_cents(self, order: Order) -> int:
        """Stored pay for an order; legacy rows without it fall back to the pay formula."""
        stored = order.employee_pay_cents
        if stored is not None:
            return stored
        return calculate_pay(
            order.items_digitized,
            self.config.base_pay_cents,
            self.config.per_item_pay_cents,
        ).total_cents

    def pay_summary(self, employee_id: str, employee_name: str | None = None) -> dict:
        """
        Earnings view for an employee.

        Totals cover every completed order credited to the employee; only the
        most recent few are listed individually. Current-period earnings are
        the all-time total, not a sum bounded by the period's dates.

        Returns:
            {"currentPeriod", "stats", "recentOrders"}
        """
        completed = [
            order for order in self.orders.list_completed()
            if ref_matches(order.completed_by, employee_id, employee_name)
        ]
        completed.sort(key=lambda o: o.completion_date or date.min, reverse=True)

        pay_by_order = [(order, self.order_pay_cents(order)) for order in completed]
        total_items = sum(order.items_digitized for order in completed)
        total_cents = sum(pay for _, pay in pay_by_order)

        recent = [
            {
                "id": order.id,
                "orderNumber": order.order_number,
                "items": order.items_digitized,
                "pay": cents_to_dollars(pay),
                "completedDate": order.completion_date.isoformat() if order.completion_date else None,
            }
            for order, pay in pay_by_order[: self.config.recent_pay_orders]
        ]

        period = self.pay_periods.get_current() or PayPeriod.default()

        return {
            "currentPeriod": {
                "id": period.id,
                "name": period.name,
                "status": period.status,
                "startDate": period.start_date.isoformat() if period.start_date else None,
                "earnings": cents_to_dollars(total_cents),
            },
            "stats": {
                "totalOrders": len(completed),
                "totalItems": total_items,
                "totalEarnings": cents_to_dollars(total_cents),
            },
            "recentOrders": recent,
        }
