"""Core domain models."""

from core.models.fields import (
    OrderFields, EmployeeFields, PayPeriodFields, OrderItemFields, CustomerFields,
)
from core.models.employee import Employee, EmployeeRef, ById, ByName, parse_employee_ref, ref_matches
from core.models.order import Order, first_value, as_int
from core.models.pay import PayBreakdown, PayPeriod, calculate_pay, cents_to_dollars
from core.models.invoice import InvoiceSummary, InvoiceStatus

__all__ = [
    # Record-store schema
    "OrderFields", "EmployeeFields", "PayPeriodFields", "OrderItemFields", "CustomerFields",
    # Employee
    "Employee", "EmployeeRef", "ById", "ByName", "parse_employee_ref", "ref_matches",
    # Order
    "Order", "first_value", "as_int",
    # Pay
    "PayBreakdown", "PayPeriod", "calculate_pay", "cents_to_dollars",
    # Invoice
    "InvoiceSummary", "InvoiceStatus",
]
