"""Order domain model.

An order is a record-store row. The model keeps the raw fields (the store
owns the schema) and exposes typed accessors for the ones the service uses.
Lookup and linked fields arrive as arrays even when single-valued; accessors
collapse them to their first element.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from core.models.employee import EmployeeRef, parse_employee_ref
from core.models.fields import OrderFields
from utils.timezone import parse_record_date, parse_record_datetime


def first_value(value: Any) -> Any:
    """Collapse a lookup/linked array to its first element."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


def as_int(value: Any) -> int:
    """Coerce a numeric field (possibly a lookup array, possibly missing) to an int >= 0."""
    value = first_value(value)
    if value is None or value == "":
        return 0
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


class Order(BaseModel):
    """Full order record as stored."""

    id: str
    created_time: datetime | None = None
    fields: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: dict) -> "Order":
        return cls(
            id=record["id"],
            created_time=parse_record_datetime(record.get("createdTime")),
            fields=record.get("fields", {}),
        )

    def to_response(self) -> dict:
        """Shape returned to API callers: {id, fields}."""
        return {"id": self.id, "fields": self.fields}

    @property
    def order_number(self) -> str | None:
        value = first_value(self.fields.get(OrderFields.ORDER_NUMBER))
        return str(value) if value is not None else None

    @property
    def customer_name(self) -> str | None:
        """Name from the lookup field, else the raw customer field."""
        return (
            first_value(self.fields.get(OrderFields.CUSTOMER_NAME))
            or first_value(self.fields.get(OrderFields.CUSTOMER))
        )

    @property
    def customer_email(self) -> str | None:
        email = first_value(self.fields.get(OrderFields.CUSTOMER_EMAIL))
        return email.strip() if isinstance(email, str) and email.strip() else None

    @property
    def customer_ids(self) -> list[str]:
        value = self.fields.get(OrderFields.CUSTOMER)
        return list(value) if isinstance(value, list) else []

    @property
    def expected_items(self) -> int:
        return as_int(self.fields.get(OrderFields.EXPECTED_ITEMS))

    @property
    def items_digitized(self) -> int:
        return as_int(self.fields.get(OrderFields.ITEMS_DIGITIZED))

    @property
    def status(self) -> str | None:
        return self.fields.get(OrderFields.STATUS)

    @property
    def assignment(self) -> EmployeeRef | None:
        return parse_employee_ref(self.fields.get(OrderFields.ASSIGNED_EMPLOYEE))

    @property
    def completed_by(self) -> EmployeeRef | None:
        """Completion employee, falling back to the assignment when unset."""
        ref = parse_employee_ref(self.fields.get(OrderFields.COMPLETED_BY))
        return ref if ref is not None else self.assignment

    @property
    def is_complete(self) -> bool:
        return bool(self.fields.get(OrderFields.DIGITIZATION_COMPLETE))

    @property
    def completion_date(self) -> date | None:
        return parse_record_date(self.fields.get(OrderFields.COMPLETION_DATE))

    @property
    def employee_pay_cents(self) -> int | None:
        """Stored pay for this order in cents, or None if never recorded."""
        value = first_value(self.fields.get(OrderFields.EMPLOYEE_PAY))
        if value is None or value == "":
            return None
        try:
            return round(float(value) * 100)
        except (TypeError, ValueError):
            return None

    @property
    def tracking_numbers(self) -> list[str | None]:
        return [self.fields.get(name) for name in OrderFields.TRACKING]

    @property
    def order_item_ids(self) -> list[str]:
        value = self.fields.get(OrderFields.ORDER_ITEMS)
        return list(value) if isinstance(value, list) else []

    def match_summary(self) -> dict:
        """Candidate summary shown when a tracking code is ambiguous."""
        tracking = self.tracking_numbers
        return {
            "id": self.id,
            "orderNumber": self.order_number,
            "customer": self.customer_name,
            "tracking1": tracking[0],
            "tracking2": tracking[1],
            "tracking3": tracking[2],
        }
