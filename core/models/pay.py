"""Pay models.

All amounts are stored in cents (integer) to avoid floating point issues.
Dollar values appear only in API responses and record-store writes.
"""

from datetime import date

from pydantic import BaseModel, Field

from core.models.fields import PayPeriodFields
from utils.timezone import parse_record_date


def cents_to_dollars(cents: int) -> float:
    return round(cents / 100, 2)


class PayBreakdown(BaseModel):
    """Pay for one completed order."""

    base_cents: int = Field(..., ge=0)
    per_item_cents: int = Field(..., ge=0)

    @property
    def total_cents(self) -> int:
        return self.base_cents + self.per_item_cents

    def to_response(self) -> dict:
        return {
            "base": cents_to_dollars(self.base_cents),
            "perItem": cents_to_dollars(self.per_item_cents),
            "total": cents_to_dollars(self.total_cents),
        }


def calculate_pay(items_digitized: int, base_pay_cents: int, per_item_pay_cents: int) -> PayBreakdown:
    """Flat base plus a per-item rate. The only place pay is computed."""
    if items_digitized < 0:
        raise ValueError("items_digitized must be >= 0")
    return PayBreakdown(
        base_cents=base_pay_cents,
        per_item_cents=items_digitized * per_item_pay_cents,
    )


class PayPeriod(BaseModel):
    """A pay period row from the record store."""

    id: str | None
    name: str
    status: str | None = None
    start_date: date | None = None

    @classmethod
    def from_record(cls, record: dict) -> "PayPeriod":
        fields = record.get("fields", {})
        return cls(
            id=record["id"],
            name=fields.get(PayPeriodFields.NAME) or "",
            status=fields.get(PayPeriodFields.STATUS),
            start_date=parse_record_date(fields.get(PayPeriodFields.START_DATE)),
        )

    @classmethod
    def default(cls) -> "PayPeriod":
        """Synthesized period used when every recorded period is paid."""
        return cls(id=None, name="Current Period")
