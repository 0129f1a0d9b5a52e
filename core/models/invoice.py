"""Invoice models.

Invoices are owned by the billing provider. The order only stores the
invoice id; these models shape what the API reports about them.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from utils.timezone import from_timestamp


class InvoiceSummary(BaseModel):
    """Overage invoice created during check-in."""

    id: str
    url: str | None = None
    amount_cents: int = Field(..., ge=0)

    @property
    def amount_dollars(self) -> float:
        return self.amount_cents / 100

    def to_response(self) -> dict:
        return {"id": self.id, "url": self.url, "amount": self.amount_dollars}


class InvoiceStatus(BaseModel):
    """Payment status of an invoice as reported by the billing provider."""

    id: str
    status: str | None
    paid: bool
    amount_due: float
    amount_paid: float
    hosted_invoice_url: str | None
    created: datetime | None

    @classmethod
    def from_provider(cls, invoice: dict) -> "InvoiceStatus":
        status = invoice.get("status")
        created = invoice.get("created")
        return cls(
            id=invoice["id"],
            status=status,
            # Newer API versions drop the boolean in favour of status
            paid=bool(invoice.get("paid", status == "paid")),
            amount_due=(invoice.get("amount_due") or 0) / 100,
            amount_paid=(invoice.get("amount_paid") or 0) / 100,
            hosted_invoice_url=invoice.get("hosted_invoice_url"),
            created=from_timestamp(created) if created else None,
        )
