"""
Domain events for the check-in service.

Immutable event objects representing things that happened outside the
request that observed them. The webhook receiver publishes what the billing
provider reported; handlers apply the business follow-up.

Events carry the provider payload so handlers don't need to re-fetch it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from utils.timezone import now_utc


def _as_dict(value: Any) -> dict:
    """Provider payload section, or an empty dict when absent or malformed."""
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base class for all domain events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


# =============================================================================
# BILLING EVENTS
# =============================================================================


@dataclass(frozen=True)
class BillingEvent(DomainEvent):
    """Events reported by the billing provider."""
    provider_event_id: str | None = None


@dataclass(frozen=True)
class InvoicePaid(BillingEvent):
    """An invoice was paid in full."""
    invoice: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_provider(cls, event: dict) -> "InvoicePaid":
        return cls(
            provider_event_id=event.get("id"),
            invoice=_as_dict(_as_dict(event.get("data")).get("object")),
        )

    @property
    def order_number(self) -> str | None:
        """Order number tag placed in the invoice metadata at check-in."""
        metadata = _as_dict(self.invoice.get("metadata"))
        value = metadata.get("order_number")
        return str(value) if value else None
