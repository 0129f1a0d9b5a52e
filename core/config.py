"""Check-in service configuration."""

from pydantic import BaseModel, Field


class AppConfig(BaseModel):
    """
    Business constants and record-store schema values.

    Money is in cents. Status values and table names belong to the record
    store's schema; they are configured here rather than assumed in code.
    """

    # Pricing and pay
    extra_item_price_cents: int = Field(
        default=1500,
        description="Charge per item received beyond the package allowance",
        ge=0,
    )
    base_pay_cents: int = Field(
        default=750,
        description="Flat pay per completed order",
        ge=0,
    )
    per_item_pay_cents: int = Field(
        default=200,
        description="Pay per digitized item",
        ge=0,
    )
    currency: str = Field(default="usd", min_length=3, max_length=3)
    invoice_days_until_due: int = Field(default=7, ge=1, le=90)

    # Tracking lookup
    suffix_match_max_length: int = Field(
        default=5,
        description="Codes this long or shorter match the end of a tracking number",
        ge=1,
    )
    tracking_max_matches: int = Field(
        default=10,
        description="Candidate orders fetched for a tracking lookup",
        ge=2,
        le=100,
    )
    usb_product_keyword: str = Field(
        default="usb",
        description="Case-insensitive substring identifying the USB add-on product",
    )

    # Record store schema
    orders_table: str = "Orders"
    employees_table: str = "Employees"
    pay_periods_table: str = "Pay Periods"
    customers_table: str = "Customers"
    order_items_table: str = "Order Items"
    received_status: str = Field(
        default="Received",
        description="Status written at check-in (intake complete, ready to digitize)",
    )
    completion_status: str = Field(
        default="Complete",
        description="Status written at completion; orders in it leave the work queue",
    )
    paid_period_status: str = Field(
        default="Paid",
        description="Pay periods in this status are never the current period",
    )

    # Views
    recent_pay_orders: int = Field(default=5, ge=1, le=50)

    # Infrastructure
    webhook_tolerance_seconds: int = Field(default=300, ge=0)
    http_timeout_seconds: float = Field(default=10, gt=0, le=120)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$")

    @property
    def extra_item_price_dollars(self) -> float:
        """Per-item overage price for display."""
        return self.extra_item_price_cents / 100
