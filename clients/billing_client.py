"""
Billing provider client (Stripe REST API).

Covers the invoicing calls used by check-in (customer lookup/create, invoice,
invoice item, finalize, send), invoice retrieval for status checks, and
verification of inbound webhook deliveries.

Stripe takes form-encoded bodies; nested metadata is flattened to
"metadata[key]" parameters. Amounts are integer minor units (cents).
"""

import hashlib
import hmac
import json
import logging
import time

import requests

logger = logging.getLogger(__name__)

API_URL = "https://api.stripe.com/v1"
DEFAULT_TOLERANCE_SECONDS = 300


class BillingError(Exception):
    """Raised when a billing provider request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class WebhookSignatureError(Exception):
    """Inbound webhook could not be verified. The delivery must be discarded."""


def _form_encode(params: dict) -> dict:
    """Flatten one level of nested dicts into bracketed form keys."""
    encoded = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                if sub_value is not None:
                    encoded[f"{key}[{sub_key}]"] = str(sub_value)
        elif isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = value
    return encoded


class BillingClient:
    """Thin wrapper over the provider's invoicing endpoints."""

    def __init__(self, secret_key: str, api_url: str = API_URL, timeout: float = 10):
        """
        Initialize with the account secret key.

        Raises:
            ValueError: If secret_key is empty
        """
        if not secret_key:
            raise ValueError("secret_key is required")

        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {secret_key}"})

    def _call(self, method: str, path: str, params: dict | None = None) -> dict:
        url = f"{self.api_url}/{path}"
        kwargs = {"timeout": self.timeout}
        if method == "GET":
            kwargs["params"] = params
        else:
            kwargs["data"] = _form_encode(params or {})

        try:
            response = self.session.request(method, url, **kwargs)
        except (requests.exceptions.RequestException, ConnectionError) as e:
            logger.error(f"Billing provider connection failed ({method} /{path}): {e}")
            raise BillingError(f"Connection failed: {e}")

        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError):
            logger.error(f"Billing provider returned invalid JSON: {response.text[:200]}")
            raise BillingError("Invalid response from billing provider", response.status_code)

        if not response.ok:
            error = data.get("error") if isinstance(data, dict) else None
            if isinstance(error, dict):
                message = error.get("message") or "Unknown error"
            else:
                message = error or "Unknown error"
            logger.error(f"Billing provider error {response.status_code} on /{path}: {message}")
            raise BillingError(f"Billing error: {message}", response.status_code)

        return data

    # -------------------------------------------------------------------------
    # Customers
    # -------------------------------------------------------------------------

    def find_customer_by_email(self, email: str) -> dict | None:
        """Return the first customer with this email, or None."""
        result = self._call("GET", "customers", {"email": email, "limit": 1})
        customers = result.get("data", [])
        return customers[0] if customers else None

    def create_customer(self, email: str, name: str, metadata: dict | None = None) -> dict:
        """Create a customer."""
        return self._call("POST", "customers", {
            "email": email,
            "name": name,
            "metadata": metadata,
        })

    def find_or_create_customer(
        self, email: str, name: str, metadata: dict | None = None
    ) -> dict:
        """
        Look up a customer by email, creating one only if none exists.

        Repeated calls for the same email reuse the same customer.
        """
        existing = self.find_customer_by_email(email)
        if existing is not None:
            return existing

        customer = self.create_customer(email, name, metadata)
        logger.info(f"Created billing customer {customer['id']} for {email}")
        return customer

    # -------------------------------------------------------------------------
    # Invoices
    # -------------------------------------------------------------------------

    def create_invoice(
        self,
        customer_id: str,
        days_until_due: int,
        metadata: dict | None = None,
        collection_method: str = "send_invoice",
    ) -> dict:
        """Create a draft invoice for a customer."""
        return self._call("POST", "invoices", {
            "customer": customer_id,
            "collection_method": collection_method,
            "days_until_due": days_until_due,
            "metadata": metadata,
        })

    def create_invoice_item(
        self,
        customer_id: str,
        invoice_id: str,
        amount_cents: int,
        currency: str,
        description: str,
    ) -> dict:
        """Attach a single line item to a draft invoice."""
        return self._call("POST", "invoiceitems", {
            "customer": customer_id,
            "invoice": invoice_id,
            "amount": amount_cents,
            "currency": currency,
            "description": description,
        })

    def finalize_invoice(self, invoice_id: str) -> dict:
        """Finalize a draft invoice. Returns the finalized invoice (with hosted URL)."""
        return self._call("POST", f"invoices/{invoice_id}/finalize")

    def send_invoice(self, invoice_id: str) -> dict:
        """Email a finalized invoice to the customer."""
        return self._call("POST", f"invoices/{invoice_id}/send")

    def retrieve_invoice(self, invoice_id: str) -> dict:
        """Fetch an invoice by id."""
        return self._call("GET", f"invoices/{invoice_id}")


# =============================================================================
# WEBHOOKS
# =============================================================================


def verify_signature(
    payload: bytes,
    sig_header: str | None,
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
    now: float | None = None,
) -> None:
    """
    Verify a webhook signature header of the form "t=<ts>,v1=<hex>[,v1=<hex>]".

    The signed payload is "<ts>.<raw body>", HMAC-SHA256 with the endpoint
    secret. Any v1 signature may match.

    Raises:
        WebhookSignatureError: Header missing or malformed, no signature
            matches, or the timestamp is outside the tolerance window
    """
    if not sig_header:
        raise WebhookSignatureError("No signatures found matching the expected signature for payload")
    if not secret:
        raise WebhookSignatureError("Webhook secret is not configured")

    timestamp = None
    signatures = []
    for item in sig_header.split(","):
        key, _, value = item.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1":
            signatures.append(value)

    try:
        timestamp_int = int(timestamp)
    except (TypeError, ValueError):
        raise WebhookSignatureError("Unable to extract timestamp and signatures from header")

    if not signatures:
        raise WebhookSignatureError("No signatures found with expected scheme v1")

    signed_payload = f"{timestamp}.".encode("utf-8") + payload
    expected = hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()

    if not any(hmac.compare_digest(expected, candidate) for candidate in signatures):
        raise WebhookSignatureError("No signatures found matching the expected signature for payload")

    current = time.time() if now is None else now
    if tolerance and timestamp_int < current - tolerance:
        raise WebhookSignatureError("Timestamp outside the tolerance zone")


def construct_event(
    payload: bytes,
    sig_header: str | None,
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
) -> dict:
    """
    Verify a webhook delivery and parse its JSON body.

    The raw body must be passed exactly as received; it is never parsed
    before the signature check.

    Raises:
        WebhookSignatureError: On verification failure or an unparseable body
    """
    verify_signature(payload, sig_header, secret, tolerance)

    try:
        event = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise WebhookSignatureError(f"Invalid payload: {e}")

    if not isinstance(event, dict) or "type" not in event:
        raise WebhookSignatureError("Invalid payload: missing event type")

    return event
