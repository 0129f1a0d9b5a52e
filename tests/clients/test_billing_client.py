"""
Tests for BillingClient and webhook verification.

HTTP is mocked with the responses library. Webhook signatures are computed
in the test with the same scheme the provider uses.
"""

import hashlib
import hmac
import json
import time
from urllib.parse import parse_qs

import pytest
import responses

from clients.billing_client import (
    BillingClient,
    BillingError,
    WebhookSignatureError,
    construct_event,
    verify_signature,
)

API = "https://api.stripe.com/v1"
SECRET = "whsec_test"


def _form(call) -> dict:
    return {k: v[0] for k, v in parse_qs(call.request.body).items()}


def sign(payload: bytes, secret: str = SECRET, timestamp: int | None = None) -> str:
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.".encode() + payload
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


@pytest.fixture
def client():
    return BillingClient(secret_key="sk_test_123")


class TestInit:

    def test_rejects_empty_secret_key(self):
        with pytest.raises(ValueError, match="secret_key"):
            BillingClient(secret_key="")


class TestCustomers:

    @responses.activate
    def test_existing_customer_is_reused(self, client):
        responses.add(
            responses.GET, f"{API}/customers",
            json={"data": [{"id": "cus_existing", "email": "jane@example.com"}]},
        )

        customer = client.find_or_create_customer("jane@example.com", "Jane")

        assert customer["id"] == "cus_existing"
        assert len(responses.calls) == 1
        assert responses.calls[0].request.headers["Authorization"] == "Bearer sk_test_123"

    @responses.activate
    def test_missing_customer_is_created_with_metadata(self, client):
        responses.add(responses.GET, f"{API}/customers", json={"data": []})
        responses.add(responses.POST, f"{API}/customers", json={"id": "cus_new"})

        customer = client.find_or_create_customer(
            "jane@example.com", "Jane", metadata={"airtable_order": "HB-1001"}
        )

        assert customer["id"] == "cus_new"
        body = _form(responses.calls[1])
        assert body["email"] == "jane@example.com"
        assert body["name"] == "Jane"
        assert body["metadata[airtable_order]"] == "HB-1001"


class TestInvoices:

    @responses.activate
    def test_create_invoice_sends_collection_settings(self, client):
        responses.add(responses.POST, f"{API}/invoices", json={"id": "in_1"})

        client.create_invoice(
            "cus_1", days_until_due=7,
            metadata={"order_number": "HB-1001", "extra_items": "5"},
        )

        body = _form(responses.calls[0])
        assert body["customer"] == "cus_1"
        assert body["collection_method"] == "send_invoice"
        assert body["days_until_due"] == "7"
        assert body["metadata[order_number]"] == "HB-1001"
        assert body["metadata[extra_items]"] == "5"

    @responses.activate
    def test_create_invoice_item_uses_minor_units(self, client):
        responses.add(responses.POST, f"{API}/invoiceitems", json={"id": "ii_1"})

        client.create_invoice_item("cus_1", "in_1", 7500, "usd", "5 items")

        body = _form(responses.calls[0])
        assert body["amount"] == "7500"
        assert body["currency"] == "usd"
        assert body["invoice"] == "in_1"

    @responses.activate
    def test_finalize_and_send_hit_invoice_actions(self, client):
        responses.add(
            responses.POST, f"{API}/invoices/in_1/finalize",
            json={"id": "in_1", "hosted_invoice_url": "https://pay.example/in_1"},
        )
        responses.add(responses.POST, f"{API}/invoices/in_1/send", json={"id": "in_1"})

        finalized = client.finalize_invoice("in_1")
        client.send_invoice("in_1")

        assert finalized["hosted_invoice_url"] == "https://pay.example/in_1"
        assert [c.request.url for c in responses.calls] == [
            f"{API}/invoices/in_1/finalize",
            f"{API}/invoices/in_1/send",
        ]

    @responses.activate
    def test_provider_error_raises_billing_error(self, client):
        responses.add(
            responses.GET, f"{API}/invoices/in_missing",
            json={"error": {"message": "No such invoice: 'in_missing'"}},
            status=404,
        )

        with pytest.raises(BillingError, match="No such invoice") as exc_info:
            client.retrieve_invoice("in_missing")
        assert exc_info.value.status_code == 404

    @responses.activate
    def test_connection_failure_raises_billing_error(self, client):
        responses.add(responses.POST, f"{API}/invoices", body=ConnectionError("down"))

        with pytest.raises(BillingError, match="Connection failed"):
            client.create_invoice("cus_1", days_until_due=7)


class TestVerifySignature:

    def test_valid_signature_passes(self):
        payload = b'{"type": "invoice.paid"}'
        verify_signature(payload, sign(payload), SECRET)

    def test_any_matching_v1_signature_passes(self):
        payload = b'{"type": "invoice.paid"}'
        header = sign(payload) + ",v1=deadbeef"
        verify_signature(payload, header, SECRET)

    def test_missing_header_rejected(self):
        with pytest.raises(WebhookSignatureError):
            verify_signature(b"{}", None, SECRET)

    def test_wrong_secret_rejected(self):
        payload = b'{"type": "invoice.paid"}'
        with pytest.raises(WebhookSignatureError, match="expected signature"):
            verify_signature(payload, sign(payload, secret="whsec_other"), SECRET)

    def test_tampered_body_rejected(self):
        header = sign(b'{"amount": 100}')
        with pytest.raises(WebhookSignatureError):
            verify_signature(b'{"amount": 1}', header, SECRET)

    def test_malformed_header_rejected(self):
        with pytest.raises(WebhookSignatureError, match="timestamp"):
            verify_signature(b"{}", "garbage", SECRET)

    def test_stale_timestamp_rejected(self):
        payload = b"{}"
        old = int(time.time()) - 3600
        with pytest.raises(WebhookSignatureError, match="tolerance"):
            verify_signature(payload, sign(payload, timestamp=old), SECRET, tolerance=300)


class TestConstructEvent:

    def test_returns_parsed_event(self):
        payload = json.dumps({"id": "evt_1", "type": "invoice.paid", "data": {"object": {}}}).encode()

        event = construct_event(payload, sign(payload), SECRET)

        assert event["id"] == "evt_1"
        assert event["type"] == "invoice.paid"

    def test_non_json_body_rejected(self):
        payload = b"not json"
        with pytest.raises(WebhookSignatureError, match="Invalid payload"):
            construct_event(payload, sign(payload), SECRET)

    def test_event_without_type_rejected(self):
        payload = b'{"id": "evt_1"}'
        with pytest.raises(WebhookSignatureError, match="event type"):
            construct_event(payload, sign(payload), SECRET)


class TestErrorBodies:

    @responses.activate
    def test_string_error_body_raises_billing_error(self, client):
        responses.add(
            responses.GET, f"{API}/invoices/in_1",
            json={"error": "rate limited"},
            status=429,
        )

        with pytest.raises(BillingError, match="rate limited") as exc_info:
            client.retrieve_invoice("in_1")
        assert exc_info.value.status_code == 429

    @responses.activate
    def test_non_object_body_raises_billing_error(self, client):
        responses.add(responses.GET, f"{API}/invoices/in_1", json=["bad"], status=500)

        with pytest.raises(BillingError, match="Unknown error"):
            client.retrieve_invoice("in_1")
