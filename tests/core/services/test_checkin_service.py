"""Tests for CheckInService and the overage invoice flow behind it."""

import pytest

from clients.billing_client import BillingError
from clients.record_store_client import RecordStoreError
from core.exceptions import OrderNotFoundError
from core.services.checkin_service import CheckInService, compute_overage
from core.services.invoice_service import InvoiceService
from core.services.order_service import OrderService
from factories import make_order_record


@pytest.fixture
def service(record_store, billing, config):
    orders = OrderService(record_store, config)
    invoices = InvoiceService(billing, config)
    return CheckInService(orders, invoices, config)


def _written_fields(record_store) -> dict:
    return record_store.update_record.call_args.args[2]


class TestComputeOverage:

    def test_extra_items_are_charged_per_unit(self):
        assert compute_overage(15, 10, 1500) == (5, 7500)

    def test_exact_count_has_no_overage(self):
        assert compute_overage(10, 10, 1500) == (0, 0)

    def test_fewer_items_than_expected_is_not_negative(self):
        assert compute_overage(3, 10, 1500) == (0, 0)


class TestCheckIn:

    def test_overage_creates_invoice_and_records_charge(self, service, record_store, billing):
        record_store.get_record.return_value = make_order_record(expected=10)

        result = service.check_in("recOrder1", 15, "recEmp1", employee_name="Alice")

        assert result.extra_items == 5
        assert result.extra_charge_cents == 7500
        assert result.invoice.id == "in_123"
        assert result.invoice.url == "https://invoice.example.com/in_123"
        assert result.invoice.to_response()["amount"] == 75.0

        item_kwargs = billing.create_invoice_item.call_args.kwargs
        assert item_kwargs["amount_cents"] == 7500
        assert item_kwargs["currency"] == "usd"
        assert "5 items @ $15.00/each" in item_kwargs["description"]
        assert "HB-1001" in item_kwargs["description"]

        fields = _written_fields(record_store)
        assert fields["Items Received"] == 15
        assert fields["Extra Items"] == 5
        assert fields["Extra Items Charge"] == 75.0
        assert fields["Extra Items Invoice ID"] == "in_123"
        assert fields["Status"] == "Received"
        assert fields["Assigned Employee"] == ["recEmp1"]

    def test_invoice_steps_run_in_order(self, service, record_store, billing):
        record_store.get_record.return_value = make_order_record(expected=1)

        service.check_in("recOrder1", 2, "recEmp1")

        called = [name for name, _, _ in billing.mock_calls]
        assert called == [
            "find_or_create_customer",
            "create_invoice",
            "create_invoice_item",
            "finalize_invoice",
            "send_invoice",
        ]
        invoice_kwargs = billing.create_invoice.call_args.kwargs
        assert invoice_kwargs["days_until_due"] == 7
        assert invoice_kwargs["metadata"] == {"order_number": "HB-1001", "extra_items": "1"}
        customer_kwargs = billing.find_or_create_customer.call_args.kwargs
        assert customer_kwargs["email"] == "jane@example.com"
        assert customer_kwargs["metadata"] == {"airtable_order": "HB-1001"}

    def test_exact_count_skips_billing(self, service, record_store, billing):
        record_store.get_record.return_value = make_order_record(expected=10)

        result = service.check_in("recOrder1", 10, "recEmp1")

        assert result.invoice is None
        assert result.extra_items == 0
        assert billing.mock_calls == []
        fields = _written_fields(record_store)
        assert fields["Extra Items"] == 0
        assert fields["Extra Items Charge"] == 0
        assert "Extra Items Invoice ID" not in fields

    def test_missing_expected_count_treats_every_item_as_extra(self, service, record_store):
        record_store.get_record.return_value = make_order_record(expected=None)

        result = service.check_in("recOrder1", 2, "recEmp1")

        assert result.extra_items == 2
        assert result.extra_charge_cents == 3000

    def test_billing_failure_still_checks_in(self, service, record_store, billing):
        record_store.get_record.return_value = make_order_record(expected=10)
        billing.create_invoice.side_effect = BillingError("card_declined", 402)

        result = service.check_in("recOrder1", 12, "recEmp1")

        assert result.invoice is None
        assert result.extra_items == 2
        fields = _written_fields(record_store)
        assert fields["Items Received"] == 12
        assert fields["Extra Items Charge"] == 30.0
        assert "Extra Items Invoice ID" not in fields

    def test_missing_email_skips_invoice(self, service, record_store, billing):
        record_store.get_record.return_value = make_order_record(expected=1, email=None)

        result = service.check_in("recOrder1", 4, "recEmp1")

        assert result.invoice is None
        assert result.extra_items == 3
        billing.find_or_create_customer.assert_not_called()

    def test_notes_are_written_and_none_clears(self, service, record_store):
        record_store.get_record.return_value = make_order_record()

        service.check_in("recOrder1", 10, "recEmp1", notes="box dented")
        assert _written_fields(record_store)["Notes"] == "box dented"

        service.check_in("recOrder1", 10, "recEmp1", notes=None)
        assert _written_fields(record_store)["Notes"] == ""

    def test_repeat_check_in_overwrites(self, service, record_store):
        record_store.get_record.return_value = make_order_record(
            expected=10, **{"Items Received": 15, "Extra Items": 5}
        )

        result = service.check_in("recOrder1", 10, "recEmp2")

        assert result.extra_items == 0
        fields = _written_fields(record_store)
        assert fields["Items Received"] == 10
        assert fields["Assigned Employee"] == ["recEmp2"]

    def test_negative_items_rejected_before_any_call(self, service, record_store):
        with pytest.raises(ValueError):
            service.check_in("recOrder1", -1, "recEmp1")
        record_store.get_record.assert_not_called()

    def test_missing_employee_rejected(self, service, record_store):
        with pytest.raises(ValueError, match="employeeId"):
            service.check_in("recOrder1", 5, "")
        record_store.update_record.assert_not_called()

    def test_unknown_order_raises_not_found(self, service, record_store):
        record_store.get_record.return_value = None

        with pytest.raises(OrderNotFoundError):
            service.check_in("recMissing", 5, "recEmp1")
        record_store.update_record.assert_not_called()

    def test_store_write_failure_propagates(self, service, record_store):
        record_store.get_record.return_value = make_order_record()
        record_store.update_record.side_effect = RecordStoreError("Record store error: boom", 500)

        with pytest.raises(RecordStoreError):
            service.check_in("recOrder1", 10, "recEmp1")
