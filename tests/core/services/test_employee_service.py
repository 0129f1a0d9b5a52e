"""Tests for EmployeeService: roster, work queue and pay summary."""

import pytest

from core.services.employee_service import EmployeeService
from core.services.order_service import OrderService
from core.services.pay_period_service import PayPeriodService
from factories import make_order_record, make_record


@pytest.fixture
def service(record_store, config):
    orders = OrderService(record_store, config)
    pay_periods = PayPeriodService(record_store, config)
    return EmployeeService(record_store, orders, pay_periods, config)


def _route(record_store, tables: dict):
    """Answer list_records by table name."""
    record_store.list_records.side_effect = lambda table, **kwargs: tables.get(table, [])


class TestListActive:

    def test_filters_inactive_and_sorts_by_name(self, service, record_store):
        _route(record_store, {"Employees": [
            make_record("recE1", {"Name": "zoe", "Active": True}),
            make_record("recE2", {"Name": "Adam", "Active": False}),
            make_record("recE3", {"Name": "Bea"}),
        ]})

        employees = service.list_active()

        assert [e.name for e in employees] == ["Bea", "zoe"]

    def test_empty_roster(self, service):
        assert service.list_active() == []


class TestWorkQueue:

    def test_matches_linked_id_and_legacy_name(self, service, record_store):
        _route(record_store, {"Orders": [
            make_order_record("recA", "HB-1", **{"Assigned Employee": ["recEmp1"]}),
            make_order_record("recB", "HB-2", **{"Assigned Employee": "alice"}),
            make_order_record("recC", "HB-3", **{"Assigned Employee": ["recEmp2"]}),
            make_order_record("recD", "HB-4"),
        ]})

        queue = service.work_queue("recEmp1", "Alice")

        assert [o.id for o in queue] == ["recA", "recB"]

    def test_legacy_name_needs_a_name(self, service, record_store):
        _route(record_store, {"Orders": [
            make_order_record("recB", "HB-2", **{"Assigned Employee": "Alice"}),
        ]})

        assert service.work_queue("recEmp1") == []

    def test_oldest_first(self, service, record_store):
        _route(record_store, {"Orders": [
            make_order_record("recNew", created_time="2024-02-01T00:00:00.000Z",
                              **{"Assigned Employee": ["recEmp1"]}),
            make_order_record("recOld", created_time="2024-01-01T00:00:00.000Z",
                              **{"Assigned Employee": ["recEmp1"]}),
        ]})

        assert [o.id for o in service.work_queue("recEmp1")] == ["recOld", "recNew"]

    def test_only_open_orders_are_requested(self, service, record_store):
        service.work_queue("recEmp1")

        formula = record_store.list_records.call_args.kwargs["formula"]
        assert formula == "{Status}!='Complete'"


class TestPaySummary:

    def test_totals_and_recent_orders(self, service, record_store):
        completed = [
            make_order_record(
                f"rec{i}", f"HB-{i}",
                **{
                    "Completed By": ["recEmp1"],
                    "Items Digitized": 10,
                    "Employee Pay": 27.5,
                    "Completion Date": f"2024-03-{i:02d}",
                    "Digitization Complete": True,
                },
            )
            for i in range(1, 8)
        ]
        completed.append(make_order_record(
            "recOther", "HB-99",
            **{"Completed By": ["recEmp2"], "Items Digitized": 50, "Employee Pay": 107.5},
        ))
        _route(record_store, {
            "Orders": completed,
            "Pay Periods": [make_record("recP1", {"Name": "March", "Status": "Open", "Start Date": "2024-03-01"})],
        })

        summary = service.pay_summary("recEmp1")

        assert summary["stats"] == {"totalOrders": 7, "totalItems": 70, "totalEarnings": 192.5}
        assert summary["currentPeriod"]["id"] == "recP1"
        assert summary["currentPeriod"]["name"] == "March"
        assert summary["currentPeriod"]["startDate"] == "2024-03-01"
        assert summary["currentPeriod"]["earnings"] == 192.5
        recent = summary["recentOrders"]
        assert len(recent) == 5
        assert recent[0] == {
            "id": "rec7",
            "orderNumber": "HB-7",
            "items": 10,
            "pay": 27.5,
            "completedDate": "2024-03-07",
        }
        assert [r["id"] for r in recent] == ["rec7", "rec6", "rec5", "rec4", "rec3"]

    def test_legacy_rows_without_stored_pay_use_formula(self, service, record_store):
        _route(record_store, {"Orders": [
            make_order_record("recA", **{"Assigned Employee": ["recEmp1"], "Items Digitized": 20}),
        ]})

        summary = service.pay_summary("recEmp1")

        assert summary["stats"]["totalEarnings"] == 47.5
        assert summary["recentOrders"][0]["completedDate"] is None

    def test_no_unpaid_period_uses_default(self, service, record_store):
        _route(record_store, {"Pay Periods": [
            make_record("recP1", {"Name": "Jan", "Status": "Paid", "Start Date": "2024-01-01"}),
        ]})

        summary = service.pay_summary("recEmp1")

        assert summary["currentPeriod"]["id"] is None
        assert summary["currentPeriod"]["name"] == "Current Period"
        assert summary["stats"] == {"totalOrders": 0, "totalItems": 0, "totalEarnings": 0}
        assert summary["recentOrders"] == []
