"""Shared test fixtures for the check-in test suite."""

from unittest.mock import Mock

import pytest

import clients.vault_client as vault_module
from clients.billing_client import BillingClient
from clients.record_store_client import RecordStoreClient
from core.config import AppConfig
from factories import echo_update


# =============================================================================
# CONFIG & VAULT
# =============================================================================


@pytest.fixture(autouse=True)
def reset_vault_state():
    """Ensure no Vault client or cached secret leaks between tests."""
    vault_module._vault_client_instance = None
    vault_module._secret_cache.clear()
    yield
    vault_module._vault_client_instance = None
    vault_module._secret_cache.clear()


@pytest.fixture
def config() -> AppConfig:
    return AppConfig()


# =============================================================================
# GATEWAY FIXTURES
# =============================================================================


@pytest.fixture
def record_store():
    """Record store stand-in. Tests set return values per call."""
    mock = Mock(spec=RecordStoreClient)
    mock.list_records.return_value = []
    mock.get_record.return_value = None
    mock.update_record.side_effect = echo_update
    return mock


@pytest.fixture
def billing():
    """Billing provider stand-in that succeeds by default."""
    mock = Mock(spec=BillingClient)
    mock.find_or_create_customer.return_value = {"id": "cus_123", "email": "jane@example.com"}
    mock.create_invoice.return_value = {"id": "in_123", "status": "draft"}
    mock.create_invoice_item.return_value = {"id": "ii_123"}
    mock.finalize_invoice.return_value = {
        "id": "in_123",
        "status": "open",
        "hosted_invoice_url": "https://invoice.example.com/in_123",
    }
    mock.send_invoice.return_value = {"id": "in_123", "status": "open"}
    return mock
