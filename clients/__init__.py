# External service clients
from clients.vault_client import (
    VaultClient,
    get_record_store_config,
    get_billing_config,
)
from clients.record_store_client import RecordStoreClient, RecordStoreError, quote_formula_value
from clients.billing_client import (
    BillingClient,
    BillingError,
    WebhookSignatureError,
    construct_event,
)
