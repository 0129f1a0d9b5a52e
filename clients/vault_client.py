"""
HashiCorp Vault client for check-in service secrets.

AppRole authentication, fail-fast on missing configuration. Every path is
scoped under 'checkin/', so the service can only read its own credentials
(record store and billing provider).
"""

import os
import logging
from typing import Dict

import hvac
from hvac.exceptions import InvalidPath, Unauthorized, Forbidden

logger = logging.getLogger(__name__)

_SECRET_PREFIX = "checkin"

# Process-wide client and per-secret cache; reset in tests
_vault_client_instance: "VaultClient | None" = None
_secret_cache: Dict[str, Dict[str, str]] = {}


def _ensure_vault_client() -> "VaultClient":
    global _vault_client_instance
    if _vault_client_instance is None:
        _vault_client_instance = VaultClient()
    return _vault_client_instance


class VaultClient:
    """Reads KV v2 secrets for the check-in service."""

    def __init__(self, vault_addr: str | None = None, vault_namespace: str | None = None):
        """
        Authenticate against Vault using AppRole credentials from the environment.

        Raises:
            ValueError: VAULT_ADDR, VAULT_ROLE_ID or VAULT_SECRET_ID missing
            PermissionError: AppRole login rejected
        """
        self.vault_addr = vault_addr or os.getenv("VAULT_ADDR")
        namespace = vault_namespace or os.getenv("VAULT_NAMESPACE")
        role_id = os.getenv("VAULT_ROLE_ID")
        secret_id = os.getenv("VAULT_SECRET_ID")

        if not self.vault_addr:
            raise ValueError("VAULT_ADDR environment variable is required")
        if not role_id or not secret_id:
            raise ValueError(
                "VAULT_ROLE_ID and VAULT_SECRET_ID environment variables are required"
            )

        if namespace:
            self.client = hvac.Client(url=self.vault_addr, namespace=namespace)
        else:
            self.client = hvac.Client(url=self.vault_addr)

        try:
            login = self.client.auth.approle.login(role_id=role_id, secret_id=secret_id)
        except Exception as e:
            logger.error(f"AppRole authentication failed: {e}")
            raise PermissionError(f"AppRole authentication failed: {e}")

        self.client.token = login["auth"]["client_token"]
        if not self.client.is_authenticated():
            raise PermissionError("Vault authentication failed")

        logger.info(f"Vault client initialized: {self.vault_addr}")

    def read_secret(self, path: str) -> Dict[str, str]:
        """
        Read every field of a secret under checkin/.

        Raises:
            PermissionError: Path missing or access denied
        """
        full_path = f"{_SECRET_PREFIX}/{path}"
        try:
            response = self.client.secrets.kv.v2.read_secret_version(
                path=full_path, raise_on_deleted_version=True
            )
        except InvalidPath:
            logger.error(f"Secret path not found: {full_path}")
            raise PermissionError(f"Secret path '{full_path}' not found in Vault")
        except (Unauthorized, Forbidden) as e:
            logger.error(f"Access denied to secret {full_path}: {e}")
            raise PermissionError(f"Access denied to secret '{full_path}': {e}")

        return response["data"]["data"]

    def get_secret(self, path: str, field: str) -> str:
        """
        Read a single field of a secret under checkin/.

        Raises:
            PermissionError: Path missing or access denied
            KeyError: Field not present in the secret
        """
        data = self.read_secret(path)
        if field not in data:
            raise KeyError(
                f"Field '{field}' not found in secret '{_SECRET_PREFIX}/{path}'. "
                f"Available: {', '.join(data.keys())}"
            )
        return data[field]


def _get_required(path: str, fields: tuple[str, ...]) -> Dict[str, str]:
    """Fetch a secret once per process and check every required field is set."""
    if path not in _secret_cache:
        _secret_cache[path] = _ensure_vault_client().read_secret(path)

    data = _secret_cache[path]
    missing = [f for f in fields if not data.get(f)]
    if missing:
        raise KeyError(
            f"Secret '{_SECRET_PREFIX}/{path}' is missing: {', '.join(missing)}"
        )
    return {f: data[f] for f in fields}


def get_record_store_config() -> Dict[str, str]:
    """Airtable credentials: api_key, base_id."""
    return _get_required("airtable", ("api_key", "base_id"))


def get_billing_config() -> Dict[str, str]:
    """Stripe credentials: secret_key, webhook_secret."""
    return _get_required("stripe", ("secret_key", "webhook_secret"))
