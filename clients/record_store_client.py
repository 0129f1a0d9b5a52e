"""
Record store client (Airtable REST API).

The record store is the system of record for orders, employees, pay periods,
customers and order items. This client exposes the three operations the
service needs, each scoped to a named table: list with formula filter and
sort, get by id, update by id.

Records are returned as plain dicts in the store's own shape:
{"id": "rec...", "createdTime": "...", "fields": {...}}.
"""

import json
import logging
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

API_URL = "https://api.airtable.com/v0"
_PAGE_SIZE = 100


class RecordStoreError(Exception):
    """Raised when a record store request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


def quote_formula_value(value: str) -> str:
    """
    Render a Python string as a single-quoted formula string literal.

    Scanned codes and order numbers come from operators and webhooks, so
    they are escaped before being interpolated into a filter formula.
    """
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class RecordStoreClient:
    """Table-scoped access to an Airtable base."""

    def __init__(
        self,
        api_key: str,
        base_id: str,
        api_url: str = API_URL,
        timeout: float = 10,
    ):
        """
        Initialize with base credentials.

        Raises:
            ValueError: If api_key or base_id is empty
        """
        if not api_key:
            raise ValueError("api_key is required")
        if not base_id:
            raise ValueError("base_id is required")

        self.base_url = f"{api_url.rstrip('/')}/{base_id}"
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    def _table_url(self, table: str, record_id: str | None = None) -> str:
        url = f"{self.base_url}/{quote(table, safe='')}"
        if record_id:
            url = f"{url}/{quote(record_id, safe='')}"
        return url

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except (requests.exceptions.RequestException, ConnectionError) as e:
            logger.error(f"Record store connection failed ({method} {url}): {e}")
            raise RecordStoreError(f"Connection failed: {e}")
        return response

    @staticmethod
    def _parse(response: requests.Response) -> dict:
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError):
            logger.error(f"Record store returned invalid JSON: {response.text[:200]}")
            raise RecordStoreError("Invalid response from record store", response.status_code)

        if not response.ok:
            error = data.get("error") if isinstance(data, dict) else None
            if isinstance(error, dict):
                message = error.get("message") or error.get("type") or "Unknown error"
            else:
                message = error or "Unknown error"
            logger.error(f"Record store error {response.status_code}: {message}")
            raise RecordStoreError(f"Record store error: {message}", response.status_code)

        return data

    def list_records(
        self,
        table: str,
        formula: str | None = None,
        sort: list[tuple[str, str]] | None = None,
        max_records: int | None = None,
    ) -> list[dict]:
        """
        List records in a table, following pagination.

        Args:
            table: Table name
            formula: Optional filterByFormula expression
            sort: Optional list of (field, "asc" | "desc")
            max_records: Optional cap on total records returned

        Returns:
            Records in store order (or sort order when given)

        Raises:
            RecordStoreError: On any failure
        """
        params: dict[str, str | int] = {"pageSize": _PAGE_SIZE}
        if formula:
            params["filterByFormula"] = formula
        if max_records is not None:
            params["maxRecords"] = max_records
            params["pageSize"] = min(_PAGE_SIZE, max_records)
        for index, (field, direction) in enumerate(sort or []):
            params[f"sort[{index}][field]"] = field
            params[f"sort[{index}][direction]"] = direction

        records: list[dict] = []
        url = self._table_url(table)

        while True:
            data = self._parse(self._request("GET", url, params=params))
            records.extend(data.get("records", []))

            offset = data.get("offset")
            if not offset or (max_records is not None and len(records) >= max_records):
                break
            params["offset"] = offset

        if max_records is not None:
            records = records[:max_records]

        logger.debug(f"Listed {len(records)} records from {table}")
        return records

    def get_record(self, table: str, record_id: str) -> dict | None:
        """
        Fetch a single record.

        Returns:
            The record, or None if the store reports it does not exist

        Raises:
            RecordStoreError: On any other failure
        """
        response = self._request("GET", self._table_url(table, record_id))
        if response.status_code == 404:
            return None
        return self._parse(response)

    def update_record(self, table: str, record_id: str, fields: dict) -> dict:
        """
        Update the given fields of a record, leaving the others untouched.

        Returns:
            The updated record as stored

        Raises:
            RecordStoreError: On any failure, including unknown record id
        """
        response = self._request(
            "PATCH",
            self._table_url(table, record_id),
            data=json.dumps({"fields": fields}),
        )
        return self._parse(response)
