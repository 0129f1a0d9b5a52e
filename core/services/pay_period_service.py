"""Pay period lookup."""

import logging

from clients.record_store_client import RecordStoreClient
from core.config import AppConfig
from core.models import PayPeriod, PayPeriodFields

logger = logging.getLogger(__name__)


class PayPeriodService:
    """Reads the Pay Periods table."""

    def __init__(self, record_store: RecordStoreClient, config: AppConfig):
        self.record_store = record_store
        self.config = config

    def get_current(self) -> PayPeriod | None:
        """
        The most recently started period that has not been paid.

        The store returns periods newest first; the first unpaid one wins.

        Returns:
            The period, or None if every period is paid (or none exist)
        """
        records = self.record_store.list_records(
            self.config.pay_periods_table,
            sort=[(PayPeriodFields.START_DATE, "desc")],
        )
        for record in records:
            period = PayPeriod.from_record(record)
            if period.status != self.config.paid_period_status:
                return period
        return None
