"""Utility modules for cross-cutting concerns."""

from utils.timezone import (
    now_utc,
    today_utc,
    from_timestamp,
    parse_record_date,
    parse_record_datetime,
)
from utils.logging_config import configure_logging
