"""Typed exceptions for check-in workflow failures."""


class CheckInError(Exception):
    """Base class for domain errors surfaced to API callers."""


class OrderNotFoundError(CheckInError):
    """No order matches the given record id, tracking code or order number."""

    def __init__(self, message: str, tracking_number: str | None = None):
        self.tracking_number = tracking_number
        super().__init__(message)


class AmbiguousTrackingError(CheckInError):
    """
    A tracking code matched more than one order.

    Carries a summary of every candidate so the operator can enter more
    digits. The resolver never picks one on their behalf.
    """

    def __init__(self, tracking_number: str, matches: list[dict]):
        self.tracking_number = tracking_number
        self.matches = matches
        super().__init__("Multiple orders match. Use more digits.")
