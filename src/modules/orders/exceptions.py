"""Order intake exceptions.

Raised by the pipeline stages when a submission cannot proceed.
The API layer (Views) catches these and translates them into
the stable response shapes of the intake endpoint.
"""

from __future__ import annotations


class AdmissionDenied(Exception):
    """The client identity exhausted its request budget for the window."""

    def __init__(self, identity: str, retry_after: int) -> None:
        super().__init__(f"Rate limit exceeded for {identity}.")
        self.identity = identity
        self.retry_after = retry_after


class OrderValidationFailed(Exception):
    """A submitted field failed validation (first failing field wins)."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class DuplicateOrder(Exception):
    """An equivalent order was accepted within the suppression window."""


class StorageWriteFailed(Exception):
    """The datastore rejected or failed the order insert."""


class OrderNotFound(Exception):
    """The requested order does not exist in the given table."""
