"""
Accounting Consumer Errors

ERROR TAXONOMY:
- ConfigurationError: required setting missing, raised at construction (fatal)
- TransientConsumeError: broker hiccup during fetch or commit (loop continues)
- DecodeError: payload is not a valid order (message dropped)
- PersistError: accounting row could not be written (row dropped, no retry)
- FetchCancelled: stop requested while fetching (orderly shutdown, not an error)
"""

from typing import Optional


class AccountingError(Exception):
    """Base class for accounting consumer errors."""


class ConfigurationError(AccountingError):
    """A required configuration value is missing or invalid."""


class TransientConsumeError(AccountingError):
    """Recoverable broker-level failure while consuming."""

    def __init__(self, reason: str, code: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.code = code


class DecodeError(AccountingError):
    """Payload could not be decoded into an Order."""

    def __init__(self, reason: str):
        super().__init__(f"Order parsing failed: {reason}")
        self.reason = reason


class PersistError(AccountingError):
    """Accounting row could not be written to the store."""

    def __init__(self, order_id: str, cause: BaseException):
        super().__init__(f"Failed to save order {order_id}: {cause}")
        self.order_id = order_id
        self.cause = cause


class FetchCancelled(Exception):
    """Raised by a pending fetch once cancellation has been requested."""
