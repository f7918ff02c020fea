"""
Ledger Exceptions

Errors raised by the ledger, its condition parsing and the reference
event source. Reads of undeclared counters are never errors.
"""


class LedgerError(Exception):
    """Base exception for ledger errors"""
    pass


class InvalidConditionError(LedgerError, TypeError):
    """Raised when a counter condition is neither callable nor a message type"""
    pass


class EventSourceError(LedgerError):
    """Raised when an object cannot act as an event source"""
    pass


class SubscriptionError(LedgerError):
    """Raised when subscription operations fail"""
    pass


class TreeError(LedgerError, ValueError):
    """Raised when attaching a node would create a cycle"""
    pass


__all__ = [
    "LedgerError", "InvalidConditionError", "EventSourceError", "SubscriptionError",
    "TreeError"
]
