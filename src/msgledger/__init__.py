"""
msgledger - Message Counting for Event Trees

Count messages flowing through a tree of event sources and await the
moment a count returns to zero.
"""

from .config import (
    Environment, LedgerConfig, LoggingConfig, configure_from_dict,
    configure_from_file, configure_logging, get_config, set_config
)
from .events import (
    MESSAGE_ADDED, MESSAGE_REMOVED, SCOPE_DEEP, SCOPE_LOCAL,
    EventNode, EventSource, LedgerEvent, Subscription
)
from .exceptions import (
    EventSourceError, InvalidConditionError, LedgerError, SubscriptionError, TreeError
)
from .ledger import Counter, Ledger, create_ledger
from .messages import Message, MessageCondition, message_type, parse_condition
from .settlement import Settlement

__version__ = "0.1.0"

__all__ = [
    # Ledger
    'Ledger',
    'Counter',
    'create_ledger',
    'Settlement',

    # Messages
    'Message',
    'MessageCondition',
    'message_type',
    'parse_condition',

    # Event sources
    'EventNode',
    'EventSource',
    'LedgerEvent',
    'Subscription',
    'MESSAGE_ADDED',
    'MESSAGE_REMOVED',
    'SCOPE_LOCAL',
    'SCOPE_DEEP',

    # Configuration
    'LedgerConfig',
    'LoggingConfig',
    'Environment',
    'configure_logging',
    'configure_from_dict',
    'configure_from_file',
    'get_config',
    'set_config',

    # Errors
    'LedgerError',
    'InvalidConditionError',
    'EventSourceError',
    'SubscriptionError',
    'TreeError',
]
