"""
Event Sources - Hierarchical Message Events

The ledger never emits events itself; it listens to an event source.
This module defines the contract a source has to meet and ships
``EventNode``, a small in-process tree that satisfies it.

Listeners registered with ``scope="deep"`` fire for events emitted by
the node itself or by any of its descendants. ``scope="local"``
listeners only see events emitted by their own node. Delivery is
synchronous and listener errors propagate to the emitter.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

from .exceptions import SubscriptionError, TreeError
from .messages import Message

logger = logging.getLogger(__name__)

MESSAGE_ADDED = "message-added"
MESSAGE_REMOVED = "message-removed"

SCOPE_LOCAL = "local"
SCOPE_DEEP = "deep"
SCOPES = (SCOPE_LOCAL, SCOPE_DEEP)


@dataclass
class LedgerEvent:
    """An event delivered to listeners"""
    name: str
    payload: Any
    origin: Optional["EventNode"] = None
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)


EventListener = Callable[[LedgerEvent], Any]


class EventSource(Protocol):
    """Anything the ledger can subscribe to."""

    def on(self, event_name: str, listener: EventListener, scope: str = SCOPE_LOCAL) -> str:
        ...


class Subscription:
    """Represents a listener registered on a node"""

    def __init__(self, receipt: str, event_name: str, listener: EventListener, scope: str):
        self.receipt = receipt
        self.event_name = event_name
        self.listener = listener
        self.scope = scope

    def matches(self, event: LedgerEvent, local: bool) -> bool:
        """Check if this subscription should receive the event"""
        if event.name != self.event_name:
            return False
        return local or self.scope == SCOPE_DEEP

    def deliver(self, event: LedgerEvent):
        self.listener(event)

    def __repr__(self) -> str:
        return f"Subscription({self.event_name!r}, scope={self.scope!r})"


class EventNode:
    """
    A node in an in-process event tree.

    Nodes hold a keyed message store. Setting and removing messages emits
    ``message-added`` and ``message-removed`` events which bubble up to
    deep listeners on every ancestor.
    """

    def __init__(self, name: str = "root", parent: Optional["EventNode"] = None):
        self.name = name
        self.parent: Optional[EventNode] = None
        self._children: List[EventNode] = []
        self._subscriptions: Dict[str, Subscription] = {}
        self._messages: Dict[str, Message] = {}
        if parent is not None:
            parent.add_child(self)

    # Tree structure

    @property
    def children(self) -> List["EventNode"]:
        return list(self._children)

    def add_child(self, child: "EventNode") -> "EventNode":
        """
        Attach a child node, detaching it from any previous parent.

        Raises:
            TreeError: If the child is this node or one of its ancestors
        """
        if child.parent is self:
            return child
        if child is self or child in self.ancestors():
            raise TreeError(f"Cannot attach {child.name!r} below {self.name!r}: cycle in tree")
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        self._children.append(child)
        return child

    def remove_child(self, child: "EventNode") -> bool:
        if child not in self._children:
            return False
        self._children.remove(child)
        child.parent = None
        return True

    def ancestors(self) -> List["EventNode"]:
        """Ancestors from the immediate parent up to the root."""
        chain = []
        node = self.parent
        while node is not None:
            chain.append(node)
            node = node.parent
        return chain

    # Subscriptions

    def on(self, event_name: str, listener: EventListener, scope: str = SCOPE_LOCAL) -> str:
        """
        Register a listener.

        Args:
            event_name: Name of the event, e.g. ``message-added``
            listener: Callable receiving a ``LedgerEvent``
            scope: ``local`` for this node only, ``deep`` to include descendants

        Returns:
            str: Receipt for ``off()``
        """
        if scope not in SCOPES:
            raise SubscriptionError(f"Unknown propagation scope: {scope!r}")
        if not callable(listener):
            raise SubscriptionError("Listener must be callable")

        receipt = str(uuid.uuid4())
        self._subscriptions[receipt] = Subscription(receipt, event_name, listener, scope)
        logger.debug("Node %s subscribed %s listener to %s", self.name, scope, event_name)
        return receipt

    def off(self, receipt: str) -> bool:
        """Remove a listener by its receipt."""
        return self._subscriptions.pop(receipt, None) is not None

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def emit(self, event_name: str, payload: Any = None) -> LedgerEvent:
        """
        Emit an event from this node and bubble it to ancestors.

        Listeners on this node fire regardless of scope; ancestors only
        notify their deep listeners.
        """
        event = LedgerEvent(name=event_name, payload=payload, origin=self)
        self._dispatch(event, local=True)
        for ancestor in self.ancestors():
            ancestor._dispatch(event, local=False)
        return event

    def _dispatch(self, event: LedgerEvent, local: bool):
        for subscription in list(self._subscriptions.values()):
            if subscription.matches(event, local):
                subscription.deliver(event)

    # Message store

    @property
    def messages(self) -> Mapping[str, Message]:
        return dict(self._messages)

    def set_message(self, message: Message) -> Message:
        """Store a message, replacing any message with the same key."""
        previous = self._messages.get(message.key)
        if previous is not None:
            self.remove_message(previous.key)
        self._messages[message.key] = message
        self.emit(MESSAGE_ADDED, message)
        return message

    def remove_message(self, key: str) -> Optional[Message]:
        """Remove a stored message. Missing keys are ignored."""
        message = self._messages.pop(key, None)
        if message is not None:
            self.emit(MESSAGE_REMOVED, message)
        return message

    def clear_messages(self):
        for key in list(self._messages):
            self.remove_message(key)

    def __repr__(self) -> str:
        return f"EventNode({self.name!r}, children={len(self._children)})"


__all__ = [
    "LedgerEvent", "EventListener", "EventSource", "Subscription", "EventNode",
    "MESSAGE_ADDED", "MESSAGE_REMOVED", "SCOPE_LOCAL", "SCOPE_DEEP", "SCOPES",
]
