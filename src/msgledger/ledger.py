"""
Ledger - Message Counting Service

🧮 Counting Messages Across a Tree:
A ledger keeps named counters over a stream of ``message-added`` and
``message-removed`` events. Each counter carries a condition deciding
which messages it tallies, and a ``Settlement`` that is fulfilled
whenever the count is zero. Callers use it to wait until, say, no
validation errors remain anywhere below a node.

Handles only change at the zero boundary:
- zero -> non-zero installs a fresh pending settlement
- non-zero -> zero fulfills the current settlement and keeps it
- any other change leaves the handle alone, so existing waiters keep
  waiting on the same object

Conditions are trusted. A condition that raises aborts routing of that
event; counters after it in the mapping are not updated.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .config import LedgerConfig, get_config
from .events import SCOPE_DEEP, EventSource, LedgerEvent
from .exceptions import EventSourceError
from .messages import MessageCondition, parse_condition
from .settlement import Settlement

logger = logging.getLogger(__name__)


@dataclass
class Counter:
    """A named tally with its condition and completion handle"""
    name: str
    condition: MessageCondition
    count: int = 0
    settlement: Settlement = field(default_factory=Settlement.resolved)


class Ledger:
    """
    Counts messages flowing through an event source.

    The ledger owns its counter mapping for its whole lifetime; counters
    are created on first declaration and never removed.
    """

    def __init__(self, config: Optional[LedgerConfig] = None):
        """
        Args:
            config: Ledger configuration. Defaults to the global configuration,
                which is built from ``MSGLEDGER_*`` environment variables on
                first use.

        Raises:
            ValueError: If no config is given and ``MSGLEDGER_ENV`` names an
                unknown environment
        """
        self.config = config or get_config()
        self._counters: Dict[str, Counter] = {}
        self._sources: List[Any] = []

    @property
    def initialized(self) -> bool:
        return bool(self._sources)

    def init(self, source: EventSource) -> None:
        """
        Subscribe the ledger to an event source.

        Registers one listener for added messages and one for removed
        messages, both with deep scope so events from any descendant of
        ``source`` are counted. Calling this twice subscribes twice.

        Raises:
            EventSourceError: If ``source`` has no ``on`` method
        """
        subscribe = getattr(source, "on", None)
        if not callable(subscribe):
            raise EventSourceError(
                f"{type(source).__name__} cannot be used as an event source: no on() method"
            )

        if self._sources and self.config.warn_on_reinit:
            logger.warning("Ledger initialized more than once; events will be counted twice")

        subscribe(self.config.added_event, self._listener(1), SCOPE_DEEP)
        subscribe(self.config.removed_event, self._listener(-1), SCOPE_DEEP)
        self._sources.append(source)
        logger.debug(
            "Ledger subscribed to %s/%s", self.config.added_event, self.config.removed_event
        )

    def count(
        self,
        name: str,
        condition: Union[MessageCondition, str, None] = None,
        initial_value: int = 0
    ) -> Settlement:
        """
        Declare a counter, or update an existing one.

        Args:
            name: Counter name
            condition: Callable deciding if a message counts, or a message
                type string. Defaults to messages whose type equals ``name``.
            initial_value: Starting count for a new counter. For an
                existing counter it is added to the current count.

        Returns:
            Settlement: The counter's current completion handle
        """
        condition = parse_condition(condition or name)

        counter = self._counters.get(name)
        if counter is None:
            counter = Counter(
                name=name,
                condition=condition,
                count=initial_value,
                settlement=Settlement(done=not initial_value)
            )
            self._counters[name] = counter
            logger.debug("Created counter %s with value %d", name, initial_value)
            return counter.settlement

        counter.condition = condition
        logger.debug("Updated counter %s by %d", name, initial_value)
        return self._apply_delta(counter, initial_value).settlement

    def settled(self, name: str) -> Settlement:
        """Completion handle for a counter; undeclared counters are settled."""
        counter = self._counters.get(name)
        return counter.settlement if counter is not None else Settlement.resolved()

    def value(self, name: str) -> int:
        """Current count, or 0 for undeclared counters."""
        counter = self._counters.get(name)
        return counter.count if counter is not None else 0

    def names(self) -> List[str]:
        return list(self._counters)

    def snapshot(self) -> Dict[str, int]:
        """Copy of every counter value"""
        return {name: counter.count for name, counter in self._counters.items()}

    def _apply_delta(self, counter: Counter, delta: int) -> Counter:
        before = counter.count
        after = before + delta
        counter.count = after

        if before == 0 and after != 0:
            counter.settlement = Settlement()
            logger.debug("Counter %s left zero (%d)", counter.name, after)
        elif before != 0 and after == 0:
            counter.settlement.resolve()
            logger.debug("Counter %s settled", counter.name)

        return counter

    def _route(self, payload: Any, delta: int):
        for counter in list(self._counters.values()):
            if counter.condition(payload):
                self._apply_delta(counter, delta)

    def _listener(self, delta: int):
        def listener(event: LedgerEvent):
            self._route(event.payload, delta)
        return listener

    def __contains__(self, name: str) -> bool:
        return name in self._counters

    def __len__(self) -> int:
        return len(self._counters)

    def __repr__(self) -> str:
        return f"Ledger({self.snapshot()!r})"


def create_ledger(config: Optional[LedgerConfig] = None) -> Ledger:
    """Create a new ledger for a single node's context."""
    return Ledger(config)


__all__ = ["Counter", "Ledger", "create_ledger"]
