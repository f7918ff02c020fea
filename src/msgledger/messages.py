"""
Messages and Counter Conditions

Messages are the payloads carried by ``message-added`` and
``message-removed`` events. Counter conditions decide which of them a
counter tallies.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import InvalidConditionError


class Message(BaseModel):
    """
    A message stored on an event source node.

    The ledger only looks at ``type``; every other field is handed to
    custom conditions untouched.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    key: str
    type: str = "state"
    value: Any = None
    visible: bool = True
    blocking: bool = False
    meta: Dict[str, Any] = Field(default_factory=dict)


MessageCondition = Callable[[Any], bool]


def message_type(payload: Any) -> Optional[str]:
    """Read the ``type`` of a message, mapping or arbitrary object payload."""
    if isinstance(payload, Mapping):
        return payload.get("type")
    return getattr(payload, "type", None)


def parse_condition(condition: Union[str, MessageCondition]) -> MessageCondition:
    """
    Normalize a counter condition.

    Callables are used as-is. A string becomes a condition matching
    messages whose type equals that string.

    Raises:
        InvalidConditionError: If the condition is neither callable nor a string
    """
    if callable(condition):
        return condition
    if isinstance(condition, str):
        return lambda payload: message_type(payload) == condition
    raise InvalidConditionError(
        f"Counter condition must be callable or a message type, got {type(condition).__name__}"
    )


__all__ = ["Message", "MessageCondition", "message_type", "parse_condition"]
