"""Normalize conversation messages into the minimal shape the OpenAI API accepts."""

from collections.abc import Mapping
from typing import Any, Dict, Iterable, List

from .models import FunctionCall


def _field(message: Any, key: str) -> Any:
    if isinstance(message, Mapping):
        return message.get(key)
    return getattr(message, key, None)


def _function_call(value: Any) -> Any:
    if isinstance(value, FunctionCall):
        return value.as_dict()
    if not isinstance(value, Mapping) and hasattr(value, "name"):
        # openai.types FunctionCall objects
        return {"name": value.name, "arguments": getattr(value, "arguments", "{}")}
    return value


def sanitize_message(message: Any) -> Dict[str, Any]:
    """Sanitize a single message.

    Keeps ``role`` always, ``content`` only when it is not None, and ``name``
    and ``function_call`` only when they are set.
    """
    role = _field(message, "role")
    sanitized: Dict[str, Any] = {"role": getattr(role, "value", role)}

    content = _field(message, "content")
    if content is not None:
        sanitized["content"] = content

    name = _field(message, "name")
    if name:
        sanitized["name"] = name

    function_call = _field(message, "function_call")
    if function_call:
        sanitized["function_call"] = _function_call(function_call)

    return sanitized


def sanitize_messages(messages: Iterable[Any]) -> List[Dict[str, Any]]:
    """Sanitize a sequence of Message objects or plain mappings.

    Args:
        messages: Conversation messages in chronological order

    Returns:
        New list of dictionaries without undefined placeholders
    """
    return [sanitize_message(message) for message in messages]
