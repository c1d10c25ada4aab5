"""Beat Buddy

Conversational music recommender that turns natural-language requests into
Last.fm lookups and playlist edits through OpenAI function calling.
"""

__version__ = "1.0.0"

from .conversation import ConversationLoop
from .dispatcher import Dispatcher, FunctionKind, parse_function_call
from .exceptions import (
    BackendOperationError,
    CommunicationError,
    MalformedFunctionArgumentsError,
    UnknownFunctionError,
)
from .models import ChatResult, FunctionCall, Message, Role
from .sanitizer import sanitize_messages

__all__ = [
    "ConversationLoop",
    "Dispatcher",
    "FunctionKind",
    "parse_function_call",
    "BackendOperationError",
    "CommunicationError",
    "MalformedFunctionArgumentsError",
    "UnknownFunctionError",
    "ChatResult",
    "FunctionCall",
    "Message",
    "Role",
    "sanitize_messages",
]
