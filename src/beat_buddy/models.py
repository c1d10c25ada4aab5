"""
Data models for Beat Buddy - messages, function descriptors and chat results.

Messages mirror the OpenAI chat-completion message shape. Function descriptors
are rendered into the legacy ``functions`` payload understood by the API.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Role(str, Enum):
    """Author of a conversation message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"


@dataclass(frozen=True)
class FunctionCall:
    """Function call requested by the model.

    Attributes:
        name: Catalog name of the requested function
        arguments: JSON-encoded argument object, exactly as emitted by the model
    """

    name: str
    arguments: str = "{}"

    def as_dict(self) -> Dict[str, str]:
        return {"name": self.name, "arguments": self.arguments}


@dataclass
class Message:
    """Single entry of the conversation history."""

    role: Role
    content: Optional[str] = None
    name: Optional[str] = None
    function_call: Optional[FunctionCall] = None

    def __post_init__(self) -> None:
        self.role = Role(self.role)

    def as_dict(self) -> Dict[str, Any]:
        """Render the message in wire shape, omitting absent fields."""
        data: Dict[str, Any] = {"role": self.role.value}
        if self.content is not None:
            data["content"] = self.content
        if self.name:
            data["name"] = self.name
        if self.function_call:
            data["function_call"] = self.function_call.as_dict()
        return data


@dataclass(frozen=True)
class ParameterSpec:
    """Schema entry for one function parameter."""

    type: str
    description: str
    default: Optional[Any] = None
    minimum: Optional[int] = None

    def to_openai(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.type, "description": self.description}
        if self.default is not None:
            schema["default"] = self.default
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        return schema


@dataclass(frozen=True)
class FunctionDescriptor:
    """Catalog entry advertised to the model.

    Attributes:
        name: Function name the model uses to request a call
        description: Human-readable description shown to the model
        parameters: Ordered mapping of parameter name to ParameterSpec
        required: Names of the parameters the model must supply
    """

    name: str
    description: str
    parameters: Dict[str, ParameterSpec] = field(default_factory=dict)
    required: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        unknown = [p for p in self.required if p not in self.parameters]
        if unknown:
            raise ValueError(f"Required parameters not declared for {self.name}: {unknown}")

    def to_openai(self) -> Dict[str, Any]:
        """Render the descriptor as an OpenAI function definition."""
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {
                param: spec.to_openai() for param, spec in self.parameters.items()
            },
        }
        if self.required:
            schema["required"] = list(self.required)
        return {
            "name": self.name,
            "description": self.description,
            "parameters": schema,
        }


@dataclass
class ChatResult:
    """Outcome of one conversation turn."""

    response: Optional[str]
    conversation_history: List[Message]
