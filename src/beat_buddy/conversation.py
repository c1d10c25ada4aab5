"""
Conversation loop for Beat Buddy.

Each user turn makes at most two chat-completion calls. The first call
advertises the function catalog and lets the model decide whether to call one
of the functions. When it does, the function runs through the Dispatcher, its
result is appended to the history, and a second call (without functions)
turns the result into a conversational answer. Only one function call is
serviced per turn.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from .catalog import openai_function_definitions
from .dispatcher import Dispatcher, parse_function_call
from .exceptions import CommunicationError
from .models import ChatResult, FunctionCall, Message, Role
from .sanitizer import sanitize_messages

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 250
DEFAULT_FINAL_MAX_TOKENS = 75
DEFAULT_TEMPERATURE = 0.7

SYSTEM_PROMPT = (
    "You are Beat Buddy, a music recommender. Guide the user and make playlists "
    "based on their inputs and suggestions. Use the available functions to get "
    "music data when necessary."
)


class ConversationLoop:
    """Two-pass function-calling conversation against the OpenAI API."""

    def __init__(
        self,
        client: AsyncOpenAI,
        dispatcher: Dispatcher,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        final_max_tokens: int = DEFAULT_FINAL_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        """
        Initialize the conversation loop.

        Args:
            client: OpenAI client, created once by the caller and shared across turns.
            dispatcher: Dispatcher executing requested functions.
            model: Chat model name.
            max_tokens: Output cap for the first (function-deciding) call.
            final_max_tokens: Output cap for the second (narrating) call.
            temperature: Sampling temperature for both calls.
        """
        self.client = client
        self.dispatcher = dispatcher
        self.model = model
        self.max_tokens = max_tokens
        self.final_max_tokens = final_max_tokens
        self.temperature = temperature

    async def _complete(self, messages: List[Dict[str, Any]], **kwargs: Any) -> Any:
        response: ChatCompletion = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,  # type: ignore[arg-type]
            temperature=self.temperature,
            **kwargs,
        )
        if response.usage:
            logger.debug(
                f"Completion used {response.usage.prompt_tokens} prompt tokens, "
                f"{response.usage.completion_tokens} completion tokens"
            )
        return response.choices[0].message

    async def send_message(
        self,
        user_input: Optional[str],
        conversation_history: Optional[List[Message]] = None,
    ) -> ChatResult:
        """
        Run one user turn.

        Args:
            user_input: Text typed by the user. Empty input is not appended.
            conversation_history: History to extend in place. A new list is
                started when omitted.

        Returns:
            ChatResult with the assistant's answer and the updated history.

        Raises:
            CommunicationError: If the OpenAI call, argument parsing, dispatch
                or the backend fails. The original exception is chained.
                Messages appended before the failure stay in the history.
        """
        history = conversation_history if conversation_history is not None else []

        if user_input:
            history.append(Message(role=Role.USER, content=user_input))

        try:
            messages = sanitize_messages(
                [Message(role=Role.SYSTEM, content=SYSTEM_PROMPT), *history]
            )
            response_message = await self._complete(
                messages,
                functions=openai_function_definitions(),
                function_call="auto",
                max_tokens=self.max_tokens,
            )

            if not response_message.function_call:
                history.append(Message(role=Role.ASSISTANT, content=response_message.content))
                return ChatResult(response=response_message.content, conversation_history=history)

            function_name = response_message.function_call.name
            function_arguments = response_message.function_call.arguments
            logger.info(f"Model requested function {function_name} with args: {function_arguments}")
            request = parse_function_call(function_name, function_arguments)

            history.append(
                Message(
                    role=Role.ASSISTANT,
                    content=response_message.content or None,
                    function_call=FunctionCall(name=function_name, arguments=function_arguments),
                )
            )

            function_result = await self.dispatcher.dispatch(request)
            history.append(
                Message(
                    role=Role.FUNCTION,
                    name=function_name,
                    content=json.dumps(function_result),
                )
            )

            final_message = await self._complete(
                sanitize_messages(history),
                max_tokens=self.final_max_tokens,
            )
            history.append(Message(role=Role.ASSISTANT, content=final_message.content))
            return ChatResult(response=final_message.content, conversation_history=history)

        except Exception as e:
            logger.error(f"Error communicating with OpenAI: {e}", exc_info=True)
            raise CommunicationError("Failed to communicate with OpenAI.") from e
