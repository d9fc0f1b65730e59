"""Chat Provider Port - Abstract interface for tool-calling chat models.

The assistant loop depends on this port; the OpenAI adapter implements it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ToolCall:
    """A tool invocation requested by the model.

    Attributes:
        id: Provider-assigned call id (echoed back with the tool result)
        name: Tool name as registered with the chat loop
        arguments: Raw JSON string of arguments produced by the model
    """
    id: str
    name: str
    arguments: str


@dataclass
class ChatCompletion:
    """One model turn.

    Attributes:
        content: Assistant text (None when the turn only calls tools)
        tool_calls: Tool invocations requested in this turn
        model: Model name
        finish_reason: Provider finish reason ('stop', 'tool_calls', ...)
    """
    content: Optional[str]
    model: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    finish_reason: Optional[str] = None


class ChatProviderPort(ABC):
    """Abstract interface for chat completion providers with tool calling."""

    @abstractmethod
    def complete(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        timeout: Optional[float] = None,
    ) -> ChatCompletion:
        """Run one chat completion turn.

        Args:
            messages: Conversation in provider message format
            tools: Tool schemas in provider function-calling format
            timeout: Per-call timeout in seconds (None for client default)

        Returns:
            ChatCompletion with text and/or tool calls

        Raises:
            ChatTimeoutError, ChatRateLimitError, ChatAuthError, ChatServiceError
        """
        pass


class ChatError(Exception):
    """Base exception for chat completion calls"""
    pass


class ChatTimeoutError(ChatError):
    """Chat request timed out"""
    pass


class ChatRateLimitError(ChatError):
    """Rate limit exceeded"""
    pass


class ChatAuthError(ChatError):
    """Authentication failed"""
    pass


class ChatServiceError(ChatError):
    """Provider service unavailable or returned error"""
    pass
