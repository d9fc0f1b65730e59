"""Chat assistant - Tool-calling loop for the product search assistant.

Each step sends the conversation and tool schemas to the chat provider. Tool
calls are dispatched through the registry and their results fed back, until
the model answers with text or the step budget runs out.
"""

import json
import logging
import time
from typing import Any, Iterator, Optional

from ..domain.ai import ChatProviderPort, ChatTimeoutError
from .tools import ToolRegistry

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a product search assistant for an e-commerce store. Your primary role is to help users find products using semantic search. You have access to a database of products with names, descriptions, and images, searchable by similarity.

When responding to users:
1. Focus on helping them find products based on their queries
2. Provide relevant product information including names, descriptions, and similarity match percentages
3. Be concise and helpful in your product descriptions
4. If asked about specific product details that aren't in the search results, politely explain that you can only provide information about products in the search results
5. Suggest refining search terms if results aren't what the user is looking for
6. Format product listings in a clear, readable way with product names in bold

Your goal is to create a seamless product discovery experience through natural conversation."""


class ChatAssistant:
    """Runs the chat completion / tool dispatch loop and yields events.

    Events are plain dicts:
        {"type": "text", "content": "..."}
        {"type": "tool_result", "tool_name": "search", "tool_call_id": "...",
         "input": {...}, "result": [...]}

    A tool result is always delivered whole in a single event.
    """

    def __init__(
        self,
        chat_provider: ChatProviderPort,
        registry: ToolRegistry,
        max_steps: int = 5,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self.chat_provider = chat_provider
        self.registry = registry
        self.max_steps = max_steps
        self.system_prompt = system_prompt

    def stream(
        self,
        messages: list[dict[str, Any]],
        deadline: Optional[float] = None,
    ) -> Iterator[dict[str, Any]]:
        """Run the loop for a conversation.

        Args:
            messages: Conversation as [{"role": ..., "content": ...}]
            deadline: time.monotonic() value after which no further model
                call is started (None = no deadline)

        Yields:
            Event dicts (see class docstring)

        Raises:
            ChatError: Provider failure, or ChatTimeoutError once the deadline passes
        """
        conversation: list[dict[str, Any]] = [{"role": "system", "content": self.system_prompt}]
        conversation.extend(messages)

        for step in range(self.max_steps):
            timeout = None
            if deadline is not None:
                timeout = deadline - time.monotonic()
                if timeout <= 0:
                    raise ChatTimeoutError("Chat response deadline exceeded")

            # Last step gets no tools so the model has to answer in text
            tools = self.registry.schemas() if step < self.max_steps - 1 else []
            completion = self.chat_provider.complete(conversation, tools=tools, timeout=timeout)

            if completion.content:
                yield {"type": "text", "content": completion.content}

            if not completion.tool_calls:
                return

            conversation.append({
                "role": "assistant",
                "content": completion.content,
                "tool_calls": [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {"name": call.name, "arguments": call.arguments},
                    }
                    for call in completion.tool_calls
                ],
            })

            for call in completion.tool_calls:
                invocation = self.registry.dispatch(call.name, call.arguments)
                if invocation.ok:
                    yield {
                        "type": "tool_result",
                        "tool_name": call.name,
                        "tool_call_id": call.id,
                        "input": invocation.arguments,
                        "result": invocation.output,
                    }
                conversation.append({
                    "role": "tool",
                    "tool_call_id": call.id,
                    "content": json.dumps(invocation.output),
                })

        logger.warning(f"Chat loop stopped after {self.max_steps} steps without a final answer")
