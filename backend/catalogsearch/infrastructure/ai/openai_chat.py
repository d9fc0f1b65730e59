"""OpenAI Chat Provider - Implementation of ChatProviderPort for OpenAI chat completions.

Runs one tool-calling turn per call; the assistant loop decides whether to
call again with tool results.
"""

import time
from typing import Any, Optional

from openai import (
    OpenAI,
    APIError,
    APIConnectionError,
    APITimeoutError,
    RateLimitError,
    AuthenticationError,
)

from ...domain.ai import (
    AICallType,
    ChatError,
    ChatProviderPort,
    ChatCompletion,
    ToolCall,
    ChatTimeoutError,
    ChatRateLimitError,
    ChatAuthError,
    ChatServiceError,
)
from ...observability.metrics import ai_calls_total, ai_latency_ms, ai_tokens_total


class OpenAIChatProvider(ChatProviderPort):
    """OpenAI implementation of ChatProviderPort.

    Uses the chat completions API with function tools.

    Example Usage:
        provider = OpenAIChatProvider(api_key="sk-...", model="gpt-4.1")
        turn = provider.complete(messages, tools=[search_tool_schema])
        for call in turn.tool_calls:
            ...
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4.1",
        timeout: int = 30,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize OpenAI chat provider.

        Args:
            api_key: OpenAI API key
            model: Chat model name
            timeout: Default request timeout in seconds
            client: Preconfigured OpenAI client (tests, shared clients)

        Without a key or client every complete() call raises ChatAuthError.
        """
        self.model = model
        self.timeout = timeout
        if client is None and api_key:
            client = OpenAI(api_key=api_key, timeout=timeout)
        self.client = client

    def complete(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        timeout: Optional[float] = None,
    ) -> ChatCompletion:
        start_time = time.perf_counter()
        call_type = AICallType.CHAT_COMPLETION.value
        status = "error"

        request: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "timeout": timeout if timeout is not None else self.timeout,
        }
        if tools:
            request["tools"] = tools

        try:
            if self.client is None:
                raise ChatAuthError("OPENAI_API_KEY not provided")

            response = self.client.chat.completions.create(**request)

            choice = response.choices[0]
            message = choice.message
            tool_calls = [
                ToolCall(id=call.id, name=call.function.name, arguments=call.function.arguments or "{}")
                for call in (message.tool_calls or [])
            ]

            if response.usage:
                ai_tokens_total.labels(call_type=call_type, provider="openai").inc(response.usage.total_tokens)

            status = "success"
            return ChatCompletion(
                content=message.content,
                model=response.model or self.model,
                tool_calls=tool_calls,
                finish_reason=choice.finish_reason,
            )

        except ChatError:
            raise

        except APITimeoutError as e:
            raise ChatTimeoutError(f"OpenAI API timeout: {str(e)}") from e

        except RateLimitError as e:
            raise ChatRateLimitError(f"OpenAI rate limit exceeded: {str(e)}") from e

        except AuthenticationError as e:
            raise ChatAuthError(f"OpenAI authentication failed: {str(e)}") from e

        except (APIConnectionError, APIError) as e:
            raise ChatServiceError(f"OpenAI service error: {str(e)}") from e

        except Exception as e:
            raise ChatServiceError(f"Unexpected error calling OpenAI: {str(e)}") from e

        finally:
            latency_ms = (time.perf_counter() - start_time) * 1000
            ai_calls_total.labels(call_type=call_type, provider="openai", status=status).inc()
            ai_latency_ms.labels(call_type=call_type, provider="openai").observe(latency_ms)
