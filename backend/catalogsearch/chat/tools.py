"""Chat tools - Fixed registry of tools the chat model may call.

Each tool declares a pydantic input model; the registry turns it into an
OpenAI function schema and validates model-produced arguments against it.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, Field, ValidationError

from ..domain.search import with_debug
from ..observability.metrics import tool_calls_total
from ..services.embedding import SemanticSearchService

logger = logging.getLogger(__name__)

# Parameters the chat search tool always uses
SEARCH_TOOL_LIMIT = 10
SEARCH_TOOL_MIN_SCORE = 0.1


@dataclass
class ToolDefinition:
    """A tool exposed to the chat model.

    Attributes:
        name: Tool name the model calls
        description: Shown to the model
        input_model: Pydantic model validating the call arguments
        handler: Callable receiving the validated input, returning JSON-serializable data
    """
    name: str
    description: str
    input_model: type[BaseModel]
    handler: Callable[[Any], Any]

    def schema(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_model.model_json_schema(),
            },
        }


@dataclass
class ToolInvocation:
    """Result of dispatching one tool call."""
    name: str
    arguments: dict[str, Any]
    output: Any
    ok: bool = True


class ToolRegistry:
    """Tools available to the chat loop, looked up by name."""

    def __init__(self, tools: list[ToolDefinition]):
        self._tools = {tool.name: tool for tool in tools}

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def schemas(self) -> list[dict[str, Any]]:
        return [tool.schema() for tool in self._tools.values()]

    def dispatch(self, name: str, arguments_json: str) -> ToolInvocation:
        """Run a tool requested by the model.

        Unknown tools, invalid arguments and handler failures produce an
        error payload for the model instead of raising.
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.warning(f"Model requested unknown tool: {name}", extra={"tool_name": name})
            tool_calls_total.labels(tool_name=name, status="unknown_tool").inc()
            return ToolInvocation(name=name, arguments={}, output={"error": f"Unknown tool: {name}"}, ok=False)

        try:
            arguments = json.loads(arguments_json or "{}")
            validated = tool.input_model.model_validate(arguments)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(
                f"Invalid arguments for tool {name}: {e}",
                extra={"tool_name": name, "error_type": type(e).__name__},
            )
            tool_calls_total.labels(tool_name=name, status="error").inc()
            return ToolInvocation(
                name=name,
                arguments={},
                output={"error": f"Invalid arguments for tool {name}: {e}"},
                ok=False,
            )

        try:
            output = tool.handler(validated)
        except Exception as e:
            logger.error(
                f"Tool {name} failed: {e}",
                extra={"tool_name": name, "error_type": type(e).__name__},
                exc_info=True,
            )
            tool_calls_total.labels(tool_name=name, status="error").inc()
            return ToolInvocation(
                name=name,
                arguments=validated.model_dump(),
                output={"error": f"Tool {name} failed"},
                ok=False,
            )

        tool_calls_total.labels(tool_name=name, status="success").inc()
        return ToolInvocation(name=name, arguments=validated.model_dump(), output=output)


class SearchToolInput(BaseModel):
    query: str = Field(..., description="The search query")


def build_search_tool(search_service: SemanticSearchService) -> ToolDefinition:
    """Product search tool backed by the semantic search service.

    Always searches with limit 10, no filter and min_score 0.1. A search
    failure is reported to the model as an empty list.
    """

    def handle(params: SearchToolInput) -> list[dict[str, Any]]:
        logger.info("Searching for products", extra={"tool_name": "search", "query": params.query})

        outcome = search_service.search(
            params.query,
            limit=SEARCH_TOOL_LIMIT,
            filter={},
            min_score=SEARCH_TOOL_MIN_SCORE,
        )
        if not outcome.ok:
            return []

        results = [with_debug(result) for result in outcome.results]
        logger.info(
            f"Found {len(results)} results",
            extra={"tool_name": "search", "query": params.query, "result_count": len(results)},
        )
        return results

    return ToolDefinition(
        name="search",
        description="Search for products in the database",
        input_model=SearchToolInput,
        handler=handle,
    )
