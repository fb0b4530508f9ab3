"""
Tool response envelope.

Every tool call ends in exactly one ToolResponse. Report functions return
plain markdown and raise on failure; handle_tool_error is the single place
where those failures become error responses.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, List, Union

import structlog
from mcp.types import CallToolResult, TextContent

from marketing_analytics_mcp.config import AppConfig, ProviderFamily
from marketing_analytics_mcp.setup_guides import setup_instructions_for

logger = structlog.get_logger(__name__)


@dataclass
class ToolResponse:
    content: List[TextContent] = field(default_factory=list)
    is_error: bool = False

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)

    def to_call_tool_result(self) -> CallToolResult:
        return CallToolResult(content=list(self.content), isError=self.is_error)


def text_response(text: str) -> ToolResponse:
    return ToolResponse(content=[TextContent(type="text", text=text)])


def error_response(message: str) -> ToolResponse:
    return ToolResponse(content=[TextContent(type="text", text=f"Error: {message}")], is_error=True)


def not_configured_response(family: ProviderFamily, config: AppConfig) -> ToolResponse:
    """Setup instructions for a provider whose credentials are missing"""
    text = setup_instructions_for(family, config)
    return ToolResponse(content=[TextContent(type="text", text=text)], is_error=True)


async def handle_tool_error(
    report: Callable[..., Union[str, ToolResponse]], *args: Any, **kwargs: Any
) -> ToolResponse:
    """
    Run a synchronous report function off the event loop.

    Args:
        report: Report function issuing the vendor SDK calls
        *args, **kwargs: Passed through to the report

    Returns:
        The report's markdown as a success response, or an error response
        carrying the exception message if the report raised.
    """
    try:
        result = await asyncio.to_thread(report, *args, **kwargs)
    except Exception as e:
        logger.error(
            "tool_error",
            report=getattr(report, "__name__", repr(report)),
            error=str(e),
            error_type=type(e).__name__,
        )
        return error_response(str(e) or type(e).__name__)

    if isinstance(result, ToolResponse):
        return result
    return text_response(result)
