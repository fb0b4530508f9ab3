"""Module declaring the tool registry and the MCP server bound to it.

Tool modules register their handlers on a ToolRegistry with the
@registry.tool decorator; create_server then exposes the registry through
the low-level MCP Server, thereby 'coordinating' the bootstrapping of the
server.
"""
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

import structlog
from mcp.server import Server
from mcp.types import CallToolResult, Tool
from pydantic import BaseModel

from marketing_analytics_mcp import __version__
from marketing_analytics_mcp.config import AppConfig, ProviderFamily
from marketing_analytics_mcp.responses import ToolResponse, error_response, not_configured_response
from marketing_analytics_mcp.security import ValidationError, validate_arguments

logger = structlog.get_logger(__name__)

SERVER_NAME = "marketing-analytics"

Handler = Callable[..., Awaitable[ToolResponse]]


@dataclass
class RegisteredTool:
    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: Handler
    family: Optional[ProviderFamily] = None
    arguments: Optional[Type[BaseModel]] = None

    def to_tool(self) -> Tool:
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema)


@dataclass
class ToolRegistry:
    """
    Named tools with their schemas, handlers and provider gate.

    Every call goes through the same steps: unknown tool, provider not
    configured, argument validation, then the handler.
    """
    config: AppConfig
    tools: Dict[str, RegisteredTool] = field(default_factory=dict)

    def tool(
        self,
        name: str,
        description: str,
        family: Optional[ProviderFamily] = None,
        arguments: Optional[Type[BaseModel]] = None,
    ) -> Callable[[Handler], Handler]:
        """
        Register an async handler under name.

        Args:
            name: Tool name advertised to clients
            description: What the tool does, read by the calling model
            family: Provider the tool needs, None for always-available tools
            arguments: Pydantic model of the arguments, None when the tool takes none.
                The input schema is generated from it and the handler receives
                its fields as keyword arguments.

        Returns:
            Decorator that registers the handler and returns it unchanged
        """
        if arguments is not None:
            schema = arguments.model_json_schema()
        else:
            schema = {"type": "object", "properties": {}}

        def decorator(handler: Handler) -> Handler:
            if name in self.tools:
                raise ValueError(f"Tool already registered: {name}")
            self.tools[name] = RegisteredTool(name, description, schema, handler, family, arguments)
            return handler

        return decorator

    def list_tools(self) -> List[Tool]:
        return [registered.to_tool() for registered in self.tools.values()]

    async def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResponse:
        registered = self.tools.get(name)
        if registered is None:
            logger.warning("unknown_tool", tool=name)
            return error_response(f"Unknown tool: {name}")

        if registered.family is not None and not self.config.is_configured(registered.family):
            logger.info("tool_not_configured", tool=name, family=registered.family.value)
            return not_configured_response(registered.family, self.config)

        try:
            params = validate_arguments(registered.arguments, arguments)
        except ValidationError as e:
            logger.info("tool_invalid_arguments", tool=name, error=str(e))
            return error_response(str(e))

        logger.info("tool_called", tool=name, params=sorted(params))
        # Provider failures are handled in handle_tool_error; only the
        # handlers' own argument checks surface here.
        try:
            return await registered.handler(**params)
        except ValidationError as e:
            return error_response(str(e))


def create_server(registry: ToolRegistry) -> Server:
    """Low-level MCP server whose tools are served by the registry"""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools"""
        return registry.list_tools()

    # The registry validates arguments itself so that the configuration
    # gate runs before any schema check.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict) -> CallToolResult:
        """Handle tool calls"""
        response = await registry.call(name, arguments)
        return response.to_call_tool_result()

    return server
