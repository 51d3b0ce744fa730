"""MCP server exposing the abmcp tool registry over stdio."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool, ToolAnnotations

from abmcp import __version__
from abmcp.tools.base import ToolCall

if TYPE_CHECKING:
    from abmcp.config.schema import AbmcpConfig
    from abmcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolCallFailed(Exception):
    """Raised inside the call handler so the MCP layer reports ``isError``."""


def _get_tools(registry: ToolRegistry) -> list[Tool]:
    """Describe every registered tool as an MCP tool."""
    tools = []
    for definition in registry.list_definitions():
        annotations = None
        if definition.annotations is not None:
            annotations = ToolAnnotations(
                title=definition.annotations.title,
                readOnlyHint=definition.annotations.read_only,
                destructiveHint=definition.annotations.destructive,
            )
        tools.append(
            Tool(
                name=definition.name,
                description=definition.description,
                inputSchema=definition.parameters_schema,
                annotations=annotations,
            )
        )
    return tools


async def _call_tool(
    registry: ToolRegistry, name: str, arguments: dict[str, Any] | None
) -> list[TextContent]:
    """Run one tool call through the registry.

    Raises:
        ToolCallFailed: If the tool returned an error result.
    """
    call = ToolCall(id=uuid.uuid4().hex, name=name, arguments=arguments or {})
    result = await registry.execute(call)
    if result.is_error:
        raise ToolCallFailed(result.content)
    return [TextContent(type="text", text=result.content)]


def create_server(registry: ToolRegistry) -> Server:
    """Build an MCP server bound to ``registry``."""
    server = Server("abmcp", version=__version__)

    @server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
    async def list_tools() -> list[Tool]:
        """List available MCP tools."""
        return _get_tools(registry)

    @server.call_tool()  # type: ignore[untyped-decorator]
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls."""
        return await _call_tool(registry, name, arguments)

    return server


async def run_server(config: AbmcpConfig) -> None:
    """Start the MCP server on stdio."""
    from abmcp.runtime import build_runtime

    runtime = build_runtime(config)
    server = create_server(runtime.registry)
    logger.info(
        "Starting abmcp MCP server network=%s tools=%d",
        config.chain.network,
        len(runtime.registry),
    )
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
