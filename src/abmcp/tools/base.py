"""Tool protocol and data types.

Defines the ``Tool`` protocol that all tool implementations must
satisfy, plus data classes for tool calls, results, definitions, and
the per-call context handed to each tool.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger("abmcp.tools")


@dataclass(frozen=True, slots=True)
class ToolAnnotations:
    """Hints shown to MCP clients alongside the tool."""

    title: str
    read_only: bool = False
    destructive: bool = False


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """Schema definition for a tool, suitable for an MCP tool list."""

    name: str
    description: str
    parameters_schema: dict[str, Any]
    annotations: ToolAnnotations | None = None


@dataclass(frozen=True, slots=True)
class ToolCall:
    """A tool invocation requested by a client."""

    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Result from executing a tool."""

    tool_call_id: str
    content: str
    is_error: bool = False
    error_kind: str | None = None


class ToolLogger:
    """Structured logger for one tool invocation.

    ``log.info("Balance fetched", address=addr)`` becomes
    ``[ab_get_balance] Balance fetched address=0x...``.
    """

    def __init__(self, tool_name: str, base: logging.Logger | None = None) -> None:
        self._tool_name = tool_name
        self._logger = base or logger

    def _emit(self, level: int, message: str, fields: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        pairs = " ".join(f"{k}={v}" for k, v in fields.items())
        line = f"[{self._tool_name}] {message}"
        if pairs:
            line = f"{line} {pairs}"
        self._logger.log(level, "%s", line)

    def info(self, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, message, fields)

    def warn(self, message: str, **fields: Any) -> None:
        self._emit(logging.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._emit(logging.ERROR, message, fields)


@dataclass(slots=True)
class ToolContext:
    """Per-call context passed to :meth:`Tool.execute`."""

    tool_name: str
    call_id: str
    log: ToolLogger

    @classmethod
    def for_call(cls, call: ToolCall) -> ToolContext:
        return cls(tool_name=call.name, call_id=call.id, log=ToolLogger(call.name))


@runtime_checkable
class Tool(Protocol):
    """Protocol that all tool implementations must satisfy."""

    @property
    def name(self) -> str:
        """Unique name for this tool."""
        ...

    @property
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        ...

    @property
    def parameters_schema(self) -> dict[str, Any]:
        """JSON Schema for the tool's parameters."""
        ...

    @property
    def annotations(self) -> ToolAnnotations:
        """Title and read-only / destructive hints."""
        ...

    async def execute(self, context: ToolContext, **kwargs: Any) -> str:
        """Execute the tool with the given arguments.

        Returns:
            String result of the tool execution.

        Raises:
            AbmcpError: On an expected failure (bad input, failed
                resolution, external call failure).
        """
        ...
