"""abmcp - MCP tool server for the Abstract chain."""

__version__ = "0.1.0"
