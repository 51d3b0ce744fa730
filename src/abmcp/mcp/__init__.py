"""MCP transport for abmcp."""
