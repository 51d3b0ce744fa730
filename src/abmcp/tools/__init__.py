"""Tool framework for the Abstract chain operations.

Provides the tool protocol, registry, and the operation handlers
exposed over MCP and the CLI.
"""
