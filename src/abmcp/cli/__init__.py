"""Command line interface for abmcp."""
