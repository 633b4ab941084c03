"""MCP server for Qveris tool discovery and execution."""

__version__ = "0.1.0"
