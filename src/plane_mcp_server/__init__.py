"""Plane MCP server: the Plane project-management API as MCP tools."""

__version__ = "1.0.0"
