"""Azure MCP command tree: one registry, two front-ends (CLI and MCP tools)."""

__version__ = "0.1.0"
