"""PAYE Calc MCP server."""
