"""MCP server for sitescout - Model Context Protocol integration.

Install with: pip install sitescout[mcp]
"""

try:
    import fastmcp  # noqa: F401
except ImportError as e:
    raise ImportError("sitescout[mcp] extras required. Install with: pip install sitescout[mcp]") from e
