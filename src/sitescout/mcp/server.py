"""
sitescout MCP Server - website URL discovery via Model Context Protocol.

Exposes URL extraction and page categorisation as MCP tools for AI agents.
Runs over stdio; logs go to stderr as JSON lines.
"""

import logging
import sys

from fastmcp import FastMCP

from sitescout.config import get_settings
from sitescout.mcp.wiring import register_all_tools
from sitescout.services.extract import ExtractService
from sitescout.utils import JSONFormatter

LOGGER = logging.getLogger(__name__)

SERVICE_NAME = "sitescout-mcp"

# Server instructions for LLMs
SITESCOUT_INSTRUCTIONS = """\
Use sitescout to find the pages of a website.

Tool selection:
- sitescout_extract_urls: List a website's URLs (from sitemaps, or by crawling)
- sitescout_categorize_urls: Find standard pages (home, contact, about, ...) in a URL list
"""


def create_server(service: ExtractService | None = None, server_name: str = "sitescout") -> FastMCP:
    """
    Create the MCP server with all tools registered.

    Args:
        service: Optional ExtractService (created from settings if not provided)
        server_name: MCP server name

    Returns:
        Configured FastMCP instance.
    """
    if service is None:
        service = ExtractService(request_timeout=get_settings().request_timeout)

    mcp = FastMCP(server_name, instructions=SITESCOUT_INSTRUCTIONS)
    register_all_tools(mcp, service)
    return mcp


def setup_server_logging(level: str) -> None:
    """Send JSON log lines to stderr (stdout carries the MCP protocol)."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter(SERVICE_NAME))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def main() -> None:
    """Entry point for sitescout-mcp command."""
    settings = get_settings()
    setup_server_logging(settings.log_level)
    LOGGER.info("Starting sitescout MCP server")
    create_server().run()


if __name__ == "__main__":
    main()
