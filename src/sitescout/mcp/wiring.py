"""Tool registration wiring for the sitescout MCP server."""

import inspect
import logging
from collections.abc import Awaitable, Callable
from functools import update_wrapper
from typing import Any

from fastmcp import FastMCP

from sitescout.mcp import tools
from sitescout.services.extract import ExtractService

LOGGER = logging.getLogger(__name__)


def create_tool_wrapper(
    tool_func: Callable[..., Awaitable[Any]],
    service: ExtractService,
) -> Callable[..., Awaitable[Any]]:
    """
    Create a tool function with ``service`` injected as its first argument.

    The wrapper keeps the tool's name, docstring and remaining parameters so
    FastMCP builds the same schema, minus the injected parameter.

    Args:
        tool_func: Tool coroutine function taking ``service`` first.
        service: Service instance to inject.

    Returns:
        Wrapped coroutine function.
    """
    original_sig = inspect.signature(tool_func)
    params = [param for name, param in original_sig.parameters.items() if name != "service"]
    new_sig = original_sig.replace(parameters=params)

    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        return await tool_func(service, *args, **kwargs)

    update_wrapper(wrapper, tool_func)
    # FastMCP must not see the wrapped signature
    del wrapper.__wrapped__
    wrapper.__signature__ = new_sig  # type: ignore[attr-defined]
    wrapper.__annotations__ = {
        name: annotation for name, annotation in tool_func.__annotations__.items() if name != "service"
    }
    return wrapper


def register_all_tools(mcp: FastMCP, service: ExtractService | None) -> None:
    """
    Register all sitescout MCP tools.

    Args:
        mcp: FastMCP server instance
        service: ExtractService used by the extraction tool

    Raises:
        RuntimeError: If no service is given.
    """
    if service is None:
        LOGGER.error("Cannot register tools: extract service is not initialized.")
        raise RuntimeError("Extract service must be initialized before registering tools.")

    mcp.tool(create_tool_wrapper(tools.sitescout_extract_urls, service))
    mcp.tool(tools.sitescout_categorize_urls)

    LOGGER.info("Registered 2 sitescout tools")
