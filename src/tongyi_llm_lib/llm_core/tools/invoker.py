"""Lookup and execution of the tools advertised in a request."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Iterable, Optional

from ..exceptions import ToolExecutionError, ToolNotFoundError
from ..logger import get_logger
from .models import ToolDefinition

logger = get_logger(__name__)


async def tool_call(
    tools: Optional[Iterable[ToolDefinition]],
    name: str,
    arguments: str,
    *,
    timeout: Optional[float] = None,
) -> str:
    """Invoke the tool called ``name`` with the raw ``arguments`` string.

    Args:
        tools: Tools available to the current request.
        name: Exact name of the tool requested by the model.
        arguments: Raw JSON argument string, passed to the handler untouched.
        timeout: Optional limit in seconds for the handler to finish.

    Returns:
        The textual result of the handler.

    Raises:
        ToolNotFoundError: If no tool with the given name exists.
        ToolExecutionError: If the handler exceeds ``timeout``.
    """
    for tool in tools or ():
        if tool.name == name:
            logger.info(f"Executing tool '{name}'...")
            result = await execute_handler(tool, arguments, timeout=timeout)
            logger.debug("Tool '%s' returned %d characters.", name, len(result))
            return result

    msg = f"Tool '{name}' not found."
    logger.error(msg)
    raise ToolNotFoundError(msg)


async def execute_handler(tool: ToolDefinition, arguments: str, *, timeout: Optional[float] = None) -> str:
    """Run a tool handler once, awaiting coroutine handlers and off-loading plain ones to a thread."""
    handler = tool.handler
    if inspect.iscoroutinefunction(handler):
        pending: Any = handler(arguments)
    else:
        pending = asyncio.to_thread(handler, arguments)

    try:
        result = await asyncio.wait_for(pending, timeout=timeout)
        if inspect.isawaitable(result):
            result = await asyncio.wait_for(result, timeout=timeout)
    except asyncio.TimeoutError as exc:
        msg = f"Tool '{tool.name}' timed out after {timeout} seconds."
        logger.error(msg)
        raise ToolExecutionError(msg) from exc

    if result is None:
        return ""
    return result if isinstance(result, str) else str(result)
