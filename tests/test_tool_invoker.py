import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from tongyi_llm_lib import ToolDefinition
from tongyi_llm_lib.llm_core.exceptions import ToolExecutionError, ToolNotFoundError
from tongyi_llm_lib.llm_core.tools import tool_call


def _tools() -> list[ToolDefinition]:
    return [
        ToolDefinition(name="test_tool", handler=lambda arguments: "test result"),
        ToolDefinition(name="another_tool", handler=lambda arguments: "another result"),
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, expected",
    [("test_tool", "test result"), ("another_tool", "another result")],
)
async def test_tool_call_returns_handler_result(name: str, expected: str) -> None:
    assert await tool_call(_tools(), name, "test args") == expected


@pytest.mark.asyncio
async def test_tool_call_unknown_tool() -> None:
    result = None
    with pytest.raises(ToolNotFoundError, match="nonexistent_tool"):
        result = await tool_call(_tools(), "nonexistent_tool", "test args")
    assert result is None


@pytest.mark.asyncio
async def test_tool_call_without_tools() -> None:
    with pytest.raises(ToolNotFoundError):
        await tool_call(None, "test_tool", "{}")


@pytest.mark.asyncio
async def test_tool_call_passes_raw_arguments_once() -> None:
    handler = MagicMock(return_value="ok")
    tools = [ToolDefinition(name="echo", handler=handler)]

    await tool_call(tools, "echo", '{"a": 1}')

    handler.assert_called_once_with('{"a": 1}')


@pytest.mark.asyncio
async def test_tool_call_awaits_async_handlers() -> None:
    handler = AsyncMock(return_value="async ok")
    tools = [ToolDefinition(name="echo", handler=handler)]

    assert await tool_call(tools, "echo", "{}") == "async ok"
    handler.assert_awaited_once_with("{}")


@pytest.mark.asyncio
async def test_tool_call_propagates_handler_errors() -> None:
    def failing(arguments: str) -> str:
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        await tool_call([ToolDefinition(name="failing", handler=failing)], "failing", "{}")


@pytest.mark.asyncio
async def test_tool_call_timeout() -> None:
    async def slow(arguments: str) -> str:
        await asyncio.sleep(1)
        return "late"

    with pytest.raises(ToolExecutionError, match="timed out"):
        await tool_call([ToolDefinition(name="slow", handler=slow)], "slow", "{}", timeout=0.01)


@pytest.mark.asyncio
async def test_tool_call_stringifies_results() -> None:
    tools = [
        ToolDefinition(name="number", handler=lambda arguments: 42),
        ToolDefinition(name="nothing", handler=lambda arguments: None),
    ]

    assert await tool_call(tools, "number", "") == "42"
    assert await tool_call(tools, "nothing", "") == ""
