from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import AsyncOpenAI

from tongyi_llm_lib import ModelRequest, TongyiChatProvider, ToolDefinition, user_message
from tongyi_llm_lib.llm_impl.tongyi import QWEN_TURBO
from wire_fixtures import VALID_API_KEY


@pytest.fixture
def mock_openai_client() -> Any:
    client = MagicMock(spec=AsyncOpenAI)
    client.chat = MagicMock()
    client.chat.completions = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def provider(mock_openai_client: Any) -> TongyiChatProvider:
    return TongyiChatProvider(VALID_API_KEY, client=mock_openai_client)


@pytest.fixture
def weather_tool() -> ToolDefinition:
    def get_weather(arguments: str) -> str:
        return f"sunny for {arguments}"

    return ToolDefinition(
        name="get_weather",
        description="Current weather for a city.",
        input_schema={"type": "object", "properties": {"city": {"type": "string"}}},
        handler=get_weather,
    )


@pytest.fixture
def weather_request(weather_tool: ToolDefinition) -> ModelRequest:
    return ModelRequest(
        model=QWEN_TURBO,
        messages=[user_message("What is the weather in Paris?")],
        tools=[weather_tool],
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove provider variables; anything set during the test is undone afterwards."""
    for name in ("DASHSCOPE_API_KEY", "OPENAI_API_KEY", "DASHSCOPE_BASE_URL"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
