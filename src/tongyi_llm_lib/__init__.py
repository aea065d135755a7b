"""Tongyi LLM Library - Qwen chat completions with automatic tool calling."""

from .llm_core import (
    ModelProvider,
    ModelRequest,
    ModelOptions,
    ModelResponse,
    Message,
    Role,
    Status,
    TextPart,
    FilePart,
    DataPart,
    ToolCall,
    ToolDefinition,
    ToolRegistry,
    StreamPipe,
    user_message,
    system_message,
    assistant_message,
)
from .llm_impl.tongyi import TongyiChatProvider, TongyiSettings

__all__ = [
    "ModelProvider",
    "ModelRequest",
    "ModelOptions",
    "ModelResponse",
    "Message",
    "Role",
    "Status",
    "TextPart",
    "FilePart",
    "DataPart",
    "ToolCall",
    "ToolDefinition",
    "ToolRegistry",
    "StreamPipe",
    "user_message",
    "system_message",
    "assistant_message",
    "TongyiChatProvider",
    "TongyiSettings",
]
