"""Public exports for the core abstractions and utilities."""

from .base import ModelProvider
from .exceptions import (
    LLMError,
    ModelRequestError,
    InvalidModelError,
    EmptyMessagesError,
    TooManyIterationsError,
    InvalidAPIKeyError,
    EmptyResponseError,
    LLMToolError,
    ToolRegistrationError,
    ToolNotFoundError,
    ToolExecutionError,
    ToolValidationError,
    ToolSchemaError,
)
from .logger import get_logger, setup_logging
from .messages import (
    Role,
    Status,
    TextPart,
    FilePart,
    DataPart,
    Part,
    ToolCall,
    Message,
    ModelRequest,
    ModelOptions,
    ModelResponse,
    user_message,
    system_message,
    assistant_message,
)
from .streaming import StreamPipe
from .tools import ToolDefinition, ToolRegistry, tool_call

__all__ = [
    "ModelProvider",
    "LLMError",
    "ModelRequestError",
    "InvalidModelError",
    "EmptyMessagesError",
    "TooManyIterationsError",
    "InvalidAPIKeyError",
    "EmptyResponseError",
    "LLMToolError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "ToolValidationError",
    "ToolSchemaError",
    "get_logger",
    "setup_logging",
    "Role",
    "Status",
    "TextPart",
    "FilePart",
    "DataPart",
    "Part",
    "ToolCall",
    "Message",
    "ModelRequest",
    "ModelOptions",
    "ModelResponse",
    "user_message",
    "system_message",
    "assistant_message",
    "StreamPipe",
    "ToolDefinition",
    "ToolRegistry",
    "tool_call",
]
