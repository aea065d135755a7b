"""Expose provider-agnostic message model types shared by chat implementations."""

from .models import (
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
    mime_category,
    mime_format,
    user_message,
    system_message,
    assistant_message,
)

__all__ = [
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
    "mime_category",
    "mime_format",
    "user_message",
    "system_message",
    "assistant_message",
]
