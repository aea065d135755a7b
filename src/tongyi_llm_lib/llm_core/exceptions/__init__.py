"""Export the exception hierarchy used across request translation, tools and streaming."""

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

__all__ = [
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
]
