"""
Custom exception classes for the Tongyi LLM library.

Request validation errors are raised before any network activity. Tool errors
abort the current response assembly. Transport errors raised by the ``openai``
client are never wrapped and reach the caller unchanged.
"""


class LLMError(Exception):
    """Base exception for all library errors."""

    pass


class ModelRequestError(LLMError):
    """Raised when a request or its options are rejected before being sent."""

    pass


class InvalidModelError(ModelRequestError):
    """Raised when the requested model name is not supported."""

    pass


class EmptyMessagesError(ModelRequestError):
    """Raised when a request carries no messages."""

    pass


class TooManyIterationsError(ModelRequestError):
    """Raised when the configured maximum number of tool iterations is below 1."""

    pass


class InvalidAPIKeyError(ModelRequestError):
    """Raised on first use when the stored API key is missing or malformed."""

    pass


class EmptyResponseError(LLMError):
    """Raised when the provider returns a completion without any choices."""

    pass


class LLMToolError(LLMError):
    """Base exception for all tool-related errors."""

    pass


class ToolRegistrationError(LLMToolError):
    """Raised when there is an error registering a tool."""

    pass


class ToolNotFoundError(LLMToolError):
    """Raised when the model calls a tool that is not part of the request."""

    pass


class ToolExecutionError(LLMToolError):
    """Raised when a tool fails during execution."""

    pass


class ToolValidationError(LLMToolError):
    """Raised when tool parameters or definition are invalid."""

    pass


class ToolSchemaError(ToolValidationError):
    """Raised when a tool input schema cannot be translated to the wire format."""

    pass
