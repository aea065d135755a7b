"""Translation of provider-agnostic requests into chat-completions parameters."""

import base64
import json
from typing import Any, Dict, Iterable, List, Optional, assert_never

from pydantic import BaseModel

from ...llm_core.exceptions import EmptyMessagesError, InvalidModelError, ToolSchemaError
from ...llm_core.logger import get_logger
from ...llm_core.messages import (
    DataPart,
    FilePart,
    Message,
    ModelOptions,
    ModelRequest,
    Role,
    TextPart,
    mime_category,
    mime_format,
)
from ...llm_core.tools import ToolDefinition
from .models import is_valid_model

logger = get_logger(__name__)


def to_chat_completion_params(request: ModelRequest, options: ModelOptions) -> Dict[str, Any]:
    """
    Converts a provider-agnostic request into keyword arguments for
    ``AsyncOpenAI.chat.completions.create``.

    The returned dictionary is the running request of a call chain: the tool loop
    appends tool-call announcements and tool results to its ``messages`` list.

    Args:
        request: The model request to translate.
        options: Sampling and loop options. Only active (non-zero) values are sent.

    Returns:
        The wire request parameters.

    Raises:
        InvalidModelError: If the model is not supported.
        EmptyMessagesError: If the request has no messages.
        ToolSchemaError: If a tool schema cannot be translated.
    """
    if not is_valid_model(request.model):
        msg = f"Invalid model name: '{request.model}'."
        logger.error(msg)
        raise InvalidModelError(msg)

    if not request.messages:
        msg = "At least one message is required."
        logger.error(msg)
        raise EmptyMessagesError(msg)

    params: Dict[str, Any] = {
        "model": request.model,
        "messages": [],
    }

    tools = to_tools(request.tools)
    if tools:
        params["tools"] = tools

    if options.top_p > 0:
        params["top_p"] = options.top_p
    if options.temperature > 0:
        params["temperature"] = options.temperature
    if options.max_output_tokens > 0:
        params["max_completion_tokens"] = options.max_output_tokens
    if options.reasoning_effort:
        params["reasoning_effort"] = options.reasoning_effort

    for message in request.messages:
        logger.debug("Processing message: role=%s parts=%d", message.role.value, len(message.parts))
        if message.role == Role.USER:
            params["messages"].append({"role": "user", "content": to_content_parts(message)})
        elif message.role == Role.ASSISTANT:
            # Only plain text can be sent back as assistant content.
            text_parts = to_text_parts(message)
            if text_parts:
                params["messages"].append({"role": "assistant", "content": text_parts[0]["text"]})
        elif message.role == Role.SYSTEM:
            params["messages"].append({"role": "system", "content": to_text_parts(message)})
        # Tool results only enter the request through the tool loop.

    return params


def to_tools(tools: Optional[Iterable[ToolDefinition]]) -> List[Dict[str, Any]]:
    """
    Converts tool definitions into chat-completions function tools.

    Args:
        tools: The tools available to the request.

    Returns:
        A list of function tool declarations, empty if there are no tools.

    Raises:
        ToolSchemaError: If an input schema cannot be serialized to a JSON object.
    """
    declarations: List[Dict[str, Any]] = []
    for tool in tools or ():
        function: Dict[str, Any] = {"name": tool.name}
        if tool.description:
            function["description"] = tool.description
        if tool.input_schema is not None:
            function["parameters"] = _schema_to_parameters(tool.name, tool.input_schema)
        declarations.append({"type": "function", "function": function})
    return declarations


def _schema_to_parameters(tool_name: str, schema: Any) -> Dict[str, Any]:
    """Round-trip a schema through JSON so only plain JSON data reaches the wire."""
    try:
        if isinstance(schema, BaseModel):
            raw = schema.model_dump_json(by_alias=True, exclude_none=True)
        else:
            raw = json.dumps(schema)
        parameters = json.loads(raw)
    except (TypeError, ValueError) as exc:
        msg = f"Input schema of tool '{tool_name}' is not valid JSON: {exc}"
        logger.error(msg)
        raise ToolSchemaError(msg) from exc

    if not isinstance(parameters, dict):
        msg = f"Input schema of tool '{tool_name}' must be a JSON object, got {type(parameters).__name__}."
        logger.error(msg)
        raise ToolSchemaError(msg)
    return parameters


def to_text_parts(message: Message) -> List[Dict[str, Any]]:
    """Text-only content parts of a message, as used for system and assistant turns."""
    return [{"type": "text", "text": part.text} for part in message.parts if isinstance(part, TextPart)]


def to_content_parts(message: Message) -> List[Dict[str, Any]]:
    """
    Converts the parts of a user message into multi-modal content parts.

    Images become ``image_url`` parts, audio becomes ``input_audio`` parts, other
    inline data is attached as a ``file`` part. File parts of any other MIME type
    cannot be referenced by URI and are skipped.

    Args:
        message: The user message.

    Returns:
        The content parts in message order.
    """
    parts: List[Dict[str, Any]] = []
    for part in message.parts:
        if isinstance(part, TextPart):
            parts.append({"type": "text", "text": part.text})
        elif isinstance(part, FilePart):
            category = mime_category(part.mime_type)
            if category == "image":
                parts.append({"type": "image_url", "image_url": {"url": part.uri}})
            elif category == "audio":
                parts.append(
                    {
                        "type": "input_audio",
                        "input_audio": {"data": part.uri, "format": mime_format(part.mime_type)},
                    }
                )
            else:
                logger.warning("Failed to process file part '%s' with MIME type: %s", part.name, part.mime_type)
        elif isinstance(part, DataPart):
            category = mime_category(part.mime_type)
            encoded = base64.b64encode(part.data).decode("ascii")
            if category == "image":
                parts.append({"type": "image_url", "image_url": {"url": f"data:{part.mime_type};base64,{encoded}"}})
            elif category == "audio":
                parts.append(
                    {
                        "type": "input_audio",
                        "input_audio": {"data": f"data:;base64,{encoded}", "format": mime_format(part.mime_type)},
                    }
                )
            else:
                parts.append({"type": "file", "file": {"file_data": encoded, "filename": part.name}})
        else:
            assert_never(part)
    return parts
