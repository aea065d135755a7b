"""Conversion of chat-completion choices into provider-agnostic responses."""

import base64
from typing import Any, Dict, Iterable, List, Optional, Sequence

from openai.types.chat.chat_completion import Choice
from openai.types.chat.chat_completion_chunk import Choice as ChunkChoice

from ...llm_core.logger import get_logger
from ...llm_core.messages import DataPart, Message, ModelResponse, Part, Role, Status, TextPart, ToolCall
from ...llm_core.tools import ToolDefinition, tool_call

logger = get_logger(__name__)


async def choice_to_response(
    params: Dict[str, Any],
    tools: Optional[Iterable[ToolDefinition]],
    choices: Sequence[Choice],
    *,
    tool_timeout: Optional[float] = None,
) -> ModelResponse:
    """
    Converts completed choices into a ModelResponse, running any requested tools.

    When a choice carries tool calls, the assistant's call announcement and one
    tool result per call are appended to ``params["messages"]`` so the next
    request gives the model its full context.

    Args:
        params: The running wire request. Its ``messages`` list is extended in place.
        tools: Tools available to the request.
        choices: Choices of a ``ChatCompletion``.
        tool_timeout: Optional time limit per tool invocation.

    Returns:
        One completed message per choice. Messages whose tools ran have role ``tool``.

    Raises:
        ToolNotFoundError: If the model called an unknown tool.
        binascii.Error: If the audio payload is not valid base64.
    """
    tool_list = list(tools or ())
    messages: List[Message] = []
    for choice in choices:
        wire_message = choice.message
        role = Role.ASSISTANT
        parts: List[Part] = []
        metadata: Dict[str, str] = {}
        tool_calls: List[ToolCall] = []

        if wire_message.content:
            parts.append(TextPart(text=wire_message.content))
        if wire_message.audio is not None and wire_message.audio.data:
            audio_bytes = base64.b64decode(wire_message.audio.data, validate=True)
            parts.append(DataPart(name=wire_message.audio.id, data=audio_bytes))
        if wire_message.refusal:
            metadata["refusal"] = wire_message.refusal
        if choice.finish_reason:
            metadata["finish_reason"] = choice.finish_reason

        function_calls: List[Any] = []
        for call in wire_message.tool_calls or ():
            if call.type == "function":
                function_calls.append(call)
            else:
                logger.warning("Skipping tool call '%s' of unsupported type: %s", call.id, call.type)
        if function_calls:
            params["messages"].append(_tool_call_announcement(wire_message.content, function_calls))

        for call in function_calls:
            name, arguments = call.function.name, call.function.arguments
            result = await tool_call(tool_list, name, arguments, timeout=tool_timeout)
            role = Role.TOOL
            tool_calls.append(ToolCall(id=call.id, name=name, arguments=arguments, result=result))
            params["messages"].append({"role": "tool", "tool_call_id": call.id, "content": result})

        messages.append(
            Message(role=role, parts=parts, status=Status.COMPLETED, metadata=metadata, tool_calls=tool_calls)
        )
    return ModelResponse(messages=messages)


def chunk_choice_to_response(choices: Sequence[ChunkChoice]) -> ModelResponse:
    """Converts the choices of a stream chunk into incomplete messages.

    Tool-call deltas are reported as they arrive; they carry partial arguments
    and no result.
    """
    messages: List[Message] = []
    for choice in choices:
        delta = choice.delta
        role = Role.ASSISTANT
        parts: List[Part] = []
        metadata: Dict[str, str] = {}
        tool_calls: List[ToolCall] = []

        if delta.content:
            parts.append(TextPart(text=delta.content))
        if delta.refusal:
            metadata["refusal"] = delta.refusal
        if choice.finish_reason:
            metadata["finish_reason"] = choice.finish_reason
        for call in delta.tool_calls or ():
            role = Role.TOOL
            function = call.function
            tool_calls.append(
                ToolCall(
                    id=call.id or "",
                    name=(function.name or "") if function else "",
                    arguments=(function.arguments or "") if function else "",
                )
            )

        messages.append(
            Message(role=role, parts=parts, status=Status.INCOMPLETE, metadata=metadata, tool_calls=tool_calls)
        )
    return ModelResponse(messages=messages)


def _tool_call_announcement(content: Optional[str], calls: Sequence[Any]) -> Dict[str, Any]:
    """The assistant turn that requested ``calls``, in request format."""
    return {
        "role": "assistant",
        "content": content,
        "tool_calls": [
            {
                "id": call.id,
                "type": "function",
                "function": {"name": call.function.name, "arguments": call.function.arguments},
            }
            for call in calls
        ],
    }
