"""Accumulation of streamed chat-completion chunks into a complete completion."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openai.types import CompletionUsage
from openai.types.chat import ChatCompletion, ChatCompletionChunk


@dataclass
class _ToolCallBuffer:
    id: str = ""
    name: str = ""
    arguments: str = ""


@dataclass
class _ChoiceBuffer:
    content: List[str] = field(default_factory=list)
    refusal: List[str] = field(default_factory=list)
    finish_reason: Optional[str] = None
    tool_calls: Dict[int, _ToolCallBuffer] = field(default_factory=dict)


class ChatCompletionAccumulator:
    """
    Buffers ``ChatCompletionChunk`` deltas keyed by choice index and tool-call index.

    Once the stream has ended, ``chat_completion`` rebuilds the equivalent
    non-streaming ``ChatCompletion`` so the same response handling applies to
    both paths.
    """

    def __init__(self) -> None:
        self._id = ""
        self._model = ""
        self._created = 0
        self._usage: Optional[CompletionUsage] = None
        self._choices: Dict[int, _ChoiceBuffer] = {}

    def add_chunk(self, chunk: ChatCompletionChunk) -> None:
        """Merge a single chunk into the accumulated completion."""
        self._id = self._id or chunk.id
        self._model = self._model or chunk.model
        self._created = self._created or chunk.created
        if chunk.usage is not None:
            self._usage = chunk.usage

        for choice in chunk.choices:
            buffer = self._choices.setdefault(choice.index, _ChoiceBuffer())
            delta = choice.delta
            if delta.content:
                buffer.content.append(delta.content)
            if delta.refusal:
                buffer.refusal.append(delta.refusal)
            if choice.finish_reason:
                buffer.finish_reason = choice.finish_reason

            for call in delta.tool_calls or ():
                call_buffer = buffer.tool_calls.setdefault(call.index, _ToolCallBuffer())
                if call.id:
                    call_buffer.id = call.id
                if call.function is not None:
                    call_buffer.name += call.function.name or ""
                    call_buffer.arguments += call.function.arguments or ""

    @property
    def chat_completion(self) -> ChatCompletion:
        """The completion assembled from all chunks seen so far."""
        choices: List[Dict[str, Any]] = []
        for index in sorted(self._choices):
            buffer = self._choices[index]
            message: Dict[str, Any] = {
                "role": "assistant",
                "content": "".join(buffer.content) or None,
                "refusal": "".join(buffer.refusal) or None,
            }
            if buffer.tool_calls:
                message["tool_calls"] = [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {"name": call.name, "arguments": call.arguments},
                    }
                    for _, call in sorted(buffer.tool_calls.items())
                ]
            default_reason = "tool_calls" if buffer.tool_calls else "stop"
            choices.append(
                {
                    "index": index,
                    "finish_reason": buffer.finish_reason or default_reason,
                    "message": message,
                    "logprobs": None,
                }
            )

        # construct() skips validation like the SDK does for parsed responses
        return ChatCompletion.construct(
            id=self._id,
            object="chat.completion",
            created=self._created,
            model=self._model,
            choices=choices,
            usage=self._usage.model_dump() if self._usage is not None else None,
        )
