"""Provider-agnostic message models for requests and responses."""

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..tools.models import ToolDefinition

# Wire formats named differently from their MIME subtype.
_MIME_FORMAT_ALIASES = {
    "mpeg": "mp3",
    "x-wav": "wav",
    "wave": "wav",
}


class Role(str, Enum):
    """Author of a message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class Status(str, Enum):
    """Lifecycle status of a message."""

    COMPLETED = "completed"
    INCOMPLETE = "incomplete"


def mime_category(mime_type: str) -> str:
    """Return the top-level type of a MIME type, e.g. ``image`` for ``image/png``."""
    return mime_type.split("/", 1)[0].strip().lower()


def mime_format(mime_type: str) -> str:
    """Return the wire format name of a MIME type, e.g. ``wav`` for ``audio/wav``."""
    _, _, subtype = mime_type.partition("/")
    subtype = subtype.split(";", 1)[0].strip().lower()
    return _MIME_FORMAT_ALIASES.get(subtype, subtype)


class TextPart(BaseModel):
    """Plain text content."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class FilePart(BaseModel):
    """Content referenced by URI (http(s) URL or data URL)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    name: str = ""
    uri: str
    mime_type: str


class DataPart(BaseModel):
    """Inline binary content."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["data"] = "data"
    name: str = ""
    data: bytes
    mime_type: str = ""


Part = Annotated[Union[TextPart, FilePart, DataPart], Field(discriminator="kind")]


class ToolCall(BaseModel):
    """A tool call issued by the model.

    Attributes:
        id: Identifier correlating the call with its result.
        name: Name of the called tool.
        arguments: Raw JSON argument string as produced by the model.
        result: Tool output, empty until the tool has been invoked.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str = ""
    arguments: str = ""
    result: str = ""


class Message(BaseModel):
    """A single message exchanged with the model.

    Attributes:
        role: Author of the message.
        parts: Ordered content parts.
        status: ``completed`` for final messages, ``incomplete`` for stream deltas.
        metadata: Extra string data such as ``finish_reason`` or ``refusal``.
        tool_calls: Tool calls carried by the message.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    parts: List[Part] = Field(default_factory=list)
    status: Status = Status.COMPLETED
    metadata: Dict[str, str] = Field(default_factory=dict)
    tool_calls: List[ToolCall] = Field(default_factory=list)

    def text(self) -> str:
        """Concatenate all text parts of the message."""
        return "".join(part.text for part in self.parts if isinstance(part, TextPart))


def _to_parts(contents: tuple[Union[str, TextPart, FilePart, DataPart], ...]) -> List[Part]:
    return [TextPart(text=c) if isinstance(c, str) else c for c in contents]


def user_message(*contents: Union[str, TextPart, FilePart, DataPart]) -> Message:
    """Build a user message from strings and parts."""
    return Message(role=Role.USER, parts=_to_parts(contents))


def system_message(*contents: Union[str, TextPart]) -> Message:
    """Build a system message from strings and text parts."""
    return Message(role=Role.SYSTEM, parts=_to_parts(contents))


def assistant_message(*contents: Union[str, TextPart]) -> Message:
    """Build an assistant message from strings and text parts."""
    return Message(role=Role.ASSISTANT, parts=_to_parts(contents))


class ModelRequest(BaseModel):
    """A request for a single model turn.

    Attributes:
        model: Target model identifier.
        messages: Conversation so far.
        tools: Tools the model may call while answering.
    """

    model: str
    messages: Optional[List[Message]] = None
    tools: List[ToolDefinition] = Field(default_factory=list)


class ModelOptions(BaseModel):
    """Sampling and loop options. Zero or empty values are treated as unset.

    Attributes:
        temperature: Sampling temperature.
        top_p: Nucleus sampling probability mass.
        max_output_tokens: Maximum number of completion tokens.
        reasoning_effort: Reasoning-effort hint passed through verbatim.
        max_iterations: Maximum number of request/tool-invocation cycles.
    """

    temperature: float = 0.0
    top_p: float = 0.0
    max_output_tokens: int = 0
    reasoning_effort: str = ""
    max_iterations: int = 3


class ModelResponse(BaseModel):
    """Messages produced by one request cycle or one stream chunk."""

    messages: List[Message] = Field(default_factory=list)

    def text(self) -> str:
        """Concatenate the text of all messages."""
        return "".join(message.text() for message in self.messages)

    def has_tool_calls(self) -> bool:
        """Whether any message reports executed tool calls."""
        return any(message.role == Role.TOOL and message.tool_calls for message in self.messages)
