import pytest
from pydantic import ValidationError

from tongyi_llm_lib import DataPart, FilePart, Message, ModelResponse, Role, Status, TextPart, ToolCall
from tongyi_llm_lib.llm_core.messages import mime_category, mime_format, user_message


class TestParts:
    """Tests for the content part union."""

    def test_parts_are_parsed_by_kind(self) -> None:
        message = Message.model_validate(
            {
                "role": "user",
                "parts": [
                    {"kind": "text", "text": "Describe this"},
                    {"kind": "file", "uri": "https://example.com/a.png", "mime_type": "image/png"},
                    {"kind": "data", "data": b"\x00\x01", "mime_type": "audio/wav"},
                ],
            }
        )

        assert [type(part) for part in message.parts] == [TextPart, FilePart, DataPart]

    def test_unknown_kind_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Message.model_validate({"role": "user", "parts": [{"kind": "video", "uri": "x"}]})

    def test_strings_become_text_parts(self) -> None:
        message = user_message("Hello", DataPart(data=b"\x00", mime_type="image/png"))

        assert message.role == Role.USER
        assert message.parts[0] == TextPart(text="Hello")
        assert isinstance(message.parts[1], DataPart)


class TestMessage:
    def test_defaults(self) -> None:
        message = Message(role=Role.ASSISTANT)

        assert message.status == Status.COMPLETED
        assert message.metadata == {}
        assert message.tool_calls == []

    def test_message_is_frozen(self) -> None:
        message = user_message("Hello")
        with pytest.raises(ValidationError):
            message.role = Role.SYSTEM  # type: ignore[misc]

    def test_text_joins_text_parts_only(self) -> None:
        message = user_message("Hello, ", DataPart(data=b"\x00", mime_type="image/png"), "world")
        assert message.text() == "Hello, world"


class TestModelResponse:
    def test_has_tool_calls_requires_tool_role_and_calls(self) -> None:
        call = ToolCall(id="call_1", name="t", arguments="{}", result="ok")

        assert not ModelResponse(messages=[Message(role=Role.ASSISTANT)]).has_tool_calls()
        assert not ModelResponse(messages=[Message(role=Role.TOOL)]).has_tool_calls()
        assert ModelResponse(messages=[Message(role=Role.TOOL, tool_calls=[call])]).has_tool_calls()

    def test_text(self) -> None:
        response = ModelResponse(messages=[user_message("a"), user_message("b")])
        assert response.text() == "ab"


@pytest.mark.parametrize(
    "mime_type, category, fmt",
    [
        ("image/png", "image", "png"),
        ("audio/wav", "audio", "wav"),
        ("audio/mpeg", "audio", "mp3"),
        ("Audio/WAV; rate=16000", "audio", "wav"),
        ("application/pdf", "application", "pdf"),
        ("", "", ""),
    ],
)
def test_mime_helpers(mime_type: str, category: str, fmt: str) -> None:
    assert mime_category(mime_type) == category
    assert mime_format(mime_type) == fmt
