import asyncio
import json
from typing import Annotated, List, Optional

import pytest
from pydantic import BaseModel, Field

from tongyi_llm_lib.llm_core.exceptions import (
    ToolNotFoundError,
    ToolRegistrationError,
    ToolValidationError,
)
from tongyi_llm_lib.llm_core.tools import ToolDefinition, ToolRegistry, tool_call
from tongyi_llm_lib.llm_impl.tongyi.adapter import to_tools


def test_registry_tool_decorator() -> None:
    registry = ToolRegistry()

    @registry.tool
    def my_tool(x: Annotated[int, Field(description="An integer")]) -> int:
        """My tool description."""
        return x * 2

    assert "my_tool" in registry.tools
    tool_def = registry.tools["my_tool"]
    assert tool_def.description == "My tool description."
    assert tool_def.handler('{"x": 2}') == "4"
    # The decorator returns the plain function.
    assert my_tool(3) == 6


def test_registry_definitions_translate_to_function_tools() -> None:
    registry = ToolRegistry()

    @registry.tool
    def my_tool(x: Annotated[int, Field(description="An integer")]) -> int:
        """My tool description."""
        return x * 2

    declarations = to_tools(registry.definitions)

    assert len(declarations) == 1
    function = declarations[0]["function"]
    assert declarations[0]["type"] == "function"
    assert function["name"] == "my_tool"
    assert function["description"] == "My tool description."
    assert function["parameters"]["type"] == "object"
    assert function["parameters"]["properties"]["x"] == {"type": "integer", "description": "An integer"}
    assert function["parameters"]["required"] == ["x"]


def test_registry_missing_docstring() -> None:
    registry = ToolRegistry()
    with pytest.raises(ToolValidationError, match="missing docstring"):

        @registry.tool
        def no_doc_tool(x: Annotated[int, Field(description="desc")]) -> None:
            pass


def test_registry_missing_param_description() -> None:
    registry = ToolRegistry()
    with pytest.raises(ToolValidationError, match="missing a description"):

        @registry.tool
        def bad_param_tool(x: int) -> None:
            """Docstring."""
            pass


def test_registry_rejects_duplicate_names() -> None:
    registry = ToolRegistry()

    def lookup(query: Annotated[str, Field(description="Search query")]) -> str:
        """Looks something up."""
        return query

    registry.register(lookup)
    with pytest.raises(ToolRegistrationError, match="already registered"):
        registry.register(lookup)


def test_register_by_name_requires_func() -> None:
    with pytest.raises(ToolRegistrationError, match="func is required"):
        ToolRegistry().register("lookup")


def test_register_with_explicit_parameters_requires_description() -> None:
    registry = ToolRegistry()
    with pytest.raises(ToolRegistrationError, match="description is required"):
        registry.register("lookup", func=lambda query: query, parameters={"type": "object"})


def test_register_with_explicit_parameters() -> None:
    registry = ToolRegistry()
    schema = {"type": "object", "properties": {"query": {"type": "string"}}}

    tool_def = registry.register(
        "lookup", description="Looks something up.", func=lambda query: {"hits": [query]}, parameters=schema
    )

    assert tool_def.input_schema == schema
    assert tool_def.args_model is None
    assert json.loads(tool_def.handler('{"query": "qwen"}')) == {"hits": ["qwen"]}


def test_register_existing_definition_and_unregister() -> None:
    registry = ToolRegistry()
    definition = ToolDefinition(name="echo", handler=lambda arguments: arguments)

    assert registry.register(definition) is definition
    assert registry.definitions == [definition]

    registry.unregister("echo")
    assert registry.definitions == []
    with pytest.raises(ToolNotFoundError):
        registry.unregister("echo")


def test_handler_rejects_malformed_arguments() -> None:
    registry = ToolRegistry()

    @registry.tool
    def square(x: Annotated[int, Field(description="An integer")]) -> int:
        """Squares a number."""
        return x * x

    handler = registry.tools["square"].handler
    with pytest.raises(ToolValidationError, match="Failed to parse"):
        handler("{not json")
    with pytest.raises(ToolValidationError, match="JSON object"):
        handler("[1, 2]")
    with pytest.raises(ToolValidationError, match="validation failed"):
        handler('{"x": "many"}')


def test_handler_applies_defaults_for_empty_arguments() -> None:
    registry = ToolRegistry()

    @registry.tool
    def greet(name: Annotated[str, Field(description="Who to greet")] = "world") -> str:
        """Greets someone."""
        return f"Hello {name}"

    assert registry.tools["greet"].handler("") == "Hello world"


def test_nested_pydantic_models_schema_resolution() -> None:
    """
    Nested models are resolved into a single schema without $ref definitions,
    and the handler receives model instances.
    """
    registry = ToolRegistry()

    class Address(BaseModel):
        street: str = Field(description="Street name")
        city: str = Field(description="City name")

    class User(BaseModel):
        name: str = Field(description="User's full name")
        age: int = Field(description="User's age")
        address: Address = Field(description="User's address")
        tags: List[str] = Field(description="User tags")

    @registry.tool
    def create_user(user: Annotated[User, Field(description="The user object to create")]) -> User:
        """Creates a new user in the system."""
        assert isinstance(user.address, Address)
        return user

    tool_def = registry.tools["create_user"]
    schema = tool_def.input_schema

    assert schema["type"] == "object"
    user_schema = schema["properties"]["user"]
    assert user_schema["type"] == "object"
    address_schema = user_schema["properties"]["address"]
    assert address_schema["type"] == "object"
    assert "street" in address_schema["properties"]
    assert "$defs" not in schema
    assert "$ref" not in json.dumps(schema)

    arguments = {
        "user": {
            "name": "Ada",
            "age": 36,
            "address": {"street": "Main St", "city": "London"},
            "tags": ["admin"],
        }
    }
    result = json.loads(tool_def.handler(json.dumps(arguments)))
    assert result == arguments["user"]


def test_tool_without_parameters() -> None:
    registry = ToolRegistry()

    @registry.tool
    def get_current_time() -> str:
        """Returns the current server time."""
        return "12:00 PM"

    tool_def = registry.tools["get_current_time"]
    assert tool_def.description == "Returns the current server time."
    assert tool_def.handler("{}") == "12:00 PM"
    assert tool_def.input_schema["type"] == "object"
    assert tool_def.input_schema["properties"] == {}


def test_recursive_model_detection() -> None:
    registry = ToolRegistry()

    class Node(BaseModel):
        name: str = Field(description="Node name")
        child: Optional["Node"] = Field(default=None, description="Child node")

    Node.model_rebuild()

    with pytest.raises(ToolValidationError, match="Recursive structure detected"):

        @registry.tool
        def process_tree(root: Annotated[Node, Field(description="Root node")]) -> str:
            """Process a tree structure."""
            return "processed"


@pytest.mark.asyncio
async def test_async_tool_runs_through_invoker() -> None:
    registry = ToolRegistry()

    @registry.tool
    async def slow_lookup(query: Annotated[str, Field(description="Search query")]) -> dict:
        """Looks something up slowly."""
        await asyncio.sleep(0)
        return {"query": query, "hits": 2}

    result = await tool_call(registry.definitions, "slow_lookup", '{"query": "qwen"}')

    assert json.loads(result) == {"query": "qwen", "hits": 2}
