from typing import Any, Awaitable, Callable, Optional, Type, Union

from pydantic import BaseModel, ConfigDict

# A handler receives the raw JSON argument string produced by the model.
ToolHandler = Callable[[str], Union[str, Awaitable[str]]]


class ToolDefinition(BaseModel):
    """
    Represents a tool the model may call during a request.

    Attributes:
        name: The unique name of the tool within a request.
        description: A human-readable description of what the tool does.
        input_schema: JSON schema describing the tool arguments. Either a plain
                      dictionary or a pydantic model instance that dumps to one.
        handler: Callable receiving the raw argument string and returning the
                 textual result. May be a plain function or a coroutine function.
        args_model: Optional pydantic model used to validate arguments when the
                    definition was generated from a Python function.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: Optional[str] = None
    input_schema: Optional[Any] = None
    handler: Callable[..., Any]
    args_model: Optional[Type[BaseModel]] = None
