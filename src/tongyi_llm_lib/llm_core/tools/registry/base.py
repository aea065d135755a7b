"""Tool registry turning Python functions into request tool definitions."""

import inspect
import json
from typing import Any, Callable, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ValidationError

from ..models import ToolDefinition
from ..schema import build_input_schema
from ...exceptions import ToolNotFoundError, ToolRegistrationError, ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)


class ToolRegistry:
    """
    A central registry to manage the tools offered to the model.

    Registered functions are wrapped in handlers that accept the raw JSON
    argument string produced by the model, so ``definitions`` can be passed
    directly as ``ModelRequest.tools``.
    """

    def __init__(self) -> None:
        """Initialize the ToolRegistry."""
        self.tools: Dict[str, ToolDefinition] = {}

    def register(
        self,
        name_or_tool: Union[str, ToolDefinition, Callable],
        description: Optional[str] = None,
        func: Optional[Callable] = None,
        parameters: Optional[Any] = None,
    ) -> ToolDefinition:
        """
        Register a new tool for the model.

        A tool can be registered as a ready-made `ToolDefinition`, as a documented
        function whose schema is generated from its signature, or by name together
        with an implementation and an optional explicit JSON schema.

        Args:
            name_or_tool: Either a `ToolDefinition` object, the name of the tool (str), or a Callable.
            description: Description of the tool. Required when passing a name and explicit parameters.
            func: The callable implementing the tool. Required if `name_or_tool` is a string.
            parameters: A JSON schema for the tool arguments. If None, it is inferred from `func`.

        Returns:
            The registered tool definition.

        Raises:
            ToolRegistrationError: If arguments are missing or the tool already exists.
        """
        if isinstance(name_or_tool, ToolDefinition):
            tool = name_or_tool
        elif callable(name_or_tool):
            tool = self._generate_tool_definition(name_or_tool, description=description)
        else:
            if func is None:
                raise ToolRegistrationError("If passing name as string, func is required.")

            if parameters is None:
                tool = self._generate_tool_definition(func, name=name_or_tool, description=description)
            else:
                if description is None:
                    raise ToolRegistrationError("If passing name and parameters, description is required.")
                tool = ToolDefinition(
                    name=name_or_tool,
                    description=description,
                    input_schema=parameters,
                    handler=self._build_handler(name_or_tool, func, None),
                )

        if tool.name in self.tools:
            msg = f"Tool '{tool.name}' is already registered."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        self.tools[tool.name] = tool
        logger.info(f"Successfully registered tool: '{tool.name}'")
        return tool

    def unregister(self, tool_name: str) -> None:
        """Unregister a tool from the registry.

        Raises:
            ToolNotFoundError: If the tool does not exist in the registry.
        """
        if tool_name not in self.tools:
            raise ToolNotFoundError(f"Tool '{tool_name}' not found in the registry.")
        del self.tools[tool_name]
        logger.info(f"Successfully unregistered tool: '{tool_name}'")

    def tool(self, func: Callable) -> Callable:
        """A decorator to turn a function into a model tool.

        Returns:
            The original function, after registering it as a tool.
        """
        self.register(func)
        return func

    @property
    def definitions(self) -> List[ToolDefinition]:
        """Registered tools in registration order."""
        return list(self.tools.values())

    def _generate_tool_definition(
        self, func: Callable, name: Optional[str] = None, description: Optional[str] = None
    ) -> ToolDefinition:
        tool_name = name or func.__name__
        if description is None:
            description = inspect.getdoc(func)
            if not description:
                msg = f"Tool '{tool_name}' missing docstring. LLMs need a description of what the tool does."
                logger.error(msg)
                raise ToolValidationError(msg)

        schema, args_model = build_input_schema(func, tool_name)
        return ToolDefinition(
            name=tool_name,
            description=description,
            input_schema=schema,
            handler=self._build_handler(tool_name, func, args_model),
            args_model=args_model,
        )

    @classmethod
    def _build_handler(
        cls, tool_name: str, func: Callable, args_model: Optional[Type[BaseModel]]
    ) -> Callable[[str], Any]:
        """Wrap ``func`` so it can be called with the raw argument string."""
        if inspect.iscoroutinefunction(func):

            async def async_handler(arguments: str) -> str:
                kwargs = cls._parse_arguments(tool_name, arguments, args_model)
                return cls._format_result(await func(**kwargs))

            return async_handler

        def handler(arguments: str) -> str:
            kwargs = cls._parse_arguments(tool_name, arguments, args_model)
            return cls._format_result(func(**kwargs))

        return handler

    @staticmethod
    def _parse_arguments(
        tool_name: str, arguments: str, args_model: Optional[Type[BaseModel]]
    ) -> Dict[str, Any]:
        """Decode the model-provided JSON arguments and validate them.

        Raises:
            ToolValidationError: If the arguments are not a JSON object or fail validation.
        """
        if not arguments or not arguments.strip():
            parsed: Any = {}
        else:
            try:
                parsed = json.loads(arguments)
            except json.JSONDecodeError as exc:
                raise ToolValidationError(f"Failed to parse arguments for tool '{tool_name}': {exc}") from exc
        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise ToolValidationError(f"Arguments for tool '{tool_name}' must decode to a JSON object.")

        if args_model is None:
            return parsed

        try:
            validated = args_model(**parsed)
        except ValidationError as exc:
            raise ToolValidationError(f"Argument validation failed for tool '{tool_name}': {exc}") from exc
        # Attribute access keeps nested models as model instances.
        return {field: getattr(validated, field) for field in type(validated).model_fields}

    @staticmethod
    def _format_result(result: Any) -> str:
        if isinstance(result, str):
            return result
        if isinstance(result, BaseModel):
            return result.model_dump_json()
        if isinstance(result, (dict, list)):
            return json.dumps(result, default=str)
        return "" if result is None else str(result)
