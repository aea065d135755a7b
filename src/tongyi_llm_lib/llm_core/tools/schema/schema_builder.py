"""Generation of tool input schemas from annotated Python functions."""

import inspect
from typing import Annotated, Any, Callable, Dict, Set, Tuple, Type, cast, get_args, get_origin

import jsonref  # type: ignore
from pydantic import BaseModel, Field, create_model
from pydantic.fields import FieldInfo

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_METADATA_KEYS = ("$defs", "$schema", "$id", "title", "definitions")


def build_input_schema(func: Callable, tool_name: str) -> Tuple[Dict[str, Any], Type[BaseModel]]:
    """Build the JSON schema and the pydantic argument model for ``func``.

    Every parameter must be declared as ``Annotated[T, Field(description="...")]``.

    Args:
        func: The tool implementation.
        tool_name: Name of the tool, used in error messages and the model name.

    Returns:
        The sanitized, fully resolved schema and the generated argument model.

    Raises:
        ToolValidationError: On missing parameter descriptions or recursive models.
    """
    fields: Dict[str, Any] = {}
    for param_name, param in inspect.signature(func).parameters.items():
        if param_name in ("self", "cls"):
            continue
        description = _parameter_description(param.annotation, param_name, tool_name)
        default = param.default if param.default is not inspect.Parameter.empty else ...
        fields[param_name] = (param.annotation, Field(default=default, description=description))

    args_model = create_model(f"{tool_name}Params", **cast(Dict[str, Any], fields))
    raw_schema = args_model.model_json_schema()

    assert_no_recursive_refs(raw_schema)
    # proxies=False gives plain dicts instead of lazy JsonRef objects
    resolved = jsonref.replace_refs(raw_schema, proxies=False)
    return sanitize_schema(resolved), args_model


def _parameter_description(annotation: Any, param_name: str, tool_name: str) -> str:
    if get_origin(annotation) is Annotated:
        for metadata in get_args(annotation)[1:]:
            if isinstance(metadata, FieldInfo) and metadata.description:
                return metadata.description

    msg = (
        f"Parameter '{param_name}' in tool '{tool_name}' is missing a description.\n"
        f"Usage: {param_name}: Annotated[Type, Field(description='...')] = ..."
    )
    logger.error(msg)
    raise ToolValidationError(msg)


def assert_no_recursive_refs(schema: Dict[str, Any]) -> None:
    """Raise ToolValidationError if a ``$ref`` in ``schema`` points back into its own chain."""
    defs = schema.get("$defs") or schema.get("definitions") or {}

    def visit(node: Any, chain: Set[str]) -> None:
        if isinstance(node, list):
            for item in node:
                visit(item, chain)
            return
        if not isinstance(node, dict):
            return

        ref = node.get("$ref")
        if ref is None:
            for value in node.values():
                visit(value, chain)
            return

        if ref in chain:
            msg = (
                f"Recursive structure detected: {ref}. "
                "Recursive structures are not allowed in tool inputs. "
                "Use parent ids or flat lists instead."
            )
            logger.error(msg)
            raise ToolValidationError(msg)

        def_name = ref.rsplit("/", 1)[-1]
        if ref.startswith("#") and def_name in defs:
            visit(defs[def_name], chain | {ref})

    visit(schema, set())


def sanitize_schema(schema: Any) -> Any:
    """Strip schema metadata, collapse ``Optional`` unions and close object schemas."""
    if isinstance(schema, list):
        return [sanitize_schema(item) for item in schema]
    if not isinstance(schema, dict):
        return schema

    cleaned = {k: v for k, v in schema.items() if k not in _METADATA_KEYS}

    variants = cleaned.get("anyOf")
    if isinstance(variants, list):
        non_null = [v for v in variants if not (isinstance(v, dict) and v.get("type") == "null")]
        if len(non_null) == 1 and isinstance(non_null[0], dict):
            collapsed = dict(non_null[0])
            for key in ("description", "default"):
                if key in cleaned:
                    collapsed[key] = cleaned[key]
            return sanitize_schema(collapsed)

    if cleaned.get("type") == "object":
        cleaned.setdefault("additionalProperties", False)

    result: Dict[str, Any] = {}
    for key, value in cleaned.items():
        if key == "properties" and isinstance(value, dict):
            # keys here are parameter names, not schema keywords
            result[key] = {name: sanitize_schema(prop) for name, prop in value.items()}
        else:
            result[key] = sanitize_schema(value)
    return result
