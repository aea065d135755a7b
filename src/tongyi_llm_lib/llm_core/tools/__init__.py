from .models import ToolDefinition, ToolHandler
from .registry import ToolRegistry
from .invoker import tool_call, execute_handler
from .schema import build_input_schema, assert_no_recursive_refs, sanitize_schema

__all__ = [
    "ToolDefinition",
    "ToolHandler",
    "ToolRegistry",
    "tool_call",
    "execute_handler",
    "build_input_schema",
    "assert_no_recursive_refs",
    "sanitize_schema",
]
