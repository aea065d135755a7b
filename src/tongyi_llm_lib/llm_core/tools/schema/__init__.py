"""Tool schema generation and validation."""

from .schema_builder import build_input_schema, assert_no_recursive_refs, sanitize_schema

__all__ = ["build_input_schema", "assert_no_recursive_refs", "sanitize_schema"]
