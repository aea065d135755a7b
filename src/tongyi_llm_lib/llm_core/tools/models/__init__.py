"""Tool-related data models."""

from .models import ToolDefinition, ToolHandler

__all__ = ["ToolDefinition", "ToolHandler"]
