"""Re-export the provider interface implemented by all providers."""

from .base import ModelProvider

__all__ = ["ModelProvider"]
