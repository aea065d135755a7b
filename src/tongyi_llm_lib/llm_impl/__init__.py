"""Collect concrete LLM provider implementations."""

from .tongyi import TongyiChatProvider, TongyiSettings

__all__ = [
    "TongyiChatProvider",
    "TongyiSettings",
]
