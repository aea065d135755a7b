"""Expose the Tongyi Qwen chat provider and its request/response translation helpers."""

from .core import TongyiChatProvider, IterationState
from .config import TongyiSettings, resolve_api_key
from .accumulator import ChatCompletionAccumulator
from .models import (
    DEFAULT_BASE_URL,
    QWEN_TURBO,
    QWEN_PLUS,
    QWEN_MAX,
    QWEN_LONG,
    QWEN_VL,
    QWEN_AUDIO,
    SUPPORTED_MODELS,
    is_valid_model,
    is_valid_api_key,
)

__all__ = [
    "TongyiChatProvider",
    "IterationState",
    "TongyiSettings",
    "resolve_api_key",
    "ChatCompletionAccumulator",
    "DEFAULT_BASE_URL",
    "QWEN_TURBO",
    "QWEN_PLUS",
    "QWEN_MAX",
    "QWEN_LONG",
    "QWEN_VL",
    "QWEN_AUDIO",
    "SUPPORTED_MODELS",
    "is_valid_model",
    "is_valid_api_key",
]
