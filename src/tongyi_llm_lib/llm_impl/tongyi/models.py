"""Supported Tongyi Qwen models and credential checks."""

from typing import Optional

DEFAULT_BASE_URL = "https://dashscope.aliyuncs.com/compatible-mode/v1"

# Tongyi Qwen model names
QWEN_TURBO = "qwen-turbo"
QWEN_PLUS = "qwen-plus"
QWEN_MAX = "qwen-max"
QWEN_LONG = "qwen-long"
QWEN_VL = "qwen-vl-plus"
QWEN_AUDIO = "qwen-audio-turbo"

SUPPORTED_MODELS = frozenset({QWEN_TURBO, QWEN_PLUS, QWEN_MAX, QWEN_LONG, QWEN_VL, QWEN_AUDIO})

MIN_API_KEY_LENGTH = 20


def is_valid_model(model: Optional[str]) -> bool:
    """Whether ``model`` is one of the supported Qwen models."""
    return model in SUPPORTED_MODELS


def is_valid_api_key(api_key: Optional[str]) -> bool:
    """Basic format check run before the first request of a provider."""
    return api_key is not None and len(api_key) >= MIN_API_KEY_LENGTH
