"""Environment-based configuration for the Tongyi provider."""

import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from ...llm_core.logger import get_logger
from .models import DEFAULT_BASE_URL

logger = get_logger(__name__)

API_KEY_ENV_VARS = ("DASHSCOPE_API_KEY", "OPENAI_API_KEY")
BASE_URL_ENV_VAR = "DASHSCOPE_BASE_URL"


class TongyiSettings(BaseModel):
    """
    Connection settings for the DashScope compatible-mode endpoint.

    Attributes:
        api_key: Bearer key used for every request.
        base_url: OpenAI-compatible endpoint.
        timeout: HTTP timeout in seconds passed to the wire client.
        max_retries: Transport retries performed by the wire client.
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=60.0, gt=0)
    max_retries: int = Field(default=2, ge=0)

    @classmethod
    def from_env(cls, env_file: Optional[str | Path] = None, **overrides: object) -> "TongyiSettings":
        """Build settings from the process environment.

        The API key is read from ``DASHSCOPE_API_KEY`` and, if that is unset or
        empty, from ``OPENAI_API_KEY``. Variables from a ``.env`` file are loaded
        first without overriding variables already set.

        Args:
            env_file: Explicit ``.env`` path. If None, the nearest ``.env`` is used when found.
            **overrides: Field values taking precedence over the environment.

        Returns:
            The resolved settings.
        """
        dotenv_path = str(env_file) if env_file else find_dotenv(usecwd=True)
        if dotenv_path:
            logger.debug("Loading environment from %s", dotenv_path)
            load_dotenv(dotenv_path, override=False)

        values: dict[str, object] = {"api_key": resolve_api_key()}
        base_url = os.getenv(BASE_URL_ENV_VAR)
        if base_url:
            values["base_url"] = base_url
        values.update(overrides)
        return cls.model_validate(values)


def resolve_api_key() -> str:
    """Return the first non-empty API key from the recognized environment variables."""
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    logger.warning("None of %s is set; requests will fail until an API key is provided.", ", ".join(API_KEY_ENV_VARS))
    return ""
