"""Core abstractions for model provider implementations."""

from abc import ABC, abstractmethod
from typing import Optional

from ..messages import ModelOptions, ModelRequest, ModelResponse
from ..streaming import StreamPipe


class ModelProvider(ABC):
    """Abstract base class for chat model providers.

    Implementations translate a provider-agnostic ``ModelRequest`` into their wire
    format, execute any tool calls the model makes, and return provider-agnostic
    ``ModelResponse`` objects, either once (``generate``) or incrementally
    (``new_stream``).
    """

    @abstractmethod
    async def generate(self, request: ModelRequest, options: Optional[ModelOptions] = None) -> ModelResponse:
        """Run a request to completion, resolving tool calls along the way."""
        pass

    @abstractmethod
    async def new_stream(
        self, request: ModelRequest, options: Optional[ModelOptions] = None
    ) -> StreamPipe[ModelResponse]:
        """Start a streaming request and return the pipe its partial responses are sent to."""
        pass
