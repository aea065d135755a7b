from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from openai import AsyncOpenAI

from ...llm_core.base import ModelProvider
from ...llm_core.exceptions import EmptyResponseError, InvalidAPIKeyError, TooManyIterationsError
from ...llm_core.logger import get_logger
from ...llm_core.messages import ModelOptions, ModelRequest, ModelResponse
from ...llm_core.streaming import DEFAULT_PIPE_SIZE, StreamPipe
from ...llm_core.tools import ToolDefinition
from .accumulator import ChatCompletionAccumulator
from .adapter import to_chat_completion_params
from .assembler import choice_to_response, chunk_choice_to_response
from .config import TongyiSettings
from .models import DEFAULT_BASE_URL, is_valid_api_key

logger = get_logger(__name__)


class IterationState(str, Enum):
    """States of the tool iteration loop."""

    REQUESTING = "requesting"
    DONE = "done"


class TongyiChatProvider(ModelProvider):
    """
    Chat provider for Tongyi Qwen models served through DashScope's
    OpenAI-compatible endpoint.

    Handles request translation and the automatic tool calling loop, both for
    single results (``generate``) and for streams (``new_stream``).
    """

    def __init__(
        self,
        api_key: str = "",
        *,
        client: Optional[AsyncOpenAI] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        max_retries: int = 2,
        tool_timeout: Optional[float] = None,
        pipe_size: int = DEFAULT_PIPE_SIZE,
    ):
        """
        Initializes the provider. Construction never fails: a missing or malformed
        API key is reported by the first request as ``InvalidAPIKeyError``.

        Args:
            api_key: DashScope API key.
            client: Optional pre-built ``AsyncOpenAI`` client. Created lazily on first use otherwise.
            base_url: The OpenAI-compatible endpoint.
            timeout: HTTP timeout in seconds for a lazily created client.
            max_retries: Transport retries for a lazily created client.
            tool_timeout: Optional time limit in seconds for a single tool invocation.
            pipe_size: Capacity of the pipes returned by ``new_stream``.
        """
        self.api_key = api_key or ""
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.tool_timeout = tool_timeout
        self.pipe_size = pipe_size
        self._client: Optional[AsyncOpenAI] = client

        if not is_valid_api_key(self.api_key):
            logger.debug("Provider created without a valid API key; requests will be rejected.")

    @classmethod
    def from_settings(cls, settings: Optional[TongyiSettings] = None, **kwargs: Any) -> "TongyiChatProvider":
        """Create a provider from ``TongyiSettings``, reading the environment when none are given."""
        settings = settings or TongyiSettings.from_env()
        return cls(
            settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            **kwargs,
        )

    @property
    def client(self) -> AsyncOpenAI:
        """
        The wire client. Accessing it re-runs the API key check.

        Raises:
            InvalidAPIKeyError: If the stored API key is missing or malformed.
        """
        if not is_valid_api_key(self.api_key):
            msg = "Invalid or missing API key."
            logger.error(msg)
            raise InvalidAPIKeyError(msg)
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=self.max_retries,
            )
        return self._client

    async def generate(self, request: ModelRequest, options: Optional[ModelOptions] = None) -> ModelResponse:
        """
        Executes a non-streaming chat completion request, running requested tools
        until the model answers without tool calls or the iteration budget is used up.

        Args:
            request: The model request.
            options: Sampling and loop options. Defaults to ``ModelOptions()``.

        Returns:
            The response of the last request cycle.
        """
        options = options or ModelOptions()
        params = to_chat_completion_params(request, options)
        return await self.new(params, request.tools, options)

    async def new(
        self, params: Dict[str, Any], tools: Optional[Iterable[ToolDefinition]], options: ModelOptions
    ) -> ModelResponse:
        """
        Runs the tool iteration loop on already translated request parameters.

        Args:
            params: The running wire request, extended in place with tool turns.
            tools: Tools available to the request.
            options: Loop options; ``max_iterations`` bounds the number of request cycles.

        Returns:
            The response of the last request cycle.

        Raises:
            TooManyIterationsError: If ``options.max_iterations`` is below 1.
            EmptyResponseError: If the provider returns no choices.
        """
        remaining = options.max_iterations
        self._check_iterations(remaining)
        client = self.client
        tool_list = list(tools or ())

        state = IterationState.REQUESTING
        response = ModelResponse()
        while state is IterationState.REQUESTING:
            logger.debug(f"Sending request to model '{params['model']}' with {len(params['messages'])} message(s).")
            completion = await client.chat.completions.create(**params)  # type: ignore[call-overload]
            if not completion.choices:
                msg = "Empty completion response."
                logger.error(msg)
                raise EmptyResponseError(msg)

            response = await choice_to_response(params, tool_list, completion.choices, tool_timeout=self.tool_timeout)
            state, remaining = self._next_state(response, remaining)

        return response

    async def new_stream(
        self, request: ModelRequest, options: Optional[ModelOptions] = None
    ) -> StreamPipe[ModelResponse]:
        """
        Executes a streaming chat completion request.

        Validation errors are raised here; errors that occur while streaming end the
        returned pipe instead.

        Args:
            request: The model request.
            options: Sampling and loop options. Defaults to ``ModelOptions()``.

        Returns:
            A pipe yielding incomplete responses per chunk, a completed response per
            stream, and the output of every follow-up stream started for tool results.
        """
        options = options or ModelOptions()
        self._check_iterations(options.max_iterations)
        params = to_chat_completion_params(request, options)
        return await self.new_streaming(params, request.tools, options)

    async def new_streaming(
        self, params: Dict[str, Any], tools: Optional[Iterable[ToolDefinition]], options: ModelOptions
    ) -> StreamPipe[ModelResponse]:
        """
        Starts the streaming tool loop on already translated request parameters.

        Args:
            params: The running wire request, extended in place with tool turns.
            tools: Tools available to the request.
            options: Loop options; ``max_iterations`` bounds the number of streams.

        Returns:
            The pipe fed by the background stream task.
        """
        self._check_iterations(options.max_iterations)
        client = self.client
        tool_list = list(tools or ())
        pipe: StreamPipe[ModelResponse] = StreamPipe(self.pipe_size)

        async def produce() -> None:
            accumulator = ChatCompletionAccumulator()
            logger.debug(f"Opening stream to model '{params['model']}' with {len(params['messages'])} message(s).")
            stream = await client.chat.completions.create(**params, stream=True)  # type: ignore[call-overload]
            try:
                async for chunk in stream:
                    accumulator.add_chunk(chunk)
                    partial = chunk_choice_to_response(chunk.choices)
                    if partial.messages:
                        await pipe.send(partial)
            finally:
                await stream.close()

            completion = accumulator.chat_completion
            if not completion.choices:
                msg = "Empty completion response."
                logger.error(msg)
                raise EmptyResponseError(msg)

            final = await choice_to_response(params, tool_list, completion.choices, tool_timeout=self.tool_timeout)
            await pipe.send(final)

            state, remaining = self._next_state(final, options.max_iterations)
            if state is IterationState.DONE:
                return

            # The follow-up stream only starts once this one is fully consumed.
            child = await self.new_streaming(params, tool_list, options.model_copy(update={"max_iterations": remaining}))
            async with child:
                async for item in child:
                    await pipe.send(item)

        pipe.go(produce)
        return pipe

    @staticmethod
    def _check_iterations(max_iterations: int) -> None:
        if max_iterations < 1:
            msg = f"Too many iterations requested: max_iterations must be at least 1, got {max_iterations}."
            logger.error(msg)
            raise TooManyIterationsError(msg)

    @staticmethod
    def _next_state(response: ModelResponse, remaining: int) -> Tuple[IterationState, int]:
        """Decide whether another request cycle is needed after ``response``."""
        if not response.has_tool_calls():
            logger.debug("No tool calls found in response. Loop finished.")
            return IterationState.DONE, remaining

        remaining -= 1
        if remaining < 1:
            logger.warning("Max tool iterations reached. Stopping execution.")
            return IterationState.DONE, remaining

        logger.info(f"Tool results sent back to the model ({remaining} iteration(s) left).")
        return IterationState.REQUESTING, remaining
