"""Streaming primitives shared by provider implementations."""

from .pipe import StreamPipe, DEFAULT_PIPE_SIZE

__all__ = ["StreamPipe", "DEFAULT_PIPE_SIZE"]
