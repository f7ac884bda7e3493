"""Streaming generation with fallback to a secondary model."""

import logging
from collections.abc import AsyncIterator

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage

from .errors import GenerationError
from .message_mappers import chunk_text
from .model_registry import ModelRegistry
from .prompt_builder import build_fallback_messages

logger = logging.getLogger(__name__)


class StreamingGenerator:
    def __init__(self, registry: ModelRegistry) -> None:
        self._registry = registry

    async def generate(
        self,
        client: BaseChatModel,
        messages: list[BaseMessage],
        original_query: str,
        provider: str,
    ) -> AsyncIterator[str]:
        """Yield text deltas from ``client``, falling back to an apology on failure."""
        streamed_length = 0
        try:
            async for chunk in client.astream(messages):
                text = chunk_text(chunk)
                if text:
                    streamed_length += len(text)
                    yield text
        except Exception as e:
            logger.exception(
                "LLM streaming failed; switching to fallback",
                extra={"provider": provider, "streamed_length": streamed_length},
            )
            fallback = self._fallback(original_query, provider, client, GenerationError(str(e)))
            async for text in fallback:
                yield text
            return

        logger.info(
            "LLM streaming completed",
            extra={"provider": provider, "response_length": streamed_length},
        )

    async def _fallback(
        self,
        original_query: str,
        provider: str,
        failed: BaseChatModel,
        error: GenerationError,
    ) -> AsyncIterator[str]:
        candidates = self._registry.fallback_clients(provider, failed)
        if not candidates:
            logger.warning("No fallback model configured", extra={"provider": provider})

        messages = build_fallback_messages(original_query)
        for attempt, fallback in enumerate(candidates, start=1):
            try:
                async for chunk in fallback.astream(messages):
                    text = chunk_text(chunk)
                    if text:
                        yield text
                return
            except Exception:
                logger.exception(
                    "Fallback streaming failed",
                    extra={"provider": provider, "attempt": attempt},
                )

        yield f"Error generating response: {error}"
