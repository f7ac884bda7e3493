"""Orchestration interfaces and the event emission steps they share."""

import logging
from contextlib import aclosing
from typing import Protocol

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage

from search_chat.constants import GENERIC_PROCESSING_ERROR
from search_chat.errors import ConfigurationError
from search_chat.schemas import (
    ChatRequest,
    ChunkEvent,
    EndEvent,
    ErrorEvent,
    MetadataEvent,
    StreamEvent,
)
from search_chat.search.base import DispatchOutcome
from search_chat.streaming import StreamingGenerator

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    @property
    def closed(self) -> bool:
        """True once the remote peer stopped consuming events."""
        ...

    async def send(self, event: StreamEvent) -> None:
        """Append one event frame."""
        ...


class ChatOrchestrator(Protocol):
    async def run(self, request: ChatRequest, sink: EventSink) -> None:
        """Answer the request, writing its events to the sink and ending with ``end``."""


async def emit(sink: EventSink, event: StreamEvent) -> bool:
    if sink.closed:
        return False
    await sink.send(event)
    return True


def unresolved_model_error(request: ChatRequest) -> ConfigurationError:
    return ConfigurationError(
        f'Error: Model provider "{request.model_provider}" not initialized or model '
        f'"{request.model_name or "default"}" not found. Check API keys.'
    )


def metadata_event(search: DispatchOutcome) -> MetadataEvent:
    return MetadataEvent(
        used_search=search.used,
        search_tool=search.result.tool_used,
        search_sources=list(search.result.sources),
        is_search_successful=search.result.success,
    )


async def stream_answer(
    generator: StreamingGenerator,
    sink: EventSink,
    llm: BaseChatModel,
    messages: list[BaseMessage],
    request: ChatRequest,
) -> None:
    if sink.closed:
        logger.info("Client disconnected before generation")
        return
    deltas = generator.generate(llm, messages, request.message, request.model_provider)
    async with aclosing(deltas):
        async for delta in deltas:
            if not await emit(sink, ChunkEvent(data=delta)):
                logger.info("Client disconnected during stream")
                return


async def finish(sink: EventSink, error: Exception | None = None) -> None:
    """Emit the optional ``error`` frame and the final ``end`` frame."""
    if error is not None:
        await emit(sink, ErrorEvent(data=str(error) or GENERIC_PROCESSING_ERROR))
    await emit(sink, EndEvent())
