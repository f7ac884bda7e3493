"""Direct orchestration: resolve, search, prompt and stream in sequence."""

import logging
from collections.abc import Callable

from search_chat.model_registry import ModelRegistry
from search_chat.orchestration.base import (
    ChatOrchestrator,
    EventSink,
    emit,
    finish,
    metadata_event,
    stream_answer,
    unresolved_model_error,
)
from search_chat.prompt_builder import build_prompt_messages
from search_chat.schemas import ChatRequest
from search_chat.search.decision import should_search
from search_chat.search.dispatcher import SearchDispatcher
from search_chat.streaming import StreamingGenerator

logger = logging.getLogger(__name__)


class DirectChatOrchestrator(ChatOrchestrator):
    def __init__(
        self,
        registry: ModelRegistry,
        dispatcher: SearchDispatcher,
        generator: StreamingGenerator,
        decide_search: Callable[[str], bool] = should_search,
    ) -> None:
        self._registry = registry
        self._dispatcher = dispatcher
        self._generator = generator
        self._decide_search = decide_search

    async def run(self, request: ChatRequest, sink: EventSink) -> None:
        logger.info(
            "Processing chat request",
            extra={"provider": request.model_provider, "model": request.model_name},
        )
        error: Exception | None = None
        try:
            llm = self._registry.resolve(request.model_provider, request.model_name)
            if llm is None:
                raise unresolved_model_error(request)

            needs_search = request.force_search or self._decide_search(request.message)
            search = await self._dispatcher.dispatch(
                request.message, request.model_provider, needs_search
            )
            if not await emit(sink, metadata_event(search)):
                return

            messages = build_prompt_messages(request.message, search)
            await stream_answer(self._generator, sink, llm, messages, request)
        except Exception as e:
            logger.exception("Chat orchestration failed")
            error = e
        finally:
            await finish(sink, error)
