"""LangGraph-based orchestration strategy for search chat."""

import logging
from collections.abc import Callable
from typing import NotRequired, TypedDict, cast

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langgraph.graph import END, START, StateGraph

from search_chat.model_registry import ModelRegistry
from search_chat.prompt_builder import build_prompt_messages
from search_chat.schemas import ChatRequest
from search_chat.search.base import DispatchOutcome
from search_chat.search.decision import should_search
from search_chat.search.dispatcher import SearchDispatcher
from search_chat.streaming import StreamingGenerator

from .base import (
    ChatOrchestrator,
    EventSink,
    emit,
    finish,
    metadata_event,
    stream_answer,
    unresolved_model_error,
)

logger = logging.getLogger(__name__)


class SearchChatState(TypedDict):
    request: ChatRequest
    llm: NotRequired[BaseChatModel]
    needs_search: NotRequired[bool]
    search: NotRequired[DispatchOutcome]
    messages: NotRequired[list[BaseMessage]]


class LangGraphChatOrchestrator(ChatOrchestrator):
    """Runs resolve → decide → dispatch → prompt as a graph, then streams the answer."""

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

        graph = StateGraph(SearchChatState)
        graph.add_node("resolve_model", self._resolve_model)
        graph.add_node("decide_search", self._decide)
        graph.add_node("dispatch_search", self._dispatch_search)
        graph.add_node("build_prompt", self._build_prompt)
        graph.add_edge(START, "resolve_model")
        graph.add_edge("resolve_model", "decide_search")
        graph.add_edge("decide_search", "dispatch_search")
        graph.add_edge("dispatch_search", "build_prompt")
        graph.add_edge("build_prompt", END)
        self._graph = graph.compile()

    def _resolve_model(self, state: SearchChatState) -> dict[str, BaseChatModel]:
        request = state["request"]
        llm = self._registry.resolve(request.model_provider, request.model_name)
        if llm is None:
            raise unresolved_model_error(request)
        return {"llm": llm}

    def _decide(self, state: SearchChatState) -> dict[str, bool]:
        request = state["request"]
        return {"needs_search": request.force_search or self._decide_search(request.message)}

    async def _dispatch_search(self, state: SearchChatState) -> dict[str, DispatchOutcome]:
        request = state["request"]
        search = await self._dispatcher.dispatch(
            request.message, request.model_provider, state["needs_search"]
        )
        return {"search": search}

    def _build_prompt(self, state: SearchChatState) -> dict[str, list[BaseMessage]]:
        return {"messages": build_prompt_messages(state["request"].message, state["search"])}

    async def run(self, request: ChatRequest, sink: EventSink) -> None:
        logger.info(
            "Processing chat request",
            extra={"provider": request.model_provider, "model": request.model_name},
        )
        error: Exception | None = None
        try:
            result = cast("SearchChatState", await self._graph.ainvoke({"request": request}))
            if not await emit(sink, metadata_event(result["search"])):
                return
            await stream_answer(self._generator, sink, result["llm"], result["messages"], request)
        except Exception as e:
            logger.exception("LangGraph chat orchestration failed")
            error = e
        finally:
            await finish(sink, error)
