"""Application service for streaming chat requests."""

import logging
from typing import Any

from pydantic import ValidationError

from search_chat.constants import MISSING_MESSAGE_ERROR, NO_SEARCH_TOOL
from search_chat.errors import RequestValidationError
from search_chat.model_registry import ModelRegistry
from search_chat.orchestration.base import ChatOrchestrator, EventSink, finish
from search_chat.schemas import ChatRequest, ProviderMetadata
from search_chat.search.dispatcher import SearchDispatcher

logger = logging.getLogger(__name__)


def _validation_message(error: ValidationError) -> str:
    details = []
    for item in error.errors():
        if item["loc"] == ("message",) and (
            item["type"] in {"missing", "value_error"} or item.get("input") is None
        ):
            return MISSING_MESSAGE_ERROR
        location = ".".join(str(part) for part in item["loc"]) or "body"
        details.append(f"{location}: {item['msg']}")
    return "; ".join(details)


def parse_chat_request(payload: Any) -> ChatRequest:
    if not isinstance(payload, dict):
        raise RequestValidationError("Request body must be a JSON object.")
    try:
        return ChatRequest.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(_validation_message(e)) from e


class ChatService:
    def __init__(
        self,
        registry: ModelRegistry,
        dispatcher: SearchDispatcher,
        orchestrator: ChatOrchestrator,
    ) -> None:
        self._registry = registry
        self._dispatcher = dispatcher
        self._orchestrator = orchestrator

    async def stream_chat(self, payload: Any, sink: EventSink) -> None:
        try:
            request = parse_chat_request(payload)
        except RequestValidationError as e:
            logger.warning("Invalid chat request", extra={"detail": str(e)})
            await finish(sink, e)
            return

        logger.info(
            "Chat request received",
            extra={"provider": request.model_provider, "force_search": request.force_search},
        )
        await self._orchestrator.run(request, sink)

    def list_providers(self) -> list[ProviderMetadata]:
        providers = []
        for name, profile in self._registry.profiles.items():
            adapter = self._dispatcher.select_adapter(name)
            providers.append(
                ProviderMetadata(
                    provider=name,
                    capable_model=profile.capable_model,
                    fast_model=profile.fast_model,
                    search_tool=adapter.tool.value if adapter else NO_SEARCH_TOOL,
                )
            )
        return providers
