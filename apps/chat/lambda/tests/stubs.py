"""Test doubles shared by the search chat test modules."""

from typing import Any

from langchain_core.messages import AIMessageChunk

from search_chat.model_registry import ModelRegistry
from search_chat.schemas import StreamEvent
from search_chat.search.base import SearchResult, SearchTool


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubChatModel:
    def __init__(
        self,
        deltas: tuple[Any, ...] = ("Hello", " world"),
        error: Exception | None = None,
        name: str = "stub",
    ) -> None:
        self.deltas = deltas
        self.error = error
        self.name = name
        self.calls: list[list[Any]] = []

    async def astream(self, messages: list[Any]):
        self.calls.append(messages)
        for delta in self.deltas:
            yield AIMessageChunk(content=delta)
        if self.error is not None:
            raise self.error


class StubModelFactory:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, float]] = []
        self.models: dict[str, StubChatModel] = {}

    def __call__(self, provider: str, model: str, temperature: float) -> StubChatModel:
        self.calls.append((provider, model, temperature))
        stub = StubChatModel(deltas=(f"{provider}:{model}",), name=f"{provider}:{model}")
        self.models[f"{provider}:{model}"] = stub
        return stub


def build_registry(
    providers: tuple[str, ...] = ("openai",),
) -> tuple[ModelRegistry, StubModelFactory]:
    factory = StubModelFactory()
    return ModelRegistry.build(providers, factory), factory


class StubSearchAdapter:
    def __init__(
        self,
        tool: SearchTool,
        result: SearchResult | None = None,
        error: Exception | None = None,
    ) -> None:
        self.tool = tool
        self.result = result or SearchResult(
            content=f"{tool.value} context",
            sources=("https://example.com/a", "https://example.com/b"),
            tool_used=tool.value,
            success=True,
        )
        self.error = error
        self.calls: list[str] = []

    async def search(self, query: str) -> SearchResult:
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return self.result


class RecordingSink:
    def __init__(self, close_after: int | None = None) -> None:
        self.events: list[StreamEvent] = []
        self._closed = False
        self._close_after = close_after

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, event: StreamEvent) -> None:
        if self._closed:
            raise AssertionError(f"send on closed sink: {event!r}")
        self.events.append(event)
        if self._close_after is not None and len(self.events) >= self._close_after:
            self._closed = True

    def types(self) -> list[str]:
        return [event.type for event in self.events]
