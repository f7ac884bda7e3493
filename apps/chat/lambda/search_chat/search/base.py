"""Search adapter interface and the normalized search result."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class SearchTool(str, Enum):
    PERPLEXITY_WEB_SEARCH = "perplexity_web_search"
    GOOGLE_SEARCH_GROUNDING = "google_search_grounding"


@dataclass(frozen=True)
class SearchResult:
    content: str
    sources: tuple[str, ...] = ()
    citations: Any = None
    tool_used: str = ""
    success: bool = False


@dataclass(frozen=True)
class DispatchOutcome:
    result: SearchResult
    used: bool


class SearchProvider(Protocol):
    tool: SearchTool

    async def search(self, query: str) -> SearchResult:
        """Search the backend and return a normalized result, raising AdapterError on failure."""
        ...


def normalize_query(query: str) -> str:
    return query.lower()


def unique_urls(urls: list[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for url in urls:
        if url:
            seen.setdefault(url, None)
    return tuple(seen)
