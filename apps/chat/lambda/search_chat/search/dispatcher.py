"""Search dispatch: adapter selection per provider with a dispatcher-level cache."""

import logging
from collections.abc import Mapping

from search_chat.cache import TTLCache
from search_chat.constants import FAILED_TOOL_SUFFIX, NO_SEARCH_TOOL

from .base import DispatchOutcome, SearchProvider, SearchResult, SearchTool, normalize_query

logger = logging.getLogger(__name__)

# Providers whose own backend can ground generation in search results.
GROUNDING_PROVIDERS: Mapping[str, SearchTool] = {"google": SearchTool.GOOGLE_SEARCH_GROUNDING}

NO_TOOL_AVAILABLE_CONTENT = "(No search tool available for your request.)"


def dispatch_cache_key(query: str, provider: str) -> str:
    return f"{normalize_query(query)}-{provider}"


class SearchDispatcher:
    def __init__(
        self,
        adapters: Mapping[SearchTool, SearchProvider],
        cache: TTLCache[SearchResult],
    ) -> None:
        self._adapters = adapters
        self._cache = cache

    def select_adapter(self, provider: str) -> SearchProvider | None:
        grounding_tool = GROUNDING_PROVIDERS.get(provider)
        if grounding_tool is not None and grounding_tool in self._adapters:
            return self._adapters[grounding_tool]
        return self._adapters.get(SearchTool.PERPLEXITY_WEB_SEARCH)

    async def dispatch(self, query: str, provider: str, needs_search: bool) -> DispatchOutcome:
        if not needs_search:
            return DispatchOutcome(
                result=SearchResult(content="", tool_used=NO_SEARCH_TOOL), used=False
            )

        cache_key = dispatch_cache_key(query, provider)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            logger.info("Search cache hit", extra={"provider": provider, "tool": cached.tool_used})
            return DispatchOutcome(result=cached, used=True)

        adapter = self.select_adapter(provider)
        if adapter is None:
            logger.warning(
                "No search tool available; answering without search",
                extra={"provider": provider},
            )
            return DispatchOutcome(
                result=SearchResult(content=NO_TOOL_AVAILABLE_CONTENT, tool_used=NO_SEARCH_TOOL),
                used=False,
            )

        tool_name = adapter.tool.value
        logger.info("Search cache miss; performing live search", extra={"tool": tool_name})
        try:
            result = await self._cache.get_or_create(cache_key, lambda: adapter.search(query))
        except Exception as e:
            logger.exception("Search adapter failed", extra={"tool": tool_name})
            return DispatchOutcome(
                result=SearchResult(
                    content=f'Error: {tool_name} failed for "{query}": {e}',
                    tool_used=f"{tool_name}{FAILED_TOOL_SUFFIX}",
                    success=False,
                ),
                used=True,
            )
        return DispatchOutcome(result=result, used=True)
