"""Perplexity web-search adapter over its OpenAI-compatible chat completions API."""

import logging
import time
from typing import Any

from langsmith import traceable
from openai import AsyncOpenAI, OpenAIError

from search_chat.cache import TTLCache
from search_chat.constants import (
    PERPLEXITY_MAX_TOKENS,
    PERPLEXITY_MODEL,
    PERPLEXITY_TEMPERATURE,
)
from search_chat.errors import AdapterError

from .base import SearchResult, SearchTool, normalize_query, unique_urls

logger = logging.getLogger(__name__)

RESEARCH_SYSTEM_PROMPT = (
    "You are a helpful research assistant. Provide concise, directly relevant "
    "information from the web to answer the user's question."
)


def _citation_url(citation: Any) -> str:
    if isinstance(citation, str):
        return citation
    if isinstance(citation, dict):
        return str(citation.get("url") or "")
    return ""


def parse_search_response(data: dict[str, Any]) -> SearchResult:
    choices = data.get("choices") or []
    if not choices:
        raise AdapterError("Perplexity response contained no choices")

    message = choices[0].get("message") or {}
    content = message.get("content") or ""

    citations = data.get("citations") or data.get("search_results") or []
    sources = unique_urls([_citation_url(citation) for citation in citations])
    return SearchResult(
        content=content,
        sources=sources,
        citations=citations,
        tool_used=SearchTool.PERPLEXITY_WEB_SEARCH.value,
        success=True,
    )


class PerplexitySearchAdapter:
    tool = SearchTool.PERPLEXITY_WEB_SEARCH

    def __init__(
        self,
        client: AsyncOpenAI,
        cache: TTLCache[SearchResult],
        model: str = PERPLEXITY_MODEL,
    ) -> None:
        self._client = client
        self._cache = cache
        self._model = model

    async def search(self, query: str) -> SearchResult:
        return await self._cache.get_or_create(
            normalize_query(query), lambda: self._search_web(query)
        )

    @traceable(run_type="tool", name="perplexity.chat.completions")
    async def _search_web(self, query: str) -> SearchResult:
        start = time.time()
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": RESEARCH_SYSTEM_PROMPT},
                    {"role": "user", "content": f"Search for: {query}"},
                ],
                max_tokens=PERPLEXITY_MAX_TOKENS,
                temperature=PERPLEXITY_TEMPERATURE,
                extra_body={
                    "return_citations": True,
                    "return_images": False,
                    "web_search_options": {"search_context_size": "medium"},
                },
            )
        except OpenAIError as e:
            logger.warning("Perplexity API request failed", extra={"query": query}, exc_info=True)
            raise AdapterError(f"Perplexity API error: {e}") from e

        result = parse_search_response(response.model_dump())
        logger.info(
            "Perplexity search completed",
            extra={
                "perplexity_duration_ms": int((time.time() - start) * 1000),
                "source_count": len(result.sources),
                "response_length": len(result.content),
            },
        )
        return result
