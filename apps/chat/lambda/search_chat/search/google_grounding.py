"""Gemini search-grounded generation adapter."""

import logging
import time
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from langsmith import traceable

from search_chat.cache import TTLCache
from search_chat.constants import GROUNDING_MODEL
from search_chat.errors import AdapterError

from .base import SearchResult, SearchTool, normalize_query, unique_urls

logger = logging.getLogger(__name__)


def _grounding_urls(candidate: types.Candidate) -> list[str]:
    urls: list[str] = []
    metadata = candidate.grounding_metadata
    if metadata is not None:
        for chunk in metadata.grounding_chunks or []:
            if chunk.web is not None and chunk.web.uri:
                urls.append(chunk.web.uri)
    if not urls and candidate.citation_metadata is not None:
        for citation in candidate.citation_metadata.citations or []:
            if citation.uri:
                urls.append(citation.uri)
    return urls


def _raw_citations(candidate: types.Candidate) -> Any:
    metadata = candidate.grounding_metadata or candidate.citation_metadata
    if metadata is None:
        return None
    return metadata.model_dump(mode="json", exclude_none=True)


def parse_grounded_response(response: types.GenerateContentResponse) -> SearchResult:
    if not response.candidates:
        raise AdapterError("Google Grounding response contained no candidates")

    candidate = response.candidates[0]
    return SearchResult(
        content=response.text or "",
        sources=unique_urls(_grounding_urls(candidate)),
        citations=_raw_citations(candidate),
        tool_used=SearchTool.GOOGLE_SEARCH_GROUNDING.value,
        success=True,
    )


class GoogleGroundingAdapter:
    tool = SearchTool.GOOGLE_SEARCH_GROUNDING

    def __init__(
        self,
        client: genai.Client,
        cache: TTLCache[SearchResult],
        model: str = GROUNDING_MODEL,
    ) -> None:
        self._client = client
        self._cache = cache
        self._model = model

    async def search(self, query: str) -> SearchResult:
        return await self._cache.get_or_create(
            normalize_query(query), lambda: self._generate_grounded(query)
        )

    @traceable(run_type="tool", name="gemini.generate_content.grounded")
    async def _generate_grounded(self, query: str) -> SearchResult:
        start = time.time()
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=query,
                config=types.GenerateContentConfig(
                    tools=[types.Tool(google_search=types.GoogleSearch())]
                ),
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            logger.warning("Google Grounding request failed", extra={"query": query}, exc_info=True)
            raise AdapterError(f"Google Grounding failed: {e}") from e

        result = parse_grounded_response(response)
        logger.info(
            "Google Grounding completed",
            extra={
                "grounding_duration_ms": int((time.time() - start) * 1000),
                "source_count": len(result.sources),
                "response_length": len(result.content),
            },
        )
        return result
