"""Runtime infrastructure helpers for credentials, tracing, and service wiring."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache, partial
from typing import Any, cast

import boto3
from google import genai
from langchain_core.language_models.chat_models import BaseChatModel
from langsmith.run_trees import get_cached_client
from openai import AsyncOpenAI

from search_chat.cache import TTLCache
from search_chat.constants import (
    ANTHROPIC_API_KEY_ENV,
    AWS_REGION,
    BEDROCK_ENABLED_ENV,
    CORS_ALLOW_ORIGINS_ENV,
    GOOGLE_API_KEY_ENV,
    LANGSMITH_API_KEY_ENV,
    LANGSMITH_PROJECT,
    OPENAI_API_KEY_ENV,
    ORCHESTRATOR_ENV,
    PERPLEXITY_API_KEY_ENV,
    PERPLEXITY_BASE_URL,
    PROVIDERS,
    SEARCH_CACHE_TTL_ENV,
    SEARCH_CACHE_TTL_SECONDS,
    SSM_PARAMETER_PREFIX_ENV,
    OrchestratorKind,
    Provider,
)
from search_chat.model_registry import ModelRegistry
from search_chat.orchestration.base import ChatOrchestrator
from search_chat.orchestration.direct import DirectChatOrchestrator
from search_chat.orchestration.langgraph_flow import LangGraphChatOrchestrator
from search_chat.providers.chat_models import build_chat_model
from search_chat.search.base import SearchProvider, SearchResult, SearchTool
from search_chat.search.dispatcher import SearchDispatcher
from search_chat.search.google_grounding import GoogleGroundingAdapter
from search_chat.search.perplexity import PerplexitySearchAdapter
from search_chat.services.chat_service import ChatService
from search_chat.streaming import StreamingGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiCredentials:
    openai_api_key: str | None
    google_api_key: str | None
    anthropic_api_key: str | None
    perplexity_api_key: str | None
    langsmith_api_key: str | None
    bedrock_enabled: bool = False
    aws_region: str = AWS_REGION

    def api_key(self, provider: Provider) -> str | None:
        return {
            "openai": self.openai_api_key,
            "google": self.google_api_key,
            "anthropic": self.anthropic_api_key,
        }.get(provider)

    def configured_providers(self) -> list[Provider]:
        providers: list[Provider] = []
        for provider in PROVIDERS:
            if provider == "bedrock":
                available = self.bedrock_enabled
            else:
                available = bool(self.api_key(provider))
            if available:
                providers.append(provider)
            else:
                logger.warning(
                    "Provider credential missing; its models will not be available",
                    extra={"provider": provider},
                )
        return providers


def _get_optional_secure_parameter(ssm_client: Any, parameter_name: str) -> str | None:
    try:
        result = ssm_client.get_parameter(Name=parameter_name, WithDecryption=True)
    except Exception:
        logger.warning(
            "Optional SSM parameter is unavailable; disabling dependent feature",
            extra={"parameter_name": parameter_name},
            exc_info=True,
        )
        return None
    return result["Parameter"].get("Value") or None


def _read_credential(env_name: str, ssm_client: Any | None, prefix: str) -> str | None:
    value = os.environ.get(env_name)
    if value:
        return value
    if ssm_client is None:
        return None
    slug = env_name.lower().replace("_", "-")
    return _get_optional_secure_parameter(ssm_client, f"{prefix.rstrip('/')}/{slug}")


@lru_cache(maxsize=1)
def get_api_credentials() -> ApiCredentials:
    """Load provider credentials from the environment, falling back to SSM when configured."""
    region = os.environ.get("AWS_REGION", AWS_REGION)
    prefix = os.environ.get(SSM_PARAMETER_PREFIX_ENV, "")
    ssm_client = boto3.client("ssm", region_name=region) if prefix else None
    read = partial(_read_credential, ssm_client=ssm_client, prefix=prefix)
    return ApiCredentials(
        openai_api_key=read(OPENAI_API_KEY_ENV),
        google_api_key=read(GOOGLE_API_KEY_ENV),
        anthropic_api_key=read(ANTHROPIC_API_KEY_ENV),
        perplexity_api_key=read(PERPLEXITY_API_KEY_ENV),
        langsmith_api_key=read(LANGSMITH_API_KEY_ENV),
        bedrock_enabled=os.environ.get(BEDROCK_ENABLED_ENV, "").lower() == "true",
        aws_region=region,
    )


def _configure_langsmith(langsmith_api_key: str | None) -> None:
    if not langsmith_api_key:
        os.environ.pop("LANGSMITH_TRACING", None)
        os.environ.pop("LANGSMITH_API_KEY", None)
        logger.info("LangSmith tracing disabled because API key is unavailable")
        return

    os.environ["LANGSMITH_TRACING"] = "true"
    os.environ["LANGSMITH_API_KEY"] = langsmith_api_key
    os.environ.setdefault("LANGSMITH_PROJECT", LANGSMITH_PROJECT)


@lru_cache(maxsize=1)
def ensure_langsmith_configured() -> None:
    """Configure LangSmith environment variables (called once via lru_cache)."""
    credentials = get_api_credentials()
    _configure_langsmith(credentials.langsmith_api_key)


def flush_langsmith_traces() -> None:
    if os.environ.get("LANGSMITH_TRACING", "").lower() != "true":
        return
    if not os.environ.get("LANGSMITH_API_KEY"):
        return
    try:
        get_cached_client().flush()
    except Exception:
        logger.warning("Failed to flush LangSmith traces", exc_info=True)


def search_cache_ttl() -> float:
    raw = os.environ.get(SEARCH_CACHE_TTL_ENV)
    if not raw:
        return SEARCH_CACHE_TTL_SECONDS
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid search cache TTL; using default", extra={"value": raw})
        return SEARCH_CACHE_TTL_SECONDS


def cors_allow_origins() -> list[str]:
    raw = os.environ.get(CORS_ALLOW_ORIGINS_ENV, "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()] or ["*"]


def build_model_registry(credentials: ApiCredentials) -> ModelRegistry:
    def model_factory(provider: Provider, model: str, temperature: float) -> BaseChatModel:
        return build_chat_model(
            provider,
            model,
            temperature,
            api_key=credentials.api_key(provider),
            region_name=credentials.aws_region,
        )

    return ModelRegistry.build(credentials.configured_providers(), model_factory)


def build_search_dispatcher(credentials: ApiCredentials, ttl_seconds: float) -> SearchDispatcher:
    adapters: dict[SearchTool, SearchProvider] = {}
    if credentials.perplexity_api_key:
        adapters[SearchTool.PERPLEXITY_WEB_SEARCH] = PerplexitySearchAdapter(
            AsyncOpenAI(api_key=credentials.perplexity_api_key, base_url=PERPLEXITY_BASE_URL),
            TTLCache[SearchResult](ttl_seconds=ttl_seconds, name="perplexity"),
        )
        logger.info(
            "Search adapter initialized", extra={"tool": SearchTool.PERPLEXITY_WEB_SEARCH.value}
        )
    else:
        logger.warning("Perplexity API key missing; web search will not be available")

    if credentials.google_api_key:
        adapters[SearchTool.GOOGLE_SEARCH_GROUNDING] = GoogleGroundingAdapter(
            genai.Client(api_key=credentials.google_api_key),
            TTLCache[SearchResult](ttl_seconds=ttl_seconds, name="google_grounding"),
        )
        logger.info(
            "Search adapter initialized", extra={"tool": SearchTool.GOOGLE_SEARCH_GROUNDING.value}
        )
    else:
        logger.warning("Google API key missing; Google Grounding will not be available")

    return SearchDispatcher(
        adapters, TTLCache[SearchResult](ttl_seconds=ttl_seconds, name="dispatcher")
    )


def build_orchestrator(
    kind: OrchestratorKind,
    registry: ModelRegistry,
    dispatcher: SearchDispatcher,
) -> ChatOrchestrator:
    generator = StreamingGenerator(registry)
    if kind == "langgraph":
        return LangGraphChatOrchestrator(registry, dispatcher, generator)
    return DirectChatOrchestrator(registry, dispatcher, generator)


def build_chat_service() -> ChatService:
    ensure_langsmith_configured()
    credentials = get_api_credentials()
    registry = build_model_registry(credentials)
    dispatcher = build_search_dispatcher(credentials, search_cache_ttl())
    kind = os.environ.get(ORCHESTRATOR_ENV, "direct")
    if kind not in ("direct", "langgraph"):
        logger.warning("Unknown orchestrator; using direct", extra={"orchestrator": kind})
        kind = "direct"
    orchestrator = build_orchestrator(cast(OrchestratorKind, kind), registry, dispatcher)
    return ChatService(registry=registry, dispatcher=dispatcher, orchestrator=orchestrator)
