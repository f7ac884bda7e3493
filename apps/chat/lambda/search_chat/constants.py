"""Shared constants and literal types for the search chat Lambda."""

from typing import Literal

AWS_REGION = "ap-northeast-1"
LANGSMITH_PROJECT = "search-chat"

OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
GOOGLE_API_KEY_ENV = "GOOGLE_API_KEY"
ANTHROPIC_API_KEY_ENV = "ANTHROPIC_API_KEY"
PERPLEXITY_API_KEY_ENV = "PERPLEXITY_API_KEY"
LANGSMITH_API_KEY_ENV = "LANGSMITH_API_KEY"
BEDROCK_ENABLED_ENV = "CHAT_BEDROCK_ENABLED"
SSM_PARAMETER_PREFIX_ENV = "CHAT_SSM_PARAMETER_PREFIX"
ORCHESTRATOR_ENV = "CHAT_ORCHESTRATOR"
SEARCH_CACHE_TTL_ENV = "CHAT_SEARCH_CACHE_TTL_SECONDS"
CORS_ALLOW_ORIGINS_ENV = "CHAT_CORS_ALLOW_ORIGINS"

Provider = Literal["openai", "google", "anthropic", "bedrock"]
PROVIDERS: tuple[Provider, ...] = ("openai", "google", "anthropic", "bedrock")
DEFAULT_PROVIDER: Provider = "openai"

CAPABLE_TEMPERATURE = 0.2
FAST_TEMPERATURE = 0.7
FAST_MODEL_MARKER = "fast"

SEARCH_CACHE_TTL_SECONDS = 5 * 60
SEARCH_CACHE_MAX_ENTRIES = 1024
EVENT_CHANNEL_SIZE = 64

PERPLEXITY_BASE_URL = "https://api.perplexity.ai"
PERPLEXITY_MODEL = "sonar"
PERPLEXITY_MAX_TOKENS = 750
PERPLEXITY_TEMPERATURE = 0.2
GROUNDING_MODEL = "gemini-2.5-pro"

NO_SEARCH_TOOL = "none"
FAILED_TOOL_SUFFIX = "_failed"
MISSING_MESSAGE_ERROR = "Message is required."
GENERIC_PROCESSING_ERROR = "An unexpected error occurred during processing."

OrchestratorKind = Literal["direct", "langgraph"]
