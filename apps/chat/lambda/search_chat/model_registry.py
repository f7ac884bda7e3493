"""Provider profiles and model resolution."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from langchain_core.language_models.chat_models import BaseChatModel

from .constants import (
    CAPABLE_TEMPERATURE,
    FAST_MODEL_MARKER,
    FAST_TEMPERATURE,
    PROVIDERS,
    Provider,
)
from .providers.chat_models import ChatModelFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderDefaults:
    capable_model: str
    fast_model: str


PROVIDER_DEFAULTS: Mapping[Provider, ProviderDefaults] = MappingProxyType(
    {
        # --- OpenAI ---
        "openai": ProviderDefaults(capable_model="gpt-4-turbo", fast_model="gpt-3.5-turbo"),
        # --- Google Gemini ---
        "google": ProviderDefaults(capable_model="gemini-2.5-pro", fast_model="gemini-2.5-flash"),
        # --- Anthropic ---
        "anthropic": ProviderDefaults(
            capable_model="claude-3-sonnet-20240229",
            fast_model="claude-3-haiku-20240307",
        ),
        # --- Bedrock (Claude) ---
        "bedrock": ProviderDefaults(
            capable_model="global.anthropic.claude-sonnet-4-6",
            fast_model="global.anthropic.claude-haiku-4-5-20251001-v1:0",
        ),
    }
)


@dataclass(frozen=True)
class ProviderProfile:
    provider: Provider
    capable_model: str
    fast_model: str
    capable: BaseChatModel
    fast: BaseChatModel

    @property
    def default_models(self) -> frozenset[str]:
        return frozenset({self.capable_model, self.fast_model})


class ModelRegistry:
    def __init__(
        self,
        profiles: Mapping[str, ProviderProfile],
        model_factory: ChatModelFactory,
    ) -> None:
        self._profiles = MappingProxyType(dict(profiles))
        self._model_factory = model_factory

    @classmethod
    def build(
        cls, providers: Iterable[Provider], model_factory: ChatModelFactory
    ) -> "ModelRegistry":
        """Build capable and fast clients for every provider that has a credential."""
        profiles: dict[str, ProviderProfile] = {}
        for provider in providers:
            defaults = PROVIDER_DEFAULTS[provider]
            profiles[provider] = ProviderProfile(
                provider=provider,
                capable_model=defaults.capable_model,
                fast_model=defaults.fast_model,
                capable=model_factory(provider, defaults.capable_model, CAPABLE_TEMPERATURE),
                fast=model_factory(provider, defaults.fast_model, FAST_TEMPERATURE),
            )
            logger.info("Provider models initialized", extra={"provider": provider})
        return cls(profiles, model_factory)

    @property
    def profiles(self) -> Mapping[str, ProviderProfile]:
        return self._profiles

    def resolve(self, provider: str, model_name: str | None) -> BaseChatModel | None:
        profile = self._profiles.get(provider)
        if profile is None:
            return None
        if not model_name:
            return profile.capable
        if FAST_MODEL_MARKER in model_name:
            return profile.fast
        # Any default identifier, including the fast tier's, maps to the capable client.
        if model_name in profile.default_models:
            return profile.capable

        logger.info(
            "Creating client for explicit model",
            extra={"provider": provider, "model": model_name},
        )
        return self._model_factory(profile.provider, model_name, CAPABLE_TEMPERATURE)

    def fallback_clients(
        self, provider: str, failed: BaseChatModel | None = None
    ) -> list[BaseChatModel]:
        """Fast clients to try after ``failed``: the same provider's first, then the others."""
        order = [provider, *(name for name in PROVIDERS if name != provider)]
        candidates: list[BaseChatModel] = []
        for name in order:
            profile = self._profiles.get(name)
            if profile is not None and profile.fast is not failed:
                candidates.append(profile.fast)
        return candidates
