"""LangChain chat model construction per provider."""

from collections.abc import Callable

from langchain_anthropic import ChatAnthropic
from langchain_aws import ChatBedrockConverse
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from search_chat.constants import AWS_REGION, Provider
from search_chat.errors import ConfigurationError

ChatModelFactory = Callable[[Provider, str, float], BaseChatModel]


def build_chat_model(
    provider: Provider,
    model: str,
    temperature: float,
    *,
    api_key: str | None,
    region_name: str = AWS_REGION,
) -> BaseChatModel:
    if provider == "openai":
        return ChatOpenAI(api_key=api_key, model=model, temperature=temperature, streaming=True)
    if provider == "google":
        return ChatGoogleGenerativeAI(google_api_key=api_key, model=model, temperature=temperature)
    if provider == "anthropic":
        return ChatAnthropic(api_key=api_key, model=model, temperature=temperature, streaming=True)
    if provider == "bedrock":
        return ChatBedrockConverse(model=model, region_name=region_name, temperature=temperature)
    raise ConfigurationError(f"Unsupported provider: {provider}")
