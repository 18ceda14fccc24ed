"""Generation clients."""

from mandalart.config import AppConfig
from mandalart.generation.providers.base import GenerationClient
from mandalart.generation.providers.openrouter_provider import OpenRouterProvider
from mandalart.generation.providers.anthropic_provider import AnthropicProvider


def get_provider(config: AppConfig) -> GenerationClient:
    """Build the provider named by the configuration."""
    if config.provider == "anthropic":
        return AnthropicProvider(
            api_key=config.api_key,
            model=config.model,
            timeout=config.generation_timeout,
        )
    return OpenRouterProvider(
        api_key=config.api_key,
        model=config.model,
        base_url=config.base_url,
        timeout=config.generation_timeout,
    )


__all__ = ["GenerationClient", "OpenRouterProvider", "AnthropicProvider", "get_provider"]
