"""
LLM Providers - Abstract interface for different completion backends

Supported:
- OpenAI (default)
- Ollama (local)
"""

from .base import BaseProvider, Message, ProviderError
from .ollama import OllamaProvider
from .openai import OpenAIProvider

PROVIDERS = {
    "openai": OpenAIProvider,
    "ollama": OllamaProvider,
}


def get_provider(name: str, **kwargs) -> BaseProvider:
    """Get a provider instance by name."""
    if name not in PROVIDERS:
        raise ValueError(f"Unknown provider: {name}. Available: {list(PROVIDERS.keys())}")
    return PROVIDERS[name](**kwargs)


def list_providers() -> list[str]:
    """List available provider names."""
    return list(PROVIDERS.keys())


__all__ = [
    "BaseProvider",
    "Message",
    "ProviderError",
    "OpenAIProvider",
    "OllamaProvider",
    "get_provider",
    "list_providers",
]
