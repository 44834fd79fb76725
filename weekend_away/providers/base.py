"""Base provider interface for LLM completion backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

VALID_ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class Message:
    """A chat message."""
    role: str  # "system", "user", "assistant"
    content: str

    def __post_init__(self):
        if self.role not in VALID_ROLES:
            raise ValueError(f"Invalid role {self.role!r}, expected one of {VALID_ROLES}")

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


class ProviderError(Exception):
    """The completion service could not produce a response."""

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.message = message
        self.provider = provider


class BaseProvider(ABC):
    """Abstract base class for LLM providers.

    Providers are stateless between requests so one instance can be shared
    by concurrent agent runs.
    """

    name: str = "base"

    def __init__(self, model: str = None, api_key: str = None, **kwargs):
        self.model = model
        self.api_key = api_key
        self.kwargs = kwargs

    @abstractmethod
    async def complete(
        self,
        messages: List[Message],
        model: str = None,
        temperature: float = None,
    ) -> Optional[str]:
        """
        Request one assistant message for the transcript.

        Args:
            messages: Ordered transcript, system message first
            model: Model identifier (falls back to the provider default)
            temperature: Sampling temperature

        Returns:
            The assistant text, or None/"" when the service returned no content

        Raises:
            ProviderError: If the request itself fails
        """

    def is_configured(self) -> bool:
        """Check if provider is properly configured."""
        return True

    def get_config_help(self) -> str:
        """Get help text for configuring this provider."""
        return f"{self.name} provider"
