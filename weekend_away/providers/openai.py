"""OpenAI chat completions provider."""

import logging
import os
from typing import List, Optional

import openai

from .base import BaseProvider, Message, ProviderError

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseProvider):
    """OpenAI API provider (also works with OpenAI-compatible endpoints)."""

    name = "openai"

    DEFAULT_MODEL = "gpt-3.5-turbo"

    def __init__(self, model: str = None, api_key: str = None, **kwargs):
        super().__init__(model=model or self.DEFAULT_MODEL, api_key=api_key, **kwargs)

        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.base_url = kwargs.get("base_url")  # For OpenAI-compatible APIs

        if self.api_key:
            self.client = openai.AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
            )
        else:
            self.client = None

    async def complete(
        self,
        messages: List[Message],
        model: str = None,
        temperature: float = None,
    ) -> Optional[str]:
        if not self.client:
            raise ProviderError("OpenAI API key not configured. Set OPENAI_API_KEY", self.name)

        kwargs = {
            "model": model or self.model,
            "messages": [m.to_dict() for m in messages],
        }
        if temperature is not None:
            kwargs["temperature"] = temperature

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except openai.APIError as e:
            logger.warning("OpenAI request failed: %s", e.message)
            raise ProviderError(e.message, self.name) from e

        if not response.choices:
            return None
        return response.choices[0].message.content

    def is_configured(self) -> bool:
        """Check if API key is set."""
        return bool(self.api_key)

    def get_config_help(self) -> str:
        return """OpenAI

1. Get API key: https://platform.openai.com/api-keys
2. Set environment variable:
   export OPENAI_API_KEY=sk-...

Or add to ~/.weekend_away/.env or a .env in the working directory:
   OPENAI_API_KEY=sk-..."""
