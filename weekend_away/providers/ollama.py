"""Ollama provider for local models."""

import logging
import os
from typing import List, Optional

import httpx
import ollama

from .base import BaseProvider, Message, ProviderError

logger = logging.getLogger(__name__)


class OllamaProvider(BaseProvider):
    """Ollama local LLM provider."""

    name = "ollama"

    DEFAULT_MODEL = "llama3.2"

    # Reasoning models that need longer timeouts
    REASONING_MODELS = ["gpt-oss", "deepseek-r1", "qwq"]

    def __init__(self, model: str = None, **kwargs):
        super().__init__(model=model or self.DEFAULT_MODEL, **kwargs)
        self.base_url = kwargs.get("base_url") or os.getenv("OLLAMA_HOST", "http://localhost:11434")
        self.headers = kwargs.get("headers")

        is_reasoning = any(r in self.model.lower() for r in self.REASONING_MODELS)
        timeout = 600.0 if is_reasoning else 120.0  # 10 min for reasoning, 2 min default

        self.client = ollama.AsyncClient(
            host=self.base_url,
            timeout=httpx.Timeout(timeout, connect=30.0),
            headers=self.headers,
        )

    async def complete(
        self,
        messages: List[Message],
        model: str = None,
        temperature: float = None,
    ) -> Optional[str]:
        options = {}
        if temperature is not None:
            options["temperature"] = temperature

        try:
            response = await self.client.chat(
                model=model or self.model,
                messages=[m.to_dict() for m in messages],
                options=options or None,
            )
        except ollama.ResponseError as e:
            logger.warning("Ollama request failed: %s", e.error)
            raise ProviderError(e.error, self.name) from e
        except (httpx.HTTPError, ConnectionError) as e:
            # the ollama client re-raises failed connects as ConnectionError
            raise ProviderError(f"Cannot reach Ollama at {self.base_url}: {e}", self.name) from e

        message = response.message
        return message.content if message else None

    def get_config_help(self) -> str:
        return """Ollama (local)

1. Install: https://ollama.com/download
2. Pull a model:
   ollama pull llama3.2
3. Optionally point at a remote server:
   export OLLAMA_HOST=http://host:11434"""
