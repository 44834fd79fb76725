"""
Configuration loading.

Settings come from ``settings.yaml`` in the data directory, secrets from the
environment (a ``.env`` file is loaded on import).
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from . import get_data_dir

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_ITERATIONS = 3


def get_config_path() -> Path:
    return get_data_dir() / "config" / "settings.yaml"


def load_config(path: Optional[Path] = None) -> dict:
    """Load settings.yaml, returning an empty dict when it does not exist."""
    config_path = Path(path) if path else get_config_path()
    if not config_path.exists():
        logger.debug("No settings file at %s, using defaults", config_path)
        return {}
    with open(config_path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path} must contain a mapping, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class AgentRunConfig:
    """Generation and loop limits for a single agent run."""

    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    # Wall-clock limit in seconds for each completion request and tool call
    timeout: Optional[float] = None
    # Require the "Answer:" marker on final responses
    strict_answers: bool = True

    def __post_init__(self):
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int):
            raise ValueError(f"max_iterations must be an integer, got {self.max_iterations!r}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_config(cls, config: dict) -> "AgentRunConfig":
        """Build from the ``agent`` section of a loaded settings dict."""
        agent_cfg = (config or {}).get("agent", {}) or {}
        timeout = agent_cfg.get("timeout")
        return cls(
            model=str(agent_cfg.get("model", DEFAULT_MODEL)),
            temperature=float(agent_cfg.get("temperature", DEFAULT_TEMPERATURE)),
            max_iterations=int(agent_cfg.get("max_iterations", DEFAULT_MAX_ITERATIONS)),
            timeout=float(timeout) if timeout is not None else None,
            strict_answers=bool(agent_cfg.get("strict_answers", True)),
        )

    def with_overrides(self, **overrides) -> "AgentRunConfig":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self
