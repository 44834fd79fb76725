"""
Weekend Away - LLM-driven local event recommendations

Asks a language model for the two most exciting events in a city, letting it
call event and weather lookups through a bounded tool-calling loop:
- Pluggable completion providers (OpenAI, Ollama)
- SerpApi events and OpenWeatherMap forecast tools
- Progress reporting for any UI
"""

__version__ = "0.1.0"

import os
from pathlib import Path

# Package paths
PACKAGE_DIR = Path(__file__).parent
PROJECT_ROOT = PACKAGE_DIR.parent


def get_data_dir() -> Path:
    """Get the user data directory for Weekend Away."""
    custom_dir = os.environ.get("WEEKEND_AWAY_DATA_DIR")
    if custom_dir:
        return Path(custom_dir)

    # Default to ~/.weekend_away
    return Path.home() / ".weekend_away"


def ensure_data_dir() -> Path:
    """Ensure the data directory exists with required structure."""
    data_dir = get_data_dir()
    (data_dir / "config").mkdir(parents=True, exist_ok=True)
    return data_dir


from .core.agent import run_agent  # noqa: E402

__all__ = ["__version__", "get_data_dir", "ensure_data_dir", "run_agent"]
