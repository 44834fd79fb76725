"""
Agent tools - event and weather lookups

Each tool returns JSON text: records on success, {"error": ...} otherwise.
"""

from typing import Optional

import httpx

from ..core.tool_registry import ToolRegistry
from .events import EventSource, EventSourceError, events_tool, get_events
from .weather import WeatherSource, WeatherSourceError, get_weather, weather_tool


def build_default_registry(client: httpx.AsyncClient, config: Optional[dict] = None) -> ToolRegistry:
    """Registry with getEvents and, unless ``tools.weather`` is false, getWeather."""
    config = config or {}
    integrations = config.get("integrations", {}) or {}
    serpapi_cfg = integrations.get("serpapi", {}) or {}
    weather_cfg = integrations.get("openweather", {}) or {}
    tools_cfg = config.get("tools", {}) or {}

    registry = ToolRegistry()
    registry.register(events_tool(EventSource(
        client,
        gl=serpapi_cfg.get("gl", "au"),
        hl=serpapi_cfg.get("hl", "en"),
    )))
    if tools_cfg.get("weather", True):
        registry.register(weather_tool(WeatherSource(client, units=weather_cfg.get("units", "metric"))))
    return registry


__all__ = [
    "EventSource",
    "EventSourceError",
    "WeatherSource",
    "WeatherSourceError",
    "build_default_registry",
    "events_tool",
    "get_events",
    "get_weather",
    "weather_tool",
]
