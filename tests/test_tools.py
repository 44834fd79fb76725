"""Tests for the event and weather tools (upstream HTTP served by httpx.MockTransport)."""

import asyncio
import json
from datetime import datetime, timezone

import httpx
import pytest

from weekend_away.tools import (
    EventSource, EventSourceError, WeatherSource, build_default_registry,
    events_tool, get_events, get_weather, weather_tool,
)

SYDNEY = "Sydney, New South Wales, Australia"

SERPAPI_RESULTS = {
    "events_results": [
        {
            "title": "Secret Cinema",
            "description": "Immersive cinema experience",
            "date": {"when": "Sat, Jun 14, 7 PM"},
            "address": ["Carriageworks", "245 Wilson St, Eveleigh NSW"],
            "link": "https://example.com/secret-cinema",
            "knowledge_graph": {"type": "Film screening"},
        },
        {
            "title": "Flash Mob",
            "venue": {"name": "Circular Quay"},
        },
    ]
}


def _ts(year, month, day, hour=2):
    return int(datetime(year, month, day, hour, tzinfo=timezone.utc).timestamp())


ONECALL = {
    "daily": [
        {
            "dt": _ts(2025, 6, 14),
            "temp": {"max": 19.5, "min": 10.2},
            "humidity": 60,
            "wind_speed": 4.1,
            "weather": [{"main": "Clear", "description": "clear sky", "icon": "01d"}],
        },
        {
            "dt": _ts(2025, 6, 15),
            "temp": {"max": 17.0, "min": 9.0},
            "weather": [{"main": "Rain", "description": "light rain", "icon": "10d"}],
        },
    ]
}


def call_with(handler, fn):
    """Run ``fn(client)`` against a client served by ``handler``."""
    async def runner():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fn(client)
    return asyncio.run(runner())


# ──────────────────────────────────────────────
# Events
# ──────────────────────────────────────────────

class TestEventSource:

    def test_search_normalizes_results(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json=SERPAPI_RESULTS)

        events = call_with(handler, lambda c: EventSource(c, api_key="k").search(SYDNEY, "date:today"))

        assert seen["engine"] == "google_events"
        assert seen["location"] == SYDNEY
        assert seen["htichips"] == "date:today"
        assert seen["q"] == "events"
        assert seen["api_key"] == "k"

        first, second = events
        assert first == {
            "id": "https://example.com/secret-cinema",
            "name": "Secret Cinema",
            "description": "Immersive cinema experience",
            "date": "Sat, Jun 14, 7 PM",
            "location": "Carriageworks, 245 Wilson St, Eveleigh NSW",
            "category": "Film screening",
            "link": "https://example.com/secret-cinema",
        }
        assert second["id"].startswith("serpapi_")
        assert second["description"] == "No description available."
        assert second["date"] == "Date unknown"
        assert second["location"] == "Circular Quay"
        assert second["category"] == "Event"

    def test_categories_in_query(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json={"events_results": []})

        call_with(handler, lambda c: EventSource(c, api_key="k").search(SYDNEY, "date:week", ["music", "food"]))
        assert seen["q"] == "music food events"

    def test_no_results_is_empty(self):
        events = call_with(
            lambda r: httpx.Response(200, json={"search_metadata": {}}),
            lambda c: EventSource(c, api_key="k").search(SYDNEY, "date:today"),
        )
        assert events == []

    def test_upstream_error(self):
        handler = lambda r: httpx.Response(401, json={"error": "Invalid API key."})
        with pytest.raises(EventSourceError, match="SerpApi Error: Invalid API key."):
            call_with(handler, lambda c: EventSource(c, api_key="bad").search(SYDNEY, "date:today"))

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("SERPAPI_API_KEY", raising=False)
        with pytest.raises(EventSourceError, match="API Key missing"):
            call_with(lambda r: httpx.Response(200, json={}), lambda c: EventSource(c).search(SYDNEY, "date:today"))

    def test_missing_timeframe(self):
        with pytest.raises(EventSourceError, match="timeframe"):
            call_with(lambda r: httpx.Response(200, json={}), lambda c: EventSource(c, api_key="k").search(SYDNEY, ""))


class TestGetEventsTool:

    def test_returns_json_array(self):
        text = call_with(
            lambda r: httpx.Response(200, json=SERPAPI_RESULTS),
            lambda c: get_events(EventSource(c, api_key="k"), SYDNEY, "date:today"),
        )
        assert [e["name"] for e in json.loads(text)] == ["Secret Cinema", "Flash Mob"]

    def test_errors_become_json(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        text = call_with(handler, lambda c: get_events(EventSource(c, api_key="k"), SYDNEY, "date:today"))
        error = json.loads(text)["error"]
        assert error.startswith("Failed to get events:")
        assert "connection refused" in error

    def test_tool_adapter(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json=SERPAPI_RESULTS)

        async def invoke(client):
            tool = events_tool(EventSource(client, api_key="k"))
            assert tool.name == "getEvents"
            assert tool.required == ("city", "eventKey")
            return await tool.invoke({"city": SYDNEY, "eventKey": "date:tomorrow", "categories": "music", "x": 1})

        text = call_with(handler, invoke)
        assert len(json.loads(text)) == 2
        assert seen["htichips"] == "date:tomorrow"
        assert seen["q"] == "music events"


# ──────────────────────────────────────────────
# Weather
# ──────────────────────────────────────────────

def weather_handler(geo=None, onecall=None, onecall_status=200):
    geo = [{"name": "Sydney", "lat": -33.87, "lon": 151.21, "country": "AU"}] if geo is None else geo

    def handler(request):
        if request.url.path == "/geo/1.0/direct":
            assert request.url.params["q"] == SYDNEY
            return httpx.Response(200, json=geo)
        if request.url.path == "/data/3.0/onecall":
            assert request.url.params["lat"] == "-33.87"
            assert request.url.params["units"] == "metric"
            return httpx.Response(onecall_status, json=ONECALL if onecall is None else onecall)
        return httpx.Response(404, json={})

    return handler


class TestWeatherSource:

    def test_forecast_for_date(self):
        forecast = call_with(weather_handler(), lambda c: WeatherSource(c, api_key="k").forecast(SYDNEY, "2025-06-14"))
        assert forecast == {
            "date": "2025-06-14",
            "main": "Clear",
            "description": "clear sky",
            "temp_max": 19.5,
            "temp_min": 10.2,
            "humidity": 60,
            "wind_speed": 4.1,
            "icon": "01d",
        }

    def test_optional_fields(self):
        forecast = call_with(weather_handler(), lambda c: WeatherSource(c, api_key="k").forecast(SYDNEY, "2025-06-15"))
        assert forecast["main"] == "Rain"
        assert forecast["humidity"] is None
        assert forecast["wind_speed"] is None

    @pytest.mark.parametrize("handler, date, message", [
        (weather_handler(), "2025-07-01", "No weather forecast found"),
        (weather_handler(geo=[]), "2025-06-14", "City not found"),
        (weather_handler(geo=[{"name": "Sydney", "country": "AU"}]), "2025-06-14", "City not found"),
        (weather_handler(onecall={"cod": 500}, onecall_status=500), "2025-06-14", "Failed to fetch weather data"),
        (weather_handler(), "14/06/2025", "Invalid date"),
    ])
    def test_errors_become_json(self, handler, date, message):
        text = call_with(handler, lambda c: get_weather(WeatherSource(c, api_key="k"), SYDNEY, date))
        error = json.loads(text)["error"]
        assert error.startswith("Failed to get weather:")
        assert message in error

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("WEATHER_API_KEY", raising=False)
        monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
        text = call_with(weather_handler(), lambda c: get_weather(WeatherSource(c), SYDNEY, "2025-06-14"))
        assert "API Key missing" in json.loads(text)["error"]

    def test_tool_adapter(self):
        async def invoke(client):
            tool = weather_tool(WeatherSource(client, api_key="k"))
            assert tool.required == ("city", "date")
            return await tool.invoke({"city": SYDNEY, "date": "2025-06-14"})

        assert json.loads(call_with(weather_handler(), invoke))["main"] == "Clear"


# ──────────────────────────────────────────────
# Default registry
# ──────────────────────────────────────────────

class TestDefaultRegistry:

    def test_both_tools_by_default(self):
        registry = call_with(lambda r: httpx.Response(200), _async(build_default_registry))
        assert registry.names() == ["getEvents", "getWeather"]

    def test_weather_can_be_disabled(self):
        config = {"tools": {"weather": False}}
        registry = call_with(lambda r: httpx.Response(200), _async(lambda c: build_default_registry(c, config)))
        assert registry.names() == ["getEvents"]


def _async(fn):
    async def wrapper(client):
        return fn(client)
    return wrapper
