"""Daily forecast lookup via OpenWeatherMap (geocoding + One Call 3.0)."""

import json
import logging
import os
from datetime import date as date_cls, datetime, timezone
from typing import Any, Dict, Mapping

import httpx

from ..core.tool_registry import Tool

logger = logging.getLogger(__name__)

OPENWEATHER_GEO_URL = "https://api.openweathermap.org/geo/1.0/direct"
OPENWEATHER_ONECALL_URL = "https://api.openweathermap.org/data/3.0/onecall"


class WeatherSourceError(Exception):
    """The weather source could not return a forecast."""


def forecast_date(dt: int) -> str:
    """UTC calendar date of a One Call ``daily[].dt`` timestamp."""
    return datetime.fromtimestamp(dt, tz=timezone.utc).date().isoformat()


def normalize_forecast(daily: Mapping[str, Any]) -> Dict[str, Any]:
    weather = (daily.get("weather") or [{}])[0]
    temp = daily.get("temp") or {}
    return {
        "date": forecast_date(daily["dt"]),
        "main": weather.get("main") or "N/A",
        "description": weather.get("description") or "N/A",
        "temp_max": temp.get("max"),
        "temp_min": temp.get("min"),
        "humidity": daily.get("humidity"),
        "wind_speed": daily.get("wind_speed"),
        "icon": weather.get("icon"),
    }


class WeatherSource:
    """Looks up the daily forecast for a city on a given date."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str = None,
        units: str = "metric",
        geo_url: str = OPENWEATHER_GEO_URL,
        onecall_url: str = OPENWEATHER_ONECALL_URL,
    ):
        self.client = client
        self.api_key = api_key or os.getenv("WEATHER_API_KEY") or os.getenv("OPENWEATHER_API_KEY")
        self.units = units
        self.geo_url = geo_url
        self.onecall_url = onecall_url

    async def _get_json(self, url: str, params: dict, what: str):
        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise WeatherSourceError(f"{what} request failed: {e}") from e
        try:
            data = response.json()
        except ValueError as e:
            raise WeatherSourceError(f"{what} returned a non-JSON body (status {response.status_code})") from e
        return response, data

    async def forecast(self, city: str, date: str) -> Dict[str, Any]:
        """
        Get the forecast for one day.

        Args:
            city: Full city name, e.g. "Sydney, New South Wales, Australia"
            date: Target day as YYYY-MM-DD

        Returns:
            Forecast record for that day

        Raises:
            WeatherSourceError: On bad input, unknown city, upstream failure or
                a date outside the forecast window
        """
        if not city or not date:
            raise WeatherSourceError("Missing 'city' or 'date'.")
        try:
            date_cls.fromisoformat(date)
        except ValueError as e:
            raise WeatherSourceError(f"Invalid date '{date}', expected YYYY-MM-DD.") from e
        if not self.api_key:
            raise WeatherSourceError("Server configuration error: Weather API Key missing.")

        response, geo = await self._get_json(
            self.geo_url, {"q": city, "limit": 1, "appid": self.api_key}, "Geocoding"
        )
        if response.is_error or not isinstance(geo, list) or not geo:
            raise WeatherSourceError(f"City not found or geocoding failed for: {city}")

        place = geo[0]
        if not isinstance(place, dict) or place.get("lat") is None or place.get("lon") is None:
            raise WeatherSourceError(f"City not found or geocoding failed for: {city}")
        logger.info("Geocoded '%s' to %s (%s, %s)", city, place.get("name"), place.get("lat"), place.get("lon"))

        response, data = await self._get_json(
            self.onecall_url,
            {
                "lat": place["lat"],
                "lon": place["lon"],
                "exclude": "current,minutely,hourly,alerts",
                "appid": self.api_key,
                "units": self.units,
            },
            "Forecast",
        )
        if response.is_error or not isinstance(data, dict) or not data.get("daily"):
            raise WeatherSourceError("Failed to fetch weather data from OpenWeatherMap.")

        for daily in data["daily"]:
            if "dt" in daily and forecast_date(daily["dt"]) == date:
                return normalize_forecast(daily)

        logger.warning("No forecast for %s in %s", date, [forecast_date(d["dt"]) for d in data["daily"] if "dt" in d])
        raise WeatherSourceError(
            f"No weather forecast found for the specific date: {date}. Forecasts available for other dates."
        )


async def get_weather(source: WeatherSource, city: str, date: str) -> str:
    """
    Get the weather forecast for a city on a date.

    Args:
        city: Full city name
        date: Day of interest (YYYY-MM-DD)

    Returns:
        JSON forecast object, or a JSON object with an "error" key
    """
    try:
        forecast = await source.forecast(city, date)
    except WeatherSourceError as e:
        logger.error("[Tool Error] Failed to fetch weather: %s", e)
        return json.dumps({"error": f"Failed to get weather: {e}"})
    return json.dumps(forecast)


def weather_tool(source: WeatherSource) -> Tool:
    """Register-ready ``getWeather`` tool bound to a weather source."""

    async def invoke(args: Mapping[str, Any]) -> str:
        return await get_weather(source, args["city"], args["date"])

    return Tool(
        name="getWeather",
        func=invoke,
        required=("city", "date"),
        description="Gets the weather forecast for the city on a specific date (YYYY-MM-DD).",
        example={"city": "Sydney, New South Wales, Australia", "date": "2025-06-14"},
        returns="JSON object with date, main, description, temp_max, temp_min, humidity, wind_speed, icon.",
    )
