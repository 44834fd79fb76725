"""Event lookup via SerpApi's Google Events engine."""

import json
import logging
import os
import secrets
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from ..core.tool_registry import Tool

logger = logging.getLogger(__name__)

SERPAPI_BASE_URL = "https://serpapi.com/search.json"


class EventSourceError(Exception):
    """The event source could not return events."""


def normalize_event(raw: Mapping[str, Any]) -> Dict[str, str]:
    """Map a SerpApi ``events_results`` entry to an event record."""
    address = raw.get("address") or []
    venue = raw.get("venue") or {}
    location = ", ".join(address) if address else venue.get("name") or "Location unknown"
    return {
        "id": raw.get("link") or f"serpapi_{secrets.token_hex(6)}",
        "name": raw.get("title") or "Unnamed Event",
        "description": raw.get("description") or "No description available.",
        "date": (raw.get("date") or {}).get("when") or "Date unknown",
        "location": location,
        "category": (raw.get("knowledge_graph") or {}).get("type") or "Event",
        "link": raw.get("link") or "",
    }


class EventSource:
    """Searches SerpApi for events in a city for a timeframe key."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str = None,
        base_url: str = SERPAPI_BASE_URL,
        gl: str = "au",
        hl: str = "en",
    ):
        self.client = client
        self.api_key = api_key or os.getenv("SERPAPI_API_KEY")
        self.base_url = base_url
        self.gl = gl
        self.hl = hl

    async def search(
        self,
        city: str,
        timeframe_key: str,
        categories: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, str]]:
        """
        Find events for a city.

        Args:
            city: Location string, e.g. "Sydney, New South Wales, Australia"
            timeframe_key: Google Events chip, e.g. "date:today"
            categories: Optional keywords added to the query

        Returns:
            Normalized event records (possibly empty)

        Raises:
            EventSourceError: On missing input, missing key or upstream failure
        """
        if not timeframe_key:
            raise EventSourceError("Missing timeframe key.")
        if not city:
            raise EventSourceError("Missing city.")
        if not self.api_key:
            raise EventSourceError("Server configuration error: API Key missing.")

        query = "events"
        if categories:
            query = f"{' '.join(categories)} events"
        params = {
            "engine": "google_events",
            "q": query,
            "location": city,
            "gl": self.gl,
            "hl": self.hl,
            "htichips": timeframe_key,
            "api_key": self.api_key,
        }

        logger.info("Requesting SerpApi events for %s (%s)", city, timeframe_key)
        try:
            response = await self.client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            raise EventSourceError(f"Request to SerpApi failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise EventSourceError(
                f"SerpApi returned status {response.status_code} with a non-JSON body"
            ) from e

        if isinstance(data, dict) and data.get("error"):
            raise EventSourceError(f"SerpApi Error: {data['error']}")
        if response.is_error:
            raise EventSourceError(f"SerpApi request failed with status {response.status_code}")

        results = data.get("events_results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            logger.warning("No 'events_results' array in SerpApi response")
            return []

        events = [normalize_event(item) for item in results if isinstance(item, dict)]
        logger.debug("Processed %d events", len(events))
        return events


async def get_events(
    source: EventSource,
    city: str,
    timeframe_key: str,
    categories: Optional[Sequence[str]] = None,
) -> str:
    """
    Find events happening in a city for a timeframe.

    Args:
        city: Full city name, e.g. "Sydney, New South Wales, Australia"
        timeframe_key: Timeframe key such as "date:today", "date:tomorrow" or "date:week"
        categories: Optional category keywords

    Returns:
        JSON array of event records, or a JSON object with an "error" key
    """
    try:
        events = await source.search(city, timeframe_key, categories)
    except EventSourceError as e:
        logger.error("[Tool Error] Failed to fetch events: %s", e)
        return json.dumps({"error": f"Failed to get events: {e}"})
    return json.dumps(events)


def events_tool(source: EventSource) -> Tool:
    """Register-ready ``getEvents`` tool bound to an event source."""

    async def invoke(args: Mapping[str, Any]) -> str:
        categories = args.get("categories")
        if isinstance(categories, str):
            categories = [categories]
        return await get_events(source, args["city"], args["eventKey"], categories)

    return Tool(
        name="getEvents",
        func=invoke,
        required=("city", "eventKey"),
        description="Finds events happening in the city for the timeframe represented by the 'eventKey'.",
        example={"city": "Sydney, New South Wales, Australia", "eventKey": "date:today"},
        returns='JSON string of event objects (e.g., \'[{"id": "evt1", "name": "Event Name", "description": "Details..."}]\').',
    )
