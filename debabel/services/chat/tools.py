"""Tools offered to the chat model.

Only plain lookups live here. Document/artifact tools need the full
interactive tool loop and are not offered on the completion path.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from debabel.core.config import settings
from debabel.services.llm.base import Tool

logger = structlog.get_logger(__name__)


async def get_weather(latitude: float, longitude: float) -> dict[str, Any]:
    """Tool: current weather at a location, from the Open-Meteo forecast API."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current": "temperature_2m",
        "hourly": "temperature_2m",
        "daily": "sunrise,sunset",
        "timezone": "auto",
    }
    async with httpx.AsyncClient(timeout=10.0) as client:
        response = await client.get(settings.weather_api_url, params=params)
        response.raise_for_status()
        logger.info("weather_lookup_ok", status_code=response.status_code)
        return response.json()


WEATHER_TOOL = Tool(
    name="getWeather",
    description="Get the current weather at a location",
    parameters={
        "type": "object",
        "properties": {
            "latitude": {"type": "number"},
            "longitude": {"type": "number"},
        },
        "required": ["latitude", "longitude"],
    },
    execute=get_weather,
)

CHAT_TOOLS: tuple[Tool, ...] = (WEATHER_TOOL,)
