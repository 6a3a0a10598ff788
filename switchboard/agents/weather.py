"""Weather agent: current conditions from the Open-Meteo API.

Resolves a location name to coordinates via the Open-Meteo geocoding
endpoint (skipped when coordinates are supplied), then fetches the
``current_weather`` block in the requested temperature unit.
"""

from __future__ import annotations

import logging
import re
from typing import Any, ClassVar, Literal

import httpx
from pydantic import BaseModel, model_validator

from switchboard.agents.base import Agent
from switchboard.errors import ServiceError

logger = logging.getLogger(__name__)

TemperatureUnit = Literal["celsius", "fahrenheit"]

# WMO Weather Interpretation Codes → human-readable description
_WMO_CODES: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    71: "Slight snow",
    73: "Moderate snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Slight showers",
    81: "Moderate showers",
    82: "Violent showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

_TRAILING_JUNK = re.compile(r"[^a-zA-Z0-9\s,]+$")


class WeatherInput(BaseModel):
    location: str | None = None
    unit: TemperatureUnit = "fahrenheit"
    latitude: float | None = None
    longitude: float | None = None

    @model_validator(mode="after")
    def _location_or_coordinates(self) -> "WeatherInput":
        if not self.location and (self.latitude is None or self.longitude is None):
            raise ValueError(
                "Either location or both latitude and longitude must be provided."
            )
        return self


class WeatherResult(BaseModel):
    location: str
    temperature: float
    unit: TemperatureUnit
    conditions: str


def describe_weather_code(code: int | None) -> str:
    """Map a WMO weather code to text, ``"Unknown"`` if unmapped."""
    if code is None:
        return "Unknown"
    return _WMO_CODES.get(int(code), "Unknown")


class WeatherAgent(Agent):
    """Looks up current weather for a place name or a coordinate pair."""

    name: ClassVar[str] = "weather"
    description: ClassVar[str] = (
        "Provides current weather conditions and temperature forecasts for a specific location."
    )
    input_type: ClassVar[type] = WeatherInput
    output_type: ClassVar[type] = WeatherResult

    def __init__(self, client: httpx.AsyncClient, geocoding_url: str, forecast_url: str) -> None:
        self._client = client
        self.geocoding_url = geocoding_url
        self.forecast_url = forecast_url

    async def _get_json(self, url: str, params: dict[str, Any], service: str) -> dict[str, Any]:
        response = await self._client.get(url, params=params)
        if response.is_error:
            raise ServiceError(
                f"{service} API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        return response.json()

    async def _geocode(self, location: str) -> tuple[float, float]:
        # Step 1: geocode the location name → lat/lon
        geo_data = await self._get_json(
            self.geocoding_url,
            {"name": location, "count": 1, "language": "en", "format": "json"},
            "Geocoding",
        )
        results: list[dict[str, Any]] = geo_data.get("results") or []
        if not results:
            raise ServiceError(f"Location not found: {location}")

        place = results[0]
        logger.info("[weather] geocoded %r → %s, %s", location, place["latitude"], place["longitude"])
        return place["latitude"], place["longitude"]

    async def execute(self, args: WeatherInput) -> WeatherResult:
        latitude, longitude = args.latitude, args.longitude

        if latitude is None or longitude is None:
            location = _TRAILING_JUNK.sub("", args.location or "").strip()
            latitude, longitude = await self._geocode(location)
        else:
            location = f"Coords: {latitude:.2f}, {longitude:.2f}"

        # Step 2: fetch current weather from the forecast API
        forecast = await self._get_json(
            self.forecast_url,
            {
                "latitude": latitude,
                "longitude": longitude,
                "current_weather": "true",
                "temperature_unit": args.unit,
            },
            "Forecast",
        )
        current: dict[str, Any] | None = forecast.get("current_weather")
        if not current:
            raise ServiceError("No current weather data in forecast response.")

        return WeatherResult(
            location=location or "Unknown location",
            temperature=current["temperature"],
            unit=args.unit,
            conditions=describe_weather_code(current.get("weathercode")),
        )
