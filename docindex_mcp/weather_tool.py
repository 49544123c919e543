"""Mock weather tool.

Data is derived from a character-code hash of the city and country, so the
same location always yields the same report.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Literal

from pydantic import Field

from docindex_common.scraper.models import utc_now_iso

logger = logging.getLogger(__name__)

Units = Literal["metric", "imperial", "kelvin"]

WEATHER_CONDITIONS = (
    ("Sunny", "Clear sky with bright sunshine"),
    ("Partly Cloudy", "Some clouds with sunny intervals"),
    ("Cloudy", "Overcast with thick clouds"),
    ("Rainy", "Light to moderate rainfall"),
    ("Heavy Rain", "Heavy rainfall with strong winds"),
    ("Thunderstorm", "Thunderstorms with lightning"),
    ("Snowy", "Light to moderate snowfall"),
    ("Foggy", "Dense fog reducing visibility"),
    ("Windy", "Strong winds with clear skies"),
    ("Drizzle", "Light drizzle with overcast skies"),
)

# (base temperature, temperature unit, wind unit, pressure unit, visibility unit)
_UNIT_TABLE = {
    "metric": (-10, "°C", "m/s", "hPa", "km"),
    "imperial": (32, "°F", "mph", "inHg", "miles"),
    "kelvin": (250, "K", "m/s", "hPa", "km"),
}


@dataclass(frozen=True)
class WeatherReport:
    city: str
    country: str
    temperature: float
    feels_like: float
    humidity: int
    pressure: float
    wind_speed: float
    wind_direction: int
    visibility: float
    uv_index: int
    condition: str
    description: str
    timestamp: str
    temperature_unit: str
    wind_unit: str
    pressure_unit: str
    visibility_unit: str


def location_hash(city: str, country: str) -> int:
    """Sum of the character codes of the lower-cased city and country."""
    return sum(map(ord, city.lower())) + sum(map(ord, country.lower()))


def generate_mock_weather(city: str, country: str = "Unknown", units: Units = "metric") -> WeatherReport:
    """Deterministic mock weather for a location."""
    combined = location_hash(city, country)
    base, temperature_unit, wind_unit, pressure_unit, visibility_unit = _UNIT_TABLE.get(
        units, _UNIT_TABLE["metric"]
    )

    span = 50 if units == "metric" else 80
    temperature = base + combined % span
    feels_like = temperature + combined % 6 - 3
    if units == "imperial":
        pressure = 29.5 + (combined % 200) / 100
        visibility = 5 + combined % 15
    else:
        pressure = 1000 + combined % 50
        visibility = 8 + combined % 22
    condition, description = WEATHER_CONDITIONS[combined % len(WEATHER_CONDITIONS)]

    return WeatherReport(
        city=city,
        country=country,
        temperature=round(temperature, 1),
        feels_like=round(feels_like, 1),
        humidity=30 + combined % 60,
        pressure=round(pressure, 1),
        wind_speed=float(combined % 25 + 1),
        wind_direction=combined % 360,
        visibility=round(float(visibility), 1),
        uv_index=max(1, combined % 12),
        condition=condition,
        description=description,
        timestamp=utc_now_iso(),
        temperature_unit=temperature_unit,
        wind_unit=wind_unit,
        pressure_unit=pressure_unit,
        visibility_unit=visibility_unit,
    )


def get_weather(
    city: Annotated[str, Field(description="City to report the weather for")],
    country: Annotated[str, Field(description="Country of the city")] = "Unknown",
    units: Annotated[
        Units, Field(description="metric (°C, m/s), imperial (°F, mph) or kelvin (K, m/s)")
    ] = "metric",
) -> str:
    """Current weather for any city (simulated data)."""
    try:
        report = generate_mock_weather(city, country, units)
    except Exception as e:
        logger.exception(f"get-weather failed for {city}")
        return f"Error: get-weather failed for {city}, {country}: {e}"

    return (
        f"Current weather in {report.city}, {report.country}\n\n"
        f"Conditions:\n"
        f"- State: {report.condition}\n"
        f"- Description: {report.description}\n"
        f"- Last updated: {report.timestamp}\n\n"
        f"Temperature:\n"
        f"- Current: {report.temperature}{report.temperature_unit}\n"
        f"- Feels like: {report.feels_like}{report.temperature_unit}\n\n"
        f"Wind and atmosphere:\n"
        f"- Wind speed: {report.wind_speed} {report.wind_unit}\n"
        f"- Wind direction: {report.wind_direction}°\n"
        f"- Humidity: {report.humidity}%\n"
        f"- Pressure: {report.pressure} {report.pressure_unit}\n\n"
        f"Visibility and UV:\n"
        f"- Visibility: {report.visibility} {report.visibility_unit}\n"
        f"- UV index: {report.uv_index}\n\n"
        f"Note: this is simulated data for demonstration purposes"
    )
