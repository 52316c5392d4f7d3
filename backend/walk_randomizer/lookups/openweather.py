from __future__ import annotations

import math
from dataclasses import dataclass
from urllib.parse import urlencode

from walk_randomizer.catalog.courses import WeatherStyle
from walk_randomizer.core.errors import ConfigurationFailure, UpstreamFailure
from walk_randomizer.lookups.http import get_json


def weather_style_for_code(code: int) -> WeatherStyle:
    """Map an OpenWeatherMap condition id onto a course weather style."""
    # thunderstorm, drizzle, rain and snow
    if 200 <= code < 700:
        return WeatherStyle.rainy
    # mist, fog, haze
    if 700 <= code < 800:
        return WeatherStyle.cloudy
    if code == 800:
        return WeatherStyle.clear
    if 801 <= code <= 804:
        return WeatherStyle.cloudy
    return WeatherStyle.clear


@dataclass(frozen=True)
class WeatherResult:
    temperature: int
    weather_style: WeatherStyle
    description: str
    icon: str


@dataclass
class OpenWeatherClient:
    api_key: str | None
    base_url: str
    latitude: float
    longitude: float
    timeout_seconds: int
    units: str = "metric"
    language: str = "ja"

    @property
    def location_key(self) -> str:
        return f"{self.latitude},{self.longitude}"

    def current_weather(self) -> WeatherResult:
        if not self.api_key:
            raise ConfigurationFailure("OPENWEATHERMAP_API_KEY is not configured")

        params = urlencode(
            {
                "lat": self.latitude,
                "lon": self.longitude,
                "appid": self.api_key,
                "units": self.units,
                "lang": self.language,
            }
        )
        data = get_json(
            f"{self.base_url.rstrip('/')}/weather?{params}",
            service="OpenWeatherMap",
            timeout_seconds=self.timeout_seconds,
        )

        try:
            condition = data["weather"][0]
            code = int(condition["id"])
            temperature = int(math.floor(float(data["main"]["temp"]) + 0.5))
            return WeatherResult(
                temperature=temperature,
                weather_style=weather_style_for_code(code),
                description=str(condition.get("description") or ""),
                icon=str(condition.get("icon") or ""),
            )
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise UpstreamFailure("Unexpected OpenWeatherMap response format") from exc
