from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from walk_randomizer.lookups.cache import CachedResult, ReadThroughCache
from walk_randomizer.lookups.openweather import OpenWeatherClient, WeatherResult
from walk_randomizer.lookups.unsplash import PhotoResult, UnsplashClient

logger = logging.getLogger(__name__)


@dataclass
class LookupServices:
    """Process-wide caches for the photo and weather lookups."""

    image_cache: ReadThroughCache[str, PhotoResult]
    weather_cache: ReadThroughCache[str, WeatherResult]
    weather_location_key: str
    image_query_suffix: str = "Tokyo Japan"

    def photo(self, query: str) -> CachedResult[PhotoResult]:
        return self.image_cache.get((query or "").strip())

    def weather(self) -> CachedResult[WeatherResult]:
        return self.weather_cache.get(self.weather_location_key)


def build_lookup_services(settings: Any) -> LookupServices:
    if not settings.UNSPLASH_ACCESS_KEY:
        logger.warning("UNSPLASH_ACCESS_KEY is not set; course photos are unavailable")
    if not settings.OPENWEATHERMAP_API_KEY:
        logger.warning("OPENWEATHERMAP_API_KEY is not set; weather autofill is unavailable")

    unsplash = UnsplashClient(
        access_key=settings.UNSPLASH_ACCESS_KEY,
        base_url=settings.UNSPLASH_API_BASE_URL,
        timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
    )
    weather = OpenWeatherClient(
        api_key=settings.OPENWEATHERMAP_API_KEY,
        base_url=settings.OPENWEATHERMAP_API_BASE_URL,
        latitude=settings.WEATHER_LATITUDE,
        longitude=settings.WEATHER_LONGITUDE,
        timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
        units=settings.WEATHER_UNITS,
        language=settings.WEATHER_LANGUAGE,
    )

    return LookupServices(
        image_cache=ReadThroughCache(
            ttl_seconds=settings.IMAGE_CACHE_TTL_SECONDS,
            lookup=unsplash.search_photo,
            name="image",
        ),
        weather_cache=ReadThroughCache(
            ttl_seconds=settings.WEATHER_CACHE_TTL_SECONDS,
            lookup=lambda _location: weather.current_weather(),
            name="weather",
        ),
        weather_location_key=weather.location_key,
        image_query_suffix=settings.IMAGE_QUERY_SUFFIX,
    )
