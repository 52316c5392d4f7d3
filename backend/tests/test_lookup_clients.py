from __future__ import annotations

import io
import json
import typing
import unittest
from types import SimpleNamespace
from urllib import error as urllib_error
from urllib.parse import parse_qs, urlparse

from walk_randomizer.catalog.courses import WeatherStyle
from walk_randomizer.core.errors import (
    ConfigurationFailure,
    NotFoundFailure,
    UpstreamFailure,
    ValidationFailure,
)
from walk_randomizer.lookups import http, openweather, unsplash
from walk_randomizer.lookups.cache import CachedResult
from walk_randomizer.lookups.openweather import OpenWeatherClient, WeatherResult, weather_style_for_code
from walk_randomizer.lookups.registry import LookupServices, build_lookup_services
from walk_randomizer.lookups.unsplash import PhotoResult, UnsplashClient

PHOTO_PAYLOAD = {
    "results": [
        {
            "urls": {"regular": "https://images.example/regular.jpg"},
            "user": {"name": "Aiko", "links": {"html": "https://unsplash.com/@aiko"}},
        }
    ]
}

WEATHER_PAYLOAD = {
    "weather": [{"id": 803, "description": "曇りがち", "icon": "04d"}],
    "main": {"temp": 17.5},
}


class FakeResponse:
    def __init__(self, body: bytes):
        self.body = body

    def read(self) -> bytes:
        return self.body

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        return False


class TestWeatherCodeMapping(unittest.TestCase):
    def test_reference_codes(self):
        self.assertEqual(weather_style_for_code(201), WeatherStyle.rainy)
        self.assertEqual(weather_style_for_code(600), WeatherStyle.rainy)
        self.assertEqual(weather_style_for_code(741), WeatherStyle.cloudy)
        self.assertEqual(weather_style_for_code(800), WeatherStyle.clear)
        self.assertEqual(weather_style_for_code(803), WeatherStyle.cloudy)

    def test_boundaries_and_unknown_codes(self):
        self.assertEqual(weather_style_for_code(200), WeatherStyle.rainy)
        self.assertEqual(weather_style_for_code(699), WeatherStyle.rainy)
        self.assertEqual(weather_style_for_code(700), WeatherStyle.cloudy)
        self.assertEqual(weather_style_for_code(804), WeatherStyle.cloudy)
        self.assertEqual(weather_style_for_code(805), WeatherStyle.clear)
        self.assertEqual(weather_style_for_code(100), WeatherStyle.clear)


class TestUnsplashClient(unittest.TestCase):
    def setUp(self):
        self.original_get_json = unsplash.get_json
        self.requests = []
        self.payload = PHOTO_PAYLOAD

        def fake_get_json(url, *, service, timeout_seconds, headers=None):
            self.requests.append((url, headers))
            return self.payload

        unsplash.get_json = fake_get_json
        self.client = UnsplashClient(access_key="key-123", base_url="https://api.unsplash.com/", timeout_seconds=5)

    def tearDown(self):
        unsplash.get_json = self.original_get_json

    def test_search_builds_request_and_parses_first_result(self):
        photo = self.client.search_photo("  中目黒 目黒川の桜道 Tokyo Japan ")

        self.assertEqual(photo.url, "https://images.example/regular.jpg")
        self.assertEqual(photo.photographer, "Aiko")
        self.assertEqual(photo.photographer_url, "https://unsplash.com/@aiko")

        url, headers = self.requests[0]
        parsed = urlparse(url)
        self.assertEqual(parsed.path, "/search/photos")
        params = parse_qs(parsed.query)
        self.assertEqual(params["query"], ["中目黒 目黒川の桜道 Tokyo Japan"])
        self.assertEqual(params["per_page"], ["1"])
        self.assertEqual(params["orientation"], ["landscape"])
        self.assertEqual(headers["Authorization"], "Client-ID key-123")

    def test_blank_query_is_rejected_before_any_request(self):
        with self.assertRaises(ValidationFailure):
            self.client.search_photo("   ")
        self.assertEqual(self.requests, [])

    def test_missing_key_is_a_configuration_failure(self):
        self.client.access_key = None
        with self.assertRaises(ConfigurationFailure):
            self.client.search_photo("Ueno")
        self.assertEqual(self.requests, [])

    def test_empty_results_is_not_found(self):
        self.payload = {"results": []}
        with self.assertRaises(NotFoundFailure):
            self.client.search_photo("nowhere")

    def test_malformed_payload_is_upstream_failure(self):
        self.payload = {"results": [{"urls": {}}]}
        with self.assertRaises(UpstreamFailure):
            self.client.search_photo("Ueno")

        self.payload = {"errors": ["rate limited"]}
        with self.assertRaises(UpstreamFailure):
            self.client.search_photo("Ueno")


class TestOpenWeatherClient(unittest.TestCase):
    def setUp(self):
        self.original_get_json = openweather.get_json
        self.urls = []
        self.payload = WEATHER_PAYLOAD

        def fake_get_json(url, *, service, timeout_seconds, headers=None):
            self.urls.append(url)
            return self.payload

        openweather.get_json = fake_get_json
        self.client = OpenWeatherClient(
            api_key="owm",
            base_url="https://api.openweathermap.org/data/2.5",
            latitude=35.6812,
            longitude=139.7671,
            timeout_seconds=5,
        )

    def tearDown(self):
        openweather.get_json = self.original_get_json

    def test_current_weather_rounds_half_up_and_maps_code(self):
        result = self.client.current_weather()
        self.assertEqual(result.temperature, 18)
        self.assertEqual(result.weather_style, WeatherStyle.cloudy)
        self.assertEqual(result.description, "曇りがち")
        self.assertEqual(result.icon, "04d")

        params = parse_qs(urlparse(self.urls[0]).query)
        self.assertEqual(params["lat"], ["35.6812"])
        self.assertEqual(params["lon"], ["139.7671"])
        self.assertEqual(params["units"], ["metric"])
        self.assertEqual(params["lang"], ["ja"])

    def test_negative_half_rounds_towards_positive(self):
        self.payload = {"weather": [{"id": 600}], "main": {"temp": -2.5}}
        result = self.client.current_weather()
        self.assertEqual(result.temperature, -2)
        self.assertEqual(result.weather_style, WeatherStyle.rainy)

    def test_missing_key_is_a_configuration_failure(self):
        self.client.api_key = ""
        with self.assertRaises(ConfigurationFailure):
            self.client.current_weather()
        self.assertEqual(self.urls, [])

    def test_malformed_payload_is_upstream_failure(self):
        self.payload = {"weather": [], "main": {"temp": 10}}
        with self.assertRaises(UpstreamFailure):
            self.client.current_weather()


class TestGetJson(unittest.TestCase):
    def setUp(self):
        self.original_urlopen = http.urllib_request.urlopen

    def tearDown(self):
        http.urllib_request.urlopen = self.original_urlopen

    def test_decodes_json_body(self):
        http.urllib_request.urlopen = lambda _req, timeout: FakeResponse(json.dumps({"ok": True}).encode())
        self.assertEqual(http.get_json("https://x.test", service="Test", timeout_seconds=1), {"ok": True})

    def test_http_error_keeps_status_and_body(self):
        def raise_http_error(req, timeout):
            raise urllib_error.HTTPError(req.full_url, 401, "Unauthorized", {}, io.BytesIO(b'{"message":"bad key"}'))

        http.urllib_request.urlopen = raise_http_error
        with self.assertRaises(UpstreamFailure) as ctx:
            http.get_json("https://x.test", service="Test", timeout_seconds=1)
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertIn("bad key", ctx.exception.response_body)

    def test_network_and_decode_errors_become_upstream_failures(self):
        def raise_url_error(_req, timeout):
            raise urllib_error.URLError("connection refused")

        http.urllib_request.urlopen = raise_url_error
        with self.assertRaises(UpstreamFailure):
            http.get_json("https://x.test", service="Test", timeout_seconds=1)

        http.urllib_request.urlopen = lambda _req, timeout: FakeResponse(b"<html>")
        with self.assertRaises(UpstreamFailure):
            http.get_json("https://x.test", service="Test", timeout_seconds=1)


class TestBuildLookupServices(unittest.TestCase):
    def test_caches_use_configured_ttls_and_location(self):
        settings = SimpleNamespace(
            UNSPLASH_ACCESS_KEY=None,
            UNSPLASH_API_BASE_URL="https://api.unsplash.com",
            OPENWEATHERMAP_API_KEY=None,
            OPENWEATHERMAP_API_BASE_URL="https://api.openweathermap.org/data/2.5",
            WEATHER_LATITUDE=35.6812,
            WEATHER_LONGITUDE=139.7671,
            WEATHER_UNITS="metric",
            WEATHER_LANGUAGE="ja",
            HTTP_TIMEOUT_SECONDS=5,
            IMAGE_CACHE_TTL_SECONDS=86400,
            WEATHER_CACHE_TTL_SECONDS=1800,
            IMAGE_QUERY_SUFFIX="Tokyo Japan",
        )
        with self.assertLogs("walk_randomizer.lookups.registry", level="WARNING") as logs:
            services = build_lookup_services(settings)

        self.assertEqual(len(logs.records), 2)
        self.assertEqual(services.image_cache.ttl_seconds, 86400)
        self.assertEqual(services.weather_cache.ttl_seconds, 1800)
        self.assertEqual(services.weather_location_key, "35.6812,139.7671")
        with self.assertRaises(ConfigurationFailure):
            services.weather()
        with self.assertRaises(ValidationFailure):
            services.photo("  ")
        self.assertEqual(len(services.image_cache), 0)

    def test_lookup_results_are_typed(self):
        self.assertEqual(typing.get_type_hints(LookupServices.photo)["return"], CachedResult[PhotoResult])
        self.assertEqual(typing.get_type_hints(LookupServices.weather)["return"], CachedResult[WeatherResult])


if __name__ == "__main__":
    unittest.main()
