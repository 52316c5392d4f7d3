from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

from walk_randomizer.core.errors import (
    ConfigurationFailure,
    NotFoundFailure,
    UpstreamFailure,
    ValidationFailure,
)
from walk_randomizer.lookups.http import get_json


@dataclass(frozen=True)
class PhotoResult:
    url: str
    photographer: str
    photographer_url: str


@dataclass
class UnsplashClient:
    """Photo search; callers must show the photographer attribution with the image."""

    access_key: str | None
    base_url: str
    timeout_seconds: int

    def search_photo(self, query: str) -> PhotoResult:
        normalized = (query or "").strip()
        if not normalized:
            raise ValidationFailure("A search query is required")
        if not self.access_key:
            raise ConfigurationFailure("UNSPLASH_ACCESS_KEY is not configured")

        params = urlencode({"query": normalized, "per_page": 1, "orientation": "landscape"})
        data = get_json(
            f"{self.base_url.rstrip('/')}/search/photos?{params}",
            service="Unsplash",
            timeout_seconds=self.timeout_seconds,
            headers={"Authorization": f"Client-ID {self.access_key}", "Accept-Version": "v1"},
        )

        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise UpstreamFailure("Unexpected Unsplash response format")
        if len(data["results"]) == 0:
            raise NotFoundFailure(f"No photo found for '{normalized}'")

        try:
            photo = data["results"][0]
            return PhotoResult(
                url=str(photo["urls"]["regular"]),
                photographer=str(photo["user"]["name"]),
                photographer_url=str(photo["user"]["links"]["html"]),
            )
        except (KeyError, IndexError, TypeError) as exc:
            raise UpstreamFailure("Unexpected Unsplash photo format") from exc
