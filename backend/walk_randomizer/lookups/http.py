from __future__ import annotations

import json
from typing import Any
from urllib import error as urllib_error
from urllib import request as urllib_request

from walk_randomizer.core.errors import UpstreamFailure


def get_json(url: str, *, service: str, timeout_seconds: int, headers: dict[str, str] | None = None) -> Any:
    http_request = urllib_request.Request(url, headers=headers or {}, method="GET")
    try:
        with urllib_request.urlopen(http_request, timeout=timeout_seconds) as response:
            raw = response.read().decode("utf-8")
        return json.loads(raw) if raw else {}
    except urllib_error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="ignore") if exc.fp else ""
        raise UpstreamFailure(
            f"{service} request failed with status {exc.code}",
            status_code=exc.code,
            response_body=body,
        ) from exc
    except urllib_error.URLError as exc:
        raise UpstreamFailure(f"{service} request failed: {exc.reason}") from exc
    except json.JSONDecodeError as exc:
        raise UpstreamFailure(f"{service} response is not valid JSON") from exc
    except (TimeoutError, OSError) as exc:
        raise UpstreamFailure(f"{service} request failed: {exc}") from exc
