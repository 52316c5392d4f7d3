from __future__ import annotations


class WalkRandomizerError(Exception):
    """Base class for every failure raised by this package."""


class ValidationFailure(WalkRandomizerError, ValueError):
    pass


class ConfigurationFailure(WalkRandomizerError):
    pass


class UpstreamFailure(WalkRandomizerError):
    def __init__(self, message: str, status_code: int | None = None, response_body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class NotFoundFailure(WalkRandomizerError):
    pass


class PersistenceCorruption(WalkRandomizerError):
    """Locally stored state for one key could not be parsed.

    Never reaches a caller of the session store: it is raised and caught
    internally so the offending sub-state can be reset on its own.
    """

    def __init__(self, key: str, message: str):
        super().__init__(f"{key}: {message}")
        self.key = key
