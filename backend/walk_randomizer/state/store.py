from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from walk_randomizer.catalog.courses import Course
from walk_randomizer.core.config import settings
from walk_randomizer.core.errors import PersistenceCorruption
from walk_randomizer.engine.selection import SelectionCriteria
from walk_randomizer.state.storage import KeyValueStore

logger = logging.getLogger(__name__)

SEASON_KEY = "currentSeason"
TEMPERATURE_KEY = "currentTemperature"
WEATHER_KEY = "currentWeather"
DURATION_KEY = "currentDuration"
HISTORY_KEY = "walkHistory"
FAVORITES_KEY = "favoriteCourses"

CRITERIA_KEYS = (SEASON_KEY, TEMPERATURE_KEY, WEATHER_KEY, DURATION_KEY)


@dataclass
class SessionState:
    last_criteria: SelectionCriteria | None = None
    favorites: set[int] = field(default_factory=set)
    history: list[Course] = field(default_factory=list)


class SessionStateStore:
    """
    Last-used criteria, favorite course ids and draw history of one device.

    Every mutation is written to the backing ``KeyValueStore`` before returning.
    Each sub-state is decoded independently: unparseable data for one of them
    resets only that one to its default and is logged, never raised.
    """

    def __init__(self, storage: KeyValueStore, history_limit: int | None = None) -> None:
        self.storage = storage
        self.history_limit = history_limit if history_limit is not None else settings.HISTORY_LIMIT
        if self.history_limit < 1:
            raise ValueError("history_limit must be at least 1")

    def load(self) -> SessionState:
        return SessionState(
            last_criteria=self._load_criteria(),
            favorites=self._load_favorites(),
            history=self._load_history(),
        )

    def save_criteria(self, criteria: SelectionCriteria) -> None:
        self.storage.set(SEASON_KEY, criteria.season.value)
        self.storage.set(TEMPERATURE_KEY, str(criteria.temperature))
        self.storage.set(WEATHER_KEY, criteria.weather_style.value)
        self.storage.set(DURATION_KEY, str(int(criteria.duration)))

    def record_draw(self, course: Course) -> list[Course]:
        history = [c for c in self._load_history() if c.id != course.id]
        history.insert(0, course)
        history = history[: self.history_limit]
        self.storage.set(HISTORY_KEY, json.dumps([c.to_dict() for c in history], ensure_ascii=False))
        return history

    def record_selection(self, criteria: SelectionCriteria, course: Course) -> list[Course]:
        history = self.record_draw(course)
        self.save_criteria(criteria)
        return history

    def toggle_favorite(self, course_id: int) -> set[int]:
        favorites = self._load_favorites() ^ {int(course_id)}
        self.storage.set(FAVORITES_KEY, json.dumps(sorted(favorites)))
        return favorites

    def _load_criteria(self) -> SelectionCriteria | None:
        raw = {key: self.storage.get(key) for key in CRITERIA_KEYS}
        if any(value is None for value in raw.values()):
            return None
        try:
            return _decode_criteria(raw)
        except PersistenceCorruption as exc:
            logger.warning(f"Resetting persisted criteria: {exc}")
            return None

    def _load_favorites(self) -> set[int]:
        raw = self.storage.get(FAVORITES_KEY)
        if raw is None:
            return set()
        try:
            return _decode_favorites(raw)
        except PersistenceCorruption as exc:
            logger.warning(f"Resetting persisted favorites: {exc}")
            return set()

    def _load_history(self) -> list[Course]:
        raw = self.storage.get(HISTORY_KEY)
        if raw is None:
            return []
        try:
            history = _decode_history(raw)
        except PersistenceCorruption as exc:
            logger.warning(f"Resetting persisted history: {exc}")
            return []
        return history[: self.history_limit]


def _decode_criteria(raw: dict[str, Any]) -> SelectionCriteria:
    try:
        return SelectionCriteria(
            season=raw[SEASON_KEY],
            temperature=int(raw[TEMPERATURE_KEY]),
            weather_style=raw[WEATHER_KEY],
            duration=int(raw[DURATION_KEY]),
        )
    except (TypeError, ValueError) as exc:
        raise PersistenceCorruption("criteria", str(exc)) from exc


def _decode_favorites(raw: str) -> set[int]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PersistenceCorruption(FAVORITES_KEY, "not valid JSON") from exc
    if not isinstance(payload, list):
        raise PersistenceCorruption(FAVORITES_KEY, "expected a JSON list of course ids")
    favorites: set[int] = set()
    for item in payload:
        if isinstance(item, bool) or not isinstance(item, int):
            raise PersistenceCorruption(FAVORITES_KEY, f"invalid course id {item!r}")
        favorites.add(item)
    return favorites


def _decode_history(raw: str) -> list[Course]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PersistenceCorruption(HISTORY_KEY, "not valid JSON") from exc
    if not isinstance(payload, list):
        raise PersistenceCorruption(HISTORY_KEY, "expected a JSON list of course snapshots")

    history: list[Course] = []
    seen: set[int] = set()
    for item in payload:
        try:
            course = Course.from_dict(item)
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceCorruption(HISTORY_KEY, f"invalid course snapshot: {exc}") from exc
        if course.id in seen:
            continue
        seen.add(course.id)
        history.append(course)
    return history
