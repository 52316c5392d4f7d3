from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, Protocol, Sequence

from walk_randomizer.catalog.courses import Course, Duration, Season, WeatherStyle
from walk_randomizer.core.errors import ValidationFailure

TEMPERATURE_MIN = -5
TEMPERATURE_MAX = 40


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int:
        ...


@dataclass(frozen=True)
class SelectionCriteria:
    season: Season
    temperature: int
    weather_style: WeatherStyle
    duration: Duration

    def __post_init__(self) -> None:
        if isinstance(self.duration, bool) or (isinstance(self.duration, float) and not self.duration.is_integer()):
            raise ValidationFailure(f"Duration must be a whole number of minutes, got {self.duration!r}")
        try:
            object.__setattr__(self, "season", Season(self.season))
            object.__setattr__(self, "weather_style", WeatherStyle(self.weather_style))
            object.__setattr__(self, "duration", Duration(int(self.duration)))
        except (TypeError, ValueError) as exc:
            raise ValidationFailure(f"Invalid selection criteria: {exc}") from exc
        if isinstance(self.temperature, bool) or not isinstance(self.temperature, int):
            raise ValidationFailure(f"Temperature must be an integer, got {self.temperature!r}")
        if not TEMPERATURE_MIN <= self.temperature <= TEMPERATURE_MAX:
            raise ValidationFailure(
                f"Temperature must be between {TEMPERATURE_MIN} and {TEMPERATURE_MAX}, got {self.temperature}"
            )


@dataclass(frozen=True)
class DrawOutcome:
    course: Course | None
    match_count: int


def matches(course: Course, criteria: SelectionCriteria) -> bool:
    return (
        criteria.season in course.seasons
        and criteria.weather_style in course.weather_styles
        and criteria.duration == course.duration
    )


def filter_courses(catalog: Iterable[Course], criteria: SelectionCriteria) -> list[Course]:
    """Return the courses matching season, weather style and duration, in catalog order.

    Temperature is informational and never filters.
    """
    return [course for course in catalog if matches(course, criteria)]


def select_course(subset: Sequence[Course], rng: RandomSource | None = None) -> Course:
    if not subset:
        raise ValueError("Cannot select a course from an empty subset")
    source = rng if rng is not None else random
    return subset[source.randrange(len(subset))]


def draw(
    catalog: Iterable[Course],
    criteria: SelectionCriteria,
    rng: RandomSource | None = None,
) -> DrawOutcome:
    subset = filter_courses(catalog, criteria)
    if not subset:
        return DrawOutcome(course=None, match_count=0)
    return DrawOutcome(course=select_course(subset, rng), match_count=len(subset))


@dataclass
class CriteriaObserver:
    """Keeps the matching courses and their count in step with the current criteria.

    Every ``update`` recomputes the matches synchronously and notifies listeners
    with ``(criteria, match_count)``.
    """

    catalog: Sequence[Course]
    criteria: SelectionCriteria
    listeners: list[Callable[[SelectionCriteria, int], None]] = field(default_factory=list)
    matching: list[Course] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.matching = filter_courses(self.catalog, self.criteria)

    @property
    def match_count(self) -> int:
        return len(self.matching)

    def subscribe(self, listener: Callable[[SelectionCriteria, int], None]) -> None:
        self.listeners.append(listener)

    def update(self, criteria: SelectionCriteria) -> int:
        self.criteria = criteria
        self.matching = filter_courses(self.catalog, criteria)
        for listener in self.listeners:
            listener(criteria, self.match_count)
        return self.match_count
