"""
Advisory season/temperature heuristics used to pre-populate criteria.

Nothing here filters courses; the user may override every suggested field.
"""
from __future__ import annotations

from datetime import date

from walk_randomizer.catalog.courses import Duration, Season, WeatherStyle
from walk_randomizer.engine.selection import TEMPERATURE_MAX, TEMPERATURE_MIN, SelectionCriteria

SPRING_MONTHS = {3, 4, 5}
SUMMER_MONTHS = {6, 7, 8}
AUTUMN_MONTHS = {9, 10, 11}

REPRESENTATIVE_TEMPERATURES: dict[Season, int] = {
    Season.spring: 18,
    Season.summer: 28,
    Season.autumn: 18,
    Season.winter: 8,
}

SUMMER_THRESHOLD_C = 25
MILD_THRESHOLD_C = 15


def season_for_month(month: int) -> Season:
    if month in SPRING_MONTHS:
        return Season.spring
    if month in SUMMER_MONTHS:
        return Season.summer
    if month in AUTUMN_MONTHS:
        return Season.autumn
    return Season.winter


def representative_temperature(season: Season) -> int:
    return REPRESENTATIVE_TEMPERATURES[Season(season)]


def season_for_temperature(temperature: float, month: int) -> Season:
    if temperature >= SUMMER_THRESHOLD_C:
        return Season.summer
    if temperature >= MILD_THRESHOLD_C:
        return Season.spring if month in SPRING_MONTHS else Season.autumn
    return Season.winter


def clamp_temperature(temperature: float) -> int:
    return max(TEMPERATURE_MIN, min(TEMPERATURE_MAX, int(round(temperature))))


def default_criteria(today: date | None = None) -> SelectionCriteria:
    month = (today or date.today()).month
    season = season_for_month(month)
    return SelectionCriteria(
        season=season,
        temperature=representative_temperature(season),
        weather_style=WeatherStyle.clear,
        duration=Duration.medium,
    )


def criteria_from_weather(
    temperature: float,
    weather_style: WeatherStyle,
    today: date | None = None,
    duration: Duration = Duration.medium,
) -> SelectionCriteria:
    month = (today or date.today()).month
    return SelectionCriteria(
        season=season_for_temperature(temperature, month),
        temperature=clamp_temperature(temperature),
        weather_style=weather_style,
        duration=duration,
    )
