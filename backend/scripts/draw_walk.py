import argparse
import os
import re
import sys

# Add the backend directory to the path so we can import walk_randomizer
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from walk_randomizer.catalog.courses import COURSES, Duration, Season, WeatherStyle, get_course, map_url
from walk_randomizer.core.config import settings
from walk_randomizer.core.errors import ConfigurationFailure, UpstreamFailure
from walk_randomizer.core.logging_config import configure_logging
from walk_randomizer.engine import seasons
from walk_randomizer.engine.selection import SelectionCriteria, draw
from walk_randomizer.lookups.registry import build_lookup_services
from walk_randomizer.state.storage import JsonFileKeyValueStore
from walk_randomizer.state.store import SessionStateStore


def device_store(device_id: str) -> SessionStateStore:
    safe_name = re.sub(r"[^A-Za-z0-9_.-]", "_", device_id) or "default"
    return SessionStateStore(JsonFileKeyValueStore(settings.SESSION_STATE_DIR / f"{safe_name}.json"))


def resolve_criteria(args, store: SessionStateStore) -> SelectionCriteria:
    base = store.load().last_criteria or seasons.default_criteria()

    if args.use_weather:
        lookups = build_lookup_services(settings)
        try:
            weather = lookups.weather().value
        except (ConfigurationFailure, UpstreamFailure) as e:
            print(f"Weather lookup failed, keeping previous criteria: {e}")
        else:
            print(f"Current weather: {weather.description} {weather.temperature}°C")
            base = seasons.criteria_from_weather(weather.temperature, weather.weather_style, duration=base.duration)

    return SelectionCriteria(
        season=args.season or base.season,
        temperature=args.temperature if args.temperature is not None else base.temperature,
        weather_style=args.weather or base.weather_style,
        duration=args.duration or base.duration,
    )


def print_course(course, favorites):
    star = "★" if course.id in favorites else " "
    print(f"{star} [{course.id}] {course.name} ({course.area}) {int(course.duration)}分 / {course.distance}km")


def main():
    parser = argparse.ArgumentParser(description="Draw a random Tokyo walking course.")
    parser.add_argument("--device", default="default", help="Device id selecting the local state file")
    parser.add_argument("--season", choices=[s.value for s in Season])
    parser.add_argument("--weather", choices=[w.value for w in WeatherStyle])
    parser.add_argument("--duration", type=int, choices=[d.value for d in Duration])
    parser.add_argument("--temperature", type=int)
    parser.add_argument("--use-weather", action="store_true", help="Autofill criteria from the current weather")
    parser.add_argument("--favorite", type=int, metavar="COURSE_ID", help="Toggle a favorite and exit")
    parser.add_argument("--history", action="store_true", help="Show the draw history and exit")
    args = parser.parse_args()

    configure_logging()
    store = device_store(args.device)

    if args.favorite is not None:
        course = get_course(args.favorite)
        if course is None:
            print(f"Unknown course id {args.favorite}")
            return 1
        favorites = store.toggle_favorite(course.id)
        state = "added to" if course.id in favorites else "removed from"
        print(f"{course.name} {state} favorites")
        return 0

    if args.history:
        state = store.load()
        if not state.history:
            print("No walks drawn yet.")
        for course in state.history:
            print_course(course, state.favorites)
        return 0

    criteria = resolve_criteria(args, store)
    outcome = draw(COURSES, criteria)
    print(
        f"{criteria.season.label} / {criteria.weather_style.label} / "
        f"{int(criteria.duration)}分 / {criteria.temperature}°C: {outcome.match_count} matching courses"
    )
    if outcome.course is None:
        store.save_criteria(criteria)
        print("No course matches these conditions.")
        return 1

    store.record_selection(criteria, outcome.course)
    print_course(outcome.course, store.load().favorites)
    print(outcome.course.description)
    print(map_url(outcome.course))
    return 0


if __name__ == "__main__":
    sys.exit(main())
