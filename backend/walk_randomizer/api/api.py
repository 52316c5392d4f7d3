import logging
import random
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from sqlalchemy.orm import Session

from walk_randomizer.catalog.courses import (
    COURSES,
    Course,
    Duration,
    Season,
    WeatherStyle,
    get_course,
    image_query,
    map_url,
    search_courses,
)
from walk_randomizer.core.database import get_db
from walk_randomizer.core.errors import (
    ConfigurationFailure,
    NotFoundFailure,
    UpstreamFailure,
    ValidationFailure,
)
from walk_randomizer.crud import crud
from walk_randomizer.engine import seasons
from walk_randomizer.engine.selection import CriteriaObserver, RandomSource, draw
from walk_randomizer.lookups.registry import LookupServices
from walk_randomizer.schemas import schemas
from walk_randomizer.state.storage import SqlKeyValueStore
from walk_randomizer.state.store import SessionStateStore

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_DEVICE_ID = "default"
CONFIGURATION_ERROR_MESSAGE = "The service is not configured for this lookup"
UPSTREAM_ERROR_MESSAGE = "The external service could not be reached, please try again later"


def get_catalog() -> tuple[Course, ...]:
    return COURSES


def get_random_source() -> RandomSource:
    return random


def get_lookup_services(request: Request) -> LookupServices:
    return request.app.state.lookups


def get_device_id(x_device_id: Optional[str] = Header(default=None)) -> str:
    device_id = (x_device_id or "").strip() or DEFAULT_DEVICE_ID
    if len(device_id) > 64:
        raise HTTPException(status_code=400, detail="X-Device-Id must be at most 64 characters")
    return device_id


def get_session_store(device_id: str = Depends(get_device_id), db: Session = Depends(get_db)) -> SessionStateStore:
    return SessionStateStore(SqlKeyValueStore(db, namespace=device_id))


def _require_course(course_id: int, catalog: tuple[Course, ...]) -> Course:
    course = get_course(course_id, catalog)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


def _lookup_error_to_http(exc: Exception, lookup: str) -> HTTPException:
    if isinstance(exc, ValidationFailure):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NotFoundFailure):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ConfigurationFailure):
        logger.error(f"{lookup} lookup is not configured: {exc}")
        return HTTPException(status_code=500, detail=CONFIGURATION_ERROR_MESSAGE)
    status_code = getattr(exc, "status_code", None)
    detail = getattr(exc, "response_body", None)
    logger.error(f"{lookup} lookup failed (status={status_code}): {exc} {detail or ''}".rstrip())
    return HTTPException(status_code=502, detail=UPSTREAM_ERROR_MESSAGE)


def _photo_response(lookups: LookupServices, query: str) -> schemas.ImageResponse:
    try:
        result = lookups.photo(query)
    except (ValidationFailure, NotFoundFailure, ConfigurationFailure, UpstreamFailure) as exc:
        raise _lookup_error_to_http(exc, "Image") from exc
    return schemas.ImageResponse(
        url=result.value.url,
        photographer=result.value.photographer,
        photographer_url=result.value.photographer_url,
        cached=result.cached,
    )


def _session_response(device_id: str, store: SessionStateStore) -> schemas.SessionStateResponse:
    state = store.load()
    return schemas.SessionStateResponse(
        device_id=device_id,
        last_criteria=(
            schemas.CriteriaPayload.from_criteria(state.last_criteria) if state.last_criteria else None
        ),
        favorites=sorted(state.favorites),
        history=[schemas.CourseResponse.from_course(c) for c in state.history],
    )

# --- Courses ---
@router.get("/courses", response_model=schemas.CourseListResponse)
def read_courses(
    season: Optional[Season] = None,
    weather_style: Optional[WeatherStyle] = None,
    duration: Optional[int] = Query(default=None, description="30, 60 or 90"),
    q: Optional[str] = None,
    catalog: tuple[Course, ...] = Depends(get_catalog),
):
    """List courses, optionally narrowed by criteria fields and a name/area search."""
    if duration is not None and duration not in {d.value for d in Duration}:
        raise HTTPException(status_code=400, detail="duration must be one of 30, 60 or 90")
    courses = search_courses(q, catalog)
    courses = [
        c for c in courses
        if (season is None or season in c.seasons)
        and (weather_style is None or weather_style in c.weather_styles)
        and (duration is None or c.duration == duration)
    ]
    return schemas.CourseListResponse(
        count=len(courses),
        courses=[schemas.CourseResponse.from_course(c) for c in courses],
    )

@router.get("/courses/{course_id}", response_model=schemas.CourseResponse)
def read_course(course_id: int, catalog: tuple[Course, ...] = Depends(get_catalog)):
    return schemas.CourseResponse.from_course(_require_course(course_id, catalog))

@router.get("/courses/{course_id}/map-url", response_model=schemas.MapUrlResponse)
def read_course_map_url(course_id: int, catalog: tuple[Course, ...] = Depends(get_catalog)):
    course = _require_course(course_id, catalog)
    return schemas.MapUrlResponse(course_id=course.id, url=map_url(course))

@router.get("/courses/{course_id}/image", response_model=schemas.ImageResponse)
def read_course_image(
    course_id: int,
    catalog: tuple[Course, ...] = Depends(get_catalog),
    lookups: LookupServices = Depends(get_lookup_services),
):
    """Photo for a course; the photographer attribution must be shown with it."""
    course = _require_course(course_id, catalog)
    return _photo_response(lookups, image_query(course, lookups.image_query_suffix))

@router.get("/courses/{course_id}/rating", response_model=schemas.RatingSummaryResponse)
def read_course_rating(
    course_id: int,
    catalog: tuple[Course, ...] = Depends(get_catalog),
    db: Session = Depends(get_db),
):
    course = _require_course(course_id, catalog)
    count, average = crud.get_rating_summary(db, course.id)
    return schemas.RatingSummaryResponse(course_id=course.id, review_count=count, average_rating=average)

# --- Criteria & Draw ---
@router.get("/criteria/default", response_model=schemas.CriteriaPayload)
def read_default_criteria(
    month: Optional[int] = Query(default=None, ge=1, le=12),
    temperature: Optional[int] = Query(default=None, ge=-50, le=60),
):
    """Suggested criteria for the current (or given) month, optionally from an observed temperature."""
    today = date.today()
    if month is not None:
        today = today.replace(day=1, month=month)
    if temperature is None:
        criteria = seasons.default_criteria(today)
    else:
        criteria = seasons.criteria_from_weather(temperature, WeatherStyle.clear, today)
    return schemas.CriteriaPayload.from_criteria(criteria)

@router.post("/draw", response_model=schemas.DrawResponse)
def draw_course(
    payload: schemas.CriteriaPayload,
    catalog: tuple[Course, ...] = Depends(get_catalog),
    rng: RandomSource = Depends(get_random_source),
    store: SessionStateStore = Depends(get_session_store),
):
    """Pick one matching course at random and record it in the device history."""
    criteria = payload.to_criteria()
    outcome = draw(catalog, criteria, rng)
    if outcome.course is None:
        store.save_criteria(criteria)
        return schemas.DrawResponse(criteria=payload, match_count=0)

    store.record_selection(criteria, outcome.course)
    return schemas.DrawResponse(
        criteria=payload,
        match_count=outcome.match_count,
        course=schemas.CourseResponse.from_course(outcome.course),
        map_url=map_url(outcome.course),
    )

@router.post("/draw/count", response_model=schemas.CourseListResponse)
def count_matching_courses(payload: schemas.CriteriaPayload, catalog: tuple[Course, ...] = Depends(get_catalog)):
    """Matching courses for criteria being edited; nothing is recorded."""
    observer = CriteriaObserver(catalog=catalog, criteria=payload.to_criteria())
    return schemas.CourseListResponse(
        count=observer.match_count,
        courses=[schemas.CourseResponse.from_course(c) for c in observer.matching],
    )

# --- Session State ---
@router.get("/session", response_model=schemas.SessionStateResponse)
def read_session_state(
    device_id: str = Depends(get_device_id),
    store: SessionStateStore = Depends(get_session_store),
):
    return _session_response(device_id, store)

@router.put("/session/criteria", response_model=schemas.SessionStateResponse)
def save_session_criteria(
    payload: schemas.CriteriaPayload,
    device_id: str = Depends(get_device_id),
    store: SessionStateStore = Depends(get_session_store),
):
    store.save_criteria(payload.to_criteria())
    return _session_response(device_id, store)

@router.post("/session/favorites/{course_id}", response_model=schemas.FavoriteToggleResponse)
def toggle_favorite_course(
    course_id: int,
    catalog: tuple[Course, ...] = Depends(get_catalog),
    store: SessionStateStore = Depends(get_session_store),
):
    course = _require_course(course_id, catalog)
    favorites = store.toggle_favorite(course.id)
    return schemas.FavoriteToggleResponse(
        course_id=course.id,
        is_favorite=course.id in favorites,
        favorites=sorted(favorites),
    )

# --- External Lookups ---
@router.get("/image", response_model=schemas.ImageResponse)
def search_image(query: str = "", lookups: LookupServices = Depends(get_lookup_services)):
    return _photo_response(lookups, query)

@router.get("/weather", response_model=schemas.WeatherResponse)
def read_current_weather(lookups: LookupServices = Depends(get_lookup_services)):
    """Current weather at the configured location plus criteria suggested from it."""
    try:
        result = lookups.weather()
    except (ConfigurationFailure, UpstreamFailure) as exc:
        raise _lookup_error_to_http(exc, "Weather") from exc

    weather = result.value
    suggested = seasons.criteria_from_weather(weather.temperature, weather.weather_style)
    return schemas.WeatherResponse(
        temperature=weather.temperature,
        weather_style=weather.weather_style,
        description=weather.description,
        icon=weather.icon,
        cached=result.cached,
        suggested_criteria=schemas.CriteriaPayload.from_criteria(suggested),
    )

# --- Board ---
@router.get("/posts", response_model=List[schemas.PostResponse])
def read_posts(limit: int = Query(default=100, ge=1, le=500), db: Session = Depends(get_db)):
    """Board posts, newest first."""
    return crud.list_posts(db, limit=limit)

@router.post("/posts", response_model=schemas.PostResponse)
def create_post(payload: schemas.PostCreate, db: Session = Depends(get_db)):
    try:
        return crud.create_post(db, payload.content)
    except ValidationFailure as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

@router.get("/reviews", response_model=List[schemas.ReviewResponse])
def read_reviews(
    course_id: Optional[int] = None,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """Course reviews, newest first, optionally for one course."""
    return crud.list_reviews(db, course_id=course_id, limit=limit)

@router.post("/reviews", response_model=schemas.ReviewResponse)
def create_review(
    payload: schemas.ReviewCreate,
    catalog: tuple[Course, ...] = Depends(get_catalog),
    db: Session = Depends(get_db),
):
    try:
        return crud.create_review(
            db,
            course_id=payload.course_id,
            rating=payload.rating,
            content=payload.content,
            nickname=payload.nickname,
            catalog=catalog,
        )
    except ValidationFailure as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
