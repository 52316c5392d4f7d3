from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from walk_randomizer.catalog.courses import Course, Duration, Season, WeatherStyle
from walk_randomizer.engine.selection import TEMPERATURE_MAX, TEMPERATURE_MIN, SelectionCriteria

# --- Course Schemas ---
class CourseResponse(BaseModel):
    id: int
    name: str
    area: str
    duration: Duration
    distance: float
    seasons: List[Season]
    weather_styles: List[WeatherStyle]
    description: str
    start_point: Optional[str] = None
    end_point: Optional[str] = None
    highlights: List[str] = []
    access_info: Optional[str] = None
    difficulty: Optional[str] = None
    duration_note: Optional[str] = None
    recommended_times: Optional[str] = None

    @classmethod
    def from_course(cls, course: Course) -> "CourseResponse":
        return cls(**course.to_dict())

class CourseListResponse(BaseModel):
    count: int
    courses: List[CourseResponse] = []

class MapUrlResponse(BaseModel):
    course_id: int
    url: str

# --- Criteria Schemas ---
class CriteriaPayload(BaseModel):
    season: Season
    temperature: int = Field(..., ge=TEMPERATURE_MIN, le=TEMPERATURE_MAX, description="Informational only, never filters")
    weather_style: WeatherStyle
    duration: Duration

    def to_criteria(self) -> SelectionCriteria:
        return SelectionCriteria(
            season=self.season,
            temperature=self.temperature,
            weather_style=self.weather_style,
            duration=self.duration,
        )

    @classmethod
    def from_criteria(cls, criteria: SelectionCriteria) -> "CriteriaPayload":
        return cls(
            season=criteria.season,
            temperature=criteria.temperature,
            weather_style=criteria.weather_style,
            duration=criteria.duration,
        )

class DrawResponse(BaseModel):
    criteria: CriteriaPayload
    match_count: int
    course: Optional[CourseResponse] = None
    map_url: Optional[str] = None

# --- Session State Schemas ---
class SessionStateResponse(BaseModel):
    device_id: str
    last_criteria: Optional[CriteriaPayload] = None
    favorites: List[int] = []
    history: List[CourseResponse] = []

class FavoriteToggleResponse(BaseModel):
    course_id: int
    is_favorite: bool
    favorites: List[int] = []

# --- Lookup Schemas ---
class ImageResponse(BaseModel):
    url: str
    photographer: str
    photographer_url: str
    cached: bool

class WeatherResponse(BaseModel):
    temperature: int
    weather_style: WeatherStyle
    description: str
    icon: str
    cached: bool
    suggested_criteria: CriteriaPayload

# --- Board Schemas ---
class PostCreate(BaseModel):
    content: str = Field(..., min_length=1)

class PostResponse(BaseModel):
    id: int
    content: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ReviewCreate(BaseModel):
    course_id: int
    rating: int = Field(default=5, ge=1, le=5)
    content: str = Field(..., min_length=1)
    nickname: Optional[str] = None

class ReviewResponse(BaseModel):
    id: int
    course_id: int
    course_name: str
    rating: int
    content: str
    nickname: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class RatingSummaryResponse(BaseModel):
    course_id: int
    review_count: int
    average_rating: Optional[float] = None
