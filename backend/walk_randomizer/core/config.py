from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    PROJECT_NAME: str = "Tokyo Walk Randomizer"

    BASE_DIR: Path = Path(__file__).resolve().parents[2]
    DATA_DIR: Path = BASE_DIR / "data"
    DATABASE_URL: str = f"sqlite:///{(DATA_DIR / 'walk_randomizer.db').as_posix()}"
    SESSION_STATE_DIR: Path = DATA_DIR / "devices"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    UNSPLASH_ACCESS_KEY: str | None = None
    UNSPLASH_API_BASE_URL: str = "https://api.unsplash.com"
    IMAGE_QUERY_SUFFIX: str = "Tokyo Japan"
    IMAGE_CACHE_TTL_SECONDS: int = 24 * 60 * 60

    OPENWEATHERMAP_API_KEY: str | None = None
    OPENWEATHERMAP_API_BASE_URL: str = "https://api.openweathermap.org/data/2.5"
    # Tokyo Station
    WEATHER_LATITUDE: float = 35.6812
    WEATHER_LONGITUDE: float = 139.7671
    WEATHER_UNITS: str = "metric"
    WEATHER_LANGUAGE: str = "ja"
    WEATHER_CACHE_TTL_SECONDS: int = 30 * 60

    HTTP_TIMEOUT_SECONDS: int = 20

    HISTORY_LIMIT: int = 10
    REVIEW_DEFAULT_NICKNAME: str = "匿名さん"

settings = Settings()
