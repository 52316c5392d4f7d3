from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from walk_randomizer.api.api import router as api_router
from walk_randomizer.core.config import settings
from walk_randomizer.core.database import init_db
from walk_randomizer.core.logging_config import configure_logging
from walk_randomizer.lookups.registry import build_lookup_services

configure_logging()

# Create database tables
init_db()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One cache per lookup for the whole process
    app.state.lookups = build_lookup_services(settings)
    yield


app = FastAPI(
    title="Tokyo Walk Randomizer API",
    description="Draws a random Tokyo walking course for the current season, weather and time budget.",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")

@app.get("/")
def root():
    return {"message": "Welcome to the Tokyo Walk Randomizer API. See /docs for documentation."}
