"""
Application configuration loaded from environment variables (.env supported)
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Server
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./cineshelf.db")

# TMDB
TMDB_API_KEY = os.getenv("TMDB_API_KEY", "")
TMDB_BASE_URL = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3")

# Upstream calls must fail fast; not configurable at runtime
TMDB_TIMEOUT_SECONDS = 10

# Scheduler
TIMEZONE = os.getenv("TIMEZONE", "UTC")
