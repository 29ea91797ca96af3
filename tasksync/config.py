"""Environment configuration for the task sharing API."""
import os
from dotenv import load_dotenv

# Load environment variables from a local .env when present
load_dotenv()

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Database URL from environment, with fallback to SQLite for local dev
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./tasksync.db")

JWT_SECRET = os.environ.get("JWT_SECRET", "dev-only-secret-change-me")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_DAYS = int(os.environ.get("JWT_EXPIRE_DAYS", "30"))

# Response cache
CACHE_TTL_SECONDS = float(os.environ.get("CACHE_TTL_SECONDS", "300"))
CACHE_SWEEP_INTERVAL_SECONDS = float(os.environ.get("CACHE_SWEEP_INTERVAL_SECONDS", "300"))

# Validation bounds
TITLE_MAX_LENGTH = 200
USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 6
# Largest row id a 64-bit signed INTEGER column can hold
MAX_ROW_ID = 2**63 - 1


def is_production() -> bool:
    return ENVIRONMENT == "production"
