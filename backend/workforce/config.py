"""Runtime configuration read from the environment.

All settings have local-development defaults so the service and the test
suite run without any environment set up.
"""
import os
from typing import List

from dotenv import find_dotenv, load_dotenv

_TRUTHY = {"1", "true", "TRUE", "yes", "on"}


def load_dotenv_if_enabled() -> bool:
    """Load a .env file when APP_LOAD_DOTENV is set. Existing env always wins."""
    if os.getenv("APP_LOAD_DOTENV") in _TRUTHY:
        return load_dotenv(find_dotenv(usecwd=True), override=False)
    return False


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", "sqlite+pysqlite:///./workforce.db")


def get_log_format() -> str:
    return os.getenv("WORKFORCE_LOG_FORMAT", "dev")


def get_log_level() -> str:
    return os.getenv("WORKFORCE_LOG_LEVEL", "INFO")


def get_cors_origins() -> List[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS")
    if raw:
        return [o.strip() for o in raw.split(",") if o.strip()]
    return ["http://localhost:3000"]
