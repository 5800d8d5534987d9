# File: api/config.py
import logging
import os
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "qwen/qwen2.5-vl-72b-instruct:free"
DEFAULT_CORS_ORIGIN = "http://localhost:5173"


def load_environment() -> str:
    env = os.getenv("APP_ENV", "local")
    if env == "local":
        load_dotenv(".env.local")
    else:
        load_dotenv(".env")
    return env


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


def _database_url() -> Optional[str]:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    from urllib.parse import quote_plus

    user = os.getenv("POSTGRES_USER")
    password = os.getenv("POSTGRES_PASSWORD")
    name = os.getenv("POSTGRES_DB")
    if not all([user, password, name]):
        return None
    host = os.getenv("POSTGRES_HOST", "localhost")
    port = os.getenv("POSTGRES_PORT", "5432")
    return f"postgresql://{quote_plus(user)}:{quote_plus(password)}@{host}:{port}/{quote_plus(name)}"


class Settings:
    """Named configuration values, read once from the environment."""

    def __init__(self, **overrides):
        self.app_env = os.getenv("APP_ENV", "local")
        self.port = _int_env("PORT", 5002)
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.cors_origin = os.getenv("CORS_ORIGIN", DEFAULT_CORS_ORIGIN)

        # Completion service (OpenRouter, OpenAI-compatible)
        self.openrouter_api_key = os.getenv("OPENROUTER_API_KEY")
        self.openrouter_org_id = os.getenv("OPENROUTER_ORG_ID")
        self.openrouter_base_url = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
        self.openrouter_model = os.getenv("OPENROUTER_MODEL", DEFAULT_MODEL)
        self.llm_timeout_seconds = _float_env("LLM_TIMEOUT_SECONDS", 60.0)

        # Paper search
        self.arxiv_api_url = os.getenv("ARXIV_API_URL", "https://export.arxiv.org/api/query")
        self.arxiv_timeout_seconds = _float_env("ARXIV_TIMEOUT_SECONDS", 10.0)
        self.search_max_results = _int_env("SEARCH_MAX_RESULTS", 6)
        self.report_max_results = _int_env("REPORT_MAX_RESULTS", 5)

        # Identity service
        self.supabase_url = os.getenv("SUPABASE_URL")
        self.supabase_service_role_key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        self.supabase_jwt_secret = os.getenv("SUPABASE_JWT_SECRET")
        self.expected_aud = os.getenv("EXPECTED_AUD")

        # Record store
        self.database_url = _database_url()

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)


def load_settings(**overrides) -> Settings:
    load_environment()
    return Settings(**overrides)
