import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv, find_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load backend/.env regardless of where the app is started
_found_env = find_dotenv(filename=".env")
if not _found_env:
    _found_env = str(Path(__file__).resolve().parents[1] / ".env")
load_dotenv(_found_env)


class Settings(BaseSettings):
    # API Configuration
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Curricula"
    DEBUG: bool = False

    # Database (empty means local SQLite under curricula/data)
    DATABASE_URL: str = ""

    # CORS Configuration
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Default frontend
    ]

    # Admin session
    SECRET_KEY: str = "change-me-in-production"
    SESSION_COOKIE_NAME: str = "curricula_session"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Shared secret for agent submissions
    SUBMISSION_API_TOKEN: str = ""

    # LLM providers
    OPENAI_API_KEY: str = ""
    EXTRACTION_MODEL: str = "gpt-4o-mini"
    PERPLEXITY_API_KEY: str = ""
    PERPLEXITY_BASE_URL: str = "https://api.perplexity.ai/"
    DISCOVERY_MODEL: str = "sonar"

    # Page content fetching
    READER_BASE_URL: str = "https://r.jina.ai/"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    model_config = SettingsConfigDict(case_sensitive=True)


settings = Settings()

# Update CORS origins from environment if present
if os.getenv("CORS_ORIGINS"):
    settings.BACKEND_CORS_ORIGINS = [
        str(origin).strip() for origin in os.getenv("CORS_ORIGINS").split(",")
    ]
