from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from datetime import datetime

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    PROJECT_NAME: str = "PocketGuard API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    DATABASE_URL: str = f"sqlite+aiosqlite:///{BASE_DIR}/data/pocketguard.db"

    SECRET_KEY: str = "change-me-pocketguard-session-key"
    SESSION_COOKIE: str = "pocketguard_session"
    SESSION_MAX_AGE: int = 7 * 24 * 60 * 60

    BACKEND_CORS_ORIGINS: list[str] = ["*"]

    DEFAULT_BANK_BALANCE: float = 5000.0
    QUIZ_PASS_RATIO: float = 0.6
    DEFAULT_QUIZ_COUNT: int = 5

    # Frozen clock for demos and tests; real time when unset
    MOCK_NOW: Optional[datetime] = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

settings = Settings()
