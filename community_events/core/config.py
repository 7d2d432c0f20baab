from datetime import date
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Community Events Analytics API"
    API_V1_STR: str = "/api/v1"

    # Shared with the hosted auth platform; tokens are verified, never issued here
    SECRET_KEY: str = "changeme"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "community_events"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str = ""

    # Local development only: create the database and tables on startup.
    # The hosted database already has them.
    CREATE_LOCAL_DATABASE: bool = False

    # Recurring event window
    EVENT_WEEKDAY: str = "tuesday"
    EVENT_PAST_COUNT: int = 6
    EVENT_FUTURE_COUNT: int = 4
    EVENT_TIMEZONE: str = "UTC"

    # Pins "today" for every request when set (YYYY-MM-DD)
    REFERENCE_DATE: Optional[date] = None

    # Tickets under this amount (minor units) are treated as test purchases
    MIN_VERIFIED_AMOUNT: int = 100

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()
