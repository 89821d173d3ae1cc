from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_TITLE: str = "Time Tracker API"
    DATABASE_URL: str = "sqlite+aiosqlite:///./timetracker.db"
    AUTO_CREATE_TABLES: bool = True

    # Elapsed-time stream cadence while a session is running
    TICK_INTERVAL_SECONDS: float = 1.0

    # Default rendering of clock times in day/week views
    USE_12H_CLOCK: bool = False

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Observability
    SENTRY_DSN: str = ""
    LOG_LEVEL: str = "INFO"

    ENVIRONMENT: str = "development"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
