# custody_desk/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./custody_desk.db"

    # Desk timezone for calendar dates (IANA name); unset means host local time
    DESK_TIMEZONE: str | None = None

    # Audit
    AUDIT_ACTOR: str = "Custody Desk Admin"

    # Overdue sweep
    OVERDUE_SWEEP_ENABLED: bool = True
    OVERDUE_SWEEP_INTERVAL_SECONDS: int = 3600

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MUTATIONS: str = "30/minute"

    # Frontend
    CORS_ORIGINS: list[str] = [
        "http://127.0.0.1:5500",
        "http://localhost:5500",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
    )


settings = Settings()
