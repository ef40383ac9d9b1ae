from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    DATABASE_URL: str = "postgresql+asyncpg://facility:facility_secret@db:5432/facility_ops"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # 9h standard shift; anything beyond counts as overtime in reports
    STANDARD_SHIFT_MINUTES: int = 540

    # Worker names used when no schedule record exists for a day
    TEAM_A_WORKER: str = "A"
    TEAM_B_WORKER: str = "B"

    PHOTO_STORAGE_DIR: str = "./storage"
    PHOTO_BASE_URL: str = "/media"
    PHOTO_MAX_BYTES: int = 10 * 1024 * 1024

    # Handover delivery: webhook when configured, otherwise a simulated send
    HANDOVER_SEND_DELAY_SEC: float = 0.5
    HANDOVER_WEBHOOK_URL: str | None = None
    HANDOVER_WEBHOOK_TIMEOUT_SEC: float = 10.0
    # Drafts nobody has touched for this long are dropped
    HANDOVER_DRAFT_TTL_SEC: float = 12 * 60 * 60

    FUZZY_MATCH_THRESHOLD: int = 90

    RUN_MIGRATIONS_ON_STARTUP: bool = True
    SEED_ON_STARTUP: bool = True

    SSE_KEEPALIVE_SEC: float = 15.0


settings = Settings()
