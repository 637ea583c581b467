from functools import lru_cache
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    ENV: str = "local"
    DB_HOST: str = "db"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "fitrecord"
    # Full URL wins over the DB_* parts, e.g. sqlite+aiosqlite:///./fitrecord.db
    DB_URL: str | None = None

    # Rest timer
    DEFAULT_REST_SECONDS: int = 60
    REST_PRESETS: tuple[int, ...] = (30, 45, 60, 90, 120)
    TIMER_TICK_SECONDS: float = 1.0

    # Workout defaults
    RECENT_SESSIONS_LIMIT: int = 10
    DEFAULT_SETS_PER_EXERCISE: int = 3

    ALLOW_ORIGINS: str = "*"
    API_VERSION: str = "dev"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("REST_PRESETS")
    @classmethod
    def presets_sorted_positive(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        if not v or any(p <= 0 for p in v):
            raise ValueError("REST_PRESETS must be positive seconds")
        return tuple(sorted(set(v)))

    @model_validator(mode="after")
    def default_is_a_preset(self) -> "Settings":
        if self.DEFAULT_REST_SECONDS not in self.REST_PRESETS:
            raise ValueError("DEFAULT_REST_SECONDS must be one of REST_PRESETS")
        return self

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        return (
            f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

@lru_cache
def get_settings() -> Settings:
    return Settings()
