from typing import Literal

from pydantic import BaseModel, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UnitSeed(BaseModel):
    name: str
    expected_duration_minutes: int = Field(gt=0)


class WorkerSeed(BaseModel):
    name: str
    role: int = 2


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "bike-assembly"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Storage
    DATABASE_URL: str = "sqlite:///./bike_assembly.db"
    DATABASE_ECHO: bool = False
    DATABASE_POOL_PRE_PING: bool = True

    # Observability Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"
    LOG_SQL: bool = False
    ENABLE_METRICS: bool = True
    METRICS_PORT: int = 8001

    # Deadline scheduling
    DEADLINE_BACKEND: Literal["in_process", "celery"] = "in_process"
    DEADLINE_POLL_INTERVAL_SECONDS: float = 30.0
    DEADLINE_RETRY_DELAY_SECONDS: float = 5.0
    RECONCILE_ON_STARTUP: bool = True
    RECONCILE_INTERVAL_SECONDS: float = 60.0

    # How long a finished unit keeps showing "completed" before it is
    # listed as available again. 0 returns it immediately.
    COMPLETED_DISPLAY_SECONDS: int = Field(default=0, ge=0)

    # Seed catalog, applied by init_db when the tables are empty
    SEED_UNITS: list[UnitSeed] = [
        UnitSeed(name="Bike 1", expected_duration_minutes=50),
        UnitSeed(name="Bike 2", expected_duration_minutes=60),
        UnitSeed(name="Bike 3", expected_duration_minutes=80),
    ]
    SEED_WORKERS: list[WorkerSeed] = [
        WorkerSeed(name="John Doe"),
        WorkerSeed(name="Jane Smith"),
        WorkerSeed(name="Bob Johnson"),
        WorkerSeed(name="Alice Brown"),
        WorkerSeed(name="Charlie Wilson"),
        WorkerSeed(name="Admin", role=1),
    ]

    # Redis Configuration
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str | None = None
    REDIS_SSL: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def REDIS_URL(self) -> str:
        """Build Redis connection URL."""
        if self.REDIS_PASSWORD:
            auth = f":{self.REDIS_PASSWORD}@"
        else:
            auth = ""

        protocol = "rediss" if self.REDIS_SSL else "redis"
        return f"{protocol}://{auth}{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # Celery Configuration
    CELERY_BROKER_URL: str | None = None
    CELERY_RESULT_BACKEND: str | None = None
    CELERY_TASK_TIME_LIMIT: int = 300
    CELERY_WORKER_PREFETCH_MULTIPLIER: int = 1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def celery_broker_url(self) -> str:
        """Get Celery broker URL (defaults to Redis)."""
        return self.CELERY_BROKER_URL or self.REDIS_URL

    @computed_field  # type: ignore[prop-decorator]
    @property
    def celery_result_backend(self) -> str:
        """Get Celery result backend URL (defaults to Redis)."""
        return self.CELERY_RESULT_BACKEND or self.REDIS_URL

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()  # type: ignore
