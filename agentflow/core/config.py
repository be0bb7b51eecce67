"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Cross-field rules (queue backend, LLM endpoint) are
validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the API process, the worker and the scheduled scripts."""

    # App
    app_name: str = "agentflow"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (Postgres + asyncpg; schema managed by Alembic)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # CORS
    allowed_origins: str = "http://localhost:3000"

    # Request scope headers
    team_header_name: str = "X-Team-ID"
    user_header_name: str = "X-User-ID"
    correlation_id_header: str = "X-Correlation-ID"
    internal_token_header_name: str = "X-Internal-Token"
    # Shared secret for /internal routes (scheduler hooks); unset disables them.
    internal_api_token: SecretStr | None = None

    # Redis
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    # Job queue: "redis" (durable list + delayed set) or "memory" (single process)
    queue_backend: str = "redis"
    queue_name: str = "agentflow:chain_triggers"
    job_max_attempts: int = 3
    job_retry_backoff_seconds: int = 60
    worker_poll_timeout_seconds: int = 5

    # Workflow runner
    workflow_max_steps: int = 100

    # LLM runner (optional; nodes fall back to heuristics when disabled)
    llm_enabled: bool = False
    llm_base_url: str | None = None
    llm_api_key: SecretStr | None = None
    llm_model: str = "gpt-4o-mini"
    llm_timeout_seconds: float = 60.0
    llm_max_tokens: int = 2048

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backends(self) -> "Settings":
        """Validate queue backend and LLM settings.

        - queue_backend must be 'redis' or 'memory'; 'redis' needs redis_enabled.
        - llm_enabled needs LLM_BASE_URL.
        """
        if self.queue_backend not in ("redis", "memory"):
            raise ValueError(
                f"queue_backend must be 'redis' or 'memory', got: {self.queue_backend!r}"
            )
        if self.queue_backend == "redis" and not self.redis_enabled:
            raise ValueError(
                "queue_backend 'redis' requires REDIS_ENABLED=true. "
                "Use QUEUE_BACKEND=memory for single-process deployments."
            )
        if self.llm_enabled and not self.llm_base_url:
            raise ValueError("LLM_BASE_URL is required when LLM_ENABLED is true.")
        if self.job_max_attempts < 1:
            raise ValueError("job_max_attempts must be >= 1")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    In tests, call get_settings.cache_clear() after changing env vars.
    """
    return Settings()
