"""UTMAudit — Central Configuration via Pydantic Settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Dashboard Backend ──
    backend_url: str = "http://localhost:3000"
    auth_path: str = "/v2/dashboards/auth"
    dashboards_path: str = "/v2/dashboards"
    ads_configs_path: str = "/v2/dashboards/{dashboard_id}/ads-configs"

    # ── HTTP ──
    request_timeout: float = 30.0
    max_retries: int = 3
    retry_base_delay: float = 2.0  # seconds

    # ── Bulk Validation ──
    dashboard_timeout: float = 60.0  # per-dashboard fetch bound
    bulk_max_concurrency: int = 8

    # ── Validation Policy ──
    error_requires_active: bool = True  # inactive ads never count as errors

    # ── App ──
    log_level: str = "INFO"

    @property
    def api_base(self) -> str:
        """Backend base URL without a trailing slash."""
        return self.backend_url.rstrip("/")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
