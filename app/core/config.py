from pathlib import Path
from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_PATH = Path(__file__).resolve().parents[2] / ".env"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_PATH, env_file_encoding="utf-8", extra="ignore")

    # App
    env: str = "dev"
    service_name: str = "keycrm-leads-proxy"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # KeyCRM
    keycrm_api_key: SecretStr | None = None
    keycrm_base_url: str = "https://openapi.keycrm.app/v1"
    keycrm_timeout_seconds: float = 30.0

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "https://dmytro-varich.github.io",
    ]

    # Pagination (KeyCRM serves 15 buyers per page regardless of per_page)
    buyers_per_page: int = 15
    buyers_page_cap: int = 1000
    buyers_page_delay_seconds: float = 0.8
    buyers_default_max: int = 10_000

    companies_per_page: int = 100
    companies_page_cap: int = 100
    companies_page_delay_seconds: float = 0.5
    companies_default_max: int = 5_000

    # Telemetry
    otlp_enabled: bool = False
    otlp_endpoint: str = "http://localhost:4318"  # Jaeger OTLP HTTP


settings = Settings()
