from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, DATA_DIR, DB_PATH, HTTP_TIMEOUT_SECONDS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "xrate"
    debug: bool = False
    version: str = "0.1.0"

    # Data & persistence (rate cache)
    data_dir: Path = Path("/tmp")
    db_filename: str = "xrate.db"
    db_path: Optional[Path] = None  # derived if not provided

    # Exchange rates
    exchange_api_base_url: AnyHttpUrl = "https://api.fixer.io/latest"  # base currency appended as ?base=
    http_timeout_seconds: float = 5.0
    # Allowed: 'fixer' (remote HTTP source), 'static' (built-in table, offline use)
    exchange_rate_provider: str = "fixer"
    # Cache keys rotate at midnight of this clock: UTC when true, local time otherwise
    cache_day_utc: bool = True

    # HTTP listener, host:port (host may be empty)
    bind: str = ":8080"

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        allowed = {"fixer", "static"}
        if self.exchange_rate_provider not in allowed:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed}"
            )
        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be positive")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
