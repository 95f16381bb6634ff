from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Environment mode: dev or prod
    ENV: Literal["dev", "prod"] = "dev"

    # Database
    DATABASE_URL: str = "sqlite:///./vn_market.db"

    # Logging
    LOG_LEVEL: str = "INFO"
    SLACK_WEBHOOK_URL: str | None = None

    # Providers
    VCI_BASE_URL: str = "https://trading.vietcap.com.vn/api"
    FMARKET_BASE_URL: str = "https://api.fmarket.vn"
    SJC_PRICE_URL: str = "https://sjc.com.vn/GoldPrice/Services/PriceService.ashx"
    PROVIDER_TIMEOUT_SECONDS: float = 30.0

    # Asset cache
    DEFAULT_CURRENCY: str = "VND"
    UPSERT_BATCH_SIZE: int = 500

    # Sync scheduling
    SYNC_INTERVAL_SECONDS: int = 24 * 60 * 60  # 24 hours
    SYNC_ENABLED: bool = True

    # Docs Configuration
    DOCS_ENABLED: bool | None = None  # Override docs setting (None = auto based on ENV)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # ignore unrelated keys in local .env
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "prod"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENV == "dev"

    @property
    def debug_enabled(self) -> bool:
        """Debug mode is only enabled in development."""
        return self.is_development

    @property
    def effective_log_level(self) -> str:
        """Return appropriate log level based on environment."""
        if self.is_production:
            # In production, minimum INFO level (ignore DEBUG)
            return self.LOG_LEVEL if self.LOG_LEVEL.upper() != "DEBUG" else "INFO"
        return self.LOG_LEVEL

    @property
    def docs_enabled(self) -> bool:
        """Swagger/ReDoc docs enabled based on environment or override."""
        if self.DOCS_ENABLED is not None:
            return self.DOCS_ENABLED
        return self.is_development


settings = Settings()
