"""
Configuration with pydantic-settings.
Every value can be overridden from the environment or a local .env file.
"""

from typing import Optional, Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow"
    )

    # Core runtime settings
    APP_ENV: Literal["dev", "prod"] = Field(default="dev", description="Application environment")
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO", description="Logging level")

    # Upstream stock API
    STOCK_API_BASE_URL: str = Field(
        default="https://20.244.56.144/evaluation-service",
        description="Base URL of the stock price service"
    )
    STOCK_API_TOKEN: Optional[str] = Field(default=None, description="Bearer token for the stock API")
    REQUEST_TIMEOUT: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")
    VERIFY_SSL: bool = Field(default=True, description="Verify TLS certificates")

    # Cache and retry
    CACHE_TTL_SECONDS: float = Field(default=30.0, gt=0, description="Cached response lifetime")
    MAX_RETRIES: int = Field(default=3, ge=0, description="Retries after the first attempt")
    INITIAL_RETRY_DELAY: float = Field(default=1.0, ge=0, description="First backoff delay in seconds")

    # Correlation heatmap
    MATRIX_MAX_STOCKS: int = Field(default=10, ge=1, description="Instruments included in the matrix")
    DEFAULT_TIMEFRAME_MINUTES: int = Field(default=30, ge=1, description="Default history window")
    TIMEFRAME_OPTIONS: list[int] = Field(
        default=[15, 30, 60, 120, 240, 480],
        description="Selectable history windows in minutes"
    )

    def masked_dict(self) -> dict:
        """
        Return configuration dictionary with secrets masked.
        Shows only last 4 characters of tokens.
        """
        result = {}
        for field_name, field_value in self.model_dump().items():
            if field_value is None:
                result[field_name] = None
            elif "TOKEN" in field_name.upper() or "SECRET" in field_name.upper():
                str_value = str(field_value)
                if len(str_value) > 4:
                    result[field_name] = f"***{str_value[-4:]}"
                else:
                    result[field_name] = "***"
            else:
                result[field_name] = field_value
        return result

    def has_token(self) -> bool:
        """Check if an API token is configured."""
        return self.STOCK_API_TOKEN is not None and len(self.STOCK_API_TOKEN) > 0

    def timeframe_label(self, minutes: int) -> str:
        """Short label for a history window, e.g. 30 -> '30m', 120 -> '2h'."""
        if minutes % 60 == 0:
            return f"{minutes // 60}h"
        return f"{minutes}m"

    def require_timeframe(self, minutes: int) -> None:
        """
        Warn when a history window is not one of the configured options.
        Unknown windows still work, they just miss the shared cache keys.
        """
        if minutes not in self.TIMEFRAME_OPTIONS:
            import warnings
            warnings.warn(
                f"Timeframe {minutes}m is not one of {self.TIMEFRAME_OPTIONS}",
                UserWarning
            )


# Global settings instance
settings = Settings()
