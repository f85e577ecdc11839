"""
FeedProxy Configuration System
=============================

Simple configuration management with environment variables and Pydantic models.
Environment variables override Field defaults with clear precedence.
"""

from pathlib import Path
from typing import Optional
from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from ..utils.exceptions import ConfigurationError, ErrorCode


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ServerSettings(BaseModel):
    """HTTP server configuration."""
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=8889, ge=1, le=65535, description="Port to listen on")
    public_scheme: Optional[str] = Field(
        default=None,
        description="Scheme used when building asset-proxy URLs (overrides the request scheme)"
    )

    @field_validator('public_scheme')
    @classmethod
    def validate_scheme(cls, v):
        """Only http and https make sense for generated links."""
        if v is not None and v not in ("http", "https"):
            raise ValueError("public_scheme must be 'http' or 'https'")
        return v


class HttpSettings(BaseModel):
    """Upstream HTTP client configuration."""
    request_timeout: int = Field(default=30, ge=1, le=300, description="Upstream request timeout in seconds")
    item_timeout: float = Field(default=20.0, gt=0, le=300, description="Upper bound for one item enrichment in seconds")
    max_concurrent_items: int = Field(default=10, ge=1, le=100, description="Concurrent item enrichments per request")
    user_agent: str = Field(
        default="FeedProxy/1.0 (+https://github.com/feedproxy/feedproxy)",
        description="User-Agent sent upstream"
    )


class AssetProxySettings(BaseModel):
    """Hotlink-protected image relay configuration."""
    origin: str = Field(default="https://webtoon-phinf.pstatic.net", description="Image origin")
    referer: str = Field(default="https://www.webtoons.com/en/", description="Authorized referrer")
    chunk_size: int = Field(default=64 * 1024, ge=1024, description="Streaming chunk size in bytes")

    @field_validator('origin')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    file_path: Optional[str] = Field(default="logs/feedproxy.log", description="Log file path")
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Max log file size in MB")
    backup_count: int = Field(default=5, ge=1, le=20, description="Number of log backup files")
    structured_logging: bool = Field(default=False, description="Use structured JSON logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class FeedProxySettings(BaseSettings):
    """Main application settings."""

    server: ServerSettings = Field(default_factory=ServerSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    asset_proxy: AssetProxySettings = Field(default_factory=AssetProxySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    app_name: str = Field(default="FeedProxy", description="Application name")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "FEEDPROXY_",
        "extra": "ignore",
    }

    def validate_configuration(self) -> None:
        """Validate complete configuration."""
        errors = []

        if self.logging.file_path:
            try:
                log_path = Path(self.logging.file_path)
                log_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Invalid log file path: {e}")

        if self.http.item_timeout > self.http.request_timeout * 2:
            errors.append("http.item_timeout should not exceed twice http.request_timeout")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                error_code=ErrorCode.CONFIG_INVALID
            )

    def get_effective_log_level(self) -> str:
        """Get effective log level considering debug mode."""
        if self.debug:
            return "DEBUG"
        return self.logging.level.value


def load_settings() -> FeedProxySettings:
    """Load settings from environment variables and defaults.

    Returns:
        Loaded and validated settings

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        settings = FeedProxySettings()
        settings.validate_configuration()
        return settings

    except Exception as e:
        if isinstance(e, ConfigurationError):
            raise
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID
        )


# Global settings instance
_settings: Optional[FeedProxySettings] = None


def get_settings(reload: bool = False) -> FeedProxySettings:
    """Get global settings instance (singleton pattern).

    Args:
        reload: Force reload of settings

    Returns:
        Global settings instance
    """
    global _settings

    if _settings is None or reload:
        _settings = load_settings()

    return _settings
