"""Configuration management for the GeoIP redirect service."""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field

from geo_redirect.common.runtime import Environment, RuntimeFlags


class Config(BaseSettings):
    """Application configuration."""

    # Deployment mode
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
        description="Deployment mode (development, production, test)"
    )

    enable_logging: bool = Field(
        default=False,
        description="Force logging on in production"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=9300,
        description="Port to listen on"
    )

    workers: int = Field(
        default=1,
        ge=1,
        description="Number of uvicorn worker processes"
    )

    allowed_origins: str = Field(
        default="*",
        description="Comma separated CORS origins"
    )

    # Redirect config settings
    redirect_config_source: Optional[str] = Field(
        default="config.json",
        description="Path or http(s) URL of the redirect config JSON"
    )

    redirect_config_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Timeout in seconds when fetching a remote redirect config"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @property
    def is_production(self) -> bool:
        return Environment.from_name(self.environment) is Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"

    @property
    def logging_enabled(self) -> bool:
        """Logging is on outside production, or when explicitly enabled."""
        return not self.is_production or self.enable_logging

    @property
    def allowed_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    def runtime_flags(self) -> RuntimeFlags:
        """Freeze the process-wide flags derived from this configuration."""
        return RuntimeFlags(
            environment=Environment.from_name(self.environment),
            development=self.is_development,
            logging_enabled=self.logging_enabled,
        )


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
