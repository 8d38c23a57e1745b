"""
Configuration management for the ArangoDB batch client.

Supports configuration via environment variables and .env files.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BatchConfig(BaseSettings):
    """
    Configuration settings for the batch client.
    
    All settings can be configured via environment variables with the ARANGO_ prefix.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="ARANGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )
    
    # Server settings
    endpoint: str = Field(
        default="http://localhost:8529",
        description="Base URL of the ArangoDB server"
    )
    database: Optional[str] = Field(
        default=None,
        description="Default database name (server-level requests if unset)"
    )
    
    # Authentication settings
    username: str = Field(
        default="root",
        description="Username for HTTP basic authentication"
    )
    password: Optional[str] = Field(
        default=None,
        description="Password for HTTP basic authentication"
    )
    
    # Transport settings
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for the physical batch request"
    )
    
    # Batching parameters
    batch_boundary: str = Field(
        default="ArangoDriverRequestPart",
        min_length=1,
        description="Multipart boundary token shared by request and response"
    )
    
    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )
    
    @property
    def base_url(self) -> str:
        """Get the endpoint without a trailing slash."""
        return self.endpoint.rstrip("/")


# Global config instance
_config: Optional[BatchConfig] = None


def get_config() -> BatchConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = BatchConfig()
    return _config


def set_config(config: BatchConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
