"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service
    service_version: str = "1.3.2"
    debug: bool = False

    # Authorization oracle
    auth_endpoint_url: str = "https://extractor.torob.com/validate_token/"
    auth_timeout: float = 12.0
    auth_valid_message: str = "the token is valid"

    # Shop
    site_url: str | None = None
    catalog_path: str | None = None
    default_page_size: int = 10

    # Reported in the response metadata block
    platform_version: str | None = None
    commerce_engine_version: str | None = None

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }


settings = Settings()
