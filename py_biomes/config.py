"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Grid
    default_grid_width: int = Field(default=1080, description="Default grid width")
    default_grid_height: int = Field(default=540, description="Default grid height")
    max_grid_cells: int = Field(
        default=1080 * 540, description="Largest grid the API will classify"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
