"""Runtime configuration for the image orchestrator."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="IMAGE_ORCHESTRATOR_", env_file=".env", extra="ignore")

    app_name: str = "image-orchestrator"
    log_level: str = "INFO"
    cache_max_images: int = Field(
        default=512,
        ge=1,
        description="Upper bound on image load objects held by the in-memory cache.",
    )
    dedupe_in_flight: bool = Field(
        default=False,
        description="Share one dispatch between concurrent requests for the same uncached image id.",
    )
    file_root: str | None = Field(
        default=None,
        description="Base directory for relative paths in file: image ids.",
    )


settings = Settings()
