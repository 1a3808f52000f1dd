import os

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TARBALL_SOURCE = "tarball"


class SourceConfig(BaseModel):
    """A bundle source entry, e.g. ``{"type": "tarball", "location": "/bundles/hc.tar.gz"}``."""

    type: str
    location: str

    @field_validator("location")
    @classmethod
    def normalize_location(cls, v: str) -> str:
        """Collapse redundant separators and up-level references. Symlinks are left alone."""
        if not v:
            raise ValueError("source location must not be empty")
        return os.path.normpath(v)


class MarketplaceConfig(BaseModel):
    enabled: bool = False
    sources: list[SourceConfig] = Field(default_factory=list)


class Settings(BaseSettings):
    database_url: str = Field(default="sqlite:///./marketplace.db", alias="DATABASE_URL")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Marketplace (bundle subscriptions)
    marketplace: MarketplaceConfig = Field(default_factory=MarketplaceConfig)

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        if isinstance(v, str):
            return v.upper()
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
