from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Hosted vision model
    gemini_api_key: str = Field(default="", alias="GEMINI_API_KEY")
    gemini_vision_model: str = Field(default="", alias="GEMINI_VISION_MODEL")
    gemini_model: str = Field(default="gemini-1.5-flash", alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    vision_timeout_seconds: float = Field(default=60.0, alias="VISION_TIMEOUT_SECONDS")

    # Uploaded photos are read from here; the upload itself happens elsewhere.
    upload_dir: str = Field(default="./uploads", alias="UPLOAD_DIR")

    # Base-price collaborator
    pricing_base_url: str = Field(default="", alias="PRICING_BASE_URL")
    pricing_timeout_seconds: float = Field(default=5.0, alias="PRICING_TIMEOUT_SECONDS")

    # Valuation rules
    default_base_price: int = Field(default=500_000, alias="DEFAULT_BASE_PRICE")
    value_range_half_width: int = Field(default=10_000, alias="VALUE_RANGE_HALF_WIDTH")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def vision_model(self) -> str:
        return self.gemini_vision_model or self.gemini_model
