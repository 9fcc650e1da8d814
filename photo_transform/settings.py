from __future__ import annotations

from functools import lru_cache
from typing import ClassVar

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_SAFETY_SETTINGS: dict[str, str] = {
    "HARM_CATEGORY_HARASSMENT": "BLOCK_MEDIUM_AND_ABOVE",
    "HARM_CATEGORY_HATE_SPEECH": "BLOCK_MEDIUM_AND_ABOVE",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT": "BLOCK_MEDIUM_AND_ABOVE",
    "HARM_CATEGORY_DANGEROUS_CONTENT": "BLOCK_MEDIUM_AND_ABOVE",
}


class Settings(BaseSettings):
    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(env_nested_delimiter="__", env_file=".env", extra="ignore")

    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "google_api_key"),
        description="API key for the Gemini Developer API",
    )

    vertex_project: str | None = Field(default=None, description="Project ID for Google Vertex AI")
    vertex_location: str | None = Field(default=None, description="Location for Google Vertex AI")
    vertex_credentials_path: str | None = Field(default=None, description="Path to Google Cloud credentials JSON file")

    # Vision model
    analysis_model: str = Field(default="gemini-2.5-flash", description="Vision-language model used for guidance analysis")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    top_k: int = Field(default=40, ge=1)
    top_p: float = Field(default=0.95, gt=0.0, le=1.0)
    max_output_tokens: int = Field(default=1024, ge=1)
    request_timeout_seconds: float = Field(default=45.0, gt=0, description="Timeout for a single analysis call")
    safety_settings: dict[str, str] = Field(
        default_factory=lambda: dict(_DEFAULT_SAFETY_SETTINGS),
        description="Harm category to block threshold, forwarded verbatim to the model",
    )

    # Pacing
    requests_per_minute: int = Field(default=15, ge=1, description="Per-minute cap on analysis calls")
    min_request_interval_seconds: float = Field(default=4.0, ge=0, description="Minimum delay between analysis calls")
    rate_window_seconds: float = Field(default=60.0, gt=0)

    # Images
    jpeg_quality: int = Field(default=80, ge=1, le=95, description="JPEG quality for images re-encoded before analysis")
    max_analysis_side: int = Field(default=1024, ge=64, description="Longest side of the copy sent to the model")
    max_image_pixels: int = Field(default=40_000_000, ge=1, description="Inputs above this pixel count are rejected")

    # Generation polling
    poll_interval_seconds: float = Field(default=3.0, ge=0)
    max_poll_attempts: int = Field(default=60, ge=1)

    output_dir: str | None = Field(default=None, description="Default directory for saved results; temp dir when unset")
    log_level: str = Field(default="INFO")

    @property
    def use_gemini(self) -> bool:
        """Determine if the Gemini Developer API should be used based on available credentials."""
        return bool(self.gemini_api_key)

    @property
    def use_vertex(self) -> bool:
        """Determine if Vertex AI should be used based on available credentials."""
        return bool(self.vertex_project and self.vertex_location and self.vertex_credentials_path)

    @property
    def analysis_available(self) -> bool:
        return self.use_gemini or self.use_vertex


@lru_cache
def get_settings() -> Settings:
    return Settings()
