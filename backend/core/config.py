"""Application settings and configuration helpers."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly-typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = Field(default="Llantera Móvil Assistant", description="Human-readable service name.")
    environment: str = Field(default="local", description="Deployment environment identifier.")
    log_level: str = Field(default="INFO", description="Application log level.")

    gemini_api_key: str | None = Field(default=None, description="Google Gemini API key.")
    gemini_model: str = Field(default="gemini-2.5-flash", description="Gemini model identifier.")
    gemini_include_thoughts: bool = Field(
        default=True,
        description="Ask the model to stream its thought summaries.",
    )
    max_tool_rounds: int = Field(
        default=5,
        ge=1,
        description="Maximum model rounds per turn when tool results are fed back.",
    )

    google_maps_api_key: str | None = Field(
        default=None,
        description="Google Maps key with Geocoding and Directions access.",
    )
    maps_region: str = Field(default="MX", description="Country restriction for geocoding.")
    maps_language: str = Field(default="es", description="Language for formatted addresses.")
    maps_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for Google Maps web service calls.",
    )

    greet_on_session_start: bool = Field(
        default=True,
        description="Run the greeting turn as soon as a chat session is created.",
    )
    inventory_seed_path: Path | None = Field(
        default=None,
        description="Optional JSON file with inventory items loaded when the inventory is empty.",
    )

    frontend_origin: AnyHttpUrl | None = Field(
        default=None,
        description="Allowed frontend origin (CORS). If omitted, defaults to localhost dev server.",
    )
    additional_origins: List[AnyHttpUrl] = Field(
        default_factory=list,
        description="Additional allowed CORS origins for multi-client deployments.",
    )

    @property
    def cors_origins(self) -> list[str]:
        """Return the full list of allowed CORS origins."""

        origins: list[str] = []

        if self.frontend_origin:
            origins.append(str(self.frontend_origin).rstrip("/"))
        else:
            origins.extend([
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            ])

        for origin in self.additional_origins:
            origins.append(str(origin).rstrip("/"))

        seen: set[str] = set()
        unique: list[str] = []
        for origin in origins:
            if origin not in seen:
                seen.add(origin)
                unique.append(origin)

        return unique

    @property
    def model_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def maps_enabled(self) -> bool:
        return bool(self.google_maps_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()
