"""
Runtime configuration for the YouthMind service, read from the environment.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Service settings loaded from environment variables / .env file.

    Model settings use the ``YOUTHMIND_`` prefix (``YOUTHMIND_TEXT_MODEL``...).
    The API key, database and listen address keep their conventional names.
    """

    model_config = SettingsConfigDict(
        env_prefix="YOUTHMIND_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    api_key: str = Field(
        "",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY", "api_key"),
        description="Gemini API key",
    )
    gemini_base_url: str | None = Field(
        None, description="Override for the Gemini API endpoint"
    )
    text_model: str = Field("gemini-2.5-flash")
    tts_model: str = Field("gemini-2.5-flash-preview-tts")
    image_model: str = Field("imagen-4.0-fast-generate-001")
    tts_voice: str = Field("Algenib")
    database_url: str | None = Field(
        None,
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
        description="MongoDB connection string; threads stay in memory when unset",
    )
    database_name: str = Field(
        "youthmind", validation_alias=AliasChoices("DATABASE_NAME", "database_name")
    )
    host: str = Field("0.0.0.0", validation_alias=AliasChoices("HOST", "host"))
    port: int = Field(8000, validation_alias=AliasChoices("PORT", "port"))
