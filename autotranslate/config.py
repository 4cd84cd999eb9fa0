"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # ==========================================================================
    # Logging
    # ==========================================================================

    log_level: str = "INFO"

    # ==========================================================================
    # Translation provider
    # ==========================================================================

    # "google" (Cloud Translation v2 REST) or "llm" (dspy)
    translation_provider: str = "google"
    translation_timeout: float = 30.0

    google_translate_api_key: str = ""
    google_translate_url: str = "https://translation.googleapis.com/language/translate/v2"

    # LLM provider (dspy via litellm)
    llm_provider: str = "gemini"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    openai_api_key: str = ""
    openai_model: str = "gpt-4-turbo"

    # ==========================================================================
    # Locales
    # ==========================================================================

    source_locale: str = "en"
    target_locales: str = "es,fr,de,it,pt,zh,ja,ko,ar"

    # ==========================================================================
    # Replication
    # ==========================================================================

    # Re-publish a source entry that was only loosely classified as published
    ensure_source_published: bool = True

    # YAML file used to seed the local store for the demo
    seed_file: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def target_locales_list(self) -> list[str]:
        return [code.strip() for code in self.target_locales.split(",") if code.strip()]

    @property
    def has_api_key(self) -> bool:
        if self.translation_provider == "llm":
            return bool(self.gemini_api_key or self.openai_api_key)
        return bool(self.google_translate_api_key)

    def public_config(self) -> dict[str, Any]:
        """Settings safe to show to an operator (no secrets)."""
        return {
            "translationProvider": self.translation_provider,
            "sourceLanguage": self.source_locale,
            "targetLanguages": self.target_locales_list,
            "ensureSourcePublished": self.ensure_source_published,
            "hasApiKey": self.has_api_key,
        }

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
