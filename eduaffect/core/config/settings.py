# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for EduAffect.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from eduaffect.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.emotional.text_analysis_timeout
    10.0
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmotionalEngineSettings(BaseSettings):
    """Emotional inference engine configuration.

    Signal fusion weights and rule thresholds are fixed constants and are
    intentionally not part of this class.

    Attributes:
        text_analysis_timeout: Seconds to wait for the text classifier
            before falling back to the low-confidence estimate.
        profile_window: Number of most recent states used for profiles.
        insight_min_states: Minimum history length before insights are produced.
        techniques_path: Optional override for the technique catalog YAML.
        store_backend: Repository implementation used by the API.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMOTIONAL_",
        extra="ignore",
    )

    text_analysis_timeout: float = Field(default=10.0, gt=0)
    profile_window: int = Field(default=20, ge=1)
    insight_min_states: int = Field(default=5, ge=1)
    techniques_path: Path | None = None
    store_backend: Literal["memory", "redis"] = "memory"


class RedisSettings(BaseSettings):
    """Redis configuration for the persistent state repository.

    Learner isolation is achieved via key prefix: learner:{learner_id}:*

    Attributes:
        host: Redis server host.
        port: Redis server port.
        password: Redis password.
        database: Redis database number.
        max_connections: Maximum connection pool size.
        key_prefix: Namespace prepended to every key.
        lock_timeout: Seconds before a learner lock expires on its own.
        lock_blocking_timeout: Seconds to wait for a learner lock.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 6379
    password: SecretStr = SecretStr("")
    database: int = 0
    max_connections: int = 50
    key_prefix: str = "eduaffect"
    lock_timeout: float = Field(default=30.0, gt=0)
    lock_blocking_timeout: float = Field(default=10.0, gt=0)

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        pwd = self.password.get_secret_value()
        if pwd:
            return f"redis://:{pwd}@{self.host}:{self.port}/{self.database}"
        return f"redis://{self.host}:{self.port}/{self.database}"


class LLMSettings(BaseSettings):
    """LLM provider configuration using LiteLLM.

    Used by the default text-emotion classifier. LiteLLM handles provider
    routing based on model prefix.

    Attributes:
        default_provider: Default LLM provider to use.
        ollama_base_url: Base URL for Ollama server.
        ollama_api_key: API key for remote Ollama instances.
        ollama_default_model: Default Ollama model.
        openai_api_key: OpenAI API key.
        openai_default_model: Default OpenAI model.
        anthropic_api_key: Anthropic API key.
        anthropic_default_model: Default Anthropic model.
        google_api_key: Google AI API key.
        google_default_model: Default Google model.
        request_timeout: Request timeout in seconds.
        max_retries: Maximum retry attempts.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    default_provider: Literal["ollama", "openai", "anthropic", "google"] = "ollama"

    ollama_base_url: str = Field(
        default="http://localhost:11434",
        validation_alias="OLLAMA_BASE_URL",
    )
    ollama_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="OLLAMA_API_KEY",
    )
    ollama_default_model: str = Field(
        default="qwen2.5:7b",
        validation_alias="OLLAMA_DEFAULT_MODEL",
    )

    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
    )
    openai_default_model: str = Field(
        default="gpt-4o-mini",
        validation_alias="OPENAI_DEFAULT_MODEL",
    )

    anthropic_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="ANTHROPIC_API_KEY",
    )
    anthropic_default_model: str = Field(
        default="claude-3-5-haiku-20241022",
        validation_alias="ANTHROPIC_DEFAULT_MODEL",
    )

    google_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="GOOGLE_API_KEY",
    )
    google_default_model: str = Field(
        default="gemini-2.0-flash",
        validation_alias="GOOGLE_DEFAULT_MODEL",
    )

    request_timeout: float = 30.0
    max_retries: int = 1

    def get_default_model(self) -> str:
        """Get the default model for the configured provider.

        Returns:
            Model identifier string for the default provider.
        """
        models = {
            "ollama": f"ollama/{self.ollama_default_model}",
            "openai": self.openai_default_model,
            "anthropic": self.anthropic_default_model,
            "google": f"gemini/{self.google_default_model}",
        }
        return models[self.default_provider]

    def get_provider_params(self, model: str) -> dict[str, str]:
        """Get api_base/api_key to pass straight to LiteLLM for a model.

        Args:
            model: Model string in LiteLLM format.

        Returns:
            Dictionary with api_base and/or api_key if configured.
        """
        params: dict[str, str] = {}
        if model.startswith(("ollama/", "ollama_chat/")):
            params["api_base"] = self.ollama_base_url
            if self.ollama_api_key:
                params["api_key"] = self.ollama_api_key.get_secret_value()
        elif model.startswith("gemini/"):
            if self.google_api_key:
                params["api_key"] = self.google_api_key.get_secret_value()
        elif model.startswith("claude"):
            if self.anthropic_api_key:
                params["api_key"] = self.anthropic_api_key.get_secret_value()
        elif self.openai_api_key:
            params["api_key"] = self.openai_api_key.get_secret_value()
        return params


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        workers: Number of worker processes.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 34100
    workers: int = 1


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        emotional: Emotional engine settings.
        redis: Redis settings.
        llm: LLM provider settings.
        cors: CORS settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    emotional: EmotionalEngineSettings = Field(default_factory=EmotionalEngineSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
