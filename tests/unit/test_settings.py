# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from eduaffect.core.config.settings import (
    APISettings,
    CORSSettings,
    EmotionalEngineSettings,
    LLMSettings,
    RedisSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


@pytest.mark.unit
class TestEmotionalEngineSettings:
    """Tests for EmotionalEngineSettings."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        settings = EmotionalEngineSettings()

        assert settings.text_analysis_timeout == 10.0
        assert settings.profile_window == 20
        assert settings.insight_min_states == 5
        assert settings.techniques_path is None
        assert settings.store_backend == "memory"

    def test_env_prefix(self) -> None:
        """Test values are read from EMOTIONAL_* variables."""
        env = {
            "EMOTIONAL_TEXT_ANALYSIS_TIMEOUT": "2.5",
            "EMOTIONAL_STORE_BACKEND": "redis",
            "EMOTIONAL_TECHNIQUES_PATH": "/etc/eduaffect/techniques.yaml",
        }
        with patch.dict(os.environ, env):
            settings = EmotionalEngineSettings()

        assert settings.text_analysis_timeout == 2.5
        assert settings.store_backend == "redis"
        assert settings.techniques_path == Path("/etc/eduaffect/techniques.yaml")

    def test_unknown_backend_is_rejected(self) -> None:
        """Test that only memory and redis backends are accepted."""
        with pytest.raises(ValidationError):
            EmotionalEngineSettings(store_backend="postgres")  # type: ignore[arg-type]

    def test_timeout_must_be_positive(self) -> None:
        """Test that a zero timeout is rejected."""
        with pytest.raises(ValidationError):
            EmotionalEngineSettings(text_analysis_timeout=0)


@pytest.mark.unit
class TestRedisSettings:
    """Tests for RedisSettings."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        settings = RedisSettings()

        assert settings.host == "localhost"
        assert settings.port == 6379
        assert settings.key_prefix == "eduaffect"
        assert settings.lock_timeout == 30.0
        assert settings.lock_blocking_timeout == 10.0

    def test_url_without_password(self) -> None:
        """Test URL property without password."""
        settings = RedisSettings(host="cache.local", port=6380, database=2)

        assert settings.url == "redis://cache.local:6380/2"

    def test_url_with_password(self) -> None:
        """Test URL property with password."""
        settings = RedisSettings(password="s3cret")  # type: ignore[arg-type]

        assert settings.url == "redis://:s3cret@localhost:6379/0"


@pytest.mark.unit
class TestLLMSettings:
    """Tests for LLMSettings."""

    def test_default_model_per_provider(self) -> None:
        """Test default model resolution per provider."""
        assert LLMSettings().get_default_model() == "ollama/qwen2.5:7b"
        assert LLMSettings(default_provider="openai").get_default_model() == "gpt-4o-mini"
        assert LLMSettings(default_provider="google").get_default_model() == "gemini/gemini-2.0-flash"

    def test_ollama_provider_params(self) -> None:
        """Test Ollama models get the configured base URL."""
        params = LLMSettings().get_provider_params("ollama/qwen2.5:7b")

        assert params == {"api_base": "http://localhost:11434"}

    def test_openai_key_from_environment(self) -> None:
        """Test OpenAI key is read from OPENAI_API_KEY."""
        with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test"}):
            settings = LLMSettings()

        assert settings.get_provider_params("gpt-4o-mini") == {"api_key": "sk-test"}


@pytest.mark.unit
class TestCORSAndAPISettings:
    """Tests for CORSSettings and APISettings."""

    def test_origins_list(self) -> None:
        """Test origins string is split and stripped."""
        settings = CORSSettings(origins="http://a.test, http://b.test,")

        assert settings.origins_list == ["http://a.test", "http://b.test"]

    def test_api_defaults(self) -> None:
        """Test API defaults."""
        settings = APISettings()

        assert settings.port == 34100
        assert settings.workers == 1


@pytest.mark.unit
class TestSettings:
    """Tests for the aggregate Settings and its cache."""

    def test_environment_flags(self) -> None:
        """Test development and production helpers."""
        assert Settings(environment="development").is_development
        assert Settings(environment="production").is_production

    def test_get_settings_is_cached(self) -> None:
        """Test get_settings returns the same instance until cleared."""
        first = get_settings()

        assert get_settings() is first

        clear_settings_cache()
        assert get_settings() is not first

    def test_nested_settings_read_environment(self) -> None:
        """Test subsettings pick up their own prefixes."""
        with patch.dict(os.environ, {"REDIS_KEY_PREFIX": "test", "EMOTIONAL_PROFILE_WINDOW": "7"}):
            clear_settings_cache()
            settings = get_settings()

        assert settings.redis.key_prefix == "test"
        assert settings.emotional.profile_window == 7
