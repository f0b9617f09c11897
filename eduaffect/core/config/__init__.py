# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for EduAffect.

This package provides centralized configuration management:
- Settings: Pydantic-based settings loaded from environment variables
- YAML loader: Utilities for loading YAML reference data

Example:
    >>> from eduaffect.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

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
from eduaffect.core.config.yaml_loader import YAMLLoadError, load_yaml, load_yaml_entries

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "EmotionalEngineSettings",
    "RedisSettings",
    "LLMSettings",
    "CORSSettings",
    "APISettings",
    # YAML utilities
    "load_yaml",
    "load_yaml_entries",
    "YAMLLoadError",
]
