# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LLM capabilities.

A capability builds prompt messages and parses the LLM's reply. It never
calls the LLM itself.
"""

from eduaffect.core.agents.capabilities.base import (
    Capability,
    CapabilityContext,
    CapabilityError,
    CapabilityResult,
)
from eduaffect.core.agents.capabilities.emotion_classification import (
    EmotionClassificationCapability,
    EmotionClassificationParams,
    EmotionClassificationResult,
)

__all__ = [
    "Capability",
    "CapabilityContext",
    "CapabilityError",
    "CapabilityResult",
    "EmotionClassificationCapability",
    "EmotionClassificationParams",
    "EmotionClassificationResult",
]
