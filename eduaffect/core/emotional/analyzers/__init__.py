# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Signal analyzers producing candidate emotional estimates."""

from eduaffect.core.emotional.analyzers.behavioral import BehavioralSignalAnalyzer
from eduaffect.core.emotional.analyzers.performance import PerformanceSignalAnalyzer
from eduaffect.core.emotional.analyzers.text import (
    TEXT_ANALYSIS_FALLBACK,
    TextEmotionClassifier,
    TextEmotionPayload,
    TextSignalAnalyzer,
)

__all__ = [
    "BehavioralSignalAnalyzer",
    "PerformanceSignalAnalyzer",
    "TextSignalAnalyzer",
    "TextEmotionClassifier",
    "TextEmotionPayload",
    "TEXT_ANALYSIS_FALLBACK",
]
