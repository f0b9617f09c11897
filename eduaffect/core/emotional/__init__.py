# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Emotional state inference and intervention engine.

This package fuses text, behavioural and performance signals into
EmotionalState records, maintains a per-learner EmotionalProfile,
selects supportive interventions and derives insights.

Example:
    from eduaffect.core.emotional import (
        EmotionalIntelligenceService,
        InMemoryEmotionalRepository,
        TechniqueCatalog,
    )

    service = EmotionalIntelligenceService(
        repository=InMemoryEmotionalRepository(),
        catalog=TechniqueCatalog.from_yaml(),
    )
    state = await service.assess(payload)
"""

from eduaffect.core.emotional.analyzers import (
    TEXT_ANALYSIS_FALLBACK,
    BehavioralSignalAnalyzer,
    PerformanceSignalAnalyzer,
    TextEmotionClassifier,
    TextSignalAnalyzer,
)
from eduaffect.core.emotional.catalog import (
    DEFAULT_TECHNIQUES_PATH,
    EmotionalTechnique,
    TechniqueCatalog,
    TechniqueCatalogError,
)
from eduaffect.core.emotional.constants import (
    EmotionType,
    InsightType,
    InterventionPriority,
    InterventionType,
    PerformanceIndicator,
    SocialContext,
)
from eduaffect.core.emotional.context import (
    AssessmentRequest,
    AssessmentValidationError,
    BehavioralTelemetry,
    LearningContext,
    PerformanceTelemetry,
)
from eduaffect.core.emotional.insights import EmotionalInsight, InsightGenerator
from eduaffect.core.emotional.interventions import EmotionalIntervention, InterventionSelector
from eduaffect.core.emotional.profile import EmotionalProfile, ProfileAggregator
from eduaffect.core.emotional.repository import (
    EmotionalRepository,
    InMemoryEmotionalRepository,
    RedisEmotionalRepository,
    StateOrderError,
)
from eduaffect.core.emotional.service import EmotionalIntelligenceService
from eduaffect.core.emotional.state import EmotionalState, SignalReadings
from eduaffect.core.emotional.synthesizer import SignalSynthesizer

__all__ = [
    # Service
    "EmotionalIntelligenceService",
    # Analyzers
    "BehavioralSignalAnalyzer",
    "PerformanceSignalAnalyzer",
    "TextSignalAnalyzer",
    "TextEmotionClassifier",
    "TEXT_ANALYSIS_FALLBACK",
    # Fusion and rules
    "SignalSynthesizer",
    "ProfileAggregator",
    "InterventionSelector",
    "InsightGenerator",
    # Catalog
    "DEFAULT_TECHNIQUES_PATH",
    "EmotionalTechnique",
    "TechniqueCatalog",
    "TechniqueCatalogError",
    # Storage
    "EmotionalRepository",
    "InMemoryEmotionalRepository",
    "RedisEmotionalRepository",
    "StateOrderError",
    # Models
    "AssessmentRequest",
    "AssessmentValidationError",
    "BehavioralTelemetry",
    "PerformanceTelemetry",
    "LearningContext",
    "EmotionalState",
    "SignalReadings",
    "EmotionalProfile",
    "EmotionalIntervention",
    "EmotionalInsight",
    # Enums
    "EmotionType",
    "InsightType",
    "InterventionPriority",
    "InterventionType",
    "PerformanceIndicator",
    "SocialContext",
]
