# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Constants for the Emotional Intelligence Engine.

This module defines all enums, emotion groupings, fusion weights and
thresholds used throughout the inference and intervention pipeline.
"""

from enum import Enum


class EmotionType(str, Enum):
    """Closed set of emotions a learner state can be labelled with."""

    # Positive / energising
    JOY = "joy"
    EXCITEMENT = "excitement"
    PRIDE = "pride"
    SATISFACTION = "satisfaction"
    CURIOSITY = "curiosity"
    ENTHUSIASM = "enthusiasm"
    # Academic distress
    FRUSTRATION = "frustration"
    ANXIETY = "anxiety"
    CONFUSION = "confusion"
    DISAPPOINTMENT = "disappointment"
    BOREDOM = "boredom"
    OVERWHELM = "overwhelm"
    # Productive learning states
    DETERMINATION = "determination"
    FOCUS = "focus"
    CALM = "calm"
    CONFIDENCE = "confidence"
    SURPRISE = "surprise"
    INTEREST = "interest"
    # Basic negative emotions
    ANGER = "anger"
    SADNESS = "sadness"
    FEAR = "fear"
    DISGUST = "disgust"
    CONTEMPT = "contempt"
    SHAME = "shame"


class PerformanceIndicator(str, Enum):
    """How the learner is doing in the current activity."""

    STRUGGLING = "struggling"
    NEUTRAL = "neutral"
    SUCCEEDING = "succeeding"


class SocialContext(str, Enum):
    """Social setting of the current activity."""

    INDIVIDUAL = "individual"
    PEER_INTERACTION = "peer_interaction"
    TEACHER_INTERACTION = "teacher_interaction"


class InterventionType(str, Enum):
    """Kinds of corrective action the engine can suggest."""

    BREATHING_EXERCISE = "breathing_exercise"
    MINDFULNESS = "mindfulness"
    COGNITIVE_REFRAMING = "cognitive_reframing"
    BREAK_SUGGESTION = "break_suggestion"
    ENCOURAGEMENT = "encouragement"
    STRATEGY_ADJUSTMENT = "strategy_adjustment"
    PEER_SUPPORT = "peer_support"
    TEACHER_NOTIFICATION = "teacher_notification"
    CONTENT_MODIFICATION = "content_modification"
    GOAL_ADJUSTMENT = "goal_adjustment"
    CELEBRATION = "celebration"
    REFLECTION_PROMPT = "reflection_prompt"


class InterventionPriority(str, Enum):
    """Urgency of a queued intervention."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class InsightType(str, Enum):
    """Kinds of insight derived from a learner's history."""

    PATTERN = "pattern"
    TRIGGER = "trigger"
    STRENGTH = "strength"
    GROWTH_AREA = "growth_area"
    RECOMMENDATION = "recommendation"


class ImpactLevel(str, Enum):
    """Expected impact of acting on an insight."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DifficultyProgression(str, Enum):
    """Inferred preference for how difficulty should ramp."""

    GRADUAL = "gradual"
    CHALLENGING = "challenging"
    ADAPTIVE = "adaptive"


class FeedbackStyle(str, Enum):
    """Inferred preference for feedback timing and depth."""

    IMMEDIATE = "immediate"
    DELAYED = "delayed"
    COMPREHENSIVE = "comprehensive"


class SocialSetting(str, Enum):
    """Inferred preference for group size."""

    INDIVIDUAL = "individual"
    SMALL_GROUP = "small_group"
    LARGE_GROUP = "large_group"


# =============================================================================
# Signal fusion
# =============================================================================

class SignalWeights:
    """Fixed contribution caps of each signal source."""

    TEXT = 0.40
    BEHAVIOR = 0.35
    PERFORMANCE = 0.25


class FusionBaseline:
    """Running values of a fusion before any text estimate replaces them."""

    INTENSITY = 0.5
    VALENCE = 0.0
    AROUSAL = 0.5
    CONFIDENCE = 0.5


# =============================================================================
# Thresholds
# =============================================================================

class EmotionalThresholds:
    """Thresholds for profile aggregation, interventions and insights."""

    # Interventions
    SINGLE_STATE_INTENSITY = 0.7  # strictly greater than
    HIGH_PRIORITY_INTENSITY = 0.8
    PATTERN_WINDOW = 3
    PATTERN_MIN_NEGATIVE = 2

    # Profile
    PROFILE_WINDOW = 20
    TOP_N = 5
    DEFAULT_RECOVERY_MINUTES = 30.0
    RECOVERY_HORIZON_MINUTES = 60.0
    CHALLENGING_DIFFICULTY = 6  # motivation: difficulty_level > 6
    HARD_TASK_DIFFICULTY = 7
    EASY_TASK_DIFFICULTY = 4
    CHALLENGING_SHARE = 0.6
    GRADUAL_SHARE = 0.8
    ANXIETY_SHARE = 0.3

    # Insights
    INSIGHT_MIN_STATES = 5
    INSIGHT_PATTERN_WINDOW = 10
    INSIGHT_MIN_COUNT = 3
    STRENGTH_THRESHOLD = 0.7
    HIGH_IMPACT_PERCENT = 60
    MEDIUM_IMPACT_PERCENT = 40


# =============================================================================
# Emotion groupings
# =============================================================================

# Pattern-path interventions
NEGATIVE_PATTERN_EMOTIONS = frozenset({
    EmotionType.FRUSTRATION,
    EmotionType.ANXIETY,
    EmotionType.DISAPPOINTMENT,
    EmotionType.OVERWHELM,
})

# Profile: stress triggers
STRESS_EMOTIONS = frozenset({
    EmotionType.FRUSTRATION,
    EmotionType.ANXIETY,
    EmotionType.OVERWHELM,
    EmotionType.ANGER,
})

# Profile: motivation drivers
MOTIVATING_EMOTIONS = frozenset({
    EmotionType.JOY,
    EmotionType.EXCITEMENT,
    EmotionType.PRIDE,
    EmotionType.SATISFACTION,
})

# Profile: recovery speed
RECOVERY_NEGATIVE_EMOTIONS = frozenset({
    EmotionType.FRUSTRATION,
    EmotionType.ANXIETY,
    EmotionType.DISAPPOINTMENT,
    EmotionType.ANGER,
    EmotionType.SADNESS,
})

# Profile: self-regulation
DYSREGULATED_EMOTIONS = frozenset({
    EmotionType.FRUSTRATION,
    EmotionType.ANXIETY,
    EmotionType.ANGER,
})

# Profile: motivation under challenge
CHALLENGE_POSITIVE_EMOTIONS = frozenset({
    EmotionType.DETERMINATION,
    EmotionType.CURIOSITY,
    EmotionType.FOCUS,
})

# Profile: empathy / social skills
SOCIAL_POSITIVE_EMOTIONS = frozenset({
    EmotionType.JOY,
    EmotionType.SATISFACTION,
    EmotionType.CURIOSITY,
})

# Profile: difficulty progression
HARD_TASK_POSITIVE_EMOTIONS = frozenset({
    EmotionType.DETERMINATION,
    EmotionType.FOCUS,
    EmotionType.PRIDE,
})
EASY_TASK_POSITIVE_EMOTIONS = frozenset({
    EmotionType.SATISFACTION,
    EmotionType.JOY,
    EmotionType.CONFIDENCE,
})

OPTIMAL_EMOTIONAL_STATES = (
    EmotionType.FOCUS,
    EmotionType.CURIOSITY,
    EmotionType.SATISFACTION,
    EmotionType.DETERMINATION,
)

SOCIAL_CONTEXT_TO_SETTING = {
    SocialContext.INDIVIDUAL: SocialSetting.INDIVIDUAL,
    SocialContext.PEER_INTERACTION: SocialSetting.SMALL_GROUP,
    SocialContext.TEACHER_INTERACTION: SocialSetting.LARGE_GROUP,
}


# =============================================================================
# Per-emotion coping steps
# =============================================================================

EMOTION_ACTION_STEPS: dict[EmotionType, list[str]] = {
    EmotionType.FRUSTRATION: [
        "Take a brief break when frustration peaks",
        "Try breaking tasks into smaller steps",
        "Use breathing exercises to stay calm",
    ],
    EmotionType.ANXIETY: [
        "Practice mindfulness techniques",
        "Start with easier tasks to build confidence",
        "Remember that mistakes are part of learning",
    ],
    EmotionType.BOREDOM: [
        "Try more challenging content",
        "Connect learning to personal interests",
        "Change learning format or environment",
    ],
    EmotionType.JOY: ["Celebrate your successes", "Share your enthusiasm with others"],
    EmotionType.EXCITEMENT: ["Channel this energy productively", "Focus excitement on learning goals"],
    EmotionType.CURIOSITY: ["Explore related topics", "Ask more questions"],
    EmotionType.CONFUSION: ["Ask for help", "Review prerequisite concepts"],
    EmotionType.PRIDE: ["Reflect on your growth", "Set new challenging goals"],
    EmotionType.SATISFACTION: ["Build on this success", "Try slightly harder challenges"],
    EmotionType.ENTHUSIASM: ["Channel this energy into learning", "Share knowledge with others"],
    EmotionType.DISAPPOINTMENT: ["Learn from setbacks", "Adjust expectations realistically"],
    EmotionType.OVERWHELM: ["Break tasks down", "Prioritize most important elements"],
    EmotionType.DETERMINATION: ["Maintain this mindset", "Set clear milestones"],
    EmotionType.FOCUS: ["Protect this state", "Minimize distractions"],
    EmotionType.CALM: ["Appreciate this balance", "Use this state for challenging tasks"],
    EmotionType.CONFIDENCE: ["Take on appropriate challenges", "Help others learn"],
    EmotionType.SURPRISE: ["Explore unexpected discoveries", "Question assumptions"],
    EmotionType.INTEREST: ["Dive deeper into the topic", "Connect to other subjects"],
    EmotionType.ANGER: ["Take a cooling-off period", "Identify the real issue"],
    EmotionType.SADNESS: ["Practice self-compassion", "Seek support if needed"],
    EmotionType.FEAR: ["Start with small steps", "Build confidence gradually"],
    EmotionType.DISGUST: ["Explore why this reaction occurred", "Find alternative approaches"],
    EmotionType.CONTEMPT: ["Practice empathy", "Consider different perspectives"],
    EmotionType.SHAME: ["Practice self-forgiveness", "Focus on growth over perfection"],
}

DEFAULT_ACTION_STEPS = ["Practice emotional awareness", "Seek support when needed"]
