# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Range clamping helpers.

Every bounded score in the engine (intensity, confidence, arousal, valence,
resilience and EQ scores) passes through one of these before it is stored.
"""


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into the closed interval [low, high].

    NaN is treated as the lower bound.

    Args:
        value: Value to clamp.
        low: Lower bound.
        high: Upper bound.

    Returns:
        The clamped value as a float.
    """
    if value != value:  # NaN
        return float(low)
    return float(max(low, min(high, value)))


def clamp_unit(value: float) -> float:
    """Clamp into [0, 1]."""
    return clamp(value, 0.0, 1.0)


def clamp_signed(value: float) -> float:
    """Clamp into [-1, 1]."""
    return clamp(value, -1.0, 1.0)


def mean(values: list[float], default: float = 0.0) -> float:
    """Arithmetic mean, or default for an empty list."""
    if not values:
        return default
    return sum(values) / len(values)
