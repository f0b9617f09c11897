# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for EduAffect.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
- ranges: Clamping helpers for bounded scores
"""

from eduaffect.utils.datetime import (
    ensure_utc,
    format_iso,
    minutes_between,
    now,
    parse_iso,
    utc_now,
)
from eduaffect.utils.logging import get_logger, learner_context, setup_logging
from eduaffect.utils.ranges import clamp, clamp_signed, clamp_unit, mean

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "learner_context",
    # Datetime
    "utc_now",
    "now",
    "ensure_utc",
    "minutes_between",
    "format_iso",
    "parse_iso",
    # Ranges
    "clamp",
    "clamp_unit",
    "clamp_signed",
    "mean",
]
