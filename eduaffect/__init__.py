"""EduAffect.

Emotional state inference and intervention engine for learners. Fuses
free text, behavioural telemetry and performance results into emotional
states, keeps a rolling emotional profile per learner, and suggests
supportive interventions and insights.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
