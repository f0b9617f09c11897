# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for assessment input validation."""

from typing import Any

import pytest
from pydantic import ValidationError

from eduaffect.core.emotional import AssessmentRequest, AssessmentValidationError, LearningContext
from eduaffect.core.emotional.constants import PerformanceIndicator, SocialContext


def payload(context_payload: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    data = {
        "learner_id": "learner-001",
        "session_id": "session-001",
        "context": context_payload,
    }
    data.update(overrides)
    return data


@pytest.mark.unit
class TestAssessmentRequest:
    """Tests for AssessmentRequest.from_payload."""

    def test_minimal_request(self, context_payload: dict[str, Any]) -> None:
        request = AssessmentRequest.from_payload(payload(context_payload))

        assert request.text is None
        assert request.behavior is None
        assert request.performance is None
        assert request.context.social_context == SocialContext.INDIVIDUAL
        assert request.context.performance_indicator == PerformanceIndicator.NEUTRAL

    def test_full_request(self, context_payload: dict[str, Any]) -> None:
        request = AssessmentRequest.from_payload(payload(
            context_payload,
            text="This is hard",
            behavior={"response_time": 12.5, "error_rate": 0.4, "engagement_level": 0.6},
            performance={"current_score": 55, "expected_score": 70, "difficulty_level": 6},
        ))

        assert request.text == "This is hard"
        assert request.behavior.help_seeking is False
        assert request.behavior.task_switching == 0
        assert request.performance.attempts == 1

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text_is_treated_as_absent(self, context_payload: dict[str, Any], text: str) -> None:
        request = AssessmentRequest.from_payload(payload(context_payload, text=text))

        assert request.text is None

    def test_missing_context_is_rejected(self, context_payload: dict[str, Any]) -> None:
        data = payload(context_payload)
        del data["context"]

        with pytest.raises(AssessmentValidationError) as exc_info:
            AssessmentRequest.from_payload(data)

        assert exc_info.value.errors[0]["loc"] == ("context",)
        assert "1 validation error" in exc_info.value.message

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("error_rate", 1.5),
            ("engagement_level", -0.1),
            ("response_time", -1),
            ("task_switching", -2),
        ],
    )
    def test_out_of_range_behaviour_is_rejected(
        self,
        context_payload: dict[str, Any],
        field: str,
        value: float,
    ) -> None:
        behavior = {"response_time": 3, "error_rate": 0.2, "engagement_level": 0.5, field: value}

        with pytest.raises(AssessmentValidationError):
            AssessmentRequest.from_payload(payload(context_payload, behavior=behavior))

    def test_out_of_range_score_is_rejected(self, context_payload: dict[str, Any]) -> None:
        performance = {"current_score": 120, "expected_score": 70, "difficulty_level": 5}

        with pytest.raises(AssessmentValidationError):
            AssessmentRequest.from_payload(payload(context_payload, performance=performance))

    def test_unknown_social_context_is_rejected(self, context_payload: dict[str, Any]) -> None:
        context = {**context_payload, "social_context": "crowd"}

        with pytest.raises(AssessmentValidationError):
            AssessmentRequest.from_payload(payload(context, learner_id="learner-001"))

    def test_empty_learner_id_is_rejected(self, context_payload: dict[str, Any]) -> None:
        with pytest.raises(AssessmentValidationError):
            AssessmentRequest.from_payload(payload(context_payload, learner_id=""))

    def test_context_is_immutable(self, learning_context: LearningContext) -> None:
        with pytest.raises(ValidationError):
            learning_context.subject = "history"
