"""Confidence gate: drop transcripts the recognizer itself wasn't sure about."""

from __future__ import annotations

import logging

from .exceptions import ConfigurationError
from .models import Transcript

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.6


class ConfidenceGate:
    """Accept a transcript only if its confidence reaches the threshold.

    A confidence exactly equal to the threshold passes.
    """

    def __init__(self, threshold: float = DEFAULT_CONFIDENCE_THRESHOLD):
        if not 0.0 <= threshold <= 1.0:
            raise ConfigurationError(
                f"Confidence threshold must be between 0 and 1, got {threshold}",
                details={"threshold": threshold},
            )
        self.threshold = threshold

    def accepts(self, transcript: Transcript) -> bool:
        if transcript.confidence < self.threshold:
            logger.info(
                "Rejected %r: confidence %.2f below threshold %.2f",
                transcript.text,
                transcript.confidence,
                self.threshold,
            )
            return False
        return True
