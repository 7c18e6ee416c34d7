"""
Interpretation pipeline: one transcript in, one verdict out.

Flow:
  ┌────────────┐
  │ Transcript │
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │ Confidence │   ← below threshold: LOW_CONFIDENCE, nothing parsed
  │    Gate    │
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │  Numerals  │   ← "seven" → "7", "to" → "2"
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │ Tokenizer  │
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │   Chunk    │   ← zero commands: UNKNOWN_COMMAND
  │   Parser   │
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │   Result   │   ← commands in pass order + feedback
  └────────────┘

The pipeline is pure: no dispatch, no history, no I/O. The engine decides
what to do with the result.
"""

from __future__ import annotations

import logging

from .gate import DEFAULT_CONFIDENCE_THRESHOLD, ConfidenceGate
from .models import InterpretationResult, Outcome, Transcript
from .numerals import normalize_numerals
from .parser import ChunkParser
from .tokenizer import tokenize
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)


class VoiceCommandPipeline:
    """Gate, normalize, tokenize and parse a transcript.

    Usage:
        pipeline = VoiceCommandPipeline(confidence_threshold=0.35)
        result = pipeline.run(Transcript(text="level seven rare", confidence=0.9))
        for command in result.commands:
            ...
    """

    def __init__(
        self,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    ):
        self.gate = ConfidenceGate(confidence_threshold)
        self.vocabulary = vocabulary

    def run(self, transcript: Transcript) -> InterpretationResult:
        if not self.gate.accepts(transcript):
            return InterpretationResult(outcome=Outcome.LOW_CONFIDENCE, transcript=transcript)

        normalized = normalize_numerals(transcript.text)
        tokens = tokenize(normalized)
        commands = ChunkParser(tokens, self.vocabulary).parse()

        if not commands:
            logger.info("No command recognized in %r", transcript.text)
            return InterpretationResult(outcome=Outcome.UNKNOWN_COMMAND, transcript=transcript)

        logger.info(
            "Recognized %r (confidence %.2f): %s",
            transcript.text,
            transcript.confidence,
            ", ".join(c.feedback for c in commands),
        )
        return InterpretationResult(
            outcome=Outcome.EXECUTED,
            transcript=transcript,
            commands=commands,
        )
