"""
Voice control engine: capture sessions, dispatch, status and history.

One engine per host. It owns everything that used to be page-global state:
whether a capture session is open, the fragments heard so far, the status
line, and the history ring buffer. Two engines never share any of it.

Session lifecycle:
    begin_capture()  → recognizer.start(engine)
    on_result(...)   → interim text shown, final fragments accumulated
    end_capture()    → recognizer.stop(), fragments joined and processed once
    (or on_end() from the recognizer when it stops by itself)

Nothing here is fatal. Recognizer failures, recognition errors, low
confidence, unknown commands and missing controls all end up as status
text, and the engine is always ready for the next session afterwards.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .config import EngineConfig
from .dispatcher import CalculatorControls, CommandDispatcher
from .exceptions import CommandTargetNotFound
from .history import CommandHistory
from .models import (
    Command,
    CommandHistoryEntry,
    CommandKind,
    InterpretationResult,
    Outcome,
    Transcript,
)
from .pipeline import VoiceCommandPipeline
from .speech import Speaker, SpeechRecognizer, SpeechResult
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

# ─── Status Texts ───────────────────────────────────────────────────

STATUS_READY = "Ready"
STATUS_LISTENING = "Listening..."
STATUS_LOW_CONFIDENCE = "Try again?"
STATUS_UNKNOWN = "Unknown command"
STATUS_UNSUPPORTED = "Voice control unsupported"


# ─── Capture Session ────────────────────────────────────────────────


class CaptureSession:
    """Everything heard between one begin_capture and its end."""

    def __init__(self) -> None:
        self.finals: list[SpeechResult] = []
        self.interim = ""

    def add(self, result: SpeechResult) -> None:
        if result.is_final:
            self.finals.append(result)
            self.interim = ""
        else:
            self.interim = result.text

    def transcript(self) -> Optional[Transcript]:
        """Join the final fragments into one Transcript, or None if nothing was said.

        The session is only as trustworthy as its weakest fragment, so the
        joined confidence is the minimum. A final without a confidence
        counts as 0.
        """
        fragments = [r for r in self.finals if r.text.strip()]
        if not fragments:
            return None
        return Transcript(
            text=" ".join(r.text.strip() for r in fragments),
            confidence=min(r.confidence or 0.0 for r in fragments),
        )


# ─── Engine ─────────────────────────────────────────────────────────


class VoiceControlEngine:
    """Drive a calculator by voice.

    Args:
        controls: The host's CalculatorControls.
        recognizer: Speech engine. None means the platform has no speech
            support: capture is disabled, simulate() still works.
        config: Engine settings. Defaults to EngineConfig().
        vocabulary: Keyword tables for the parser.
        clock: Monotonic seconds, used for status expiry.
        speaker: Reads the odds aloud after a query while audio feedback
            is on. None means no speech synthesis on this host.
    """

    def __init__(
        self,
        controls: CalculatorControls,
        recognizer: Optional[SpeechRecognizer] = None,
        config: Optional[EngineConfig] = None,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        clock: Callable[[], float] = time.monotonic,
        speaker: Optional[Speaker] = None,
    ):
        self.config = config or EngineConfig()
        self.pipeline = VoiceCommandPipeline(self.config.confidence_threshold, vocabulary)
        self.dispatcher = CommandDispatcher(controls)
        self._history = CommandHistory(self.config.history_capacity)
        self._recognizer = recognizer
        self._speaker = speaker
        self.audio_feedback = self.config.audio_feedback
        self._clock = clock
        self._session: Optional[CaptureSession] = None
        self._last_result: Optional[InterpretationResult] = None
        self._status = STATUS_READY
        self._status_expires: Optional[float] = None

        if recognizer is None:
            logger.warning("Speech recognition not supported on this host; voice capture disabled")
            self._set_status(STATUS_UNSUPPORTED)

    # ─── State ──────────────────────────────────────────────────────

    @property
    def supported(self) -> bool:
        return self._recognizer is not None

    @property
    def is_capturing(self) -> bool:
        return self._session is not None

    @property
    def interim_text(self) -> str:
        return self._session.interim if self._session else ""

    @property
    def _idle_status(self) -> str:
        return STATUS_READY if self.supported else STATUS_UNSUPPORTED

    @property
    def status(self) -> str:
        if self._status_expires is not None and self._clock() >= self._status_expires:
            self._status = self._idle_status
            self._status_expires = None
        return self._status

    def _set_status(self, text: str, duration: Optional[float] = None) -> None:
        self._status = text
        self._status_expires = None if duration is None else self._clock() + duration

    def history(self) -> list[CommandHistoryEntry]:
        """The most recent executed transcripts, newest first."""
        return self._history.snapshot()

    def toggle_audio_feedback(self) -> bool:
        """Flip audio feedback and return the new setting."""
        self.audio_feedback = not self.audio_feedback
        logger.info("Audio feedback %s", "on" if self.audio_feedback else "off")
        return self.audio_feedback

    # ─── Capture ────────────────────────────────────────────────────

    def begin_capture(self) -> bool:
        """Open a capture session. False if unsupported, already open, or the start failed."""
        if self._recognizer is None:
            logger.warning("begin_capture ignored: speech recognition unsupported")
            return False
        if self._session is not None:
            logger.debug("begin_capture ignored: already capturing")
            return False

        self._session = CaptureSession()
        self._last_result = None
        try:
            self._recognizer.start(self)
        except Exception as e:
            logger.error("Failed to start recognition: %s", e, exc_info=True)
            self._session = None
            self._set_status(f"Error: {e}", self.config.error_status_seconds)
            return False

        self._set_status(STATUS_LISTENING)
        logger.info("Capture started")
        return True

    def end_capture(self) -> Optional[InterpretationResult]:
        """Close the session and process whatever was heard.

        Returns:
            The result for the accumulated transcript, or None when no
            session was open or nothing final was said.
        """
        session = self._session
        if session is None:
            logger.debug("end_capture ignored: not capturing")
            return None

        try:
            self._recognizer.stop()  # type: ignore[union-attr]
        except Exception as e:
            logger.error("Failed to stop recognition: %s", e, exc_info=True)

        if self._session is session:
            return self._finish_session()
        # The recognizer reported on_end from inside stop()
        return self._last_result

    def close(self) -> None:
        """Tear down: abandon any open session without processing it."""
        if self._session is None:
            return
        self._session = None
        try:
            self._recognizer.stop()  # type: ignore[union-attr]
        except Exception as e:
            logger.error("Failed to stop recognition during close: %s", e, exc_info=True)
        self._set_status(STATUS_READY)

    # ─── SpeechListener ─────────────────────────────────────────────

    def on_result(self, result: SpeechResult) -> None:
        if self._session is None:
            logger.debug("Ignoring speech result outside a session: %r", result.text)
            return
        if not result.is_final:
            logger.debug("Interim: %r", result.text)
        self._session.add(result)

    def on_error(self, error: str) -> None:
        logger.warning("Recognition error: %s", error)
        self._set_status(f"Error: {error}", self.config.error_status_seconds)

    def on_end(self) -> None:
        if self._session is not None:
            self._finish_session()

    def _finish_session(self) -> Optional[InterpretationResult]:
        session, self._session = self._session, None
        logger.info("Capture ended")
        transcript = session.transcript() if session else None
        if transcript is None:
            logger.info("No final speech in session")
            if self._status == STATUS_LISTENING:
                self._set_status(STATUS_READY)
            return None
        self._last_result = self.process(transcript)
        return self._last_result

    # ─── Processing ─────────────────────────────────────────────────

    def process(self, transcript: Transcript) -> InterpretationResult:
        """Interpret one finalized transcript and apply its commands."""
        result = self.pipeline.run(transcript)
        linger = self.config.status_reset_seconds

        if result.outcome == Outcome.LOW_CONFIDENCE:
            self._set_status(STATUS_LOW_CONFIDENCE, linger)
            return result
        if result.outcome == Outcome.UNKNOWN_COMMAND:
            self._set_status(STATUS_UNKNOWN, linger)
            return result

        failed = self.dispatcher.dispatch(result.commands)
        if failed:
            result = result.model_copy(update={"failed_commands": failed})

        self._history.push(
            CommandHistoryEntry(
                transcript=transcript.text,
                confidence=transcript.confidence,
                commands=result.commands,
            )
        )
        self._set_status(f"Executed: {result.feedback}", linger)
        if self.audio_feedback and any(c.kind == CommandKind.QUERY for c in result.commands):
            self._speak_odds()
        return result

    def _speak_odds(self) -> None:
        if self._speaker is None:
            logger.debug("Audio feedback on but no speaker available")
            return
        try:
            text = self.dispatcher.controls.describe_odds()
        except CommandTargetNotFound as e:
            logger.warning("Cannot read odds aloud: %s", e)
            return
        if not text:
            logger.debug("No odds to read aloud yet")
            return
        try:
            self._speaker.speak(text)
        except Exception as e:
            logger.error("Speech synthesis failed: %s", e, exc_info=True)

    def simulate(self, text: str, confidence: float = 1.0) -> list[Command]:
        """Run ``text`` through the full engine without any audio.

        Deterministic entry point for tests and tooling: gate, parse,
        dispatch and history behave exactly as for spoken input.
        """
        return list(self.process(Transcript(text=text, confidence=confidence)).commands)
