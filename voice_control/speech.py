"""
Speech recognition boundary.

The recognizer itself (browser Web Speech API, a local model, ...) is an
outside collaborator. It is started and stopped by the engine and reports
back through a SpeechListener: interim results while the user talks, final
results with a confidence, recognition errors, and the end of the session.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class SpeechResult(BaseModel):
    """One recognition result. Interim results carry no reliable confidence."""

    text: str
    is_final: bool = True
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class SpeechListener(Protocol):
    """Callbacks a recognizer drives during a capture session."""

    def on_result(self, result: SpeechResult) -> None: ...

    def on_error(self, error: str) -> None: ...

    def on_end(self) -> None: ...


class SpeechRecognizer(Protocol):
    """A speech engine that can be started and stopped on demand.

    ``stop`` must deliver any pending final result to the listener before
    returning. Either method may raise if the underlying engine refuses.
    """

    def start(self, listener: SpeechListener) -> None: ...

    def stop(self) -> None: ...


def process_web_speech_result(payload: dict[str, Any]) -> SpeechResult:
    """Convert a Web Speech API result sent up by the browser.

    Expected format:
    {
        "transcript": "level seven rare",
        "confidence": 0.92,
        "isFinal": true
    }
    """
    is_final = bool(payload.get("isFinal", True))
    confidence = payload.get("confidence")
    if not is_final:
        # Browsers report 0 (or garbage) for interim confidence
        confidence = None
    return SpeechResult(
        text=str(payload.get("transcript", "")).strip(),
        is_final=is_final,
        confidence=confidence,
    )


class BrowserRecognizer:
    """Recognizer whose audio lives in a browser tab.

    The browser runs the Web Speech API and posts results to the HTTP API,
    which forwards them to the listener registered here. Starting and
    stopping only track whether a session is open on the server side.
    """

    def __init__(self) -> None:
        self.listener: Optional[SpeechListener] = None

    @property
    def active(self) -> bool:
        return self.listener is not None

    def start(self, listener: SpeechListener) -> None:
        if self.listener is not None:
            raise RuntimeError("Browser recognition session already open")
        self.listener = listener
        logger.debug("Browser recognition session opened")

    def stop(self) -> None:
        self.listener = None
        logger.debug("Browser recognition session closed")

    def deliver(self, payload: dict[str, Any]) -> bool:
        """Forward one browser payload; False when no session is open."""
        if self.listener is None:
            logger.info("Dropping speech result outside a capture session")
            return False
        self.listener.on_result(process_web_speech_result(payload))
        return True


# ─── Speech Synthesis ───────────────────────────────────────────────


class Speaker(Protocol):
    """Reads text aloud. May raise if the synthesis engine refuses."""

    def speak(self, text: str) -> None: ...


class Utterance(BaseModel):
    """One line for the browser's speechSynthesis to play."""

    text: str
    rate: float = 1.1
    pitch: float = 1.0
    volume: float = Field(default=0.8, ge=0.0, le=1.0)


class BrowserSpeaker:
    """Speaker whose audio lives in a browser tab.

    Utterances queue up here until the HTTP API hands them to the page
    with its next response.
    """

    def __init__(self) -> None:
        self._pending: list[Utterance] = []

    def speak(self, text: str) -> None:
        self._pending.append(Utterance(text=text))
        logger.debug("Queued utterance: %r", text)

    def drain(self) -> list[Utterance]:
        pending, self._pending = self._pending, []
        return pending
