"""
PAC Voice Control: FastAPI Server
=================================

HTTP surface for the voice control engine. A browser tab runs the Web
Speech API and posts its results here; tooling can also post plain text.

Endpoints:
    POST /interpret         Interpret text + confidence (no audio involved)
    POST /capture/begin     Open a capture session
    POST /capture/result    Forward one Web Speech API result
    POST /capture/end       Close the session and process what was heard
    POST /audio-feedback    Toggle reading the odds aloud after a query
    PUT  /state/odds        Report odds computed for the current inputs
    GET  /history           Recently executed transcripts, newest first
    GET  /state             Current calculator configuration
    GET  /health            Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from voice_control import __version__
from voice_control.calculator import CalculatorState, InMemoryCalculator
from voice_control.config import EngineConfig
from voice_control.engine import VoiceControlEngine
from voice_control.models import Command, InterpretationResult, Outcome, Transcript
from voice_control.speech import BrowserRecognizer, BrowserSpeaker, Utterance

load_dotenv()


# ─── Application Lifespan (one engine per process) ──────────────────

_engine: VoiceControlEngine | None = None
_calculator: InMemoryCalculator | None = None
_recognizer: BrowserRecognizer | None = None
_speaker: BrowserSpeaker | None = None


def build_engine(config: EngineConfig | None = None) -> None:
    """Create the process-wide engine with an in-memory calculator behind it."""
    global _engine, _calculator, _recognizer, _speaker  # noqa: PLW0603
    _calculator = InMemoryCalculator()
    _recognizer = BrowserRecognizer()
    _speaker = BrowserSpeaker()
    _engine = VoiceControlEngine(
        _calculator,
        recognizer=_recognizer,
        config=config or EngineConfig.from_env(),
        speaker=_speaker,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _engine  # noqa: PLW0603
    build_engine()
    yield
    if _engine is not None:
        _engine.close()
    _engine = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="PAC Voice Control API",
    description=(
        "Turns spoken utterances into Pokémon Auto Chess calculator settings. "
        "Confidence gating, numeral normalization and a multi-pass chunk parser "
        "that pulls several commands out of one sentence."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Request / Response Schemas ─────────────────────────────────────


class InterpretRequest(BaseModel):
    """Request body for the /interpret endpoint."""

    text: str = Field(
        ...,
        max_length=500,
        description="The transcript to interpret.",
        json_schema_extra={"example": "level seven rare have three"},
    )
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)


class WebSpeechPayload(BaseModel):
    """One result as reported by the browser's SpeechRecognition."""

    transcript: str = ""
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    isFinal: bool = True  # noqa: N815 (browser field name)


class InterpretResponse(BaseModel):
    """What the engine did with one transcript."""

    outcome: Outcome
    transcript: str
    confidence: float
    commands: list[Command]
    failed_commands: list[Command]
    feedback: str
    status: str
    speak: list[Utterance] = Field(default_factory=list)


class OddsReport(BaseModel):
    """Odds the page computed for its current inputs, in percent."""

    per_refresh: float = Field(..., ge=0.0, le=100.0)
    total: float = Field(..., ge=0.0, le=100.0)


class AudioFeedbackResponse(BaseModel):
    audio_feedback: bool


class CaptureResponse(BaseModel):
    capturing: bool
    status: str
    interim: str = ""


class HistoryEntryOut(BaseModel):
    transcript: str
    confidence: float
    commands: list[Command]
    timestamp: datetime


class HealthResponse(BaseModel):
    status: str
    version: str
    capturing: bool
    confidence_threshold: float
    audio_feedback: bool


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_engine() -> VoiceControlEngine:
    if _engine is None:
        raise HTTPException(status_code=503, detail="Engine not initialised")
    return _engine


def _build_response(result: InterpretationResult, engine: VoiceControlEngine) -> InterpretResponse:
    return InterpretResponse(
        outcome=result.outcome,
        transcript=result.transcript.text,
        confidence=result.transcript.confidence,
        commands=result.commands,
        failed_commands=result.failed_commands,
        feedback=result.feedback,
        status=engine.status,
        speak=_speaker.drain() if _speaker else [],
    )


def _capture_response(engine: VoiceControlEngine) -> CaptureResponse:
    return CaptureResponse(
        capturing=engine.is_capturing,
        status=engine.status,
        interim=engine.interim_text,
    )


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post(
    "/interpret",
    summary="Interpret a transcript",
    tags=["Interpretation"],
    responses={503: {"description": "Engine not yet initialised"}},
)
def interpret(request: InterpretRequest) -> InterpretResponse:
    """Run text through the full engine, exactly as if it had been spoken.

    - **outcome**: `executed`, `low_confidence` or `unknown_command`
    - **commands**: what was applied to the calculator, in parse order
    - **failed_commands**: commands whose control could not be found
    """
    engine = _get_engine()
    result = engine.process(Transcript(text=request.text, confidence=request.confidence))
    return _build_response(result, engine)


@app.post(
    "/capture/begin",
    summary="Open a capture session",
    tags=["Capture"],
    responses={
        409: {"description": "A capture session is already open"},
        503: {"description": "Speech recognition failed to start"},
    },
)
def capture_begin() -> CaptureResponse:
    engine = _get_engine()
    if engine.is_capturing:
        raise HTTPException(status_code=409, detail="Capture session already open")
    if not engine.begin_capture():
        raise HTTPException(status_code=503, detail=f"Could not start capture ({engine.status})")
    return _capture_response(engine)


@app.post(
    "/capture/result",
    summary="Forward one speech recognition result",
    tags=["Capture"],
    responses={409: {"description": "No capture session is open"}},
)
def capture_result(payload: WebSpeechPayload) -> CaptureResponse:
    engine = _get_engine()
    assert _recognizer is not None
    if not _recognizer.deliver(payload.model_dump()):
        raise HTTPException(status_code=409, detail="No capture session open")
    return _capture_response(engine)


@app.post(
    "/capture/end",
    summary="Close the capture session and process it",
    tags=["Capture"],
    responses={409: {"description": "No capture session is open"}},
)
def capture_end() -> Optional[InterpretResponse]:
    """Returns the interpretation, or null when nothing final was heard."""
    engine = _get_engine()
    if not engine.is_capturing:
        raise HTTPException(status_code=409, detail="No capture session open")
    result = engine.end_capture()
    return _build_response(result, engine) if result else None


@app.get("/history", summary="Recent executed transcripts", tags=["Diagnostics"])
def history() -> list[HistoryEntryOut]:
    engine = _get_engine()
    return [HistoryEntryOut.model_validate(e, from_attributes=True) for e in engine.history()]


@app.get("/state", summary="Current calculator configuration", tags=["Diagnostics"])
def state() -> CalculatorState:
    _get_engine()
    assert _calculator is not None
    return _calculator.state


@app.put("/state/odds", summary="Report computed odds", tags=["Diagnostics"])
def report_odds(report: OddsReport) -> CalculatorState:
    """The page posts its freshly computed odds so they can be read aloud."""
    _get_engine()
    assert _calculator is not None
    _calculator.report_odds(report.per_refresh, report.total)
    return _calculator.state


@app.post("/audio-feedback", summary="Toggle audio feedback", tags=["Interpretation"])
def toggle_audio_feedback() -> AudioFeedbackResponse:
    engine = _get_engine()
    return AudioFeedbackResponse(audio_feedback=engine.toggle_audio_feedback())


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Engine not yet initialised"}},
)
def health_check() -> HealthResponse:
    engine = _get_engine()
    return HealthResponse(
        status="healthy",
        version=__version__,
        capturing=engine.is_capturing,
        confidence_threshold=engine.config.confidence_threshold,
        audio_feedback=engine.audio_feedback,
    )
