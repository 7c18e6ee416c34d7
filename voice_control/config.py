"""
Engine configuration.

The confidence threshold is the one tunable of the interpretation engine.
Different deployments have run it anywhere from 0.35 to 0.6, so it is
always read from configuration, never baked into a component.

Environment variables (a .env file is honoured by the entry points):
    VOICE_CONFIDENCE_THRESHOLD   float in [0, 1]   default 0.6
    VOICE_HISTORY_CAPACITY       int >= 1          default 10
    VOICE_LANGUAGE               BCP-47 tag        default en-US
    VOICE_AUDIO_FEEDBACK         bool              default false
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError
from .gate import DEFAULT_CONFIDENCE_THRESHOLD
from .history import DEFAULT_HISTORY_CAPACITY

_ENV_FIELDS: dict[str, str] = {
    "VOICE_CONFIDENCE_THRESHOLD": "confidence_threshold",
    "VOICE_HISTORY_CAPACITY": "history_capacity",
    "VOICE_LANGUAGE": "language",
    "VOICE_AUDIO_FEEDBACK": "audio_feedback",
}


class WebSpeechSettings(BaseModel):
    """Settings handed to a browser-side Web Speech API recognizer."""

    language: str = "en-US"
    continuous: bool = False
    interim_results: bool = True
    max_alternatives: int = Field(default=1, ge=1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "lang": self.language,
            "continuous": self.continuous,
            "interimResults": self.interim_results,
            "maxAlternatives": self.max_alternatives,
        }


class EngineConfig(BaseModel):
    """All settings of one VoiceControlEngine."""

    confidence_threshold: float = Field(default=DEFAULT_CONFIDENCE_THRESHOLD, ge=0.0, le=1.0)
    history_capacity: int = Field(default=DEFAULT_HISTORY_CAPACITY, ge=1)
    error_status_seconds: float = Field(default=2.0, gt=0)  # "Error: ..." display time
    status_reset_seconds: float = Field(default=3.0, gt=0)  # outcome display time
    language: str = "en-US"
    audio_feedback: bool = False  # read the odds aloud after a query

    @property
    def web_speech(self) -> WebSpeechSettings:
        return WebSpeechSettings(language=self.language)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
        """Build a config from environment variables, defaults for anything unset.

        Raises:
            ConfigurationError: A variable is present but not a valid value.
        """
        env = os.environ if environ is None else environ
        values = {field: env[var] for var, field in _ENV_FIELDS.items() if env.get(var)}
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid voice control settings: {e.error_count()} error(s)",
                details={"errors": [err["msg"] for err in e.errors()], "values": values},
            ) from e
