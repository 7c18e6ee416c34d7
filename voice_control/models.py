"""
Pydantic models for voice control data: typed at every boundary.

A Transcript comes in, Commands go out. Commands are frozen: once the parser
emits one, nothing downstream may rewrite it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field


# ─── Command Kinds ──────────────────────────────────────────────────


class CommandKind(str, Enum):
    """Which calculator input a command changes."""

    LEVEL = "level"
    LEVEL_STEP = "level_step"
    RARITY = "rarity"
    EVOLUTION = "evolution"
    COPIES = "copies"
    SCOUTING = "scouting"
    BENCH = "bench"
    REFRESHES = "refreshes"
    DITTO = "ditto"
    PVE = "pve"
    QUERY = "query"
    RESET = "reset"


class Outcome(str, Enum):
    """How the engine disposed of one finalized transcript."""

    EXECUTED = "executed"
    LOW_CONFIDENCE = "low_confidence"  # Rejected before parsing
    UNKNOWN_COMMAND = "unknown_command"  # Parsed to zero commands


# ─── Input ──────────────────────────────────────────────────────────


class Transcript(BaseModel):
    """One finalized utterance as delivered by speech recognition."""

    text: str
    confidence: float = Field(ge=0.0, le=1.0)


# ─── Output ─────────────────────────────────────────────────────────


class Command(BaseModel):
    """A single structured instruction for the calculator."""

    model_config = ConfigDict(frozen=True)

    kind: CommandKind
    value: Optional[Union[bool, int, str]] = None
    feedback: str  # Human-readable, shown to the player


class InterpretationResult(BaseModel):
    """Everything a host needs to give feedback on one transcript."""

    outcome: Outcome
    transcript: Transcript
    commands: list[Command] = Field(default_factory=list)
    failed_commands: list[Command] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def feedback(self) -> str:
        return ", ".join(c.feedback for c in self.commands)


# ─── History ────────────────────────────────────────────────────────


class CommandHistoryEntry(BaseModel):
    """A transcript that produced commands, kept for diagnostics."""

    transcript: str
    confidence: float
    commands: list[Command]
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
