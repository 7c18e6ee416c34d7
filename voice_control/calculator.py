"""
In-memory calculator: a CalculatorControls host with no UI behind it.

Holds the calculator's live configuration as a pydantic model so the API,
the demo script and the tests can drive the engine end to end. A real page
binding replaces this class; the engine doesn't know the difference.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from .exceptions import CommandTargetNotFound

logger = logging.getLogger(__name__)

MIN_LEVEL = 1
MAX_LEVEL = 9

ALL_CONTROLS: frozenset[str] = frozenset({
    "level", "rarity", "evolution", "copies", "scouting", "bench",
    "refreshes", "ditto", "pve", "odds", "clear",
})


class CalculatorState(BaseModel):
    """The calculator inputs voice commands can change."""

    level: int = Field(default=MIN_LEVEL, ge=MIN_LEVEL, le=MAX_LEVEL)
    rarity: str = "common"
    evolution: str = "two_star"
    copies: int = Field(default=0, ge=0)
    scouting: int = Field(default=0, ge=0)
    bench: int = Field(default=0, ge=0)
    refreshes: int = Field(default=10, ge=1)
    ditto: bool = False
    pve: bool = False
    odds_requests: int = 0
    per_refresh_odds: Optional[float] = Field(default=None, ge=0, le=100)  # percent
    total_odds: Optional[float] = Field(default=None, ge=0, le=100)  # percent over `refreshes`


class InMemoryCalculator:
    """CalculatorControls over a CalculatorState.

    Args:
        state: Starting configuration. Defaults to a fresh CalculatorState.
        controls: Names of the controls this host exposes (see ALL_CONTROLS).
            Anything left out raises CommandTargetNotFound, like a page
            missing that widget.
    """

    def __init__(
        self,
        state: Optional[CalculatorState] = None,
        controls: Iterable[str] = ALL_CONTROLS,
    ):
        self.state = state or CalculatorState()
        self.controls = frozenset(controls)

    def _require(self, name: str) -> None:
        if name not in self.controls:
            raise CommandTargetNotFound(
                f"No '{name}' control on this calculator",
                details={"control": name},
            )

    # ─── CalculatorControls ─────────────────────────────────────────

    def select_level(self, level: int) -> None:
        self._require("level")
        self.state.level = max(MIN_LEVEL, min(MAX_LEVEL, level))

    def step_level(self, delta: int) -> None:
        self._require("level")
        self.state.level = max(MIN_LEVEL, min(MAX_LEVEL, self.state.level + delta))

    def select_rarity(self, rarity: str) -> None:
        self._require("rarity")
        self.state.rarity = rarity

    def select_evolution(self, stage: str) -> None:
        self._require("evolution")
        self.state.evolution = stage

    def set_number(self, field: str, value: int) -> None:
        self._require(field)
        setattr(self.state, field, value)

    def set_toggle(self, name: str, enabled: bool) -> None:
        self._require(name)
        setattr(self.state, name, enabled)

    def read_odds(self) -> None:
        self._require("odds")
        self.state.odds_requests += 1
        logger.info("Odds requested (level %d, %s)", self.state.level, self.state.rarity)

    def describe_odds(self) -> Optional[str]:
        self._require("odds")
        s = self.state
        if s.per_refresh_odds is None or s.total_odds is None:
            return None
        return (
            f"Your odds are {s.per_refresh_odds:.1f} percent per refresh, "
            f"and {s.total_odds:.1f} percent over {s.refreshes} refreshes."
        )

    def report_odds(self, per_refresh: float, total: float) -> None:
        """Record odds computed by the probability engine for the current inputs."""
        self.state.per_refresh_odds = per_refresh
        self.state.total_odds = total

    def clear_all(self) -> None:
        self._require("clear")
        self.state = CalculatorState()
