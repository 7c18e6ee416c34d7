"""
Command dispatch: the boundary between the engine and the host UI.

The engine never touches concrete controls. The host hands in an object
implementing CalculatorControls; the dispatcher switches on each command's
kind and calls the one matching capability.

A control the host can't find is not fatal: the failure is logged, the
command is reported back, and the remaining commands of the same utterance
still run.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .exceptions import CommandTargetNotFound
from .models import Command, CommandKind

logger = logging.getLogger(__name__)


class CalculatorControls(Protocol):
    """What a host must offer to be driven by voice.

    Implementations raise CommandTargetNotFound when the control a call is
    aimed at does not exist on the host. describe_odds returns the current
    odds as a sentence, or None while the host has none to report.
    """

    def select_level(self, level: int) -> None: ...

    def step_level(self, delta: int) -> None: ...

    def select_rarity(self, rarity: str) -> None: ...

    def select_evolution(self, stage: str) -> None: ...

    def set_number(self, field: str, value: int) -> None: ...

    def set_toggle(self, name: str, enabled: bool) -> None: ...

    def read_odds(self) -> None: ...

    def describe_odds(self) -> Optional[str]: ...

    def clear_all(self) -> None: ...


# Kinds that land in a plain numeric input, keyed by the host's field name
_NUMBER_FIELDS: dict[CommandKind, str] = {
    CommandKind.COPIES: "copies",
    CommandKind.SCOUTING: "scouting",
    CommandKind.BENCH: "bench",
    CommandKind.REFRESHES: "refreshes",
}

_TOGGLE_FIELDS: dict[CommandKind, str] = {
    CommandKind.DITTO: "ditto",
    CommandKind.PVE: "pve",
}


class CommandDispatcher:
    """Apply Commands to a host's CalculatorControls."""

    def __init__(self, controls: CalculatorControls):
        self.controls = controls

    def apply_command(self, command: Command) -> None:
        """Route one command to its control.

        Raises:
            CommandTargetNotFound: The host has no control for this command.
            ValueError: The command kind has no route (a vocabulary/dispatcher mismatch).
        """
        kind = command.kind
        controls = self.controls

        if kind == CommandKind.LEVEL:
            controls.select_level(int(command.value))  # type: ignore[arg-type]
        elif kind == CommandKind.LEVEL_STEP:
            controls.step_level(int(command.value))  # type: ignore[arg-type]
        elif kind == CommandKind.RARITY:
            controls.select_rarity(str(command.value))
        elif kind == CommandKind.EVOLUTION:
            controls.select_evolution(str(command.value))
        elif kind in _NUMBER_FIELDS:
            controls.set_number(_NUMBER_FIELDS[kind], int(command.value))  # type: ignore[arg-type]
        elif kind in _TOGGLE_FIELDS:
            controls.set_toggle(_TOGGLE_FIELDS[kind], bool(command.value))
        elif kind == CommandKind.QUERY:
            controls.read_odds()
        elif kind == CommandKind.RESET:
            controls.clear_all()
        else:
            raise ValueError(f"No dispatch route for command kind {kind!r}")

    def dispatch(self, commands: list[Command]) -> list[Command]:
        """Apply every command in order.

        Returns:
            The commands whose target control could not be found.
        """
        failed: list[Command] = []
        for command in commands:
            try:
                self.apply_command(command)
            except CommandTargetNotFound as e:
                logger.warning("Could not apply %s (%s): %s", command.kind.value, command.feedback, e)
                failed.append(command)
        return failed
