#!/usr/bin/env python3
"""
PAC Voice Control: Entry Point
==============================

Runs sample utterances (or your own) through the voice control engine and
prints what it made of them.

Usage:
    python main.py                                  # Built-in samples
    python main.py "level seven rare have three"    # One utterance per argument
    VOICE_CONFIDENCE_THRESHOLD=0.35 python main.py  # Override the gate
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from voice_control.calculator import InMemoryCalculator
from voice_control.config import EngineConfig
from voice_control.engine import VoiceControlEngine
from voice_control.models import InterpretationResult, Outcome, Transcript

load_dotenv()


# ─── Sample Utterances: (text, confidence) ──────────────────────────

SAMPLES: list[tuple[str, float]] = [
    ("level seven rare have three", 0.93),
    ("pve on scouting four copy two", 0.88),
    ("copy two scouting four pve on", 0.88),
    ("scouted four", 0.91),
    ("level twelve", 0.90),
    ("three star purple no ditto", 0.82),
    ("what's my odds", 0.77),
    ("level up", 0.95),
    ("banana", 0.95),
    ("reset", 0.41),
]


# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Pretty Printer ─────────────────────────────────────────────────


def _print_result(result: InterpretationResult, status: str) -> None:
    t = result.transcript
    print(f"  {_BOLD}\"{t.text}\"{_RESET}  {_DIM}(confidence {t.confidence:.0%}){_RESET}")

    if result.outcome == Outcome.LOW_CONFIDENCE:
        print(f"    {_YELLOW}LOW CONFIDENCE{_RESET}  {status}")
    elif result.outcome == Outcome.UNKNOWN_COMMAND:
        print(f"    {_RED}UNKNOWN COMMAND{_RESET}  {status}")
    else:
        for c in result.commands:
            value = "" if c.value is None else f" = {c.value!r}"
            print(f"    {_GREEN}✓{_RESET} {c.kind.value}{value}  {_DIM}{c.feedback}{_RESET}")
        for c in result.failed_commands:
            print(f"    {_RED}✗ {c.kind.value}: control not found{_RESET}")
    print()


def print_session(results: list[tuple[InterpretationResult, str]], calculator: InMemoryCalculator) -> int:
    """Print every result and the final calculator state.

    Returns:
        0 if every utterance executed, 1 otherwise.
    """
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  VOICE CONTROL SESSION{_RESET}")
    print(f"{'=' * _WIDTH}\n")

    for result, status in results:
        _print_result(result, status)

    print(f"{'─' * _WIDTH}")
    print(f"  {_BOLD}Calculator state{_RESET}")
    for name, value in calculator.state.model_dump().items():
        print(f"    {name:<14} {value}")
    print(f"{'=' * _WIDTH}\n")

    executed = sum(1 for r, _ in results if r.outcome == Outcome.EXECUTED)
    return 0 if executed == len(results) else 1


# ─── Main ────────────────────────────────────────────────────────────


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    utterances = [(text, 1.0) for text in sys.argv[1:]] or SAMPLES

    calculator = InMemoryCalculator()
    engine = VoiceControlEngine(calculator, config=EngineConfig.from_env())

    results = []
    for text, confidence in utterances:
        result = engine.process(Transcript(text=text, confidence=confidence))
        results.append((result, engine.status))

    sys.exit(print_session(results, calculator))


if __name__ == "__main__":
    main()
