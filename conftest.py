"""Pytest configuration: ensures the project root is importable."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from voice_control.calculator import InMemoryCalculator  # noqa: E402


@pytest.fixture
def calculator() -> InMemoryCalculator:
    """A calculator host exposing every control."""
    return InMemoryCalculator()
