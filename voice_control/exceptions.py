"""
Custom exception hierarchy for voice control.

Every failure the engine can run into is handled locally and turned into
status text; these types exist so each layer can catch exactly the failure
it knows how to recover from.
"""

from __future__ import annotations


class VoiceControlError(Exception):
    """Base exception for all voice control failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(VoiceControlError):
    """An engine setting is missing, malformed or out of range."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_CONFIG", message, details)


class CommandTargetNotFound(VoiceControlError):
    """The host could not locate the control a command is aimed at."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("TARGET_NOT_FOUND", message, details)
