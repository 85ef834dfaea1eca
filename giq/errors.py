"""
Exception types used across giq.

The CLI catches ``GiqError`` and reports it on stderr; anything else is a
bug and is allowed to surface with a traceback.
"""

from __future__ import annotations


class GiqError(Exception):
    """Base class for all giq specific errors."""


class ConfigurationError(GiqError):
    """Raised when the active AI provider is missing required settings."""


class TransportError(GiqError):
    """Raised when git or the AI backend fails at the process/network layer."""


class EmptyResultError(GiqError):
    """Raised when a call succeeded but produced nothing usable."""


class UserCancelled(GiqError):
    """Raised when an interactive prompt ends without a selection."""


class ValidationError(GiqError):
    """Raised when the requested operation cannot run on the current input."""


class TerminalError(GiqError):
    """Raised when an interactive terminal is required but not available."""
