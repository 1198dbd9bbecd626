"""
Error taxonomy for the scoring engine.

ConfigurationError is fatal and raised at import time. ContractViolation
fails a single scoring call. InsufficientCandidates is surfaced to the
caller as-is. CollaboratorFailure is always recovered locally by the
explanation fallback and never escapes a scoring call.
"""

from typing import List, Optional


class FitScoreError(Exception):
    """Base class for all engine errors."""
    pass


class ConfigurationError(FitScoreError):
    """Raised when the weight table or another static setting is invalid."""
    pass


class ContractViolation(FitScoreError):
    """Raised when an upstream profile is missing required fields."""

    def __init__(self, errors: List[str], kind: str = "profile"):
        self.errors = list(errors)
        self.kind = kind
        super().__init__(f"Invalid {kind}: " + "; ".join(self.errors))


class InsufficientCandidates(FitScoreError):
    """Raised when a comparison has fewer than two resolvable candidates."""

    def __init__(self, found: int):
        self.found = found
        super().__init__(f"Need at least 2 valid candidates to compare, got {found}")


class CollaboratorFailure(FitScoreError):
    """Raised by the narrative client on timeout, bad status or bad output."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)
