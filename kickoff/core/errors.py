from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    INSUFFICIENT_COMPETITORS = "insufficient-competitors"
    UNKNOWN_REFERENCE = "unknown-reference"
    INVALID_SCORE = "invalid-score"
    MATCH_NOT_READY = "match-not-ready"


class TournamentError(ValueError):
    """Business failure raised by the tournament document service (never by the engine)."""
    kind: Optional[FailureKind] = None

    def __init__(self, message: str, kind: Optional[FailureKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class InsufficientCompetitorsError(TournamentError):
    kind = FailureKind.INSUFFICIENT_COMPETITORS


class UnknownReferenceError(TournamentError):
    kind = FailureKind.UNKNOWN_REFERENCE


class MatchNotReadyError(TournamentError):
    kind = FailureKind.MATCH_NOT_READY


class InvalidRosterError(TournamentError):
    pass
