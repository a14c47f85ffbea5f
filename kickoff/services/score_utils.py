import logging
from typing import Any

from kickoff.core.errors import FailureKind

logger = logging.getLogger(__name__)


def coerce_score(value: Any) -> int:
    """
    Turns whatever the caller passed as a score into an int >= 0.
    Negative, non-numeric or missing values become 0 instead of raising.
    """
    try:
        score = int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Coercing score %r to 0 (%s)", value, FailureKind.INVALID_SCORE.value)
        return 0
    if score < 0:
        logger.warning("Coercing negative score %r to 0 (%s)", value, FailureKind.INVALID_SCORE.value)
        return 0
    return score
