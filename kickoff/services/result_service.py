"""
Score entry and competitor corrections for knockout brackets.

Every function here takes a bracket and returns a new one; the input is never
modified. Only the rounds and matches that actually change are copied, the
rest is shared with the input bracket. A call that cannot be applied (unknown
match, unusable input) returns the input bracket itself, so callers can test
`result is bracket` to find out whether anything happened.

Byes and matches still missing a competitor refuse scores on purpose: they
are settled by propagation, never by hand.
"""
import logging
from typing import List, Optional, Set, Tuple

from kickoff.core.errors import FailureKind
from kickoff.models.bracket_model import BracketModel, MatchModel, Slot, TiePolicy
from kickoff.services.score_utils import coerce_score

logger = logging.getLogger(__name__)


class _BracketDraft:
    """Copy-on-write working copy of a bracket."""

    def __init__(self, bracket: BracketModel):
        self._bracket = bracket
        self._rounds: List[List[MatchModel]] = list(bracket.rounds)
        self._copied_rounds: Set[int] = set()
        self._copied_matches: Set[Tuple[int, int]] = set()

    def locate(self, match_id: Optional[str]) -> Optional[Tuple[int, int]]:
        if match_id is None:
            return None
        location = self._bracket.locate(match_id)
        if location is None:
            return None
        return location.round_idx, location.match_idx

    def get(self, round_idx: int, match_idx: int) -> MatchModel:
        return self._rounds[round_idx][match_idx]

    def edit(self, round_idx: int, match_idx: int) -> MatchModel:
        if round_idx not in self._copied_rounds:
            self._rounds[round_idx] = list(self._rounds[round_idx])
            self._copied_rounds.add(round_idx)
        if (round_idx, match_idx) not in self._copied_matches:
            self._rounds[round_idx][match_idx] = self._rounds[round_idx][match_idx].model_copy()
            self._copied_matches.add((round_idx, match_idx))
        return self._rounds[round_idx][match_idx]

    def finish(self) -> BracketModel:
        return self._bracket.model_copy(update={"rounds": self._rounds})


def decide_winner(
    match: MatchModel,
    home_score: int,
    away_score: int,
    tie_policy: TiePolicy = TiePolicy.HOME,
    decider: Optional[Slot] = None,
) -> Optional[str]:
    if home_score > away_score:
        return match.home
    if away_score > home_score:
        return match.away
    if TiePolicy(tie_policy) == TiePolicy.HOME:
        return match.home
    if decider is None:
        return None
    return match.competitor(Slot(decider))


def apply_score(
    bracket: BracketModel,
    round_idx: int,
    match_idx: int,
    home_score,
    away_score,
    tie_policy: TiePolicy = TiePolicy.HOME,
    decider: Optional[Slot] = None,
) -> BracketModel:
    """
    Records a result and moves the winner on to the next match.

    Byes further down are resolved straight away. A completed match further
    down is reset (scores and winner cleared) because the result feeding it
    was entered again, and the walk stops there: its own result has to be
    entered again too.
    """
    match = bracket.get_match(round_idx, match_idx)
    if match is None:
        logger.warning(
            "No match at round %s, index %s (%s)",
            round_idx, match_idx, FailureKind.UNKNOWN_REFERENCE.value,
        )
        return bracket
    if match.bye or match.home is None or match.away is None:
        logger.warning(
            "Match %s cannot take a score yet (%s)", match.id, FailureKind.MATCH_NOT_READY.value,
        )
        return bracket

    home_score = coerce_score(home_score)
    away_score = coerce_score(away_score)
    winner = decide_winner(match, home_score, away_score, tie_policy, decider)
    if winner is None:
        logger.warning("Match %s is drawn %d-%d and no decider was given", match.id, home_score, away_score)
        return bracket

    draft = _BracketDraft(bracket)
    updated = draft.edit(round_idx, match_idx)
    updated.home_score = home_score
    updated.away_score = away_score
    updated.completed = True
    updated.winner = winner
    logger.info("Match %s: %d-%d, winner %s", updated.id, home_score, away_score, winner)

    _propagate(draft, updated, keep_resetting=False)
    return draft.finish()


def set_match_competitor(
    bracket: BracketModel,
    round_idx: int,
    match_idx: int,
    slot: Slot,
    competitor_id: Optional[str],
) -> BracketModel:
    """
    Puts a different competitor (or nobody) in one slot of a match.

    The previous result of that match no longer applies and is cleared, and the
    change is pushed all the way down: every completed match that ends up with
    a different pairing is reset too, until an unplayed match is reached.
    """
    match = bracket.get_match(round_idx, match_idx)
    if match is None:
        logger.warning(
            "No match at round %s, index %s (%s)",
            round_idx, match_idx, FailureKind.UNKNOWN_REFERENCE.value,
        )
        return bracket
    try:
        slot = Slot(slot)
    except ValueError:
        logger.warning("Unknown slot %r (%s)", slot, FailureKind.UNKNOWN_REFERENCE.value)
        return bracket

    draft = _BracketDraft(bracket)
    updated = draft.edit(round_idx, match_idx)
    updated.set_competitor(slot, competitor_id)
    if updated.bye:
        _settle_bye(updated)
    elif updated.completed:
        _reset(updated)
    logger.info("Match %s: %s slot set to %s", updated.id, slot.value, competitor_id)

    _propagate(draft, updated, keep_resetting=True)
    return draft.finish()


def _propagate(draft: _BracketDraft, start: MatchModel, keep_resetting: bool) -> None:
    """
    Walks forward from `start`, pushing each match's outcome into the slot it feeds.

    The outcome of a completed match is its winner, of anything else None.
    With keep_resetting=False (score entry) a completed match downstream is
    always reset, even if the pushed competitor is the one already there, and
    the reset ends its branch. With keep_resetting=True (competitor correction)
    the walk follows a branch only while the pushed value changes something,
    and each reset is pushed on.
    """
    pending = [start]
    while pending:
        current = pending.pop()
        location = draft.locate(current.next_match_id)
        if location is None:
            continue # the final, or a dangling link

        incoming = current.winner if current.completed else None
        slot = Slot(current.next_match_slot)
        existing = draft.get(*location)
        if existing.competitor(slot) == incoming and (keep_resetting or not existing.completed):
            continue
        target = draft.edit(*location)
        target.set_competitor(slot, incoming)
        logger.debug("%s -> %s (%s): %s", current.id, target.id, slot.value, incoming)

        if target.bye:
            _settle_bye(target)
            pending.append(target)
        elif target.completed:
            _reset(target)
            logger.info("Match %s reset: the result feeding it changed", target.id)
            if keep_resetting:
                pending.append(target)


def _settle_bye(match: MatchModel) -> None:
    match.winner = match.home if match.home is not None else match.away
    match.completed = match.winner is not None


def _reset(match: MatchModel) -> None:
    match.home_score = None
    match.away_score = None
    match.winner = None
    match.completed = False


def tournament_winner(bracket: Optional[BracketModel]) -> Optional[str]:
    if bracket is None:
        return None
    final = bracket.final
    if final is None or not final.completed:
        return None
    return final.winner
