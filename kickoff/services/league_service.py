import logging
from typing import List, Optional, Tuple

from kickoff.core.errors import FailureKind
from kickoff.models.competitor_model import CompetitorModel
from kickoff.models.league_model import LeagueMatchModel, LeagueModel
from kickoff.services.score_utils import coerce_score

logger = logging.getLogger(__name__)


def prepare_rotation(competitor_ids: List[str]) -> List[Optional[str]]:
    rotation: List[Optional[str]] = list(competitor_ids)
    if len(rotation) % 2 != 0:
        rotation.append(None) # whoever meets None sits the round out
    return rotation


def capture_pairs(rotation: List[Optional[str]]) -> List[Tuple[str, str]]:
    half = len(rotation) // 2
    return [
        (rotation[i], rotation[-(i + 1)])
        for i in range(half)
        if rotation[i] is not None and rotation[-(i + 1)] is not None
    ]


def rotate_players(rotation: List[Optional[str]]) -> List[Optional[str]]:
    if len(rotation) <= 2:
        return rotation[:]
    return [rotation[0], rotation[-1], *rotation[1:-1]]


def build_league(competitors: List[CompetitorModel]) -> Optional[LeagueModel]:
    """
    Round robin schedule using the circle method.

    Position 0 stays put while everybody else rotates one place per round, which
    gives n-1 rounds (n rounded up to even) where every pair meets exactly once.
    Returns None when there are fewer than 2 competitors.
    """
    if len(competitors) < 2:
        logger.warning(
            "Not building league (%s): %d competitor(s)",
            FailureKind.INSUFFICIENT_COMPETITORS.value, len(competitors),
        )
        return None

    rotation = prepare_rotation([competitor.id for competitor in competitors])
    matches: List[LeagueMatchModel] = []
    for round_idx in range(len(rotation) - 1):
        for match_in_round, (home, away) in enumerate(capture_pairs(rotation)):
            matches.append(LeagueMatchModel(
                id=f"L{round_idx}m{match_in_round}",
                round_idx=round_idx,
                home=home,
                away=away,
            ))
        rotation = rotate_players(rotation)

    logger.info("Built league: %d competitors, %d matches", len(competitors), len(matches))
    return LeagueModel(matches=matches)


def apply_league_score(league: LeagueModel, match_id: str, home_score, away_score) -> LeagueModel:
    """Records a league result. Draws are allowed: the winner is then None."""
    idx = league.index_of(match_id)
    if idx is None:
        logger.warning("No league match %r (%s)", match_id, FailureKind.UNKNOWN_REFERENCE.value)
        return league

    home_score = coerce_score(home_score)
    away_score = coerce_score(away_score)
    match = league.matches[idx]
    if home_score > away_score:
        winner = match.home
    elif away_score > home_score:
        winner = match.away
    else:
        winner = None

    matches = list(league.matches)
    matches[idx] = match.model_copy(update={
        "home_score": home_score,
        "away_score": away_score,
        "completed": True,
        "winner": winner,
    })
    logger.info("League match %s: %d-%d", match_id, home_score, away_score)
    return league.model_copy(update={"matches": matches})


def league_rounds(league: LeagueModel) -> List[Tuple[int, List[LeagueMatchModel]]]:
    """Groups the fixtures by round, rounds in numeric order."""
    rounds = {}
    for match in league.matches:
        rounds.setdefault(match.round_idx, []).append(match)
    return sorted(rounds.items(), key=lambda item: item[0])


def league_page(league: LeagueModel, page: int) -> Tuple[int, List[LeagueMatchModel]]:
    """
    One page of fixtures per round, pages numbered from 1.
    Out of range pages are clamped to the first/last round.
    Returns (round_idx, matches), or (-1, []) for an empty league.
    """
    rounds = league_rounds(league)
    if not rounds:
        return -1, []
    page = min(max(page, 1), len(rounds))
    return rounds[page - 1]
