from typing import Dict, Iterable, List, Optional, Union

from kickoff.models.bracket_model import MatchModel
from kickoff.models.competitor_model import CompetitorModel
from kickoff.models.league_model import LeagueMatchModel
from kickoff.models.standings_model import StandingRow

WIN_POINTS = 3
DRAW_POINTS = 1

AnyMatch = Union[MatchModel, LeagueMatchModel]


def _is_countable(match: AnyMatch) -> bool:
    if not match.completed or getattr(match, "bye", False):
        return False
    if match.home is None or match.away is None:
        return False
    return match.home_score is not None and match.away_score is not None


def _apply_result(row: StandingRow, scored: int, conceded: int) -> None:
    row.played += 1
    row.goals_for += scored
    row.goals_against += conceded
    if scored > conceded:
        row.wins += 1
        row.points += WIN_POINTS
    elif scored < conceded:
        row.losses += 1
    else:
        row.draws += 1
        row.points += DRAW_POINTS


def _finish(row: StandingRow) -> StandingRow:
    row.goal_diff = row.goals_for - row.goals_against
    row.win_percentage = round(row.wins / row.played * 100) if row.played else 0
    return row


def competitor_stats(competitor: CompetitorModel, matches: Iterable[AnyMatch]) -> StandingRow:
    """Played/won/drawn/lost, goals and points for one competitor."""
    row = StandingRow(id=competitor.id, name=competitor.name, members=list(competitor.members))
    for match in matches:
        if not _is_countable(match):
            continue
        if match.home == competitor.id:
            _apply_result(row, match.home_score, match.away_score)
        elif match.away == competitor.id:
            _apply_result(row, match.away_score, match.home_score)
    return _finish(row)


def standings(competitors: List[CompetitorModel], matches: Iterable[AnyMatch]) -> List[StandingRow]:
    """
    League table for `competitors` over the completed matches in `matches`.

    Ordered by points, goal difference and goals scored (all descending), then
    by display name so the order is the same every time for the same input.
    Matches involving someone who is not in `competitors` are ignored.
    """
    rows: Dict[str, StandingRow] = {
        c.id: StandingRow(id=c.id, name=c.name, members=list(c.members)) for c in competitors
    }

    for match in matches:
        if not _is_countable(match):
            continue
        home: Optional[StandingRow] = rows.get(match.home)
        away: Optional[StandingRow] = rows.get(match.away)
        if home is None or away is None:
            continue
        _apply_result(home, match.home_score, match.away_score)
        _apply_result(away, match.away_score, match.home_score)

    return sorted(
        (_finish(row) for row in rows.values()),
        key=lambda row: (-row.points, -row.goal_diff, -row.goals_for, row.name, row.id),
    )
