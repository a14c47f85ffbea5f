"""
Operations on the whole tournament document.

These are the functions the HTTP layer (or any other caller) uses. Like the
engine they never modify the state they are given and return a new one, but
unlike the engine they raise TournamentError subclasses when a request makes
no sense, so the caller can report why nothing changed.
"""
import logging
import random
from typing import List, Optional

from kickoff.core.errors import (
    InsufficientCompetitorsError,
    InvalidRosterError,
    MatchNotReadyError,
    UnknownReferenceError,
)
from kickoff.models.bracket_model import BracketModel, Slot, TiePolicy
from kickoff.models.competitor_model import (
    CompetitorModel,
    PlayerModel,
    TeamModel,
    resolve_name,
)
from kickoff.models.league_model import LeagueModel
from kickoff.models.standings_model import StandingRow
from kickoff.models.tournament_model import TEAM_SIZE, TournamentFormat, TournamentState
from kickoff.services import bracket_service, league_service, result_service, standings_service

logger = logging.getLogger(__name__)

DEFAULT_PLAYER_NAMES = [
    "Neymar", "Mbappé", "Vinicius Jr", "Rodrygo",
    "Haaland", "De Bruyne", "Salah", "Benzema",
]


def default_state() -> TournamentState:
    players = [PlayerModel(id=f"p{i}", name=name) for i, name in enumerate(DEFAULT_PLAYER_NAMES, start=1)]
    return TournamentState(players=players)


def _invalidate(state: TournamentState, fmt: str) -> TournamentState:
    fmt = TournamentFormat(fmt).value
    return state.model_copy(update={
        "brackets": {**state.brackets, fmt: None},
        "leagues": {**state.leagues, fmt: None},
    })


# --- Roster ---

def add_player(state: TournamentState, name: str) -> TournamentState:
    name = (name or "").strip()
    if not name:
        raise InvalidRosterError("Player name cannot be empty.")
    player = PlayerModel(name=name)
    new_state = state.model_copy(update={"players": [*state.players, player]})
    logger.info("Added player %s (%s)", player.id, player.name)
    return _invalidate(new_state, TournamentFormat.SINGLES)


def remove_player(state: TournamentState, player_id: str) -> TournamentState:
    if not any(p.id == player_id for p in state.players):
        raise UnknownReferenceError(f"Player with ID {player_id} not found.")
    players = [p for p in state.players if p.id != player_id]
    teams = [t for t in state.teams if player_id not in t.players]
    new_state = state.model_copy(update={"players": players, "teams": teams})
    new_state = _invalidate(new_state, TournamentFormat.SINGLES)
    if len(teams) != len(state.teams):
        new_state = _invalidate(new_state, TournamentFormat.DOUBLES)
    logger.info("Removed player %s", player_id)
    return new_state


def add_team(state: TournamentState, player_ids: List[str]) -> TournamentState:
    team_size = TEAM_SIZE[TournamentFormat.DOUBLES.value]
    if len(player_ids) != team_size or len(set(player_ids)) != team_size:
        raise InvalidRosterError(f"A team needs exactly {team_size} different players.")
    known = {p.id for p in state.players}
    missing = [pid for pid in player_ids if pid not in known]
    if missing:
        raise UnknownReferenceError(f"Unknown player(s): {', '.join(missing)}")
    already_teamed = {pid for team in state.teams for pid in team.players}
    taken = [pid for pid in player_ids if pid in already_teamed]
    if taken:
        raise InvalidRosterError(f"Player(s) already in a team: {', '.join(taken)}")

    team = TeamModel(players=list(player_ids))
    new_state = state.model_copy(update={"teams": [*state.teams, team]})
    logger.info("Added team %s (%s)", team.id, " & ".join(player_ids))
    return _invalidate(new_state, TournamentFormat.DOUBLES)


def remove_team(state: TournamentState, team_id: str) -> TournamentState:
    if not any(t.id == team_id for t in state.teams):
        raise UnknownReferenceError(f"Team with ID {team_id} not found.")
    teams = [t for t in state.teams if t.id != team_id]
    logger.info("Removed team %s", team_id)
    return _invalidate(state.model_copy(update={"teams": teams}), TournamentFormat.DOUBLES)


def set_format(state: TournamentState, fmt: str) -> TournamentState:
    try:
        fmt = TournamentFormat(fmt).value
    except ValueError:
        raise UnknownReferenceError(f"Unknown tournament format '{fmt}'.")
    return state.model_copy(update={"active_format": fmt})


def competitors_for(state: TournamentState, fmt: Optional[str] = None) -> List[CompetitorModel]:
    """Players for 1v1, teams (named "A & B") for 2v2."""
    fmt = TournamentFormat(fmt or state.format_key)
    if fmt == TournamentFormat.SINGLES:
        return [CompetitorModel.from_player(p) for p in state.players]
    return [CompetitorModel.from_team(t, state.players) for t in state.teams]


def display_name(state: TournamentState, competitor_id: Optional[str], fmt: Optional[str] = None) -> str:
    return resolve_name(competitor_id, competitors_for(state, fmt))


# --- Structures for the active format ---

def generate_bracket(state: TournamentState, rng=random) -> TournamentState:
    fmt = state.format_key
    competitors = competitors_for(state, fmt)
    bracket = bracket_service.build_bracket(competitors, rng)
    if bracket is None:
        raise InsufficientCompetitorsError(f"Need at least 2 competitors for a {fmt} bracket, have {len(competitors)}.")
    return state.model_copy(update={"brackets": {**state.brackets, fmt: bracket}})


def generate_league(state: TournamentState) -> TournamentState:
    fmt = state.format_key
    competitors = competitors_for(state, fmt)
    league = league_service.build_league(competitors)
    if league is None:
        raise InsufficientCompetitorsError(f"Need at least 2 competitors for a {fmt} league, have {len(competitors)}.")
    return state.model_copy(update={"leagues": {**state.leagues, fmt: league}})


def reset_tournament(state: TournamentState) -> TournamentState:
    logger.info("Resetting %s tournament", state.format_key)
    return _invalidate(state, state.format_key)


def _active_bracket(state: TournamentState) -> BracketModel:
    bracket = state.bracket_for(state.format_key)
    if bracket is None:
        raise UnknownReferenceError(f"No {state.format_key} bracket has been generated.")
    return bracket


def _active_league(state: TournamentState) -> LeagueModel:
    league = state.league_for(state.format_key)
    if league is None:
        raise UnknownReferenceError(f"No {state.format_key} league has been generated.")
    return league


def _with_bracket(state: TournamentState, bracket: BracketModel) -> TournamentState:
    return state.model_copy(update={"brackets": {**state.brackets, state.format_key: bracket}})


def record_bracket_score(
    state: TournamentState,
    round_idx: int,
    match_idx: int,
    home_score: int,
    away_score: int,
    tie_policy: TiePolicy = TiePolicy.HOME,
    decider: Optional[Slot] = None,
) -> TournamentState:
    bracket = _active_bracket(state)
    match = bracket.get_match(round_idx, match_idx)
    if match is None:
        raise UnknownReferenceError(f"No match at round {round_idx}, index {match_idx}.")
    updated = result_service.apply_score(bracket, round_idx, match_idx, home_score, away_score, tie_policy, decider)
    if updated is bracket:
        raise MatchNotReadyError(f"Result for match {match.id} could not be recorded.")
    return _with_bracket(state, updated)


def swap_bracket_competitor(
    state: TournamentState,
    round_idx: int,
    match_idx: int,
    slot: Slot,
    competitor_id: Optional[str],
) -> TournamentState:
    bracket = _active_bracket(state)
    if bracket.get_match(round_idx, match_idx) is None:
        raise UnknownReferenceError(f"No match at round {round_idx}, index {match_idx}.")
    if competitor_id is not None and competitor_id not in {c.id for c in competitors_for(state)}:
        raise UnknownReferenceError(f"Competitor with ID {competitor_id} not found.")
    updated = result_service.set_match_competitor(bracket, round_idx, match_idx, slot, competitor_id)
    return _with_bracket(state, updated)


def record_league_score(state: TournamentState, match_id: str, home_score: int, away_score: int) -> TournamentState:
    league = _active_league(state)
    if league.index_of(match_id) is None:
        raise UnknownReferenceError(f"League match with ID {match_id} not found.")
    updated = league_service.apply_league_score(league, match_id, home_score, away_score)
    return state.model_copy(update={"leagues": {**state.leagues, state.format_key: updated}})


def standings_table(state: TournamentState, structure: str = "league") -> List[StandingRow]:
    """Table for the active format, from its league (default) or its knockout bracket."""
    if structure == "bracket":
        bracket = state.bracket_for(state.format_key)
        matches = list(bracket.iter_matches()) if bracket is not None else []
    elif structure == "league":
        league = state.league_for(state.format_key)
        matches = league.matches if league is not None else []
    else:
        raise UnknownReferenceError(f"Unknown structure '{structure}'.")
    return standings_service.standings(competitors_for(state), matches)


def champion(state: TournamentState) -> Optional[CompetitorModel]:
    winner_id = result_service.tournament_winner(state.bracket_for(state.format_key))
    if winner_id is None:
        return None
    for competitor in competitors_for(state):
        if competitor.id == winner_id:
            return competitor
    return CompetitorModel(id=winner_id, name=display_name(state, winner_id))


class TournamentService:
    """
    Runs the operations above against a state store.

    Every write loads the stored snapshot, applies one operation and saves the
    whole result back (last write wins). TournamentError subclasses raised by
    an operation propagate and nothing is saved.
    """

    def __init__(self, store):
        self.store = store

    def _apply(self, operation, *args) -> TournamentState:
        new_state = operation(self.store.load(), *args)
        self.store.save(new_state)
        return new_state

    def get_state(self) -> TournamentState:
        return self.store.load()

    # --- Roster ---

    def add_player(self, name: str) -> TournamentState:
        return self._apply(add_player, name)

    def remove_player(self, player_id: str) -> TournamentState:
        return self._apply(remove_player, player_id)

    def add_team(self, player_ids: List[str]) -> TournamentState:
        return self._apply(add_team, player_ids)

    def remove_team(self, team_id: str) -> TournamentState:
        return self._apply(remove_team, team_id)

    def set_format(self, fmt: str) -> TournamentState:
        return self._apply(set_format, fmt)

    # --- Structures ---

    def generate_bracket(self) -> TournamentState:
        return self._apply(generate_bracket)

    def generate_league(self) -> TournamentState:
        return self._apply(generate_league)

    def reset_tournament(self) -> TournamentState:
        return self._apply(reset_tournament)

    def record_bracket_score(
        self,
        round_idx: int,
        match_idx: int,
        home_score: int,
        away_score: int,
        tie_policy: TiePolicy = TiePolicy.HOME,
        decider: Optional[Slot] = None,
    ) -> TournamentState:
        return self._apply(record_bracket_score, round_idx, match_idx, home_score, away_score, tie_policy, decider)

    def swap_bracket_competitor(
        self, round_idx: int, match_idx: int, slot: Slot, competitor_id: Optional[str]
    ) -> TournamentState:
        return self._apply(swap_bracket_competitor, round_idx, match_idx, slot, competitor_id)

    def record_league_score(self, match_id: str, home_score: int, away_score: int) -> TournamentState:
        return self._apply(record_league_score, match_id, home_score, away_score)

    # --- Reads ---

    def standings_table(self, structure: str = "league") -> List[StandingRow]:
        return standings_table(self.store.load(), structure)

    def champion(self) -> Optional[CompetitorModel]:
        return champion(self.store.load())
