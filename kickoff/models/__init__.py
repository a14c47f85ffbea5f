# Re-export the models so callers can import them from kickoff.models directly
from .competitor_model import CompetitorModel, PlayerModel, TeamModel
from .bracket_model import (
    BracketModel,
    FromCompetitor,
    FromMatch,
    MatchLocation,
    MatchModel,
    Slot,
    SlotSource,
    TiePolicy,
    Unfilled,
)
from .league_model import LeagueMatchModel, LeagueModel
from .standings_model import StandingRow
from .tournament_model import TournamentFormat, TournamentState
