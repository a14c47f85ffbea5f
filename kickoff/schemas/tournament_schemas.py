from pydantic import BaseModel, Field
from typing import List, Optional

from kickoff.models.bracket_model import Slot
from kickoff.models.league_model import LeagueMatchModel
from kickoff.models.tournament_model import TournamentFormat


class AddPlayerRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Display name of the player")


class AddTeamRequest(BaseModel):
    """Payload for forming a 2v2 team out of two registered players."""
    player_ids: List[str] = Field(..., min_length=2, max_length=2, description="IDs of the two players")


class FormatRequest(BaseModel):
    format: TournamentFormat = Field(..., description="Tournament format to make active (1v1 or 2v2)")


class ScorePayload(BaseModel):
    home_score: int = Field(..., ge=0, description="Score of the home competitor")
    away_score: int = Field(..., ge=0, description="Score of the away competitor")
    decider: Optional[Slot] = Field(None, description="Slot that won extra time / penalties on a drawn knockout match")


class CompetitorSwapRequest(BaseModel):
    slot: Slot = Field(..., description="Which slot of the match to change")
    competitor_id: Optional[str] = Field(None, description="New competitor, or null to empty the slot")


class LeagueRoundResponse(BaseModel):
    page: int
    total_pages: int
    round_idx: int
    matches: List[LeagueMatchModel] = Field(default_factory=list)
