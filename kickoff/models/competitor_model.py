from uuid import uuid4
from typing import List, Optional, Dict

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

UNKNOWN_NAME = "Unknown"
TBD_NAME = "TBD"


class PlayerModel(BaseModel):
    id: str = Field(default_factory=lambda: f"p{uuid4().hex[:12]}")
    name: str = Field(min_length=1, max_length=100)

    class Config:
        from_attributes = True


class TeamModel(BaseModel):
    id: str = Field(default_factory=lambda: f"team{uuid4().hex[:12]}")
    players: List[str] = Field(default_factory=list) # Ordered player ids

    class Config:
        from_attributes = True


class CompetitorModel(BaseModel):
    """
    What the engine sees of a 1v1 player or a 2v2 team.
    The engine only ever reads `id`; `name` is used for standings tie-breaks.
    """
    id: str
    name: str = ""
    members: List[str] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @classmethod
    def from_player(cls, player: PlayerModel) -> "CompetitorModel":
        return cls(id=player.id, name=player.name, members=[player.id])

    @classmethod
    def from_team(cls, team: TeamModel, players: List[PlayerModel]) -> "CompetitorModel":
        names_by_id = {p.id: p.name for p in players}
        name = team_display_name(team, names_by_id)
        return cls(id=team.id, name=name, members=list(team.players))


def team_display_name(team: TeamModel, names_by_id: Dict[str, str]) -> str:
    return " & ".join(names_by_id.get(player_id, UNKNOWN_NAME) for player_id in team.players)


def resolve_name(competitor_id: Optional[str], competitors: List[CompetitorModel]) -> str:
    if competitor_id is None:
        return TBD_NAME
    for competitor in competitors:
        if competitor.id == competitor_id:
            return competitor.name or competitor.id
    return UNKNOWN_NAME
