from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from kickoff.models.bracket_model import BracketModel
from kickoff.models.competitor_model import PlayerModel, TeamModel
from kickoff.models.league_model import LeagueModel


class TournamentFormat(str, Enum):
    SINGLES = "1v1"
    DOUBLES = "2v2"


TEAM_SIZE = {
    TournamentFormat.SINGLES.value: 1,
    TournamentFormat.DOUBLES.value: 2,
}


def _empty_slots() -> Dict[str, None]:
    return {fmt.value: None for fmt in TournamentFormat}


class TournamentState(BaseModel):
    """
    The whole persisted tournament document.

    Brackets and leagues are keyed by format value ("1v1", "2v2"); a null entry
    means nothing has been generated for that format yet (or it was invalidated).
    """
    players: List[PlayerModel] = Field(default_factory=list)
    teams: List[TeamModel] = Field(default_factory=list)
    brackets: Dict[str, Optional[BracketModel]] = Field(default_factory=_empty_slots)
    leagues: Dict[str, Optional[LeagueModel]] = Field(default_factory=_empty_slots)
    active_format: TournamentFormat = TournamentFormat.SINGLES

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True
        validate_default = True

    @field_validator("brackets", "leagues")
    @classmethod
    def every_format_has_a_slot(cls, v):
        allowed = {fmt.value for fmt in TournamentFormat}
        unknown = set(v) - allowed
        if unknown:
            raise ValueError(f"Unknown tournament format(s): {sorted(unknown)}")
        return {**_empty_slots(), **v}

    @property
    def format_key(self) -> str:
        return TournamentFormat(self.active_format).value

    def bracket_for(self, fmt: str) -> Optional[BracketModel]:
        return self.brackets.get(TournamentFormat(fmt).value)

    def league_for(self, fmt: str) -> Optional[LeagueModel]:
        return self.leagues.get(TournamentFormat(fmt).value)
