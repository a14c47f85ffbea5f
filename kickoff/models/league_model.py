from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class LeagueMatchModel(BaseModel):
    id: str
    round_idx: int

    home: str
    away: str

    home_score: Optional[int] = None
    away_score: Optional[int] = None

    completed: bool = False
    winner: Optional[str] = None # None on a draw or while unplayed

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class LeagueModel(BaseModel):
    matches: List[LeagueMatchModel] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def index_of(self, match_id: str) -> Optional[int]:
        for idx, match in enumerate(self.matches):
            if match.id == match_id:
                return idx
        return None

    @property
    def round_count(self) -> int:
        return len({match.round_idx for match in self.matches})
