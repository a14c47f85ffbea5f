from enum import Enum
from typing import Annotated, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class Slot(str, Enum):
    HOME = "home"
    AWAY = "away"


class TiePolicy(str, Enum):
    HOME = "home" # Drawn knockout match goes to the home competitor
    DECIDER = "decider" # Caller must name the slot that won extra time / penalties


# Where a bracket slot gets its competitor from.

class Unfilled(BaseModel):
    kind: Literal["unfilled"] = "unfilled"


class FromCompetitor(BaseModel):
    kind: Literal["competitor"] = "competitor"
    competitor_id: str


class FromMatch(BaseModel):
    kind: Literal["match"] = "match"
    match_id: str


SlotSource = Annotated[Union[Unfilled, FromCompetitor, FromMatch], Field(discriminator="kind")]


class MatchModel(BaseModel):
    id: str

    home: Optional[str] = None
    away: Optional[str] = None

    home_source_id: Optional[str] = None
    away_source_id: Optional[str] = None

    home_score: Optional[int] = None
    away_score: Optional[int] = None

    completed: bool = False
    winner: Optional[str] = None
    bye: bool = False

    next_match_id: Optional[str] = None
    next_match_slot: Optional[Slot] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True

    def competitor(self, slot: Slot) -> Optional[str]:
        return self.home if Slot(slot) == Slot.HOME else self.away

    def set_competitor(self, slot: Slot, competitor_id: Optional[str]) -> None:
        if Slot(slot) == Slot.HOME:
            self.home = competitor_id
        else:
            self.away = competitor_id

    def source(self, slot: Slot) -> SlotSource:
        """Tagged view of a slot: fed by an upstream match, seeded directly, or empty."""
        source_id = self.home_source_id if Slot(slot) == Slot.HOME else self.away_source_id
        if source_id is not None:
            return FromMatch(match_id=source_id)
        competitor_id = self.competitor(slot)
        if competitor_id is not None:
            return FromCompetitor(competitor_id=competitor_id)
        return Unfilled()

    @property
    def is_final(self) -> bool:
        return self.next_match_id is None


class MatchLocation(BaseModel):
    round_idx: int
    match_idx: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class BracketModel(BaseModel):
    rounds: List[List[MatchModel]] = Field(default_factory=list)
    match_map: Dict[str, MatchLocation] = Field(default_factory=dict)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @classmethod
    def from_rounds(cls, rounds: List[List[MatchModel]]) -> "BracketModel":
        match_map = {
            match.id: MatchLocation(round_idx=round_idx, match_idx=match_idx)
            for round_idx, round_matches in enumerate(rounds)
            for match_idx, match in enumerate(round_matches)
        }
        return cls(rounds=rounds, match_map=match_map)

    def get_match(self, round_idx: int, match_idx: int) -> Optional[MatchModel]:
        if round_idx < 0 or round_idx >= len(self.rounds):
            return None
        round_matches = self.rounds[round_idx]
        if match_idx < 0 or match_idx >= len(round_matches):
            return None
        return round_matches[match_idx]

    def locate(self, match_id: str) -> Optional[MatchLocation]:
        return self.match_map.get(match_id)

    def iter_matches(self) -> Iterator[MatchModel]:
        for round_matches in self.rounds:
            yield from round_matches

    @property
    def final(self) -> Optional[MatchModel]:
        if not self.rounds or not self.rounds[-1]:
            return None
        return self.rounds[-1][0]
