from typing import List

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class StandingRow(BaseModel):
    id: str
    name: str = ""
    members: List[str] = Field(default_factory=list)

    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_diff: int = 0
    points: int = 0
    win_percentage: int = 0

    class Config:
        alias_generator = to_camel
        populate_by_name = True
