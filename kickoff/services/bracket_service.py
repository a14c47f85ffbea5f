import logging
import random # For shuffling competitors
from typing import List, Optional

from kickoff.core.errors import FailureKind
from kickoff.models.bracket_model import BracketModel, MatchModel, Slot
from kickoff.models.competitor_model import CompetitorModel

logger = logging.getLogger(__name__)


def next_power_of_two(n: int) -> int:
    bracket_size = 1
    while bracket_size < n:
        bracket_size *= 2
    return bracket_size


def build_bracket(competitors: List[CompetitorModel], rng=random) -> Optional[BracketModel]:
    """
    Builds a single elimination bracket with a uniformly random draw.

    If the number of competitors is not a power of 2, the surplus slots become
    byes: those competitors sit in a one-competitor match in round 0 which is
    already completed, so they show up directly in round 1.
    Returns None when there are fewer than 2 competitors.

    `rng` only needs a `shuffle` method; pass a seeded random.Random to get a
    reproducible draw.
    """
    num_competitors = len(competitors)
    if num_competitors < 2:
        logger.warning(
            "Not building bracket (%s): %d competitor(s)",
            FailureKind.INSUFFICIENT_COMPETITORS.value, num_competitors,
        )
        return None

    bracket_size = next_power_of_two(num_competitors)
    num_byes = bracket_size - num_competitors
    # 2n - size is always even, so everybody without a bye has an opponent
    num_regular_matches = (num_competitors - num_byes) // 2

    shuffled_ids = [competitor.id for competitor in competitors]
    rng.shuffle(shuffled_ids)

    # --- Round 0: regular matches first, then one bye match per remaining competitor ---
    first_round: List[MatchModel] = []
    for i in range(num_regular_matches):
        first_round.append(MatchModel(
            id=f"r0m{i}",
            home=shuffled_ids[2 * i],
            away=shuffled_ids[2 * i + 1],
        ))

    bye_players = shuffled_ids[num_regular_matches * 2:]
    for i, competitor_id in enumerate(bye_players):
        first_round.append(MatchModel(
            id=f"r0bye{i}",
            home=competitor_id,
            bye=True,
            completed=True,
            winner=competitor_id,
        ))

    # Spread the byes over the draw instead of stacking them at the bottom
    rng.shuffle(first_round)
    rounds: List[List[MatchModel]] = [first_round]

    # --- Subsequent rounds ---
    while len(rounds[-1]) > 1:
        previous_round = rounds[-1]
        round_idx = len(rounds)
        current_round: List[MatchModel] = []

        for i in range(0, len(previous_round), 2):
            home_source = previous_round[i]
            away_source = previous_round[i + 1]
            new_match = MatchModel(
                id=f"r{round_idx}m{i // 2}",
                home_source_id=home_source.id,
                away_source_id=away_source.id,
            )
            _link(home_source, new_match, Slot.HOME)
            _link(away_source, new_match, Slot.AWAY)
            current_round.append(new_match)

        rounds.append(current_round)

    bracket = BracketModel.from_rounds(rounds)
    logger.info(
        "Built bracket: %d competitors, %d byes, %d rounds",
        num_competitors, num_byes, len(rounds),
    )
    return bracket


def _link(source: MatchModel, target: MatchModel, slot: Slot) -> None:
    source.next_match_id = target.id
    source.next_match_slot = slot.value
    # Rounds are built in order, so a bye in the previous round is already resolved here
    if source.completed and source.winner is not None:
        target.set_competitor(slot, source.winner)
