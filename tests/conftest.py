import pytest
from unittest.mock import patch

from kickoff.models.competitor_model import CompetitorModel
from kickoff.services.bracket_service import build_bracket


def _make_competitors(n):
    return [CompetitorModel(id=f"c{i}", name=f"Player {i}", members=[f"c{i}"]) for i in range(n)]


def _build_unshuffled(n):
    # Draw in list order: r0m0 = c0 v c1, r0m1 = c2 v c3, ..., byes last
    with patch('random.shuffle', side_effect=lambda x: x):
        return build_bracket(_make_competitors(n))


@pytest.fixture
def make_competitors():
    return _make_competitors


@pytest.fixture
def unshuffled_bracket():
    return _build_unshuffled
