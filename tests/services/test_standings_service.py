from kickoff.models.bracket_model import MatchModel
from kickoff.models.competitor_model import CompetitorModel
from kickoff.models.league_model import LeagueMatchModel
from kickoff.services.standings_service import competitor_stats, standings


def played(match_id, home, away, home_score, away_score):
    return LeagueMatchModel(
        id=match_id, round_idx=0, home=home, away=away,
        home_score=home_score, away_score=away_score, completed=True,
    )


A = CompetitorModel(id="a", name="Alice")
B = CompetitorModel(id="b", name="Bob")
C = CompetitorModel(id="c", name="Carol")


class TestStandings:

    def test_single_result(self):
        rows = standings([A, B], [played("m1", "a", "b", 3, 1)])

        assert [r.id for r in rows] == ["a", "b"]
        alice, bob = rows
        assert (alice.played, alice.wins, alice.points, alice.goal_diff) == (1, 1, 3, 2)
        assert (alice.goals_for, alice.goals_against) == (3, 1)
        assert (bob.played, bob.losses, bob.points, bob.goal_diff) == (1, 1, 0, -2)
        assert alice.win_percentage == 100
        assert bob.win_percentage == 0

    def test_draw_is_worth_one_point(self):
        rows = standings([A, B], [played("m1", "a", "b", 2, 2)])

        assert all(r.points == 1 and r.draws == 1 for r in rows)

    def test_no_matches(self):
        rows = standings([B, A], [])

        assert [r.name for r in rows] == ["Alice", "Bob"]
        assert all(r.played == 0 and r.win_percentage == 0 for r in rows)

    def test_tie_breaks(self):
        matches = [
            played("m1", "a", "b", 1, 0), # a 3 pts, gd +1
            played("m2", "c", "b", 3, 0), # c 3 pts, gd +3
            played("m3", "a", "c", 0, 0), # both +1 pt
        ]
        rows = standings([A, B, C], matches)

        assert [r.id for r in rows] == ["c", "a", "b"]
        assert [r.points for r in rows] == [4, 4, 0]

    def test_goals_for_then_name(self):
        zed = CompetitorModel(id="z", name="Zed")
        matches = [
            played("m1", "z", "b", 4, 2), # z: gd +2, gf 4
            played("m2", "a", "c", 2, 0), # a: gd +2, gf 2
        ]
        rows = standings([A, B, C, zed], matches)

        assert [r.id for r in rows[:2]] == ["z", "a"]

        same = standings([zed, A], [played("m1", "a", "z", 1, 1)])
        assert [r.name for r in same] == ["Alice", "Zed"]

    def test_unfinished_and_foreign_matches_are_ignored(self):
        matches = [
            LeagueMatchModel(id="m1", round_idx=0, home="a", away="b"),
            played("m2", "a", "x", 5, 0),
            MatchModel(id="r0bye0", home="a", bye=True, completed=True, winner="a"),
            MatchModel(id="r1m0", home="a", away="b", home_score=1, away_score=0, completed=True, winner="a"),
        ]
        rows = standings([A, B], matches)

        alice = rows[0]
        assert alice.id == "a"
        assert (alice.played, alice.points) == (1, 3)

    def test_is_idempotent(self):
        matches = [played("m1", "a", "b", 3, 1), played("m2", "b", "c", 2, 2)]

        first = standings([A, B, C], matches)
        second = standings([A, B, C], matches)

        assert [r.model_dump() for r in first] == [r.model_dump() for r in second]


class TestCompetitorStats:

    def test_home_and_away(self):
        matches = [
            played("m1", "a", "b", 2, 0),
            played("m2", "c", "a", 1, 1),
            played("m3", "b", "a", 3, 0),
        ]
        row = competitor_stats(A, matches)

        assert (row.played, row.wins, row.draws, row.losses) == (3, 1, 1, 1)
        assert (row.goals_for, row.goals_against, row.goal_diff) == (3, 4, -1)
        assert row.points == 4
        assert row.win_percentage == 33
