import random
from unittest.mock import MagicMock

import pytest

from kickoff.core.errors import (
    FailureKind,
    InsufficientCompetitorsError,
    InvalidRosterError,
    MatchNotReadyError,
    UnknownReferenceError,
)
from kickoff.models.bracket_model import Slot, TiePolicy
from kickoff.models.tournament_model import TournamentFormat, TournamentState
from kickoff.services import tournament_service
from kickoff.services.tournament_service import (
    add_player,
    add_team,
    champion,
    competitors_for,
    default_state,
    display_name,
    generate_bracket,
    generate_league,
    record_bracket_score,
    record_league_score,
    remove_player,
    remove_team,
    reset_tournament,
    set_format,
    standings_table,
    swap_bracket_competitor,
    TournamentService,
)


@pytest.fixture
def state():
    return default_state()


@pytest.fixture
def doubles_state(state):
    state = add_team(state, ["p1", "p2"])
    state = add_team(state, ["p3", "p4"])
    return set_format(state, "2v2")


class TestRoster:

    def test_default_state(self, state):
        assert [p.id for p in state.players] == [f"p{i}" for i in range(1, 9)]
        assert state.players[0].name == "Neymar"
        assert state.format_key == "1v1"
        assert state.brackets == {"1v1": None, "2v2": None}
        assert state.leagues == {"1v1": None, "2v2": None}

    def test_add_player(self, state):
        new_state = add_player(state, "  Pelé ")

        assert len(new_state.players) == 9
        assert new_state.players[-1].name == "Pelé"
        assert new_state.players[-1].id.startswith("p")
        assert len(state.players) == 8

    def test_add_player_rejects_blank_name(self, state):
        with pytest.raises(InvalidRosterError):
            add_player(state, "   ")

    def test_add_player_invalidates_singles_only(self, doubles_state):
        state = set_format(generate_bracket(doubles_state), "1v1")
        state = generate_league(generate_bracket(state))
        assert state.bracket_for("2v2") is not None

        new_state = add_player(state, "Pelé")

        assert new_state.bracket_for("1v1") is None
        assert new_state.league_for("1v1") is None
        assert new_state.bracket_for("2v2") is not None

    def test_remove_player_drops_their_team(self, doubles_state):
        state = generate_bracket(doubles_state)

        new_state = remove_player(state, "p1")

        assert "p1" not in [p.id for p in new_state.players]
        assert len(new_state.teams) == 1
        assert new_state.teams[0].players == ["p3", "p4"]
        assert new_state.bracket_for("2v2") is None

    def test_remove_unknown_player(self, state):
        with pytest.raises(UnknownReferenceError) as exc_info:
            remove_player(state, "nobody")
        assert exc_info.value.kind == FailureKind.UNKNOWN_REFERENCE

    def test_add_team(self, state):
        new_state = add_team(state, ["p1", "p2"])

        team = new_state.teams[0]
        assert team.players == ["p1", "p2"]
        assert team.id.startswith("team")

    @pytest.mark.parametrize("player_ids,error", [
        (["p1"], InvalidRosterError),
        (["p1", "p1"], InvalidRosterError),
        (["p1", "p2", "p3"], InvalidRosterError),
        (["p1", "ghost"], UnknownReferenceError),
    ])
    def test_add_team_validation(self, state, player_ids, error):
        with pytest.raises(error):
            add_team(state, player_ids)

    def test_player_can_only_be_in_one_team(self, state):
        state = add_team(state, ["p1", "p2"])
        with pytest.raises(InvalidRosterError):
            add_team(state, ["p2", "p3"])

    def test_remove_team(self, doubles_state):
        team_id = doubles_state.teams[0].id
        state = generate_league(doubles_state)

        new_state = remove_team(state, team_id)

        assert [t.id for t in new_state.teams] == [doubles_state.teams[1].id]
        assert new_state.league_for("2v2") is None
        with pytest.raises(UnknownReferenceError):
            remove_team(new_state, team_id)

    def test_set_format(self, state):
        assert set_format(state, "2v2").format_key == "2v2"
        assert set_format(state, TournamentFormat.SINGLES).format_key == "1v1"
        with pytest.raises(UnknownReferenceError):
            set_format(state, "3v3")

    def test_doubles_competitors(self, doubles_state):
        competitors = competitors_for(doubles_state)

        assert [c.name for c in competitors] == ["Neymar & Mbappé", "Vinicius Jr & Rodrygo"]
        assert competitors[0].members == ["p1", "p2"]
        assert display_name(doubles_state, None) == "TBD"
        assert display_name(doubles_state, "p1") == "Unknown"
        assert display_name(doubles_state, "p1", "1v1") == "Neymar"


class TestBracketFlow:

    def test_generate_bracket(self, state):
        new_state = generate_bracket(state, random.Random(3))

        bracket = new_state.bracket_for("1v1")
        assert [len(r) for r in bracket.rounds] == [4, 2, 1]
        assert state.bracket_for("1v1") is None

    def test_generate_needs_two_competitors(self, state):
        state = set_format(add_team(state, ["p1", "p2"]), "2v2")

        with pytest.raises(InsufficientCompetitorsError) as exc_info:
            generate_bracket(state)
        assert exc_info.value.kind == FailureKind.INSUFFICIENT_COMPETITORS
        with pytest.raises(InsufficientCompetitorsError):
            generate_league(state)

    def test_play_to_champion(self, state):
        state = generate_bracket(state, random.Random(0))
        assert champion(state) is None

        for round_idx, round_matches in enumerate(state.bracket_for("1v1").rounds):
            for match_idx in range(len(round_matches)):
                state = record_bracket_score(state, round_idx, match_idx, 1, 0)

        final = state.bracket_for("1v1").final
        winner = champion(state)
        assert winner.id == final.winner
        assert winner.name in tournament_service.DEFAULT_PLAYER_NAMES

    def test_score_without_bracket(self, state):
        with pytest.raises(UnknownReferenceError):
            record_bracket_score(state, 0, 0, 1, 0)

    def test_score_for_unknown_match(self, state):
        state = generate_bracket(state)
        with pytest.raises(UnknownReferenceError):
            record_bracket_score(state, 7, 0, 1, 0)

    def test_score_for_match_not_ready(self, state):
        state = generate_bracket(state)
        with pytest.raises(MatchNotReadyError):
            record_bracket_score(state, 2, 0, 1, 0)

    def test_drawn_match_needs_decider(self, state):
        state = generate_bracket(state)
        with pytest.raises(MatchNotReadyError):
            record_bracket_score(state, 0, 0, 1, 1, TiePolicy.DECIDER)

        new_state = record_bracket_score(state, 0, 0, 1, 1, TiePolicy.DECIDER, Slot.AWAY)
        match = new_state.bracket_for("1v1").get_match(0, 0)
        assert match.winner == match.away

    def test_swap_competitor(self, state):
        state = add_player(state, "Pelé")
        state = generate_bracket(state, random.Random(0))
        newcomer = state.players[-1].id
        match = state.bracket_for("1v1").get_match(0, 0)
        slot = "away" if match.away is not None else "home"

        new_state = swap_bracket_competitor(state, 0, 0, slot, newcomer)

        assert new_state.bracket_for("1v1").get_match(0, 0).competitor(slot) == newcomer

    def test_swap_unknown_competitor(self, state):
        state = generate_bracket(state)
        with pytest.raises(UnknownReferenceError):
            swap_bracket_competitor(state, 0, 0, "home", "ghost")

    def test_reset_keeps_roster(self, state):
        state = generate_league(generate_bracket(state))

        new_state = reset_tournament(state)

        assert new_state.bracket_for("1v1") is None
        assert new_state.league_for("1v1") is None
        assert new_state.players == state.players


class TestLeagueFlow:

    def test_league_standings(self, state):
        state = generate_league(state)
        league = state.league_for("1v1")
        first = league.matches[0]

        state = record_league_score(state, first.id, 3, 1)
        rows = standings_table(state)

        assert rows[0].id == first.home
        assert rows[0].points == 3
        assert rows[-1].id == first.away
        assert len(rows) == 8

    def test_unknown_league_match(self, state):
        with pytest.raises(UnknownReferenceError):
            record_league_score(state, "L0m0", 1, 0)
        state = generate_league(state)
        with pytest.raises(UnknownReferenceError):
            record_league_score(state, "nope", 1, 0)

    def test_bracket_standings(self, state):
        state = generate_bracket(state, random.Random(5))
        match = state.bracket_for("1v1").get_match(0, 0)
        state = record_bracket_score(state, 0, 0, 2, 0)

        rows = standings_table(state, "bracket")

        assert rows[0].id == match.home
        assert rows[0].wins == 1

    def test_unknown_structure(self, state):
        with pytest.raises(UnknownReferenceError):
            standings_table(state, "cup")

    def test_state_is_a_plain_model(self, state):
        state = generate_league(state)
        assert isinstance(TournamentState.model_validate(state.model_dump()), TournamentState)


@pytest.fixture
def mock_store():
    store = MagicMock()
    store.load.return_value = default_state()
    return store


class TestTournamentService:

    def test_write_saves_the_new_state(self, mock_store):
        service = TournamentService(mock_store)

        new_state = service.add_player("Pelé")

        mock_store.save.assert_called_once_with(new_state)
        assert new_state.players[-1].name == "Pelé"

    def test_rejected_write_saves_nothing(self, mock_store):
        service = TournamentService(mock_store)

        with pytest.raises(UnknownReferenceError):
            service.remove_player("ghost")
        mock_store.save.assert_not_called()

    def test_reads_do_not_save(self, mock_store):
        service = TournamentService(mock_store)

        assert service.get_state().format_key == "1v1"
        assert len(service.standings_table()) == 8
        assert service.champion() is None
        mock_store.save.assert_not_called()

    def test_corrected_score_voids_the_played_final(self, mock_store):
        state = mock_store.load.return_value
        for player_id in ["p5", "p6", "p7", "p8"]:
            state = remove_player(state, player_id)
        mock_store.load.return_value = generate_bracket(state, random.Random(2))
        service = TournamentService(mock_store)

        for round_idx, match_idx in [(0, 0), (0, 1), (1, 0)]:
            mock_store.load.return_value = service.record_bracket_score(round_idx, match_idx, 3, 1)
        assert champion(mock_store.load.return_value) is not None

        new_state = service.record_bracket_score(0, 0, 4, 1)

        final = new_state.bracket_for("1v1").final
        assert not final.completed
        assert final.winner is None and final.home_score is None
        assert service.store.save.call_count == 4
