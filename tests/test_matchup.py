"""
Unit tests for predefined matchups.
"""
import pytest

from domain import Localization, Matchup, MatchupMode, Player
from exceptions.custom_errors import InvalidEventError, InvalidMatchupError


class TestMatchup:
    """Tests for matchup construction."""

    def test_defaults_to_whole_domain(self, make_event):
        """Test that omitted courts and starts default to the event's valid ones."""
        event = make_event(n_courts=2, n_timeslots=4, timeslots_per_match=2)
        p = event.players
        matchup = Matchup(event, [p[0], p[1]])
        assert matchup.localizations == event.localizations
        assert matchup.timeslots == event.valid_start_timeslots
        assert matchup.occurrences == 1
        assert str(matchup) == "P0 vs P1"

    def test_timeslots_filtered_and_sorted(self, make_event):
        """Test that starts without room for a match are dropped and the rest sorted."""
        event = make_event(n_timeslots=4, timeslots_per_match=2)
        t = event.timeslots
        matchup = Matchup(event, event.players[:2], timeslots=[t[3], t[2], t[0]])
        assert matchup.timeslots == [t[0], t[2]]

    def test_only_invalid_starts(self, make_event):
        """Test that a matchup left without any valid start is rejected."""
        event = make_event(n_timeslots=4, timeslots_per_match=2)
        with pytest.raises(InvalidMatchupError):
            Matchup(event, event.players[:2], timeslots=[event.timeslots[3]])

    def test_wrong_number_of_players(self, simple_event):
        """Test that a matchup needs exactly players_per_match players."""
        with pytest.raises(InvalidMatchupError):
            Matchup(simple_event, simple_event.players[:3])

    def test_foreign_player(self, simple_event):
        """Test that matchup players must belong to the event."""
        with pytest.raises(InvalidMatchupError):
            Matchup(simple_event, [simple_event.players[0], Player("Stranger")])

    def test_foreign_localization(self, simple_event):
        """Test that matchup courts must belong to the event."""
        with pytest.raises(InvalidMatchupError):
            Matchup(simple_event, simple_event.players[:2], localizations=[Localization("Away")])

    def test_occurrences_range(self, make_event):
        """Test that occurrences must lie between 1 and matches per player."""
        event = make_event(n_timeslots=4, matches_per_player=2)
        p = event.players[:2]
        with pytest.raises(InvalidMatchupError):
            Matchup(event, p, occurrences=0)
        with pytest.raises(InvalidMatchupError):
            Matchup(event, p, occurrences=3)
        assert Matchup(event, p, occurrences=2).occurrences == 2

    def test_cumulative_occurrences(self, make_event):
        """Test that a player's predefined occurrences cannot exceed their matches."""
        event = make_event(n_timeslots=4, matches_per_player=2)
        event.matchup_mode = MatchupMode.CUSTOM
        p = event.players
        event.add_matchup_between(p[0], p[1])
        event.add_matchup_between(p[0], p[2])
        with pytest.raises(InvalidMatchupError):
            Matchup(event, [p[0], p[3]])

    def test_matchup_from_another_event(self, make_event):
        """Test that an event only accepts its own matchups."""
        first = make_event(name="First")
        second = make_event(name="Second")
        matchup = Matchup(first, first.players[:2])
        with pytest.raises(InvalidEventError):
            second.add_matchup(matchup)

    def test_remove_and_clear(self, make_event):
        """Test removing predefined matchups."""
        event = make_event(n_timeslots=4, matches_per_player=2)
        p = event.players
        first = event.add_matchup_between(p[0], p[1])
        event.add_matchup_between(p[2], p[3])
        event.remove_matchup(first)
        assert len(event.predefined_matchups) == 1
        event.clear_predefined_matchups()
        assert event.predefined_matchups == []
