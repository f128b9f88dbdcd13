"""
Unit tests for the Tournament aggregate and its cross-event helpers.
"""
import pytest

from domain import Event, Player, Tournament
from exceptions.custom_errors import InvalidTournamentError, ValidationError


@pytest.fixture
def shared_setup(make_players, make_courts, make_timeslots):
    """Two events sharing one player, one court and two timeslots."""
    players = make_players(4)
    courts = make_courts(2)
    slots = make_timeslots(4)
    singles = Event("Singles", players[:2], courts[:1], slots[:2], timeslots_per_match=1)
    doubles = Event(
        "Doubles", [players[0], players[2], players[3], Player("P4")],
        courts, slots[1:], timeslots_per_match=1, players_per_match=4,
    )
    return players, courts, slots, singles, doubles


class TestTournamentConstruction:
    """Tests for tournament construction."""

    def test_unions_in_first_seen_order(self, shared_setup):
        """Test that players, courts and timeslots are merged in first-seen order."""
        players, courts, slots, singles, doubles = shared_setup
        tournament = Tournament("Open", [singles, doubles])
        assert tournament.all_players[:4] == [players[0], players[1], players[2], players[3]]
        assert len(tournament.all_players) == 5
        assert tournament.all_localizations == courts
        assert tournament.all_timeslots == slots

    def test_events_get_back_reference(self, shared_setup):
        """Test that events point back at their tournament."""
        *_, singles, doubles = shared_setup
        tournament = Tournament("Open", [singles, doubles])
        assert singles.tournament is tournament
        assert doubles.tournament is tournament

    def test_empty_events(self):
        """Test that a tournament needs at least one event."""
        with pytest.raises(InvalidTournamentError):
            Tournament("Empty", [])

    def test_duplicate_events(self, simple_event):
        """Test that the same event cannot be added twice."""
        with pytest.raises(InvalidTournamentError):
            Tournament("Twice", [simple_event, simple_event])

    def test_counts(self, shared_setup):
        """Test the aggregated match counts."""
        *_, singles, doubles = shared_setup
        tournament = Tournament("Open", [singles, doubles])
        assert tournament.number_of_matches == 2
        assert tournament.number_of_occupied_timeslots == 6

    def test_group_events_by_players_per_match(self, shared_setup):
        """Test grouping events by match size."""
        *_, singles, doubles = shared_setup
        tournament = Tournament("Open", [singles, doubles])
        assert tournament.group_events_by_players_per_match() == {2: [singles], 4: [doubles]}


class TestCrossEventHelpers:
    """Tests for helpers that apply to every relevant event."""

    def test_unavailable_player_only_where_present(self, shared_setup):
        """Test that unavailability reaches the events holding both player and slot."""
        players, courts, slots, singles, doubles = shared_setup
        tournament = Tournament("Open", [singles, doubles])
        tournament.add_unavailable_player_at_timeslot(players[0], slots[1])
        assert singles.is_player_unavailable(players[0], slots[1])
        assert doubles.is_player_unavailable(players[0], slots[1])

        tournament.add_unavailable_player_at_timeslot(players[0], slots[3])
        assert doubles.is_player_unavailable(players[0], slots[3])
        assert players[0] in singles.unavailable_players
        assert slots[3] not in singles.unavailable_players[players[0]]

    def test_unavailable_player_range(self, shared_setup):
        """Test a range over the tournament's timeslots."""
        players, courts, slots, singles, doubles = shared_setup
        tournament = Tournament("Open", [singles, doubles])
        tournament.add_unavailable_player_at_timeslot_range(players[0], slots[0], slots[2])
        assert singles.unavailable_players[players[0]] == {slots[0], slots[1]}
        assert doubles.unavailable_players[players[0]] == {slots[1], slots[2]}
        tournament.remove_unavailable_player_timeslot(players[0], slots[1])
        assert doubles.unavailable_players[players[0]] == {slots[2]}

    def test_break_everywhere(self, shared_setup):
        """Test that a break reaches every event holding the timeslot."""
        players, courts, slots, singles, doubles = shared_setup
        tournament = Tournament("Open", [singles, doubles])
        tournament.add_break(slots[1])
        assert singles.is_break(slots[1]) and doubles.is_break(slots[1])
        tournament.remove_break(slots[1])
        assert not singles.has_breaks and not doubles.has_breaks

    def test_unavailable_localization(self, shared_setup):
        """Test that court unavailability reaches the events holding the court."""
        players, courts, slots, singles, doubles = shared_setup
        tournament = Tournament("Open", [singles, doubles])
        tournament.add_unavailable_localization_at_timeslots(courts[1], slots[1:3])
        assert not singles.has_unavailable_localizations
        assert doubles.unavailable_localizations == {courts[1]: {slots[1], slots[2]}}


class TestTournamentValidation:
    """Tests for tournament validation."""

    def test_messages_prefixed_with_event_name(self, make_event):
        """Test that event problems are reported with the event name."""
        event = make_event(name="Doubles", players_per_match=4)
        p = event.players
        event.add_team(p[0], p[1])
        tournament = Tournament("Open", [event])
        with pytest.raises(ValidationError) as exc_info:
            tournament.validate()
        assert all(m.startswith("Doubles: ") for m in exc_info.value.messages)

    def test_solve_validates_first(self, make_event):
        """Test that an invalid tournament is never handed to the solver."""
        event = make_event(players_per_match=4)
        event.add_team(*event.players[:2])
        tournament = Tournament("Open", [event])
        with pytest.raises(ValidationError):
            tournament.solve()
        assert tournament.current_schedules is None
        assert "no schedule" in tournament.schedules_to_string()
