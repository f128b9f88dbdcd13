"""
Unit tests for the decoded schedule views, built from hand-written grids.
"""
import pytest

from domain import Event, Tournament
from exceptions.custom_errors import InvalidMatchError
from schedule import (
    EventSchedule,
    InverseSchedule,
    LocalizationSchedule,
    LocalizationScheduleValue,
    Match,
    PlayerScheduleValue,
    TournamentSchedule,
    ValueKind,
)
from schedule.base import Schedule


def grid(n_players, n_courts, n_timeslots, cells):
    """Occupancy grid with 1 at every (player, court, timeslot) in `cells`."""
    occupancy = [[[0] * n_timeslots for _ in range(n_courts)] for _ in range(n_players)]
    for p, c, t in cells:
        occupancy[p][c][t] = 1
    return occupancy


class TestScheduleValues:
    """Tests for the typed grid cells."""

    def test_player_symbols(self):
        """Test how player cells are displayed."""
        assert str(PlayerScheduleValue(ValueKind.FREE)) == "-"
        assert str(PlayerScheduleValue(ValueKind.UNAVAILABLE)) == "~"
        assert str(PlayerScheduleValue(ValueKind.BREAK)) == "*"
        assert str(PlayerScheduleValue(ValueKind.LIMITED)) == "¬"
        assert str(PlayerScheduleValue(ValueKind.NOT_IN_DOMAIN)) == "x"
        assert str(PlayerScheduleValue.occupied(2)) == "2"

    def test_localization_symbols(self):
        """Test how localization cells are displayed."""
        assert str(LocalizationScheduleValue(ValueKind.CONTINUATION)) == "<"
        assert str(LocalizationScheduleValue(ValueKind.UNAVAILABLE)) == "*"
        assert str(LocalizationScheduleValue.occupied([0, 3])) == "0,3"

    def test_invalid_values(self):
        """Test that inconsistent cells are rejected."""
        with pytest.raises(InvalidMatchError):
            PlayerScheduleValue.occupied(-1)
        with pytest.raises(InvalidMatchError):
            PlayerScheduleValue(ValueKind.CONTINUATION)
        with pytest.raises(InvalidMatchError):
            LocalizationScheduleValue.occupied([1, 1])
        with pytest.raises(InvalidMatchError):
            LocalizationScheduleValue(ValueKind.BREAK)


class TestMatch:
    """Tests for match validation and queries."""

    def test_valid_match(self, make_players, make_courts, make_timeslots):
        """Test a two-slot match."""
        players, (court,), slots = make_players(2), make_courts(1), make_timeslots(3)
        match = Match(players, court, slots[0], slots[1], 2)
        assert match.occurs_at(slots[1])
        assert not match.occurs_at(slots[2])
        assert match.during(slots[1], slots[2])
        assert match.within(slots[0], slots[2])
        assert not match.within(slots[1], slots[2])
        assert str(match) == "At t0 in Court 0: P0 vs P1"

    def test_end_before_start(self, make_players, make_courts, make_timeslots):
        """Test that a match cannot end before it starts."""
        slots = make_timeslots(2)
        with pytest.raises(InvalidMatchError):
            Match(make_players(2), make_courts(1)[0], slots[1], slots[0], 2)

    def test_duration_mismatch(self, make_players, make_courts, make_timeslots):
        """Test that one-slot matches start and end on the same slot."""
        slots = make_timeslots(2)
        with pytest.raises(InvalidMatchError):
            Match(make_players(2), make_courts(1)[0], slots[0], slots[1], 1)
        with pytest.raises(InvalidMatchError):
            Match(make_players(2), make_courts(1)[0], slots[0], slots[0], 2)

    def test_teams_must_split_players(self, make_players, make_courts, make_timeslots):
        """Test that teams must belong to the match."""
        from domain import Team

        players = make_players(4)
        slot = make_timeslots(1)[0]
        match = Match(players[:2], make_courts(1)[0], slot, slot, 1)
        with pytest.raises(InvalidMatchError):
            match.set_teams([Team(players[2:])])


class TestEventSchedule:
    """Tests for decoding an occupancy grid into an event schedule."""

    def test_decode_ties_follow_player_order(self, make_event):
        """Test that players on the same court are grouped in event order."""
        event = make_event(n_players=4, n_courts=2, n_timeslots=1)
        occupancy = grid(4, 2, 1, [(0, 1, 0), (1, 0, 0), (2, 1, 0), (3, 0, 0)])
        schedule = EventSchedule(event, occupancy)
        p, c = event.players, event.localizations
        assert [m.players for m in schedule.matches] == [[p[0], p[2]], [p[1], p[3]]]
        assert [m.localization for m in schedule.matches] == [c[1], c[0]]

    def test_back_to_back_matches(self, make_event):
        """Test that consecutive matches on the same court are decoded separately."""
        event = make_event(n_players=2, n_timeslots=4, matches_per_player=2, timeslots_per_match=2)
        occupancy = grid(2, 1, 4, [(p, 0, t) for p in range(2) for t in range(4)])
        schedule = EventSchedule(event, occupancy)
        t = event.timeslots
        assert [(m.start, m.end) for m in schedule.matches] == [(t[0], t[1]), (t[2], t[3])]

    def test_incomplete_group_skipped(self, make_event):
        """Test that a group missing players is not decoded as a match."""
        event = make_event(n_players=4, n_timeslots=1)
        occupancy = grid(4, 1, 1, [(0, 0, 0), (1, 0, 0), (2, 0, 0)])
        schedule = EventSchedule(event, occupancy)
        assert len(schedule.matches) == 1
        assert schedule.matches[0].players == event.players[:2]

    def test_cell_precedence(self, make_event):
        """Test BREAK, UNAVAILABLE, LIMITED and FREE cells."""
        event = make_event(n_players=2, n_courts=2, n_timeslots=4)
        p, c, t = event.players, event.localizations, event.timeslots
        event.add_break(t[0])
        event.add_unavailable_player_at_timeslot(p[1], t[1])
        event.add_unavailable_localization_at_timeslot(c[1], t[2])
        schedule = EventSchedule(event, grid(2, 2, 4, [(0, 0, 3), (1, 0, 3)]))
        assert schedule.values[0][0].is_break
        assert schedule.values[1][1].is_unavailable
        assert schedule.values[0][1].is_free
        assert schedule.values[0][2].is_limited
        assert schedule.values[0][3] == PlayerScheduleValue.occupied(0)

    def test_filters(self, make_event):
        """Test the match filters on a decoded schedule."""
        event = make_event(n_players=4, n_courts=1, n_timeslots=3)
        p, c, t = event.players, event.localizations, event.timeslots
        schedule = EventSchedule(event, grid(4, 1, 3, [(0, 0, 0), (1, 0, 0), (2, 0, 2), (3, 0, 2)]))
        first, second = schedule.matches
        assert schedule.filter_matches_by_player(p[2]) == [second]
        assert schedule.filter_matches_by_players([p[0], p[1]]) == [first]
        assert schedule.filter_matches_by_localization(c[0]) == [first, second]
        assert schedule.filter_matches_by_start_timeslot(t[2]) == [second]
        assert schedule.filter_matches_by_end_timeslot(t[0]) == [first]
        assert schedule.filter_matches_during_timeslot(t[1]) == []
        assert schedule.filter_matches_during_timeslots([t[1], t[2]]) == [second]
        assert schedule.filter_matches_during_timeslot_range(t[0], t[1]) == [first]
        assert schedule.filter_matches_in_timeslot_range(t[1], t[2]) == [second]

    def test_occupation(self, make_event):
        """Test occupation figures of an event schedule."""
        event = make_event(n_players=4, n_courts=1, n_timeslots=3)
        event.add_break(event.timeslots[1])
        schedule = EventSchedule(event, grid(4, 1, 3, [(0, 0, 0), (1, 0, 0), (2, 0, 2), (3, 0, 2)]))
        assert schedule.total_timeslots == 3
        assert schedule.occupation == 2
        assert schedule.available_timeslots == 2
        assert schedule.occupation_ratio == 1.0

    def test_base_view_is_abstract(self):
        """Test that the base view cannot be built without a capacity definition."""
        assert Schedule.__abstractmethods__ == frozenset({"available_timeslots"})
        with pytest.raises(TypeError):
            Schedule("S", [], [], [], [], [])

    def test_dataframes(self, make_event):
        """Test the pandas exports."""
        event = make_event(n_players=2, n_timeslots=2)
        schedule = EventSchedule(event, grid(2, 1, 2, [(0, 0, 1), (1, 0, 1)]))
        frame = schedule.to_dataframe()
        assert frame.shape == (2, 2)
        assert list(frame.index) == ["P0", "P1"]
        assert frame.iloc[0, 1] == "0"
        matches = schedule.matches_dataframe()
        assert list(matches.columns) == ["start", "end", "localization", "players", "teams", "duration"]
        assert matches.iloc[0]["players"] == "P0, P1"

    def test_str_grid(self, make_event):
        """Test the text rendering of the grid."""
        event = make_event(n_players=2, n_timeslots=2)
        schedule = EventSchedule(event, grid(2, 1, 2, [(0, 0, 0), (1, 0, 0)]))
        text = str(schedule)
        assert text.startswith("Event")
        assert "P0" in text and "t1" in text


class TestLocalizationSchedule:
    """Tests for court-by-timeslot views."""

    def test_event_view(self, make_event):
        """Test occupied, continuation and unavailable cells."""
        event = make_event(n_players=2, n_courts=2, n_timeslots=3, timeslots_per_match=2)
        event.add_unavailable_localization_at_timeslot(event.localizations[1], event.timeslots[0])
        schedule = EventSchedule(event, grid(2, 2, 3, [(0, 0, 1), (0, 0, 2), (1, 0, 1), (1, 0, 2)]))
        view = LocalizationSchedule.for_event(schedule)
        assert [str(v) for v in view.values[0]] == ["-", "0,1", "<"]
        assert [str(v) for v in view.values[1]] == ["*", "-", "-"]
        assert view.occupation == 2
        assert view.available_timeslots == 5
        assert list(view.to_dataframe().index) == ["Court 0", "Court 1"]

    def test_inverse_view(self, make_event):
        """Test finding the match played on a court at a slot."""
        event = make_event(n_players=2, n_courts=2, n_timeslots=2)
        schedule = EventSchedule(event, grid(2, 2, 2, [(0, 1, 1), (1, 1, 1)]))
        inverse = InverseSchedule.for_event(schedule)
        c, t = event.localizations, event.timeslots
        assert inverse.match_at(c[1], t[1]) is schedule.matches[0]
        assert inverse.match_at(c[0], t[1]) is None
        assert inverse.matches_by_localization() == {c[0]: [], c[1]: schedule.matches}


class TestTournamentSchedule:
    """Tests for merging event schedules."""

    @pytest.fixture
    def two_events(self, make_players, make_courts, make_timeslots):
        players = make_players(3)
        courts = make_courts(1)
        slots = make_timeslots(3)
        first = Event("First", players[:2], courts, slots[:2], timeslots_per_match=1)
        second = Event("Second", [players[0], players[2]], courts, slots[1:3], timeslots_per_match=1)
        return players, courts, slots, first, second

    def test_not_in_domain_and_merge(self, two_events):
        """Test cells outside every event and occupied cells winning the merge."""
        players, courts, slots, first, second = two_events
        tournament = Tournament("Open", [first, second])
        schedules = {
            first: EventSchedule(first, grid(2, 1, 2, [(0, 0, 0), (1, 0, 0)])),
            second: EventSchedule(second, grid(2, 1, 2, [(0, 0, 1), (1, 0, 1)])),
        }
        merged = TournamentSchedule(tournament, schedules)
        assert merged.timeslots == slots[:3]
        assert merged.values[0][0].is_occupied
        assert merged.values[0][1].is_free
        assert merged.values[0][2].is_occupied
        assert merged.values[2][0].is_not_in_domain
        assert merged.values[1][2].is_not_in_domain
        assert [m.start for m in merged.matches] == [slots[0], slots[2]]

    def test_limited_and_unavailable_courts(self, two_events):
        """Test the tournament court view when only some events pause."""
        players, courts, slots, first, second = two_events
        tournament = Tournament("Open", [first, second])
        tournament.add_break(slots[1])
        first.add_break(slots[0])
        schedules = {
            first: EventSchedule(first, grid(2, 1, 2, [])),
            second: EventSchedule(second, grid(2, 1, 2, [])),
        }
        view = LocalizationSchedule.for_tournament(TournamentSchedule(tournament, schedules))
        kinds = [v.kind for v in view.values[0]]
        assert kinds == [ValueKind.UNAVAILABLE, ValueKind.UNAVAILABLE, ValueKind.FREE]

        second.add_unavailable_localization_at_timeslot(courts[0], slots[2])
        first.remove_break(slots[1])
        view = LocalizationSchedule.for_tournament(TournamentSchedule(tournament, schedules))
        kinds = [v.kind for v in view.values[0]]
        assert kinds == [ValueKind.UNAVAILABLE, ValueKind.LIMITED, ValueKind.UNAVAILABLE]
