"""
Unit tests for the basic domain entities.
"""
import pytest
import datetime

from domain import Localization, Player, Team, Timeslot
from exceptions.custom_errors import InvalidEntityError, InvalidTeamError


class TestEntities:
    """Tests for players and localizations."""

    def test_identity_equality(self):
        """Test that two players with the same name are different players."""
        a = Player("Alice")
        b = Player("Alice")
        assert a == a
        assert a != b
        assert len({a, b}) == 2

    def test_name_cannot_be_none(self):
        """Test that a None name is rejected."""
        with pytest.raises(InvalidEntityError):
            Localization(None)

    def test_str(self):
        """Test the string form of an entity."""
        assert str(Player("Bob")) == "Bob"


class TestTimeslot:
    """Tests for timeslot ordering and display."""

    def test_ordering_by_chronological_order(self):
        """Test that timeslots sort by chronological order."""
        t0, t1, t2 = Timeslot(0), Timeslot(1), Timeslot(2)
        assert sorted([t2, t0, t1]) == [t0, t1, t2]
        assert t0 < t1 <= t2
        assert t2 > t1 >= t0

    def test_start_breaks_ties(self):
        """Test that starts of the same type break a chronological tie."""
        morning = Timeslot(1, start=datetime.datetime(2026, 5, 1, 9, 0))
        noon = Timeslot(1, start=datetime.datetime(2026, 5, 1, 12, 0))
        assert morning < noon
        assert not noon < morning

    def test_same_order_without_start_is_neither_less_nor_greater(self):
        """Test that two slots with the same order and no start are tied but not equal."""
        a, b = Timeslot(3), Timeslot(3)
        assert not a < b and not b < a
        assert a <= b and b <= a
        assert a != b

    def test_end(self):
        """Test that the end is start plus duration."""
        start = datetime.datetime(2026, 5, 1, 9, 0)
        slot = Timeslot(0, start=start, duration=datetime.timedelta(minutes=30))
        assert slot.end == datetime.datetime(2026, 5, 1, 9, 30)
        assert Timeslot(0).end is None

    def test_duration_requires_start(self):
        """Test that a duration without a start is rejected."""
        with pytest.raises(InvalidEntityError):
            Timeslot(0, duration=30)

    def test_order_must_be_int(self):
        """Test that a non-integer chronological order is rejected."""
        with pytest.raises(InvalidEntityError):
            Timeslot("1")

    def test_within(self):
        """Test closed range membership."""
        t0, t1, t2 = Timeslot(0), Timeslot(1), Timeslot(2)
        assert t1.within(t0, t2)
        assert t0.within(t0, t2)
        assert not t2.within(t0, t1)

    def test_str(self):
        """Test the name, then start, then order display fallbacks."""
        assert str(Timeslot(0, name="Morning")) == "Morning"
        assert str(Timeslot(0, start=9)) == "9"
        assert str(Timeslot(4)) == "t4"


class TestTeam:
    """Tests for team construction."""

    def test_team_needs_two_players(self):
        """Test that a one-player team is rejected."""
        with pytest.raises(InvalidTeamError):
            Team([Player("A")])

    def test_team_players_must_be_unique(self):
        """Test that the same player cannot appear twice."""
        a = Player("A")
        with pytest.raises(InvalidTeamError):
            Team([a, a])

    def test_default_name(self):
        """Test that the default name joins the player names."""
        team = Team([Player("A"), Player("B")])
        assert team.name == "A-B"
        assert len(team) == 2

    def test_contains_and_same_players(self):
        """Test membership and set comparison."""
        a, b, c = Player("A"), Player("B"), Player("C")
        team = Team([a, b])
        assert team.contains(a)
        assert not team.contains(c)
        assert team.same_players([b, a])
        assert not team.same_players([a, c])
