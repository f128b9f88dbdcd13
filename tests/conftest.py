"""
Shared pytest fixtures for tournament scheduler tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - skip the longer solution enumerations
"""
import pytest
import sys
import os

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from domain import Event, Localization, Player, Timeslot, Tournament


@pytest.fixture
def make_players():
    """Factory creating `n` players named with a prefix."""
    def _make(n, prefix="P"):
        return [Player(f"{prefix}{i}") for i in range(n)]
    return _make


@pytest.fixture
def make_courts():
    """Factory creating `n` localizations."""
    def _make(n, prefix="Court "):
        return [Localization(f"{prefix}{i}") for i in range(n)]
    return _make


@pytest.fixture
def make_timeslots():
    """Factory creating `n` consecutive timeslots starting at `first`."""
    def _make(n, first=0):
        return [Timeslot(first + i) for i in range(n)]
    return _make


@pytest.fixture
def make_event(make_players, make_courts, make_timeslots):
    """Factory creating an event with fresh players, courts and timeslots."""
    def _make(
        n_players=4,
        n_courts=1,
        n_timeslots=2,
        matches_per_player=1,
        timeslots_per_match=1,
        players_per_match=2,
        name="Event",
        players=None,
        courts=None,
        timeslots=None,
    ):
        return Event(
            name,
            players if players is not None else make_players(n_players),
            courts if courts is not None else make_courts(n_courts),
            timeslots if timeslots is not None else make_timeslots(n_timeslots),
            matches_per_player=matches_per_player,
            timeslots_per_match=timeslots_per_match,
            players_per_match=players_per_match,
        )
    return _make


@pytest.fixture
def simple_event(make_event):
    """4 players, 1 court, 2 one-slot timeslots, 1 match each."""
    return make_event()


@pytest.fixture
def solve():
    """Wrap events in a tournament, solve it and return the tournament."""
    def _solve(*events, name="Tournament", settings=None):
        tournament = Tournament(name, events, settings=settings)
        tournament.solve()
        return tournament
    return _solve
