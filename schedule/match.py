from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List

from exceptions.custom_errors import InvalidMatchError

if TYPE_CHECKING:
    from domain.entities import Localization, Player, Team, Timeslot


class Match:
    """
    A decoded match: who plays, where, and during which timeslots.

    Args:
        players (Iterable[Player]): Non-empty list of unique players.
        localization (Localization): The court the match is played on.
        start (Timeslot): First timeslot of the match.
        end (Timeslot): Last timeslot of the match; equal to `start` for one-slot matches.
        duration (int): Number of timeslots the match spans.
    """

    def __init__(
        self,
        players: Iterable[Player],
        localization: Localization,
        start: Timeslot,
        end: Timeslot,
        duration: int,
    ):
        players = list(players) if players is not None else []
        if not players:
            raise InvalidMatchError("A match needs at least one player")
        if len(set(players)) != len(players):
            raise InvalidMatchError("Match players must be unique")
        if localization is None:
            raise InvalidMatchError("Localization cannot be None")
        if start is None or end is None:
            raise InvalidMatchError("Start and end timeslots cannot be None")
        if end < start:
            raise InvalidMatchError(f"End timeslot ({end}) is earlier than start ({start})")
        if not isinstance(duration, int) or duration < 1:
            raise InvalidMatchError(f"Duration must be a positive integer, got {duration!r}")
        if duration == 1 and start is not end:
            raise InvalidMatchError("A one-timeslot match must start and end on the same timeslot")
        if duration > 1 and start is end:
            raise InvalidMatchError("A match longer than one timeslot must end on a later timeslot")

        self._players: List[Player] = players
        self.localization = localization
        self.start = start
        self.end = end
        self.duration = duration
        self._teams: List[Team] = []

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    @property
    def teams(self) -> List[Team]:
        return list(self._teams)

    def set_teams(self, teams: Iterable[Team]):
        """Group the match's players into `teams`, which must split them evenly."""
        teams = list(teams) if teams is not None else []
        if not teams:
            raise InvalidMatchError("Teams cannot be empty")
        if len({id(t) for t in teams}) != len(teams):
            raise InvalidMatchError("Teams must be unique")
        size = len(teams[0])
        if any(len(t) != size for t in teams):
            raise InvalidMatchError("All teams must have the same number of players")
        if len(self._players) % size != 0:
            raise InvalidMatchError(
                f"Team size ({size}) must divide the number of match players ({len(self._players)})"
            )
        for team in teams:
            for player in team:
                if player not in self._players:
                    raise InvalidMatchError(f"Team player ({player}) does not play this match")
        self._teams = teams

    def has_player(self, player: Player) -> bool:
        return player in self._players

    def occurs_at(self, timeslot: Timeslot) -> bool:
        """Whether the match is being played at `timeslot`."""
        return self.start <= timeslot <= self.end

    def during(self, t1: Timeslot, t2: Timeslot) -> bool:
        """Whether the match overlaps the range [t1, t2]."""
        return not (self.end < t1 or t2 < self.start)

    def within(self, t1: Timeslot, t2: Timeslot) -> bool:
        """Whether the match is entirely played inside the range [t1, t2]."""
        return t1 <= self.start and self.end <= t2

    def __str__(self) -> str:
        sides = self._teams if self._teams else self._players
        return f"At {self.start} in {self.localization}: " + " vs ".join(str(s) for s in sides)

    def __repr__(self) -> str:
        return f"Match({self})"
