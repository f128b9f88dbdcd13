from typing import Any, Iterable, Iterator, List, Optional, Tuple
from exceptions.custom_errors import InvalidEntityError, InvalidTeamError

"""
This module contains the basic domain entities shared by events: players,
localizations (courts), timeslots and teams.

All entities compare equal only to themselves; two players called "Alice" are
two different players.
"""


class Entity:
    """A named domain object with identity semantics."""

    def __init__(self, name: str):
        if name is None:
            raise InvalidEntityError("Name cannot be None")
        self.name = str(name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Player(Entity):
    """A participant of one or more events."""


class Localization(Entity):
    """A court or venue where matches are played."""


class Timeslot:
    """
    One ordered unit of schedulable time.

    A timeslot is primarily ordered by its `chronological_order`. When two
    timeslots share the same order and both carry a `start` of the same type
    (e.g. two datetimes), the starts break the tie. Equality is identity, so
    two distinct timeslots with the same order are still different slots.
    """

    def __init__(
        self,
        chronological_order: int,
        start: Optional[Any] = None,
        duration: Optional[Any] = None,
        name: Optional[str] = None,
    ):
        if not isinstance(chronological_order, int) or isinstance(
            chronological_order, bool
        ):
            raise InvalidEntityError(
                f"Chronological order must be an integer, got {chronological_order!r}"
            )
        if duration is not None and start is None:
            raise InvalidEntityError("A timeslot with a duration must have a start")
        self.chronological_order = chronological_order
        self.start = start
        self.duration = duration
        self.name = name

    @property
    def end(self) -> Optional[Any]:
        """The end of the slot, when both start and duration are known."""
        if self.start is None or self.duration is None:
            return None
        return self.start + self.duration

    def _compare(self, other: "Timeslot") -> int:
        if self.chronological_order != other.chronological_order:
            return -1 if self.chronological_order < other.chronological_order else 1
        if (
            self.start is not None
            and other.start is not None
            and type(self.start) is type(other.start)
        ):
            if self.start < other.start:
                return -1
            if other.start < self.start:
                return 1
        return 0

    def __lt__(self, other):
        if not isinstance(other, Timeslot):
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other):
        if not isinstance(other, Timeslot):
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other):
        if not isinstance(other, Timeslot):
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other):
        if not isinstance(other, Timeslot):
            return NotImplemented
        return self._compare(other) >= 0

    def within(self, t1: "Timeslot", t2: "Timeslot") -> bool:
        """Whether this slot lies in the closed range [t1, t2]."""
        return t1 <= self <= t2

    def __str__(self) -> str:
        if self.name is not None:
            return self.name
        if self.start is not None:
            return str(self.start)
        return f"t{self.chronological_order}"

    def __repr__(self) -> str:
        return f"Timeslot({self.chronological_order}, start={self.start!r})"


class Team:
    """A fixed group of at least two players that always play together."""

    def __init__(self, players: Iterable[Player], name: Optional[str] = None):
        players = list(players)
        if len(players) < 2:
            raise InvalidTeamError(
                f"A team must have at least 2 players, got {len(players)}"
            )
        if any(p is None for p in players):
            raise InvalidTeamError("A team cannot contain a None player")
        if len({id(p) for p in players}) != len(players):
            raise InvalidTeamError(
                f"Team players must be unique: {', '.join(map(str, players))}"
            )
        self._players: Tuple[Player, ...] = tuple(players)
        self.name = name if name is not None else "-".join(p.name for p in players)

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    def contains(self, player: Player) -> bool:
        return any(p is player for p in self._players)

    def same_players(self, players: Iterable[Player]) -> bool:
        """Whether `players` holds exactly this team's members, in any order."""
        return {id(p) for p in players} == {id(p) for p in self._players}

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players)

    def __len__(self) -> int:
        return len(self._players)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Team({self.name!r})"
