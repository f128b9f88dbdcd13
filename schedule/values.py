from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from exceptions.custom_errors import InvalidMatchError

"""
Typed cell values of the schedule grids.

Player grids (rows are players) use `PlayerScheduleValue`; an occupied cell
records the court index. Localization grids (rows are courts) use
`LocalizationScheduleValue`; an occupied cell records the player indices.
"""


class ValueKind(Enum):
    FREE = "FREE"
    OCCUPIED = "OCCUPIED"
    UNAVAILABLE = "UNAVAILABLE"
    BREAK = "BREAK"
    LIMITED = "LIMITED"
    CONTINUATION = "CONTINUATION"
    NOT_IN_DOMAIN = "NOT_IN_DOMAIN"


@dataclass(frozen=True)
class PlayerScheduleValue:
    """A player's state at one timeslot."""

    kind: ValueKind
    localization: Optional[int] = None
    """Index of the court, only for OCCUPIED cells."""

    _ALLOWED = (
        ValueKind.FREE,
        ValueKind.OCCUPIED,
        ValueKind.UNAVAILABLE,
        ValueKind.BREAK,
        ValueKind.LIMITED,
        ValueKind.NOT_IN_DOMAIN,
    )
    _SYMBOLS = {
        ValueKind.FREE: "-",
        ValueKind.UNAVAILABLE: "~",
        ValueKind.BREAK: "*",
        ValueKind.LIMITED: "¬",
        ValueKind.NOT_IN_DOMAIN: "x",
    }

    def __post_init__(self):
        if self.kind not in self._ALLOWED:
            raise InvalidMatchError(f"{self.kind.name} is not a valid player schedule value")
        if self.kind is ValueKind.OCCUPIED:
            if self.localization is None or self.localization < 0:
                raise InvalidMatchError("An occupied cell needs a localization index")
        elif self.localization is not None:
            raise InvalidMatchError("Only occupied cells carry a localization index")

    @classmethod
    def occupied(cls, localization: int) -> "PlayerScheduleValue":
        return cls(ValueKind.OCCUPIED, localization)

    @property
    def is_occupied(self) -> bool:
        return self.kind is ValueKind.OCCUPIED

    @property
    def is_free(self) -> bool:
        return self.kind is ValueKind.FREE

    @property
    def is_unavailable(self) -> bool:
        return self.kind is ValueKind.UNAVAILABLE

    @property
    def is_break(self) -> bool:
        return self.kind is ValueKind.BREAK

    @property
    def is_limited(self) -> bool:
        return self.kind is ValueKind.LIMITED

    @property
    def is_not_in_domain(self) -> bool:
        return self.kind is ValueKind.NOT_IN_DOMAIN

    def __str__(self) -> str:
        if self.is_occupied:
            return str(self.localization)
        return self._SYMBOLS[self.kind]


@dataclass(frozen=True)
class LocalizationScheduleValue:
    """A court's state at one timeslot."""

    kind: ValueKind
    players: Optional[Tuple[int, ...]] = None
    """Indices of the players, only for OCCUPIED cells."""

    _ALLOWED = (
        ValueKind.FREE,
        ValueKind.OCCUPIED,
        ValueKind.UNAVAILABLE,
        ValueKind.LIMITED,
        ValueKind.CONTINUATION,
    )
    _SYMBOLS = {
        ValueKind.FREE: "-",
        ValueKind.UNAVAILABLE: "*",
        ValueKind.LIMITED: "¬",
        ValueKind.CONTINUATION: "<",
    }

    def __post_init__(self):
        if self.kind not in self._ALLOWED:
            raise InvalidMatchError(f"{self.kind.name} is not a valid localization schedule value")
        if self.kind is ValueKind.OCCUPIED:
            if not self.players:
                raise InvalidMatchError("An occupied cell needs player indices")
            if len(set(self.players)) != len(self.players):
                raise InvalidMatchError(f"Player indices cannot be duplicated: {self.players}")
        elif self.players is not None:
            raise InvalidMatchError("Only occupied cells carry player indices")

    @classmethod
    def occupied(cls, players: Iterable[int]) -> "LocalizationScheduleValue":
        return cls(ValueKind.OCCUPIED, tuple(players))

    @property
    def is_occupied(self) -> bool:
        return self.kind is ValueKind.OCCUPIED

    @property
    def is_free(self) -> bool:
        return self.kind is ValueKind.FREE

    @property
    def is_unavailable(self) -> bool:
        return self.kind is ValueKind.UNAVAILABLE

    @property
    def is_limited(self) -> bool:
        return self.kind is ValueKind.LIMITED

    @property
    def is_continuation(self) -> bool:
        return self.kind is ValueKind.CONTINUATION

    def __str__(self) -> str:
        if self.is_occupied:
            return ",".join(map(str, self.players))
        return self._SYMBOLS[self.kind]
