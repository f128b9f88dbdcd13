from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Sequence

import pandas as pd

from schedule.match import Match

if TYPE_CHECKING:
    from domain.entities import Localization, Player, Timeslot


class Schedule(ABC):
    """
    Base class of the schedule views: a grid of cell values plus the decoded matches.

    Player-based views have one row per player; localization-based views have
    one row per court. Columns are always timeslots. Views are read-only once built.
    """

    def __init__(
        self,
        name: str,
        players: Sequence[Player],
        localizations: Sequence[Localization],
        timeslots: Sequence[Timeslot],
        values: List[list],
        matches: Iterable[Match],
    ):
        self.name = name
        self.players = list(players)
        self.localizations = list(localizations)
        self.timeslots = list(timeslots)
        self.values = values
        self.matches: List[Match] = list(matches)

    def _row_labels(self) -> list:
        return self.players

    # === Match filters ===
    def filter_matches_by_player(self, player: Player) -> List[Match]:
        return [m for m in self.matches if m.has_player(player)]

    def filter_matches_by_players(self, players: Iterable[Player]) -> List[Match]:
        """Matches in which every one of `players` takes part."""
        players = list(players)
        return [m for m in self.matches if all(m.has_player(p) for p in players)]

    def filter_matches_by_localization(self, localization: Localization) -> List[Match]:
        return [m for m in self.matches if m.localization is localization]

    def filter_matches_by_start_timeslot(self, timeslot: Timeslot) -> List[Match]:
        return [m for m in self.matches if m.start is timeslot]

    def filter_matches_by_end_timeslot(self, timeslot: Timeslot) -> List[Match]:
        return [m for m in self.matches if m.end is timeslot]

    def filter_matches_during_timeslot(self, timeslot: Timeslot) -> List[Match]:
        return [m for m in self.matches if m.occurs_at(timeslot)]

    def filter_matches_during_timeslots(self, timeslots: Iterable[Timeslot]) -> List[Match]:
        timeslots = list(timeslots)
        return [m for m in self.matches if any(m.occurs_at(t) for t in timeslots)]

    def filter_matches_during_timeslot_range(self, t1: Timeslot, t2: Timeslot) -> List[Match]:
        """Matches overlapping [t1, t2]."""
        return [m for m in self.matches if m.during(t1, t2)]

    def filter_matches_in_timeslot_range(self, t1: Timeslot, t2: Timeslot) -> List[Match]:
        """Matches played entirely inside [t1, t2]."""
        return [m for m in self.matches if m.within(t1, t2)]

    # === Occupation ===
    @property
    def total_timeslots(self) -> int:
        """Number of court-timeslot pairs in the view's domain."""
        return len(self.localizations) * len(self.timeslots)

    @property
    def occupation(self) -> int:
        """Number of court-timeslot pairs used by matches."""
        return sum(m.duration for m in self.matches)

    @property
    @abstractmethod
    def available_timeslots(self) -> int:
        """Number of court-timeslot pairs where a match could take place."""

    @property
    def occupation_ratio(self) -> float:
        available = self.available_timeslots
        return self.occupation / available if available else 0.0

    # === Export ===
    def to_dataframe(self) -> pd.DataFrame:
        """The grid as a DataFrame, one row per player (or court), one column per timeslot."""
        return pd.DataFrame(
            [[str(v) for v in row] for row in self.values],
            index=[str(r) for r in self._row_labels()],
            columns=[str(t) for t in self.timeslots],
        )

    def matches_dataframe(self) -> pd.DataFrame:
        """The decoded matches, one row each."""
        rows = [
            {
                "start": str(m.start),
                "end": str(m.end),
                "localization": str(m.localization),
                "players": ", ".join(str(p) for p in m.players),
                "teams": " vs ".join(str(t) for t in m.teams),
                "duration": m.duration,
            }
            for m in self.matches
        ]
        return pd.DataFrame(
            rows, columns=["start", "end", "localization", "players", "teams", "duration"]
        )

    def __str__(self) -> str:
        labels = [str(r) for r in self._row_labels()]
        cells = [[str(v) for v in row] for row in self.values]
        label_width = max([len(l) for l in labels] + [8])
        cell_width = max([len(c) for row in cells for c in row] + [len(f"t{len(self.timeslots)}")]) + 2

        lines = [self.name, ""]
        lines.append(
            " " * label_width + "".join(f"t{t}".rjust(cell_width) for t in range(len(self.timeslots)))
        )
        for label, row in zip(labels, cells):
            lines.append(label.rjust(label_width) + "".join(c.rjust(cell_width) for c in row))
        return "\n".join(lines) + "\n"
