from dataclasses import dataclass, field
from typing import Any, Dict, List, Set, Tuple

from ortools.sat.python import cp_model

from schemas.solver import SolverSettings

Grid = List[List[List[cp_model.IntVar]]]
Cell = Tuple[int, int, int]


@dataclass
class ModelState:
    """
    A dataclass to hold all the state relevant to building the constraint
    model of one tournament.
    """

    # model inputs
    events: List[Any]
    """The tournament events, in tournament order."""
    players: Dict[Any, List[Any]]
    """A dictionary mapping each event to its players, in event order."""
    localizations: Dict[Any, List[Any]]
    """A dictionary mapping each event to its localizations, in event order."""
    timeslots: Dict[Any, List[Any]]
    """A dictionary mapping each event to its timeslots, in chronological order."""
    all_players: List[Any]
    """The union of the events' players, in first-seen order."""
    all_localizations: List[Any]
    """The union of the events' localizations, in first-seen order."""
    all_timeslots: List[Any]
    """The union of the events' timeslots, in first-seen order."""
    settings: SolverSettings
    """The solver settings the model is built with."""

    # decision grids
    x: Dict[Any, Grid]
    """A dictionary mapping each event to its occupancy grid `x[p][c][t]`: a
    boolean variable telling whether player `p` is on court `c` at slot `t`.
    """
    g: Dict[Any, Grid]
    """A dictionary mapping each event to its match-start grid `g[p][c][t]`:
    a boolean variable telling whether a match of player `p` starts on court
    `c` at slot `t`.
    """

    # collections to fill
    fixed_x: Dict[Any, Set[Cell]] = field(default_factory=dict)
    """A dictionary mapping each event to the `x` cells fixed to 0 before search."""
    fixed_g: Dict[Any, Set[Cell]] = field(default_factory=dict)
    """A dictionary mapping each event to the `g` cells fixed to 0 before search."""
    score_terms: List[Any] = field(default_factory=list)
    """Weighted match-start terms rewarding early matches."""

    def dims(self, event) -> Tuple[int, int, int]:
        """Number of players, localizations and timeslots of `event`."""
        return (
            len(self.players[event]),
            len(self.localizations[event]),
            len(self.timeslots[event]),
        )
