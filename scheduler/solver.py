import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional

from exceptions.custom_errors import SolverStateError
from schemas.solver import OptimizationMode, SearchStrategy, SolverSettings
from scheduler.builder import build_tournament_model
from scheduler.engine import CPEngine
from scheduler.extractor import extract_event_schedules

logger = logging.getLogger(__name__)


class ResolutionState(Enum):
    READY = "ready"
    STARTED = "started"
    COMPUTING = "computing"
    """A solution was found; more may follow."""
    FINISHED = "finished"
    """Every solution has been returned."""
    UNFEASIBLE = "unfeasible"
    """Proven that no solution exists."""
    INCOMPLETE = "incomplete"
    """The search was stopped or ran out of time before a proof."""


TERMINAL_STATES = (ResolutionState.FINISHED, ResolutionState.UNFEASIBLE, ResolutionState.INCOMPLETE)


@dataclass
class ResolutionData:
    """Figures describing one resolution process."""

    tournament_name: str
    search_strategy: SearchStrategy
    resolution_state: ResolutionState
    resolution_process_completed: bool
    variables: int
    constraints: int
    solutions: int
    building_time: float
    resolution_time: float
    nodes: int
    node_processing_rate: float
    fails: int
    backtracks: int

    def __str__(self) -> str:
        lines = [
            f"Tournament: {self.tournament_name}",
            f"Search strategy: {self.search_strategy.name}",
            f"Resolution state: {self.resolution_state.name}",
            f"Resolution process completed: {self.resolution_process_completed}",
            f"Variables: {self.variables}",
            f"Constraints: {self.constraints}",
            f"Solutions: {self.solutions}",
            f"Building time: {self.building_time:.3f} s",
            f"Resolution time: {self.resolution_time:.3f} s",
            f"Nodes: {self.nodes} ({self.node_processing_rate:.1f} nodes/s)",
            f"Fails: {self.fails}",
            f"Backtracks: {self.backtracks}",
        ]
        return "\n".join(lines)


class Solver:
    """
    Builds the constraint model of a tournament and walks through its solutions.

    `execute()` builds a fresh model and searches for the first solution. Then
    `get_solution()` hands out solutions one at a time: the first call returns
    the solution found by `execute()`, later calls search for the next one.
    Once no further solution is found the solver stays in a terminal state and
    `get_solution()` keeps returning None.

    Args:
        tournament (Tournament): The tournament to schedule.
        settings (SolverSettings, optional): Search strategy, optimization mode
            and limits. Defaults to the configured constants.
    """

    def __init__(self, tournament, settings: Optional[SolverSettings] = None):
        self.tournament = tournament
        # setters mutate this copy only
        self.settings = settings.model_copy() if settings is not None else SolverSettings()
        self.resolution_state = ResolutionState.READY
        self.building_time = 0.0

        self._engine: Optional[CPEngine] = None
        self._state = None
        self._pending = None
        self._schedules = None
        self._stop_requested = False

    # === Settings ===
    def set_time_limit(self, seconds: Optional[float]):
        """Total wall-clock budget of the next resolution, None for no limit."""
        self.settings.time_limit = seconds

    def set_search_strategy(self, strategy, prioritize_timeslots: bool = False):
        self.settings.search_strategy = strategy
        self.settings.prioritize_timeslots = prioritize_timeslots

    def set_optimization_mode(self, mode):
        self.settings.optimization_mode = mode

    # === Resolution ===
    def execute(self) -> bool:
        """
        Build the model and search for the first solution.

        Every call starts over with a new model, so changes made to the
        tournament or the settings since the last call are taken into account.

        Returns:
            bool: True if a solution was found.
        """
        self._stop_requested = False
        self._pending = None
        self._schedules = None
        self.resolution_state = ResolutionState.STARTED

        settings = self.settings.model_copy()
        engine = CPEngine(settings)
        self._engine = engine

        logger.info(f"🚀 Solving {self.tournament.name} ({settings.search_strategy.name})...")
        start = time.perf_counter()
        self._state = build_tournament_model(engine, self.tournament, settings)
        self.building_time = time.perf_counter() - start

        if self._stop_requested:
            engine.stop()
        found = engine.find_solution()
        if found:
            self.resolution_state = ResolutionState.COMPUTING
            self._pending = extract_event_schedules(engine, self._state)
            logger.info(f"✅ First solution found for {self.tournament.name}")
        elif engine.feasibility is False:
            self.resolution_state = ResolutionState.UNFEASIBLE
            logger.info(f"⚠️ {self.tournament.name} has no solution")
        else:
            self.resolution_state = ResolutionState.INCOMPLETE
            logger.info(f"⚠️ No solution found for {self.tournament.name} within limits")
        return found

    def get_solution(self) -> Optional[Dict]:
        """
        Return the next solution as a dict mapping each event to its schedule.

        Returns:
            Optional[Dict[Event, EventSchedule]]: The next solution, or None
                once the solutions are exhausted or the search was stopped.

        Raises:
            SolverStateError: If `execute()` was never called.
        """
        if self._engine is None or self.resolution_state is ResolutionState.READY:
            raise SolverStateError("get_solution() called before execute()")

        if self._pending is not None:
            self._schedules, self._pending = self._pending, None
            return self._schedules
        if self.resolution_state in TERMINAL_STATES:
            return None

        if self._engine.next_solution():
            self._schedules = extract_event_schedules(self._engine, self._state)
            logger.info(f"✅ Solution #{self._engine.solutions} found for {self.tournament.name}")
            return self._schedules

        if self._engine.exhausted:
            self.resolution_state = ResolutionState.FINISHED
            logger.info(f"All {self._engine.solutions} solution(s) of {self.tournament.name} found")
        else:
            self.resolution_state = ResolutionState.INCOMPLETE
            logger.info(f"⚠️ Search for {self.tournament.name} stopped")
        return None

    def solutions(self) -> Iterator[Dict]:
        """Lazily yield the remaining solutions."""
        while True:
            schedules = self.get_solution()
            if schedules is None:
                return
            yield schedules

    def stop(self):
        """Ask the search to stop. Safe to call from another thread."""
        self._stop_requested = True
        if self._engine is not None:
            self._engine.stop()

    # === Results ===
    @property
    def schedules(self) -> Optional[Dict]:
        """The last solution returned by `get_solution()`."""
        return self._schedules

    @property
    def found_solutions(self) -> int:
        return self._engine.solutions if self._engine is not None else 0

    @property
    def feasibility(self) -> Optional[bool]:
        return self._engine.feasibility if self._engine is not None else None

    @property
    def score(self) -> Optional[int]:
        """Early-start score of the last solution when an optimization mode is set."""
        return self._engine.last_score if self._engine is not None else None

    def resolution_data(self) -> ResolutionData:
        engine = self._engine
        constraints, variables = engine.size() if engine is not None else (0, 0)
        resolution_time = engine.resolution_time if engine is not None else 0.0
        nodes = engine.nodes if engine is not None else 0
        fails = engine.fails if engine is not None else 0
        return ResolutionData(
            tournament_name=self.tournament.name,
            search_strategy=self.settings.search_strategy,
            resolution_state=self.resolution_state,
            resolution_process_completed=self.resolution_state
            in (ResolutionState.FINISHED, ResolutionState.UNFEASIBLE),
            variables=variables,
            constraints=constraints,
            solutions=self.found_solutions,
            building_time=self.building_time,
            resolution_time=resolution_time,
            nodes=nodes,
            node_processing_rate=nodes / resolution_time if resolution_time > 0 else 0.0,
            fails=fails,
            backtracks=fails,
        )
