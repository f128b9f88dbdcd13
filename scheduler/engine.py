import logging
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from ortools.sat.python import cp_model

from exceptions.custom_errors import SolverStateError
from schemas.solver import OptimizationMode, SearchStrategy, SolverSettings

logger = logging.getLogger(__name__)

"""
This module wraps OR-Tools CP-SAT behind the small set of operations the
scheduling model needs: boolean/integer variables, linear sums, equalities,
minimum constraints, a search strategy and solution enumeration.

Solutions are enumerated by re-solving the model after each one with a clause
that forbids the previous assignment of the decision variables.
"""


def configure_solver(settings: SolverSettings, fixed_search: bool, time_limit: Optional[float]) -> cp_model.CpSolver:
    """Configure the CP solver."""
    solver = cp_model.CpSolver()
    if time_limit is not None:
        solver.parameters.max_time_in_seconds = time_limit
    solver.parameters.random_seed = settings.random_seed
    solver.parameters.num_workers = settings.num_workers
    solver.parameters.log_search_progress = False
    if fixed_search:
        solver.parameters.search_branching = cp_model.FIXED_SEARCH
    return solver


def get_model_size(model: cp_model.CpModel) -> Tuple[int, int]:
    """Get the number of constraints and variables in the model."""
    proto = model.Proto()
    num_constraints = len(proto.constraints)
    num_vars = len(proto.variables)
    return num_constraints, num_vars


class CPEngine:
    """
    A CP-SAT model plus the state needed to enumerate its solutions.

    Args:
        settings (SolverSettings): Time limit, seed and worker count used for every solve.
    """

    def __init__(self, settings: SolverSettings):
        self.model = cp_model.CpModel()
        self.settings = settings
        self.feasibility: Optional[bool] = None
        """True once a solution exists, False when proven infeasible, None if unknown."""
        self.exhausted = False
        """True once no further solution exists."""
        self.solutions = 0
        self.nodes = 0
        self.fails = 0
        self.resolution_time = 0.0

        self._decision_vars: List[cp_model.IntVar] = []
        self._tracked: List[cp_model.IntVar] = []
        self._values: Dict[int, int] = {}
        self._fixed_search = False
        self._score = None
        self._optimization_mode = OptimizationMode.NONE
        self._last_score: Optional[int] = None
        self._stop_requested = threading.Event()
        self._running_solver: Optional[cp_model.CpSolver] = None

    # === Variables ===
    def new_bool_var(self, name: str) -> cp_model.IntVar:
        return self.model.NewBoolVar(name)

    def new_int_var(self, lo: int, hi: int, name: str) -> cp_model.IntVar:
        return self.model.NewIntVar(lo, hi, name)

    def new_constant(self, value: int) -> cp_model.IntVar:
        return self.model.NewConstant(value)

    def fix(self, var: cp_model.IntVar, value: int):
        self.model.Add(var == value)

    # === Constraints ===
    def _sum(self, variables: Iterable):
        variables = list(variables)
        return cp_model.LinearExpr.Sum(variables) if variables else self.model.NewConstant(0)

    def add_sum_eq_var(self, variables: Iterable, var: cp_model.IntVar):
        self.model.Add(self._sum(variables) == var)

    def add_sum_eq(self, variables: Iterable, value: int):
        self.model.Add(self._sum(variables) == value)

    def add_sum_in(self, variables: Iterable, values: Iterable[int]):
        """Constrain the sum of `variables` to one of `values`."""
        domain = cp_model.Domain.FromValues(sorted(set(values)))
        self.model.AddLinearExpressionInDomain(self._sum(variables), domain)

    def add_sum_between(self, variables: Iterable, lo: int, hi: int):
        self.model.AddLinearConstraint(self._sum(variables), lo, hi)

    def add_equal(self, a, b):
        self.model.Add(a == b)

    def add_less_or_equal(self, a, b):
        self.model.Add(a <= b)

    def add_min_equality(self, target: cp_model.IntVar, variables: Iterable):
        self.model.AddMinEquality(target, list(variables))

    # === Search ===
    def set_search_strategy(self, variables: Iterable[cp_model.IntVar], strategy: SearchStrategy):
        """
        Declare the decision variables and how to branch on them.

        The decision variables are also the ones whose assignment is blocked
        after each solution, so they must determine the whole solution.
        """
        self._decision_vars = list(variables)
        if strategy is SearchStrategy.DOMOVERWDEG:
            self._fixed_search = False
            return
        value_strategy = (
            cp_model.SELECT_MAX_VALUE
            if strategy is SearchStrategy.MINDOM_UB
            else cp_model.SELECT_MIN_VALUE
        )
        self.model.AddDecisionStrategy(
            self._decision_vars, cp_model.CHOOSE_MIN_DOMAIN_SIZE, value_strategy
        )
        self._fixed_search = True

    def track(self, variables: Iterable[cp_model.IntVar]):
        """Keep the values of `variables` after each solution so they can be read with `value`."""
        self._tracked.extend(variables)

    def set_score(self, score, mode: OptimizationMode):
        """Attach the score used by the optimization modes."""
        self._score = score
        self._optimization_mode = mode
        if mode is OptimizationMode.OPTIMAL:
            self.model.Maximize(score)

    @property
    def last_score(self) -> Optional[int]:
        return self._last_score

    # === Resolution ===
    def find_solution(self) -> bool:
        """Search for the first solution."""
        return self._solve()

    def next_solution(self) -> bool:
        """Forbid the current solution and search for another one."""
        if self.solutions == 0:
            raise SolverStateError("next_solution() called before a first solution was found")
        if self.exhausted:
            return False
        if self._score is not None and self._last_score is not None:
            if self._optimization_mode is OptimizationMode.STEP:
                self.model.Add(self._score >= self._last_score)
            elif self._optimization_mode is OptimizationMode.STEP_STRICT:
                self.model.Add(self._score > self._last_score)
        self.model.AddBoolOr(
            [v.Not() if self._values[v.Index()] else v for v in self._decision_vars]
        )
        return self._solve()

    def _remaining_time(self) -> Optional[float]:
        if self.settings.time_limit is None:
            return None
        return self.settings.time_limit - self.resolution_time

    def _solve(self) -> bool:
        remaining = self._remaining_time()
        if self._stop_requested.is_set() or (remaining is not None and remaining <= 0):
            logger.info("⏹ Search not started: stopped or out of time")
            return False

        solver = configure_solver(self.settings, self._fixed_search, remaining)
        self._running_solver = solver
        if self._stop_requested.is_set():
            self._running_solver = None
            return False
        status = solver.Solve(self.model)
        self._running_solver = None

        self.nodes += solver.NumBranches()
        self.fails += solver.NumConflicts()
        self.resolution_time += solver.WallTime()
        logger.info(f"⏱ Solve time: {solver.WallTime():.2f} seconds")

        if status in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            self._values = {
                v.Index(): solver.Value(v) for v in (*self._decision_vars, *self._tracked)
            }
            if self._score is not None:
                self._last_score = solver.Value(self._score)
            self.solutions += 1
            self.feasibility = True
            return True
        if status == cp_model.INFEASIBLE:
            if self.solutions == 0:
                self.feasibility = False
            self.exhausted = True
            return False
        if status == cp_model.MODEL_INVALID:
            raise SolverStateError(f"Invalid model: {self.model.Validate()}")
        # UNKNOWN: stopped or out of time before a proof
        return False

    def value(self, var: cp_model.IntVar) -> int:
        """Value of a decision or tracked variable in the last solution."""
        return self._values[var.Index()]

    def stop(self):
        """Ask a running search to stop and prevent new ones from starting."""
        self._stop_requested.set()
        solver = self._running_solver
        if solver is not None:
            solver.StopSearch()

    @property
    def stopped(self) -> bool:
        return self._stop_requested.is_set()

    def size(self) -> Tuple[int, int]:
        return get_model_size(self.model)
