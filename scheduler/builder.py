import logging

from ortools.sat.python import cp_model

from core.constraint_manager import ConstraintManager
from core.state import ModelState
from schemas.solver import OptimizationMode, SolverSettings
from scheduler.rules import *
from scheduler.setup import setup_model

logger = logging.getLogger(__name__)


# == Build Tournament Model ==
def build_tournament_model(model, tournament, settings: SolverSettings) -> ModelState:
    """
    Builds the constraint model of a tournament on the given engine.

    Creates the decision grids, fixes the impossible cells, posts every rule,
    then declares the search strategy and, when an optimization mode is set,
    the early-start score. Building never fails because the configuration is
    unsatisfiable; that is only discovered by the search.

    Args:
        model (CPEngine): The engine receiving the variables and constraints.
        tournament (Tournament): The tournament to schedule.
        settings (SolverSettings): Search strategy, optimization mode and limits.

    Returns:
        ModelState: The state holding the decision grids.
    """
    logger.info(f"📋 Building model for {tournament.name}...")
    state = setup_model(model, tournament, settings)
    multi_event = len(state.events) > 1

    cm = ConstraintManager(model, state)
    # pre-fixing
    cm.add_rule(trailing_starts_rule)
    cm.add_rule(unavailable_players_rule)
    cm.add_rule(unavailable_localizations_rule)
    cm.add_rule(breaks_rule)
    cm.add_rule(players_in_localizations_rule)
    cm.add_rule(players_at_timeslots_rule)
    # per event
    cm.add_rule(match_window_rule)
    cm.add_rule(total_matches_rule)
    cm.add_rule(matches_per_player_rule)
    cm.add_rule(court_occupation_rule)
    cm.add_rule(team_rule, any(e.has_teams for e in state.events))
    cm.add_rule(matchup_mode_rule)
    cm.add_rule(predefined_matchups_rule)
    # across events
    cm.add_rule(localization_collision_rule, multi_event)
    cm.add_rule(player_not_simultaneous_rule, multi_event)
    applied = cm.apply_all()
    logger.debug(f"{applied} rules applied")

    model.set_search_strategy(decision_variables(state), settings.search_strategy)
    model.track(v for e in state.events for row in state.x[e] for col in row for v in col)

    if settings.optimization_mode is not OptimizationMode.NONE:
        model.set_score(build_score(state), settings.optimization_mode)

    num_constraints, num_vars = model.size()
    logger.info(f"→ #constraints = {num_constraints},  #bool_vars = {num_vars}")
    return state


def decision_variables(state: ModelState) -> list:
    """
    Flatten the free cells of the occupancy grids, event by event and player
    by player. Within a player, courts come first unless the settings
    prioritize timeslots.
    """
    variables = []
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        x = state.x[event]
        fixed = state.fixed_x[event]
        if state.settings.prioritize_timeslots:
            order = [(c, t) for t in range(n_t) for c in range(n_c)]
        else:
            order = [(c, t) for c in range(n_c) for t in range(n_t)]
        for p in range(n_p):
            variables.extend(x[p][c][t] for c, t in order if (p, c, t) not in fixed)
    return variables


def build_score(state: ModelState):
    """Score rewarding early matches: each start at slot `t` weighs `n_timeslots - t`."""
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        g = state.g[event]
        fixed = state.fixed_g[event]
        state.score_terms.extend(
            (g[p][c][t], n_t - t)
            for p in range(n_p)
            for c in range(n_c)
            for t in range(n_t)
            if (p, c, t) not in fixed
        )
    return cp_model.LinearExpr.WeightedSum(
        [v for v, _ in state.score_terms], [w for _, w in state.score_terms]
    )
