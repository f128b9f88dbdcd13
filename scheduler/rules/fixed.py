from core.state import ModelState

"""
This module contains the pre-fixing rules: cells of the decision grids that
are set to 0 before any constraint is posted, because a player, a court or a
timeslot cannot host a match there.
"""


def fix_x(model, state: ModelState, event, p: int, c: int, t: int):
    """Fix the occupancy of player `p` on court `c` at slot `t` to 0."""
    if (p, c, t) not in state.fixed_x[event]:
        state.fixed_x[event].add((p, c, t))
        model.fix(state.x[event][p][c][t], 0)


def fix_g(model, state: ModelState, event, p: int, c: int, t: int):
    """Forbid a match of player `p` from starting on court `c` at slot `t`."""
    if (p, c, t) not in state.fixed_g[event]:
        state.fixed_g[event].add((p, c, t))
        model.fix(state.g[event][p][c][t], 0)


def fix_window(model, state: ModelState, event, p: int, c: int, t: int):
    """Fix `x` at slot `t` and every start whose match window would cover `t`."""
    fix_x(model, state, event, p, c, t)
    for s in range(max(0, t - event.timeslots_per_match + 1), t + 1):
        fix_g(model, state, event, p, c, s)


def trailing_starts_rule(model, state: ModelState):
    """No match can start where its window would run past the last timeslot."""
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        for t in range(max(0, n_t - event.timeslots_per_match + 1), n_t):
            for p in range(n_p):
                for c in range(n_c):
                    fix_g(model, state, event, p, c, t)


def unavailable_players_rule(model, state: ModelState):
    """Unavailable players cannot be on any court at their unavailable slots."""
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        timeslots = state.timeslots[event]
        for p, player in enumerate(state.players[event]):
            for t in range(n_t):
                if event.is_player_unavailable(player, timeslots[t]):
                    for c in range(n_c):
                        fix_window(model, state, event, p, c, t)


def unavailable_localizations_rule(model, state: ModelState):
    """Nobody plays on a court at the slots where it is unavailable."""
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        timeslots = state.timeslots[event]
        for c, localization in enumerate(state.localizations[event]):
            for t in range(n_t):
                if event.is_localization_unavailable(localization, timeslots[t]):
                    for p in range(n_p):
                        fix_window(model, state, event, p, c, t)


def breaks_rule(model, state: ModelState):
    """Nobody plays during a break."""
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        timeslots = state.timeslots[event]
        for t in range(n_t):
            if event.is_break(timeslots[t]):
                for p in range(n_p):
                    for c in range(n_c):
                        fix_window(model, state, event, p, c, t)


def players_in_localizations_rule(model, state: ModelState):
    """Players restricted to some courts cannot play on the others."""
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        localizations = state.localizations[event]
        restrictions = event.players_in_localizations
        for p, player in enumerate(state.players[event]):
            allowed = restrictions.get(player)
            if allowed is None:
                continue
            for c in range(n_c):
                if localizations[c] not in allowed:
                    for t in range(n_t):
                        fix_x(model, state, event, p, c, t)
                        fix_g(model, state, event, p, c, t)


def players_at_timeslots_rule(model, state: ModelState):
    """Players restricted to some start slots cannot start a match at the others."""
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        timeslots = state.timeslots[event]
        restrictions = event.players_at_timeslots
        for p, player in enumerate(state.players[event]):
            allowed = restrictions.get(player)
            if allowed is None:
                continue
            for t in range(n_t):
                if timeslots[t] not in allowed:
                    for c in range(n_c):
                        fix_g(model, state, event, p, c, t)
