from core.state import ModelState

"""
This module contains the rules posted for each event on its own: how match
starts map onto occupied slots, how many matches each player plays, how many
players share a court, and team cohesion.
"""


def match_window_rule(model, state: ModelState):
    """
    Tie the match-start grid `g` to the occupancy grid `x`.

    A start at `t` occupies the whole window `t..t+D-1`, and every occupied
    slot is covered by exactly one start, so `x[t]` equals the sum of the
    starts whose window covers `t`. Back-to-back matches on the same court
    remain possible.
    """
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        duration = event.timeslots_per_match
        x, g = state.x[event], state.g[event]
        fixed_g = state.fixed_g[event]
        for p in range(n_p):
            for c in range(n_c):
                for t in range(n_t):
                    covering = [g[p][c][s] for s in range(max(0, t - duration + 1), t + 1)]
                    model.add_sum_eq_var(covering, x[p][c][t])

                    if duration > 1 and t + duration <= n_t and (p, c, t) not in fixed_g:
                        for i in range(duration):
                            model.add_less_or_equal(g[p][c][t], x[p][c][t + i])


def matches_per_player_rule(model, state: ModelState):
    """Each player plays exactly `matches_per_player` matches, on one court at a time."""
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        x, g = state.x[event], state.g[event]
        for p in range(n_p):
            model.add_sum_eq(
                [g[p][c][t] for c in range(n_c) for t in range(n_t)],
                event.matches_per_player,
            )
            model.add_sum_eq(
                [x[p][c][t] for c in range(n_c) for t in range(n_t)],
                event.matches_per_player * event.timeslots_per_match,
            )
            for t in range(n_t):
                model.add_sum_between([x[p][c][t] for c in range(n_c)], 0, 1)


def total_matches_rule(model, state: ModelState):
    """Event-wide totals of match starts (counted per player) and occupied slots."""
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        x, g = state.x[event], state.g[event]
        cells = [(p, c, t) for p in range(n_p) for c in range(n_c) for t in range(n_t)]
        model.add_sum_eq([g[p][c][t] for p, c, t in cells], n_p * event.matches_per_player)
        model.add_sum_eq([x[p][c][t] for p, c, t in cells], event.number_of_occupied_timeslots)


def court_occupation_rule(model, state: ModelState):
    """A court at a given slot is either empty or holds exactly one full match."""
    for event in state.events:
        n_p, n_c, n_t = state.dims(event)
        x = state.x[event]
        timeslots = state.timeslots[event]
        for t in range(n_t):
            if event.is_break(timeslots[t]):
                continue
            for c in range(n_c):
                model.add_sum_in([x[p][c][t] for p in range(n_p)], {0, event.players_per_match})


def team_rule(model, state: ModelState):
    """Players of the same team are always together on the same court and slot."""
    for event in state.events:
        if not event.has_teams:
            continue
        n_p, n_c, n_t = state.dims(event)
        x = state.x[event]
        index = {player: i for i, player in enumerate(state.players[event])}
        for team in event.teams:
            members = [index[player] for player in team]
            for a, b in zip(members, members[1:]):
                for c in range(n_c):
                    for t in range(n_t):
                        model.add_equal(x[a][c][t], x[b][c][t])
