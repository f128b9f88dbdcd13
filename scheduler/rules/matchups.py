from itertools import combinations
from typing import List, Sequence

from core.state import ModelState
from domain.event import MatchupMode

"""
This module contains the rules about who meets whom: the event's matchup
mode and its predefined matchups.
"""


def _meeting_indicators(model, state: ModelState, event, group: Sequence[int], courts, starts, tag: str) -> List:
    """
    One boolean per (court, start) that is 1 exactly when every player of
    `group` starts a match there, i.e. when the group plays together.
    """
    g = state.g[event]
    fixed_g = state.fixed_g[event]
    indicators = []
    for c in courts:
        for t in starts:
            if any((p, c, t) in fixed_g for p in group):
                continue
            meet = model.new_bool_var(f"{tag}_{c}_{t}")
            model.add_min_equality(meet, [g[p][c][t] for p in group])
            indicators.append(meet)
    return indicators


def matchup_mode_rule(model, state: ModelState):
    """
    Limit how often the same group of players meets.

    ALL_DIFFERENT: every group of `players_per_match` players meets at most once.
    ALL_EQUAL: a group meets either never or in all of its `matches_per_player` matches.
    """
    for i, event in enumerate(state.events):
        mode = event.matchup_mode
        mpp, ppm = event.matches_per_player, event.players_per_match
        if mpp == 1 or ppm == 1 or mode not in (MatchupMode.ALL_DIFFERENT, MatchupMode.ALL_EQUAL):
            continue
        n_p, n_c, n_t = state.dims(event)
        starts = range(n_t - event.timeslots_per_match + 1)
        allowed = {0, 1} if mode is MatchupMode.ALL_DIFFERENT else {0, mpp}
        for group in combinations(range(n_p), ppm):
            tag = f"meet_{i}_" + "_".join(map(str, group))
            indicators = _meeting_indicators(model, state, event, group, range(n_c), starts, tag)
            model.add_sum_in(indicators, allowed)


def predefined_matchups_rule(model, state: ModelState):
    """
    Make every predefined matchup happen in its allowed courts and start slots.

    The number of meetings follows the event's matchup mode: once for
    ALL_DIFFERENT, `matches_per_player` times for ALL_EQUAL, the matchup's
    occurrences for CUSTOM, and between its occurrences and
    `matches_per_player` for ANY.
    """
    for i, event in enumerate(state.events):
        matchups = event.predefined_matchups
        if not matchups:
            continue
        player_index = {p: k for k, p in enumerate(state.players[event])}
        localization_index = {l: k for k, l in enumerate(state.localizations[event])}
        timeslot_index = {t: k for k, t in enumerate(state.timeslots[event])}
        mode = event.matchup_mode
        mpp = event.matches_per_player

        for m, matchup in enumerate(matchups):
            group = [player_index[p] for p in matchup.players]
            courts = [localization_index[l] for l in matchup.localizations]
            starts = [timeslot_index[t] for t in matchup.timeslots]
            indicators = _meeting_indicators(
                model, state, event, group, courts, starts, f"matchup_{i}_{m}"
            )
            if mode is MatchupMode.ALL_DIFFERENT:
                model.add_sum_eq(indicators, 1)
            elif mode is MatchupMode.ALL_EQUAL:
                model.add_sum_eq(indicators, mpp)
            elif mode is MatchupMode.CUSTOM:
                model.add_sum_eq(indicators, matchup.occurrences)
            else:
                model.add_sum_between(indicators, matchup.occurrences, mpp)
