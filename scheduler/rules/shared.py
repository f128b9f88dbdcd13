from typing import Dict, List

from core.state import ModelState

"""
This module contains the rules that link events sharing courts or players.
They are only registered when the tournament has more than one event.

Events share a court or a slot when they hold the same Localization or
Timeslot object.
"""


def _indices(items) -> Dict:
    return {item: i for i, item in enumerate(items)}


def localization_collision_rule(model, state: ModelState):
    """
    Two events cannot hold matches on the same court at the same slot.

    For every shared court and slot the total occupancy must be 0 or the size
    of one match of a participating event. The total alone does not suffice:
    two 2-player matches add up to one 4-player match, so the occupancy of the
    events sharing each match size is also restricted to 0 or that size.
    """
    localization_index = {e: _indices(state.localizations[e]) for e in state.events}
    timeslot_index = {e: _indices(state.timeslots[e]) for e in state.events}

    for localization in state.all_localizations:
        for timeslot in state.all_timeslots:
            by_size: Dict[int, List] = {}
            for event in state.events:
                c = localization_index[event].get(localization)
                t = timeslot_index[event].get(timeslot)
                if c is None or t is None or event.is_break(timeslot):
                    continue
                x = state.x[event]
                by_size.setdefault(event.players_per_match, []).append(
                    [x[p][c][t] for p in range(len(state.players[event]))]
                )
            if sum(len(groups) for groups in by_size.values()) < 2:
                continue

            everything = [v for groups in by_size.values() for terms in groups for v in terms]
            model.add_sum_in(everything, {0, *by_size})
            for size, groups in by_size.items():
                model.add_sum_in([v for terms in groups for v in terms], {0, size})


def player_not_simultaneous_rule(model, state: ModelState):
    """A player entered in several events plays at most one match at any slot."""
    player_index = {e: _indices(state.players[e]) for e in state.events}
    timeslot_index = {e: _indices(state.timeslots[e]) for e in state.events}

    for player in state.all_players:
        events = [e for e in state.events if player in player_index[e]]
        if len(events) < 2:
            continue
        for timeslot in state.all_timeslots:
            terms = []
            sharing = 0
            for event in events:
                t = timeslot_index[event].get(timeslot)
                if t is None:
                    continue
                sharing += 1
                p = player_index[event][player]
                x = state.x[event]
                terms.extend(x[p][c][t] for c in range(len(state.localizations[event])))
            if sharing >= 2:
                model.add_sum_between(terms, 0, 1)
