from core.state import Grid, ModelState
from schemas.solver import SolverSettings


def build_variables(model, tag: str, event_id: int, num_players: int, num_localizations: int, num_timeslots: int) -> Grid:
    """
    Builds a `[player][localization][timeslot]` grid of BoolVars for one event.

    Args:
        model (CPEngine): The engine the variables are created in.
        tag (str): Grid name used in the variable names ("x" or "g").
        event_id (int): Position of the event in the tournament.
        num_players (int): Number of players of the event.
        num_localizations (int): Number of localizations of the event.
        num_timeslots (int): Number of timeslots of the event.

    Returns:
        Grid: Nested lists of boolean variables.
    """
    return [
        [
            [model.new_bool_var(f"{tag}_{event_id}_{p}_{c}_{t}") for t in range(num_timeslots)]
            for c in range(num_localizations)
        ]
        for p in range(num_players)
    ]


def setup_model(model, tournament, settings: SolverSettings) -> ModelState:
    """
    Create the decision grids of every event and wrap them in a `ModelState`.

    Args:
        model (CPEngine): The engine the variables are created in.
        tournament (Tournament): The tournament to model.
        settings (SolverSettings): The solver settings.

    Returns:
        ModelState: The state the rules are applied to.
    """
    events = tournament.events
    players = {e: e.players for e in events}
    localizations = {e: e.localizations for e in events}
    timeslots = {e: e.timeslots for e in events}

    x, g = {}, {}
    for i, event in enumerate(events):
        dims = (len(players[event]), len(localizations[event]), len(timeslots[event]))
        x[event] = build_variables(model, "x", i, *dims)
        g[event] = build_variables(model, "g", i, *dims)

    return ModelState(
        events=events,
        players=players,
        localizations=localizations,
        timeslots=timeslots,
        all_players=tournament.all_players,
        all_localizations=tournament.all_localizations,
        all_timeslots=tournament.all_timeslots,
        settings=settings,
        x=x,
        g=g,
        fixed_x={e: set() for e in events},
        fixed_g={e: set() for e in events},
    )
