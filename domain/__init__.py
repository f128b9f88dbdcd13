"""
domain
------

Tournament domain model and its invariants:

- Player, Localization, Timeslot, Team:
  Identity-based entities shared by events.

- Event & MatchupMode:
  One category's configuration (players, courts, timeslots, match shape, teams,
  breaks, availability, restrictions and predefined matchups).

- Matchup:
  A predefined meeting between players of an event.

- Tournament:
  A set of events solved together by a single Solver.

- EventValidator, TournamentValidator:
  Pluggable whole-object validators run before solving.
"""
from .entities import Entity, Localization, Player, Team, Timeslot
from .matchup import Matchup
from .validation import EventValidator, TournamentValidator, Validator
from .event import Event, MatchupMode
from .tournament import Tournament
