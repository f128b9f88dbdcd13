"""
schedule
--------

Read-only views decoded from a solved assignment:

- `values`: typed grid cells (FREE, OCCUPIED, UNAVAILABLE, BREAK, LIMITED, ...).
- `match`: a decoded match with its players, court, timeslots and teams.
- `event`: per-event player grid and match decoding.
- `tournament`: all events merged on the tournament's players and timeslots.
- `localization`: court-by-timeslot views, including the inverse view.
"""
from .values import LocalizationScheduleValue, PlayerScheduleValue, ValueKind
from .match import Match
from .base import Schedule
from .localization import InverseSchedule, LocalizationSchedule
from .event import EventSchedule
from .tournament import TournamentSchedule
