import logging
from typing import Dict, Iterable, List, Optional

from domain.entities import Localization, Player, Timeslot
from domain.event import Event
from domain.validation import TournamentValidator, Validator
from exceptions.custom_errors import InvalidTournamentError, ValidationError
from schedule.event import EventSchedule
from schedule.localization import InverseSchedule, LocalizationSchedule
from schedule.tournament import TournamentSchedule
from schemas.solver import SolverSettings

logger = logging.getLogger(__name__)


def _first_seen(items: Iterable) -> list:
    return list(dict.fromkeys(items))


class Tournament:
    """
    A set of events scheduled together, sharing players and courts.

    The tournament derives the union of its events' players, localizations
    and timeslots (in first-seen order) and owns the single `Solver` that
    computes their schedules.

    Args:
        name (str): Name of the tournament.
        events (Iterable[Event]): Non-empty list of unique events. Each event
            gets a weak back-reference to this tournament.
        validator (Validator, optional): Validator used by `validate()`.
        settings (SolverSettings, optional): Initial solver settings.
    """

    def __init__(
        self,
        name: str,
        events: Iterable[Event],
        validator: Optional[Validator] = None,
        settings: Optional[SolverSettings] = None,
    ):
        if name is None:
            raise InvalidTournamentError("Name cannot be None")
        events = list(events) if events is not None else []
        if not events:
            raise InvalidTournamentError("A tournament must have at least one event")
        if any(not isinstance(e, Event) for e in events):
            raise InvalidTournamentError("Events must be Event instances")
        if len(set(events)) != len(events):
            raise InvalidTournamentError("Events must be unique")

        self.name = str(name)
        self._events: List[Event] = events
        for event in events:
            event._set_tournament(self)

        self._all_players: List[Player] = _first_seen(p for e in events for p in e.players)
        self._all_localizations: List[Localization] = _first_seen(
            l for e in events for l in e.localizations
        )
        self._all_timeslots: List[Timeslot] = _first_seen(
            t for e in events for t in e.timeslots
        )

        # the solver package imports the domain, import it here to avoid the cycle
        from scheduler.solver import Solver

        self.validator: Validator = validator if validator is not None else TournamentValidator()
        self.solver = Solver(self, settings)
        self._current_schedules: Optional[Dict[Event, EventSchedule]] = None
        self._schedule: Optional[TournamentSchedule] = None

    # === Domain ===
    @property
    def events(self) -> List[Event]:
        return list(self._events)

    @property
    def all_players(self) -> List[Player]:
        return list(self._all_players)

    @property
    def all_localizations(self) -> List[Localization]:
        return list(self._all_localizations)

    @property
    def all_timeslots(self) -> List[Timeslot]:
        return list(self._all_timeslots)

    @property
    def number_of_matches(self) -> int:
        return sum(e.number_of_matches for e in self._events)

    @property
    def number_of_occupied_timeslots(self) -> int:
        return sum(e.number_of_occupied_timeslots for e in self._events)

    def group_events_by_players_per_match(self) -> Dict[int, List[Event]]:
        """Group the events by their number of players per match."""
        groups: Dict[int, List[Event]] = {}
        for event in self._events:
            groups.setdefault(event.players_per_match, []).append(event)
        return groups

    def validate(self):
        messages = self.validator.validate(self)
        if messages:
            logger.info(f"❌ Tournament {self.name} is not valid: {len(messages)} issue(s)")
            raise ValidationError(messages)

    # === Resolution ===
    def solve(self) -> bool:
        """
        Validate the tournament and compute its first schedule.

        Returns:
            bool: True if a schedule was found. On False, `solver.resolution_state`
                tells a proven infeasibility apart from a stopped or timed out search.

        Raises:
            ValidationError: If the tournament or one of its events is invalid.
        """
        self.validate()
        solved = self.solver.execute()
        self._set_current(self.solver.get_solution() if solved else None)
        return solved

    def next_schedules(self) -> Optional[Dict[Event, EventSchedule]]:
        """Move to the next solution; returns None once all solutions are exhausted."""
        self._set_current(self.solver.get_solution())
        return self._current_schedules

    def _set_current(self, schedules: Optional[Dict[Event, EventSchedule]]):
        self._current_schedules = schedules
        self._schedule = None

    @property
    def current_schedules(self) -> Optional[Dict[Event, EventSchedule]]:
        return dict(self._current_schedules) if self._current_schedules is not None else None

    @property
    def schedule(self) -> Optional[TournamentSchedule]:
        """The tournament-wide view of the current solution, or None if there is none."""
        if self._current_schedules is None:
            return None
        if self._schedule is None:
            self._schedule = TournamentSchedule(self, self._current_schedules)
        return self._schedule

    def localization_schedule(self, event: Optional[Event] = None) -> Optional[LocalizationSchedule]:
        """Court-by-slot view of the current solution, for one event or the whole tournament."""
        if self._current_schedules is None:
            return None
        if event is not None:
            return LocalizationSchedule.for_event(self._current_schedules[event])
        return LocalizationSchedule.for_tournament(self.schedule)

    def inverse_schedule(self, event: Optional[Event] = None) -> Optional[InverseSchedule]:
        """Court-by-slot view of the current solution with its matches grouped by court."""
        if self._current_schedules is None:
            return None
        if event is not None:
            return InverseSchedule.for_event(self._current_schedules[event])
        return InverseSchedule.for_tournament(self.schedule)

    def schedules_to_string(self) -> str:
        if self._current_schedules is None:
            return f"{self.name}: no schedule calculated"
        return "\n".join(str(s) for s in self._current_schedules.values())

    # === Cross-event helpers ===
    def _events_with(self, player=None, localization=None, timeslot=None) -> List[Event]:
        return [
            e
            for e in self._events
            if (player is None or e.has_player(player))
            and (localization is None or e.has_localization(localization))
            and (timeslot is None or e.has_timeslot(timeslot))
        ]

    def add_unavailable_player_at_timeslot(self, player: Player, timeslot: Timeslot):
        """Mark `player` unavailable at `timeslot` in every event where both exist."""
        for event in self._events_with(player=player, timeslot=timeslot):
            event.add_unavailable_player_at_timeslot(player, timeslot)

    def add_unavailable_player_at_timeslots(self, player: Player, timeslots: Iterable[Timeslot]):
        for timeslot in timeslots:
            self.add_unavailable_player_at_timeslot(player, timeslot)

    def add_unavailable_player_at_timeslot_range(self, player: Player, t1: Timeslot, t2: Timeslot):
        """Mark `player` unavailable at every tournament timeslot within [t1, t2]."""
        lo, hi = (t1, t2) if t1 <= t2 else (t2, t1)
        self.add_unavailable_player_at_timeslots(
            player, [t for t in self._all_timeslots if t.within(lo, hi)]
        )

    def remove_unavailable_player_timeslot(self, player: Player, timeslot: Timeslot):
        for event in self._events_with(player=player):
            event.remove_unavailable_player_timeslot(player, timeslot)

    def add_unavailable_localization_at_timeslot(
        self, localization: Localization, timeslot: Timeslot
    ):
        for event in self._events_with(localization=localization, timeslot=timeslot):
            event.add_unavailable_localization_at_timeslot(localization, timeslot)

    def add_unavailable_localization_at_timeslots(
        self, localization: Localization, timeslots: Iterable[Timeslot]
    ):
        for timeslot in timeslots:
            self.add_unavailable_localization_at_timeslot(localization, timeslot)

    def remove_unavailable_localization_timeslot(
        self, localization: Localization, timeslot: Timeslot
    ):
        for event in self._events_with(localization=localization):
            event.remove_unavailable_localization_timeslot(localization, timeslot)

    def add_break(self, timeslot: Timeslot):
        for event in self._events_with(timeslot=timeslot):
            event.add_break(timeslot)

    def remove_break(self, timeslot: Timeslot):
        for event in self._events_with(timeslot=timeslot):
            event.remove_break(timeslot)

    def __str__(self) -> str:
        return self.name
