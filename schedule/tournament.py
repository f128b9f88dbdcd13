from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from schedule.base import Schedule
from schedule.localization import LocalizationSchedule
from schedule.values import PlayerScheduleValue, ValueKind

if TYPE_CHECKING:
    from domain.event import Event
    from domain.tournament import Tournament
    from schedule.event import EventSchedule


class TournamentSchedule(Schedule):
    """
    Player-by-timeslot view of all events at once.

    The grid spans the tournament's union of players and timeslots; cells
    outside every event's domain stay NOT_IN_DOMAIN. Events are merged in
    order and the first writer wins, except that an occupied cell always
    replaces a non-occupied one. Occupied cells point at the tournament's court index.
    """

    def __init__(self, tournament: Tournament, event_schedules: Dict[Event, EventSchedule]):
        players = tournament.all_players
        localizations = tournament.all_localizations
        timeslots = tournament.all_timeslots
        super().__init__(tournament.name, players, localizations, timeslots, [], [])
        self.tournament = tournament
        self.event_schedules = dict(event_schedules)
        self.values = self._merge()
        self.matches = sorted(
            (m for s in self.event_schedules.values() for m in s.matches),
            key=lambda m: m.start,
        )

    def _merge(self) -> List[List[PlayerScheduleValue]]:
        player_index = {p: i for i, p in enumerate(self.players)}
        timeslot_index = {t: i for i, t in enumerate(self.timeslots)}
        localization_index = {l: i for i, l in enumerate(self.localizations)}
        values = [
            [PlayerScheduleValue(ValueKind.NOT_IN_DOMAIN) for _ in self.timeslots]
            for _ in self.players
        ]
        written = [[False] * len(self.timeslots) for _ in self.players]

        for event_schedule in self.event_schedules.values():
            for p, player in enumerate(event_schedule.players):
                i = player_index[player]
                for t, timeslot in enumerate(event_schedule.timeslots):
                    j = timeslot_index[timeslot]
                    current = values[i][j]
                    value = event_schedule.values[p][t]
                    if current.is_occupied:
                        continue
                    if value.is_occupied:
                        local = event_schedule.localizations[value.localization]
                        values[i][j] = PlayerScheduleValue.occupied(localization_index[local])
                    elif not written[i][j]:
                        values[i][j] = value
                    written[i][j] = True
        return values

    @property
    def available_timeslots(self) -> int:
        return LocalizationSchedule.for_tournament(self).available_timeslots
