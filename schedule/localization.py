from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

from schedule.base import Schedule
from schedule.match import Match
from schedule.values import LocalizationScheduleValue, ValueKind

if TYPE_CHECKING:
    from domain.entities import Localization, Timeslot
    from schedule.event import EventSchedule
    from schedule.tournament import TournamentSchedule


def _place_match(values, match: Match, players, c: int, slots: List[int]):
    """Write `match` on row `c`: players at its first slot, continuations after."""
    values[c][slots[0]] = LocalizationScheduleValue.occupied(
        players.index(p) for p in match.players
    )
    for t in slots[1:]:
        values[c][t] = LocalizationScheduleValue(ValueKind.CONTINUATION)


class LocalizationSchedule(Schedule):
    """
    Court-by-timeslot view of a solved schedule.

    Occupied cells hold the indices of the match players (in the view's player
    list) at the match's first timeslot and CONTINUATION afterwards. Build it
    with `for_event` or `for_tournament`.
    """

    def _row_labels(self) -> list:
        return self.localizations

    @classmethod
    def for_event(cls, schedule: EventSchedule) -> "LocalizationSchedule":
        """
        View of one event: breaks and unavailable courts are UNAVAILABLE, the
        rest is FREE unless a match is played there.
        """
        event = schedule.event
        localizations = schedule.localizations
        timeslots = schedule.timeslots
        values = [
            [LocalizationScheduleValue(ValueKind.FREE) for _ in timeslots] for _ in localizations
        ]
        for t, timeslot in enumerate(timeslots):
            for c, localization in enumerate(localizations):
                if event.is_break(timeslot) or event.is_localization_unavailable(
                    localization, timeslot
                ):
                    values[c][t] = LocalizationScheduleValue(ValueKind.UNAVAILABLE)

        index = {t: i for i, t in enumerate(timeslots)}
        for match in schedule.matches:
            start = index[match.start]
            _place_match(
                values,
                match,
                schedule.players,
                localizations.index(match.localization),
                list(range(start, start + match.duration)),
            )
        return cls(schedule.name, schedule.players, localizations, timeslots, values, schedule.matches)

    @classmethod
    def for_tournament(cls, schedule: TournamentSchedule) -> "LocalizationSchedule":
        """
        View of the whole tournament over the union of courts and timeslots.

        A court-slot pair is UNAVAILABLE only when every event sharing it has a
        break or marks the court unavailable there, and LIMITED when only some
        of them do.
        """
        events = schedule.tournament.events
        localizations = schedule.localizations
        timeslots = schedule.timeslots
        values = []
        for localization in localizations:
            row = []
            for timeslot in timeslots:
                sharing = [
                    e
                    for e in events
                    if e.has_localization(localization) and e.has_timeslot(timeslot)
                ]
                marks = [
                    e.is_break(timeslot) or e.is_localization_unavailable(localization, timeslot)
                    for e in sharing
                ]
                if marks and all(marks):
                    row.append(LocalizationScheduleValue(ValueKind.UNAVAILABLE))
                elif any(marks):
                    row.append(LocalizationScheduleValue(ValueKind.LIMITED))
                else:
                    row.append(LocalizationScheduleValue(ValueKind.FREE))
            values.append(row)

        index = {t: i for i, t in enumerate(timeslots)}
        for event_schedule in schedule.event_schedules.values():
            event_slots = event_schedule.timeslots
            event_index = {t: i for i, t in enumerate(event_slots)}
            for match in event_schedule.matches:
                start = event_index[match.start]
                _place_match(
                    values,
                    match,
                    schedule.players,
                    localizations.index(match.localization),
                    [index[s] for s in event_slots[start : start + match.duration]],
                )
        return cls(schedule.name, schedule.players, localizations, timeslots, values, schedule.matches)

    @property
    def occupation(self) -> int:
        return sum(1 for row in self.values for v in row if v.is_occupied or v.is_continuation)

    @property
    def available_timeslots(self) -> int:
        return sum(
            1
            for row in self.values
            for v in row
            if v.is_occupied or v.is_continuation or v.is_free
        )


class InverseSchedule(LocalizationSchedule):
    """Localization view that also answers which match is played on each court."""

    def matches_by_localization(self) -> Dict[Localization, List[Match]]:
        grouped = {l: [] for l in self.localizations}
        for match in self.matches:
            grouped[match.localization].append(match)
        return grouped

    def match_at(self, localization: Localization, timeslot: Timeslot) -> Optional[Match]:
        """The match being played on `localization` at `timeslot`, if any."""
        for match in self.matches:
            if match.localization is localization and match.occurs_at(timeslot):
                return match
        return None
