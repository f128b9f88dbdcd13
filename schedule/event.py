from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from schedule.base import Schedule
from schedule.localization import LocalizationSchedule
from schedule.match import Match
from schedule.values import PlayerScheduleValue, ValueKind

if TYPE_CHECKING:
    from domain.entities import Player, Team
    from domain.event import Event

logger = logging.getLogger(__name__)


class EventSchedule(Schedule):
    """
    Decoded schedule of one event.

    Built from the solved occupancy grid `occupancy[p][c][t]` (1 when player
    `p` is on court `c` at timeslot `t`). Each cell of the player grid is, in
    order of precedence: BREAK, UNAVAILABLE, OCCUPIED (first court with a 1),
    LIMITED when some court is unavailable at that slot, or FREE.

    Matches are then decoded slot by slot. A player whose cell marks the start
    of a match opens a candidate, and later players (in event order) starting
    on the same court join it until `players_per_match` are collected. Ties are
    therefore resolved by player order.
    """

    def __init__(self, event: Event, occupancy: Sequence[Sequence[Sequence[int]]]):
        players = event.players
        localizations = event.localizations
        timeslots = event.timeslots
        super().__init__(event.name, players, localizations, timeslots, [], [])
        self.event = event
        self.values = self._build_values(occupancy)
        self.matches = self._decode_matches()

    def _build_values(self, occupancy) -> List[List[PlayerScheduleValue]]:
        event = self.event
        limited = [
            any(event.is_localization_unavailable(l, t) for l in self.localizations)
            for t in self.timeslots
        ]
        values = []
        for p, player in enumerate(self.players):
            row = []
            for t, timeslot in enumerate(self.timeslots):
                if event.is_break(timeslot):
                    row.append(PlayerScheduleValue(ValueKind.BREAK))
                elif event.is_player_unavailable(player, timeslot):
                    row.append(PlayerScheduleValue(ValueKind.UNAVAILABLE))
                else:
                    court = next(
                        (c for c in range(len(self.localizations)) if occupancy[p][c][t]),
                        None,
                    )
                    if court is not None:
                        row.append(PlayerScheduleValue.occupied(court))
                    elif limited[t]:
                        row.append(PlayerScheduleValue(ValueKind.LIMITED))
                    else:
                        row.append(PlayerScheduleValue(ValueKind.FREE))
            values.append(row)
        return values

    def _beginnings(self) -> List[List[Optional[PlayerScheduleValue]]]:
        """Keep only the cells where a match starts; the rest of each match window is skipped."""
        duration = self.event.timeslots_per_match
        beginnings = []
        for row in self.values:
            starts: List[Optional[PlayerScheduleValue]] = [None] * len(row)
            t = 0
            while t < len(row):
                if row[t].is_occupied:
                    starts[t] = row[t]
                    t += duration
                else:
                    t += 1
            beginnings.append(starts)
        return beginnings

    def _decode_matches(self) -> List[Match]:
        event = self.event
        ppm = event.players_per_match
        duration = event.timeslots_per_match
        n_players = len(self.players)
        beginnings = self._beginnings()

        matches = []
        for t in range(len(self.timeslots)):
            claimed = set()
            for p in range(n_players - ppm + 1):
                value = beginnings[p][t]
                if value is None or p in claimed:
                    continue
                group = [p]
                for q in range(p + 1, n_players):
                    if len(group) == ppm:
                        break
                    if q not in claimed and beginnings[q][t] == value:
                        group.append(q)
                if len(group) < ppm:
                    logger.warning(
                        f"⚠️ Incomplete match at {self.timeslots[t]} in {event.name}: "
                        f"{len(group)} of {ppm} players"
                    )
                    continue
                claimed.update(group)

                match = Match(
                    [self.players[i] for i in group],
                    self.localizations[value.localization],
                    self.timeslots[t],
                    self.timeslots[t + duration - 1],
                    duration,
                )
                if event.has_teams:
                    match.set_teams(self._group_teams(match.players))
                matches.append(match)
        return matches

    def _group_teams(self, players: List[Player]) -> List[Team]:
        """Configured teams first, then the remaining players grouped in order."""
        from domain.entities import Team

        size = self.event.players_per_team
        teams = []
        grouped = set()
        for player in players:
            team = self.event.filter_team_by_player(player)
            if team is not None and team not in teams and all(p in players for p in team):
                teams.append(team)
                grouped.update(team)
        rest = [p for p in players if p not in grouped]
        for i in range(0, len(rest) - size + 1, size):
            teams.append(Team(rest[i : i + size]))
        return teams

    @property
    def available_timeslots(self) -> int:
        return LocalizationSchedule.for_event(self).available_timeslots
