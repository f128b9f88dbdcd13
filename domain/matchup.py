from typing import Iterable, List, Optional

from domain.entities import Localization, Player, Timeslot
from exceptions.custom_errors import InvalidMatchupError


class Matchup:
    """
    A predefined meeting between a fixed group of players of one event.

    The matchup may only take place in `localizations` and start at
    `timeslots`, and happens `occurrences` times. Omitted localizations or
    timeslots default to the whole event domain; timeslots are always filtered
    to the slots where a whole match fits.

    Args:
        event (Event): The event the matchup belongs to.
        players (Iterable[Player]): Exactly `event.players_per_match` players of the event.
        localizations (Iterable[Localization], optional): Allowed courts.
        timeslots (Iterable[Timeslot], optional): Allowed match starts.
        occurrences (int): Number of times the players meet, between 1 and
            `event.matches_per_player`.

    Raises:
        InvalidMatchupError: If any of the above does not hold, or if adding
            `occurrences` would take a player past `event.matches_per_player`
            predefined occurrences.
    """

    def __init__(
        self,
        event,
        players: Iterable[Player],
        localizations: Optional[Iterable[Localization]] = None,
        timeslots: Optional[Iterable[Timeslot]] = None,
        occurrences: int = 1,
    ):
        if event is None:
            raise InvalidMatchupError("Event cannot be None")
        players = list(players) if players is not None else []

        if len(players) != event.players_per_match:
            raise InvalidMatchupError(
                f"A matchup needs exactly {event.players_per_match} players, got {len(players)}"
            )
        if len(set(players)) != len(players):
            raise InvalidMatchupError("Matchup players must be unique")
        for player in players:
            if not event.has_player(player):
                raise InvalidMatchupError(
                    f"Player ({player}) does not exist in event ({event.name})"
                )

        if localizations is None:
            localizations = event.localizations
        localizations = list(localizations)
        if not localizations:
            raise InvalidMatchupError("Matchup localizations cannot be empty")
        for localization in localizations:
            if not event.has_localization(localization):
                raise InvalidMatchupError(
                    f"Localization ({localization}) does not exist in event ({event.name})"
                )

        if timeslots is None:
            timeslots = event.timeslots
        timeslots = list(timeslots)
        for timeslot in timeslots:
            if not event.has_timeslot(timeslot):
                raise InvalidMatchupError(
                    f"Timeslot ({timeslot}) does not exist in event ({event.name})"
                )
        timeslots = [t for t in timeslots if event.is_valid_start(t)]
        if not timeslots:
            raise InvalidMatchupError("Matchup timeslots cannot be empty")

        if (
            not isinstance(occurrences, int)
            or isinstance(occurrences, bool)
            or not 1 <= occurrences <= event.matches_per_player
        ):
            raise InvalidMatchupError(
                f"Occurrences must be between 1 and {event.matches_per_player}, got {occurrences!r}"
            )
        for player in players:
            total = event.predefined_occurrences(player) + occurrences
            if total > event.matches_per_player:
                raise InvalidMatchupError(
                    f"Player ({player}) would have {total} predefined occurrences, "
                    f"more than the matches per player ({event.matches_per_player})"
                )

        self.event = event
        self._players = players
        self._localizations = list(dict.fromkeys(localizations))
        self._timeslots = sorted(dict.fromkeys(timeslots), key=event.timeslot_index)
        self.occurrences = occurrences

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    @property
    def localizations(self) -> List[Localization]:
        return list(self._localizations)

    @property
    def timeslots(self) -> List[Timeslot]:
        return list(self._timeslots)

    def has_player(self, player: Player) -> bool:
        return player in self._players

    def __str__(self) -> str:
        return " vs ".join(p.name for p in self._players)

    def __repr__(self) -> str:
        return f"Matchup({self}, occurrences={self.occurrences})"
