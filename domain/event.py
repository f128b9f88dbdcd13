import logging
import weakref
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set, Union

from domain.entities import Localization, Player, Team, Timeslot
from domain.matchup import Matchup
from domain.validation import EventValidator, Validator
from exceptions.custom_errors import InvalidEventError, InvalidTeamError, ValidationError
from utils.constants import (
    DEFAULT_MATCHES_PER_PLAYER,
    DEFAULT_PLAYERS_PER_MATCH,
    DEFAULT_TIMESLOTS_PER_MATCH,
)

logger = logging.getLogger(__name__)


class MatchupMode(Enum):
    """Policy governing repeat pairings when a player plays several matches."""

    ALL_DIFFERENT = "ALL_DIFFERENT"
    """Every group of players meets at most once."""
    ALL_EQUAL = "ALL_EQUAL"
    """A group that meets once meets in all of its players' matches."""
    ANY = "ANY"
    """No restriction on repeat pairings."""
    CUSTOM = "CUSTOM"
    """Repeats are driven by the occurrences of the predefined matchups."""


def _positive_int(value, label: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise InvalidEventError(f"{label} must be a positive integer, got {value!r}")
    return value


def _unique(items: list, label: str):
    seen = set()
    for item in items:
        if item is None:
            raise InvalidEventError(f"{label} cannot contain None")
        if item in seen:
            raise InvalidEventError(f"{label} must be unique; ({item}) is duplicated")
        seen.add(item)


class Event:
    """
    One category of a tournament with its own players, courts and time domain.

    The event owns every collection it exposes: the properties return copies
    and all changes go through the mutators below. Each mutator checks its
    preconditions first and raises `InvalidEventError` (or `InvalidTeamError`)
    without touching the event when they do not hold.

    Args:
        name (str): Name of the event.
        players (Iterable[Player]): Non-empty list of unique players.
        localizations (Iterable[Localization]): Non-empty list of unique courts.
        timeslots (Iterable[Timeslot]): Non-empty list of unique timeslots. They
            are sorted chronologically; two slots with the same position raise.
        matches_per_player (int): Number of matches each player plays.
        timeslots_per_match (int): Duration of a match, in timeslots.
        players_per_match (int): Number of players in a match.
        validator (Validator, optional): Whole-event validator used by `validate()`.
    """

    def __init__(
        self,
        name: str,
        players: Iterable[Player],
        localizations: Iterable[Localization],
        timeslots: Iterable[Timeslot],
        matches_per_player: int = DEFAULT_MATCHES_PER_PLAYER,
        timeslots_per_match: int = DEFAULT_TIMESLOTS_PER_MATCH,
        players_per_match: int = DEFAULT_PLAYERS_PER_MATCH,
        validator: Optional[Validator] = None,
    ):
        if name is None:
            raise InvalidEventError("Name cannot be None")
        players = list(players) if players is not None else []
        localizations = list(localizations) if localizations is not None else []
        timeslots = list(timeslots) if timeslots is not None else []

        _positive_int(matches_per_player, "Matches per player")
        _positive_int(timeslots_per_match, "Timeslots per match")
        _positive_int(players_per_match, "Players per match")

        if not players:
            raise InvalidEventError("Players cannot be empty")
        _unique(players, "Players")
        if len(players) % players_per_match != 0:
            raise InvalidEventError(
                f"Number of players ({len(players)}) must be a multiple of the "
                f"number of players per match ({players_per_match})"
            )

        if not localizations:
            raise InvalidEventError("Localizations cannot be empty")
        _unique(localizations, "Localizations")

        if not timeslots:
            raise InvalidEventError("Timeslots cannot be empty")
        _unique(timeslots, "Timeslots")
        timeslots = sorted(timeslots)
        for a, b in zip(timeslots, timeslots[1:]):
            if not a < b:
                raise InvalidEventError(
                    f"Timeslots must be strictly ordered; ({a}) and ({b}) share the same position"
                )
        if len(timeslots) < matches_per_player * timeslots_per_match:
            raise InvalidEventError(
                f"Number of timeslots ({len(timeslots)}) must not be less than the "
                f"minimum needed amount ({matches_per_player * timeslots_per_match})"
            )

        self.name = str(name)
        self._players: List[Player] = players
        self._localizations: List[Localization] = localizations
        self._timeslots: List[Timeslot] = timeslots
        self._player_set = set(players)
        self._localization_set = set(localizations)
        self._timeslot_index: Dict[Timeslot, int] = {
            t: i for i, t in enumerate(timeslots)
        }

        self._matches_per_player = matches_per_player
        self._timeslots_per_match = timeslots_per_match
        self._players_per_match = players_per_match
        self._matchup_mode = MatchupMode.ANY

        self._teams: List[Team] = []
        self._unavailable_players: Dict[Player, Set[Timeslot]] = {}
        self._unavailable_localizations: Dict[Localization, Set[Timeslot]] = {}
        self._predefined_matchups: List[Matchup] = []
        self._players_in_localizations: Dict[Player, Set[Localization]] = {}
        self._players_at_timeslots: Dict[Player, Set[Timeslot]] = {}
        self._breaks: List[Timeslot] = []

        self._tournament_ref = None
        self.validator: Validator = validator if validator is not None else EventValidator()

    # === Read accessors ===
    @property
    def players(self) -> List[Player]:
        return list(self._players)

    @property
    def localizations(self) -> List[Localization]:
        return list(self._localizations)

    @property
    def timeslots(self) -> List[Timeslot]:
        return list(self._timeslots)

    @property
    def teams(self) -> List[Team]:
        return list(self._teams)

    @property
    def unavailable_players(self) -> Dict[Player, Set[Timeslot]]:
        return {p: set(ts) for p, ts in self._unavailable_players.items()}

    @property
    def unavailable_localizations(self) -> Dict[Localization, Set[Timeslot]]:
        return {l: set(ts) for l, ts in self._unavailable_localizations.items()}

    @property
    def predefined_matchups(self) -> List[Matchup]:
        return list(self._predefined_matchups)

    @property
    def players_in_localizations(self) -> Dict[Player, Set[Localization]]:
        return {p: set(ls) for p, ls in self._players_in_localizations.items()}

    @property
    def players_at_timeslots(self) -> Dict[Player, Set[Timeslot]]:
        return {p: set(ts) for p, ts in self._players_at_timeslots.items()}

    @property
    def breaks(self) -> List[Timeslot]:
        return list(self._breaks)

    @property
    def tournament(self):
        """The owning tournament, or None if the event has not been added to one."""
        return self._tournament_ref() if self._tournament_ref is not None else None

    def _set_tournament(self, tournament):
        self._tournament_ref = weakref.ref(tournament)

    # === Match shape ===
    @property
    def matches_per_player(self) -> int:
        return self._matches_per_player

    @matches_per_player.setter
    def matches_per_player(self, value: int):
        _positive_int(value, "Matches per player")
        if len(self._timeslots) < value * self._timeslots_per_match:
            raise InvalidEventError(
                f"Number of timeslots ({len(self._timeslots)}) must not be less than "
                f"the minimum needed amount ({value * self._timeslots_per_match})"
            )
        self._matches_per_player = value
        self._predefined_matchups.clear()
        if value == 1:
            self._matchup_mode = MatchupMode.ANY

    @property
    def timeslots_per_match(self) -> int:
        return self._timeslots_per_match

    @timeslots_per_match.setter
    def timeslots_per_match(self, value: int):
        _positive_int(value, "Timeslots per match")
        if len(self._timeslots) < self._matches_per_player * value:
            raise InvalidEventError(
                f"Number of timeslots ({len(self._timeslots)}) must not be less than "
                f"the minimum needed amount ({self._matches_per_player * value})"
            )
        self._timeslots_per_match = value
        self._predefined_matchups.clear()

        # start restrictions must still leave room for a whole match
        for player in list(self._players_at_timeslots):
            kept = {t for t in self._players_at_timeslots[player] if self.is_valid_start(t)}
            if kept:
                self._players_at_timeslots[player] = kept
            else:
                del self._players_at_timeslots[player]

    @property
    def players_per_match(self) -> int:
        return self._players_per_match

    @players_per_match.setter
    def players_per_match(self, value: int):
        _positive_int(value, "Players per match")
        if len(self._players) % value != 0:
            raise InvalidEventError(
                f"Number of players ({len(self._players)}) must be a multiple of the "
                f"number of players per match ({value})"
            )
        self._players_per_match = value
        self._predefined_matchups.clear()
        self._teams.clear()
        if value == 1:
            self._matchup_mode = MatchupMode.ANY

    @property
    def matchup_mode(self) -> MatchupMode:
        return self._matchup_mode

    @matchup_mode.setter
    def matchup_mode(self, mode: Union[MatchupMode, str]):
        if isinstance(mode, str):
            try:
                mode = MatchupMode[mode.upper()]
            except KeyError:
                raise InvalidEventError(f"Unknown matchup mode: {mode!r}") from None
        if not isinstance(mode, MatchupMode):
            raise InvalidEventError(f"Unknown matchup mode: {mode!r}")
        if self._matches_per_player == 1 or self._players_per_match == 1:
            mode = MatchupMode.ANY
        self._matchup_mode = mode

    # === Derived values ===
    @property
    def number_of_matches(self) -> int:
        return len(self._players) // self._players_per_match * self._matches_per_player

    @property
    def number_of_occupied_timeslots(self) -> int:
        return len(self._players) * self._matches_per_player * self._timeslots_per_match

    def timeslot_index(self, timeslot: Timeslot) -> int:
        self._require_timeslot(timeslot)
        return self._timeslot_index[timeslot]

    def is_valid_start(self, timeslot: Timeslot) -> bool:
        """Whether a match starting at `timeslot` fits in the event's domain."""
        index = self._timeslot_index.get(timeslot)
        return index is not None and index + self._timeslots_per_match <= len(self._timeslots)

    @property
    def valid_start_timeslots(self) -> List[Timeslot]:
        last = len(self._timeslots) - self._timeslots_per_match
        return self._timeslots[: last + 1]

    # === Membership checks ===
    def has_player(self, player: Player) -> bool:
        return player in self._player_set

    def has_localization(self, localization: Localization) -> bool:
        return localization in self._localization_set

    def has_timeslot(self, timeslot: Timeslot) -> bool:
        return timeslot in self._timeslot_index

    def _require_player(self, player: Player):
        if not self.has_player(player):
            raise InvalidEventError(f"Player ({player}) does not exist in event ({self.name})")

    def _require_localization(self, localization: Localization):
        if not self.has_localization(localization):
            raise InvalidEventError(
                f"Localization ({localization}) does not exist in event ({self.name})"
            )

    def _require_timeslot(self, timeslot: Timeslot):
        if not self.has_timeslot(timeslot):
            raise InvalidEventError(f"Timeslot ({timeslot}) does not exist in event ({self.name})")

    def _timeslot_range(self, t1: Timeslot, t2: Timeslot) -> List[Timeslot]:
        self._require_timeslot(t1)
        self._require_timeslot(t2)
        i, j = sorted((self._timeslot_index[t1], self._timeslot_index[t2]))
        return self._timeslots[i : j + 1]

    # === Teams ===
    @property
    def has_teams(self) -> bool:
        return bool(self._teams)

    @property
    def players_per_team(self) -> int:
        """Size of the event's teams, or 0 when the event has none."""
        return len(self._teams[0]) if self._teams else 0

    def add_team(self, *players: Player, name: Optional[str] = None) -> Team:
        """Create a team from `players` and add it to the event."""
        team = Team(players, name=name)
        self.add_team_object(team)
        return team

    def add_team_object(self, team: Team):
        if team is None:
            raise InvalidTeamError("Team cannot be None")
        if any(t is team for t in self._teams):
            raise InvalidTeamError(f"Team ({team}) already exists in event ({self.name})")
        for player in team:
            if not self.has_player(player):
                raise InvalidTeamError(
                    f"Team player ({player}) does not exist in event ({self.name})"
                )
            other = self.filter_team_by_player(player)
            if other is not None:
                raise InvalidTeamError(f"Player ({player}) already belongs to team ({other})")
        if self._teams and len(team) != self.players_per_team:
            raise InvalidTeamError(
                f"All teams must have the same number of players ({self.players_per_team}); "
                f"team ({team}) has {len(team)}"
            )
        if self._players_per_match % len(team) != 0:
            raise InvalidTeamError(
                f"Team size ({len(team)}) must divide the number of players per match "
                f"({self._players_per_match})"
            )
        self._teams.append(team)

    def remove_team(self, team: Team):
        self._teams = [t for t in self._teams if t is not team]

    def clear_teams(self):
        self._teams.clear()

    def filter_team_by_player(self, player: Player) -> Optional[Team]:
        """Return the team `player` belongs to, if any."""
        for team in self._teams:
            if team.contains(player):
                return team
        return None

    # === Unavailable players ===
    def add_unavailable_player_at_timeslot(self, player: Player, timeslot: Timeslot):
        self._require_player(player)
        self._require_timeslot(timeslot)
        self._unavailable_players.setdefault(player, set()).add(timeslot)

    def add_unavailable_player_at_timeslots(self, player: Player, timeslots: Iterable[Timeslot]):
        self._require_player(player)
        timeslots = list(timeslots)
        for t in timeslots:
            self._require_timeslot(t)
        if timeslots:
            self._unavailable_players.setdefault(player, set()).update(timeslots)

    def add_unavailable_player_at_timeslot_range(
        self, player: Player, t1: Timeslot, t2: Timeslot
    ):
        self._require_player(player)
        self.add_unavailable_player_at_timeslots(player, self._timeslot_range(t1, t2))

    def remove_unavailable_player(self, player: Player):
        self._unavailable_players.pop(player, None)

    def clear_unavailable_players(self):
        self._unavailable_players.clear()

    def remove_unavailable_player_timeslot(self, player: Player, timeslot: Timeslot):
        timeslots = self._unavailable_players.get(player)
        if timeslots is None:
            return
        timeslots.discard(timeslot)
        if not timeslots:
            del self._unavailable_players[player]

    def is_player_unavailable(self, player: Player, timeslot: Timeslot) -> bool:
        return timeslot in self._unavailable_players.get(player, ())

    # === Unavailable localizations ===
    def add_unavailable_localization_at_timeslot(
        self, localization: Localization, timeslot: Timeslot
    ):
        self._require_localization(localization)
        self._require_timeslot(timeslot)
        self._unavailable_localizations.setdefault(localization, set()).add(timeslot)

    def add_unavailable_localization_at_timeslots(
        self, localization: Localization, timeslots: Iterable[Timeslot]
    ):
        self._require_localization(localization)
        timeslots = list(timeslots)
        for t in timeslots:
            self._require_timeslot(t)
        if timeslots:
            self._unavailable_localizations.setdefault(localization, set()).update(timeslots)

    def add_unavailable_localization_at_timeslot_range(
        self, localization: Localization, t1: Timeslot, t2: Timeslot
    ):
        self._require_localization(localization)
        self.add_unavailable_localization_at_timeslots(localization, self._timeslot_range(t1, t2))

    def remove_unavailable_localization(self, localization: Localization):
        self._unavailable_localizations.pop(localization, None)

    def clear_unavailable_localizations(self):
        self._unavailable_localizations.clear()

    def remove_unavailable_localization_timeslot(
        self, localization: Localization, timeslot: Timeslot
    ):
        timeslots = self._unavailable_localizations.get(localization)
        if timeslots is None:
            return
        timeslots.discard(timeslot)
        if not timeslots:
            del self._unavailable_localizations[localization]

    def is_localization_unavailable(self, localization: Localization, timeslot: Timeslot) -> bool:
        return timeslot in self._unavailable_localizations.get(localization, ())

    @property
    def has_unavailable_localizations(self) -> bool:
        return bool(self._unavailable_localizations)

    # === Breaks ===
    def add_break(self, timeslot: Timeslot):
        self._require_timeslot(timeslot)
        if timeslot not in self._breaks:
            self._breaks.append(timeslot)
            self._breaks.sort(key=self._timeslot_index.__getitem__)

    def add_breaks(self, timeslots: Iterable[Timeslot]):
        timeslots = list(timeslots)
        for t in timeslots:
            self._require_timeslot(t)
        for t in timeslots:
            self.add_break(t)

    def add_break_range(self, t1: Timeslot, t2: Timeslot):
        self.add_breaks(self._timeslot_range(t1, t2))

    def remove_break(self, timeslot: Timeslot):
        if timeslot in self._breaks:
            self._breaks.remove(timeslot)

    def clear_breaks(self):
        self._breaks.clear()

    def is_break(self, timeslot: Timeslot) -> bool:
        return timeslot in self._breaks

    @property
    def has_breaks(self) -> bool:
        return bool(self._breaks)

    # === Player restrictions ===
    def add_player_in_localization(self, player: Player, localization: Localization):
        """Restrict `player` to play only in the localizations added for them."""
        self._require_player(player)
        self._require_localization(localization)
        self._players_in_localizations.setdefault(player, set()).add(localization)

    def remove_player_in_localization(self, player: Player, localization: Localization):
        localizations = self._players_in_localizations.get(player)
        if localizations is None:
            return
        localizations.discard(localization)
        if not localizations:
            del self._players_in_localizations[player]

    def clear_players_in_localizations(self):
        self._players_in_localizations.clear()

    def add_player_at_timeslot(self, player: Player, timeslot: Timeslot):
        """Restrict `player` to start matches only at the timeslots added for them."""
        self._require_player(player)
        self._require_timeslot(timeslot)
        if not self.is_valid_start(timeslot):
            raise InvalidEventError(
                f"Timeslot ({timeslot}) leaves no room for a match of "
                f"{self._timeslots_per_match} timeslots"
            )
        self._players_at_timeslots.setdefault(player, set()).add(timeslot)

    def add_player_at_timeslots(self, player: Player, timeslots: Iterable[Timeslot]):
        self._require_player(player)
        timeslots = list(timeslots)
        for t in timeslots:
            self._require_timeslot(t)
            if not self.is_valid_start(t):
                raise InvalidEventError(
                    f"Timeslot ({t}) leaves no room for a match of "
                    f"{self._timeslots_per_match} timeslots"
                )
        if timeslots:
            self._players_at_timeslots.setdefault(player, set()).update(timeslots)

    def add_player_at_timeslot_range(self, player: Player, t1: Timeslot, t2: Timeslot):
        """Restrict `player` to the valid match starts between `t1` and `t2`."""
        self._require_player(player)
        starts = [t for t in self._timeslot_range(t1, t2) if self.is_valid_start(t)]
        if not starts:
            raise InvalidEventError(f"No valid match start between ({t1}) and ({t2})")
        self._players_at_timeslots.setdefault(player, set()).update(starts)

    def remove_player_at_timeslot(self, player: Player, timeslot: Timeslot):
        timeslots = self._players_at_timeslots.get(player)
        if timeslots is None:
            return
        timeslots.discard(timeslot)
        if not timeslots:
            del self._players_at_timeslots[player]

    def clear_players_at_timeslots(self):
        self._players_at_timeslots.clear()

    # === Predefined matchups ===
    def add_matchup(self, matchup: Matchup):
        """
        Add a predefined matchup to the event.

        The matchup must belong to this event and must not push any of its
        players past `matches_per_player` predefined occurrences. When every
        player plays a single match, the matchup also becomes the players'
        localization and timeslot restriction. A player who already has a
        restriction gets the matchup's courts and starts merged into it,
        whatever the matches per player, so the matchup stays playable.
        """
        if matchup is None or matchup.event is not self:
            raise InvalidEventError("The matchup does not belong to this event")
        if any(m is matchup for m in self._predefined_matchups):
            raise InvalidEventError(f"Matchup ({matchup}) already exists in event ({self.name})")
        for player in matchup.players:
            total = self.predefined_occurrences(player) + matchup.occurrences
            if total > self._matches_per_player:
                raise InvalidEventError(
                    f"Player ({player}) would have {total} predefined occurrences, "
                    f"more than the matches per player ({self._matches_per_player})"
                )

        self._predefined_matchups.append(matchup)

        single = self._matches_per_player == 1
        for player in matchup.players:
            # with several matches an unrestricted player keeps the whole domain
            if single or player in self._players_in_localizations:
                self._players_in_localizations.setdefault(player, set()).update(
                    matchup.localizations
                )
            if single or player in self._players_at_timeslots:
                self._players_at_timeslots.setdefault(player, set()).update(matchup.timeslots)

    def add_matchup_between(
        self,
        *players: Player,
        localizations: Optional[Iterable[Localization]] = None,
        timeslots: Optional[Iterable[Timeslot]] = None,
        occurrences: int = 1,
    ) -> Matchup:
        """Build a matchup between `players` and add it to the event."""
        matchup = Matchup(self, players, localizations, timeslots, occurrences)
        self.add_matchup(matchup)
        return matchup

    def add_team_matchup(
        self,
        *teams: Team,
        localizations: Optional[Iterable[Localization]] = None,
        timeslots: Optional[Iterable[Timeslot]] = None,
        occurrences: int = 1,
    ) -> Matchup:
        """Build a matchup between every player of `teams` and add it to the event."""
        for team in teams:
            if not any(t is team for t in self._teams):
                raise InvalidTeamError(f"Team ({team}) does not exist in event ({self.name})")
        players = [p for team in teams for p in team]
        return self.add_matchup_between(
            *players, localizations=localizations, timeslots=timeslots, occurrences=occurrences
        )

    def remove_matchup(self, matchup: Matchup):
        self._predefined_matchups = [m for m in self._predefined_matchups if m is not matchup]

    def remove_team_matchup(self, *teams: Team):
        """Remove the predefined matchups played exactly by the players of `teams`."""
        players = {p for team in teams for p in team}
        self._predefined_matchups = [
            m for m in self._predefined_matchups if set(m.players) != players
        ]

    def clear_predefined_matchups(self):
        self._predefined_matchups.clear()

    def predefined_occurrences(self, player: Player) -> int:
        """Total occurrences of `player` across the event's predefined matchups."""
        return sum(m.occurrences for m in self._predefined_matchups if m.has_player(player))

    # === Validation ===
    def validate(self):
        """Run the event validator and raise `ValidationError` if it reports anything."""
        messages = self.validator.validate(self)
        if messages:
            logger.info(f"❌ Event {self.name} is not valid: {len(messages)} issue(s)")
            raise ValidationError(messages)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Event({self.name!r})"
