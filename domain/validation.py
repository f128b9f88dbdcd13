from typing import Generic, List, TypeVar

"""
This module contains the validators run before a tournament is solved.

A validator inspects a whole object and returns every problem it finds as a
list of readable messages; an empty list means the object is valid. Events and
tournaments hold a validator instance, so a custom one can be plugged in.
"""

T = TypeVar("T")


class Validator(Generic[T]):
    """Base validator. Subclasses override `validate`."""

    def validate(self, obj: T) -> List[str]:
        return []


class EventValidator(Validator):
    """Checks every invariant of an event in one pass."""

    def validate(self, event) -> List[str]:
        messages: List[str] = []
        players = event.players
        localizations = event.localizations
        timeslots = event.timeslots
        ppm = event.players_per_match
        mpp = event.matches_per_player
        tpm = event.timeslots_per_match

        # === Domain ===
        if not players:
            messages.append("Players cannot be empty")
        elif len(players) % ppm != 0:
            messages.append(
                f"Number of players ({len(players)}) must be a multiple of the number "
                f"of players per match ({ppm})"
            )
        if not localizations:
            messages.append("Localizations cannot be empty")
        if len(timeslots) < mpp * tpm:
            messages.append(
                f"Number of timeslots ({len(timeslots)}) must not be less than the "
                f"minimum needed amount ({mpp * tpm})"
            )
        for a, b in zip(timeslots, timeslots[1:]):
            if not a < b:
                messages.append(f"Timeslot ({a}) must be earlier than timeslot ({b})")

        # === Teams ===
        teams = event.teams
        if teams:
            if len(teams) < 2:
                messages.append(f"There must be at least 2 teams, found {len(teams)}")
            size = len(teams[0])
            seen = set()
            for team in teams:
                if len(team) != size:
                    messages.append(
                        f"All teams must have the same number of players ({size}); "
                        f"team ({team}) has {len(team)}"
                    )
                if ppm % len(team) != 0:
                    messages.append(
                        f"Team size ({len(team)}) must divide the number of players per match ({ppm})"
                    )
                for player in team:
                    if not event.has_player(player):
                        messages.append(f"Team player ({player}) does not exist in the event")
                    if player in seen:
                        messages.append(f"Player ({player}) belongs to more than one team")
                    seen.add(player)

        # === Availability ===
        for player, unavailable in event.unavailable_players.items():
            if not event.has_player(player):
                messages.append(f"Unavailable player ({player}) does not exist in the event")
            if not unavailable:
                messages.append(f"Unavailable timeslots of player ({player}) cannot be empty")
            for t in unavailable:
                if not event.has_timeslot(t):
                    messages.append(f"Unavailable timeslot ({t}) of player ({player}) does not exist")
        for localization, unavailable in event.unavailable_localizations.items():
            if not event.has_localization(localization):
                messages.append(
                    f"Unavailable localization ({localization}) does not exist in the event"
                )
            if not unavailable:
                messages.append(
                    f"Unavailable timeslots of localization ({localization}) cannot be empty"
                )
            for t in unavailable:
                if not event.has_timeslot(t):
                    messages.append(
                        f"Unavailable timeslot ({t}) of localization ({localization}) does not exist"
                    )
        for t in event.breaks:
            if not event.has_timeslot(t):
                messages.append(f"Break ({t}) does not exist in the event")

        # === Restrictions ===
        for player, allowed in event.players_in_localizations.items():
            if not event.has_player(player):
                messages.append(f"Restricted player ({player}) does not exist in the event")
            for localization in allowed:
                if not event.has_localization(localization):
                    messages.append(
                        f"Localization ({localization}) assigned to player ({player}) does not exist"
                    )
        for player, allowed in event.players_at_timeslots.items():
            if not event.has_player(player):
                messages.append(f"Restricted player ({player}) does not exist in the event")
            for t in allowed:
                if not event.is_valid_start(t):
                    messages.append(
                        f"Timeslot ({t}) assigned to player ({player}) is not a valid match start"
                    )

        # === Matchups ===
        occurrences = {}
        for matchup in event.predefined_matchups:
            if len(matchup.players) != ppm:
                messages.append(
                    f"Matchup ({matchup}) must have exactly {ppm} players"
                )
            if not 1 <= matchup.occurrences <= mpp:
                messages.append(
                    f"Matchup ({matchup}) occurrences must be between 1 and {mpp}"
                )
            for player in matchup.players:
                occurrences[player] = occurrences.get(player, 0) + matchup.occurrences
        for player, total in occurrences.items():
            if total > mpp:
                messages.append(
                    f"Player ({player}) has {total} predefined occurrences, more than "
                    f"the matches per player ({mpp})"
                )

        return messages


class TournamentValidator(Validator):
    """Checks the tournament's event list and runs each event's own validator."""

    def validate(self, tournament) -> List[str]:
        messages: List[str] = []
        events = tournament.events
        if not events:
            messages.append("A tournament must have at least one event")
        if len(set(events)) != len(events):
            messages.append("Events must be unique")
        for event in events:
            if event.tournament is not tournament:
                messages.append(f"Event ({event}) does not belong to the tournament")
            messages.extend(f"{event.name}: {m}" for m in event.validator.validate(event))
        return messages
