from typing import Iterable


class InvalidConfigurationError(Exception):
    """Raised when a tournament configuration breaks one of its invariants."""

    pass


class InvalidEntityError(InvalidConfigurationError):
    """Raised when a player, localization or timeslot is built with invalid data."""

    pass


class InvalidTeamError(InvalidConfigurationError):
    """Raised when a team is empty, too small, duplicated or foreign to its event."""

    pass


class InvalidEventError(InvalidConfigurationError):
    """Raised when an event mutation would break the event invariants."""

    pass


class InvalidMatchupError(InvalidConfigurationError):
    """Raised when a predefined matchup does not fit its event."""

    pass


class InvalidTournamentError(InvalidConfigurationError):
    """Raised when a tournament is built from an invalid list of events."""

    pass


class InvalidMatchError(InvalidConfigurationError):
    """Raised when a decoded match or schedule value is inconsistent."""

    pass


class ValidationError(InvalidConfigurationError):
    """Raised by `validate()` when a validator reports one or more problems."""

    def __init__(self, messages: Iterable[str]):
        self.messages = list(messages)
        super().__init__("\n".join(f"    • {m}" for m in self.messages))


class SolverStateError(Exception):
    """Raised when the solver is queried in a state that does not allow it, e.g. before `execute()`."""

    pass
