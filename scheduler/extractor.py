import logging
from typing import Dict, List

from core.state import ModelState
from domain.event import Event
from schedule.event import EventSchedule

logger = logging.getLogger(__name__)


def get_occupancy(model, state: ModelState, event: Event) -> List[List[List[int]]]:
    """Read the occupancy grid of `event` from the last solution as nested 0/1 lists."""
    x = state.x[event]
    return [[[model.value(var) for var in slots] for slots in courts] for courts in x]


def extract_event_schedules(model, state: ModelState) -> Dict[Event, EventSchedule]:
    """
    Decode the last solution into one `EventSchedule` per event.

    Args:
        model (CPEngine): The engine holding the last solution.
        state (ModelState): The state built for the tournament.

    Returns:
        Dict[Event, EventSchedule]: Schedules keyed by event, in tournament order.
    """
    schedules = {}
    for event in state.events:
        schedules[event] = EventSchedule(event, get_occupancy(model, state, event))
        logger.debug(f"Decoded {len(schedules[event].matches)} matches for {event.name}")
    return schedules
