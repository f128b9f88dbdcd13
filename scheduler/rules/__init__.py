"""
scheduler.rules
---------------

Exposes all scheduling constraints by importing from:

- `fixed`: Pre-fixing of cells made impossible by unavailability, breaks and player restrictions.
- `event`: Per-event rules (match windows, matches per player, court occupation, teams).
- `matchups`: Matchup mode and predefined matchups.
- `shared`: Cross-event rules (court collisions, players entered in several events).

Allows unified access to all rule and constraint definitions via wildcard imports.
"""
from .fixed import *
from .event import *
from .matchups import *
from .shared import *
