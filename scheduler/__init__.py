"""
scheduler
---------

Main scheduling module. Initializes key components:

- `engine`: The CP-SAT wrapper and its solution enumeration.
- `builder`: Model construction and constraint setup.
- `extractor`: Decoding of solved grids into event schedules.
- `solver`: The resolution state machine driven by the tournament.

Provides high-level access to core scheduling functionality.
"""
from . import builder, engine, extractor, solver
