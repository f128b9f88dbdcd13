import json
from pathlib import Path

"""
Loads configuration constants from config/constants.json and exposes them as module-level variables.
Edit constants.json to change values; import from utils.constants to use in code.
"""

# Build the path to the JSON config file
CONSTANTS_PATH = Path(__file__).parent.parent / "config" / "constants.json"

with open(CONSTANTS_PATH, "r", encoding="utf-8") as f:
    _constants = json.load(f)

# Event defaults
DEFAULT_MATCHES_PER_PLAYER = _constants["DEFAULT_MATCHES_PER_PLAYER"]
DEFAULT_TIMESLOTS_PER_MATCH = _constants["DEFAULT_TIMESLOTS_PER_MATCH"]
DEFAULT_PLAYERS_PER_MATCH = _constants["DEFAULT_PLAYERS_PER_MATCH"]

# Solver defaults
DEFAULT_SEARCH_STRATEGY = _constants["DEFAULT_SEARCH_STRATEGY"]
DEFAULT_OPTIMIZATION_MODE = _constants["DEFAULT_OPTIMIZATION_MODE"]
DEFAULT_TIME_LIMIT = _constants["DEFAULT_TIME_LIMIT"]
RANDOM_SEED = _constants["RANDOM_SEED"]
NUM_WORKERS = _constants["NUM_WORKERS"]

LOG_LEVEL = _constants["LOG_LEVEL"]
