"""
utils package
-------------

Shared helpers of the tournament scheduler:

- `constants`: configuration constants loaded from config/constants.json.
- `logger`: file and console logging setup.
"""
