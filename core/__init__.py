"""
core
----

Core model-building components:

- ConstraintManager:
  Register and apply constraint functions in a controlled sequence.

- ModelState:
  Encapsulate the tournament data, decision grids and intermediate collections
  needed to build the constraint model.
"""
