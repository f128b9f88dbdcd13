"""
schemas
-------

Pydantic models describing the solver configuration.
"""
from .solver import OptimizationMode, SearchStrategy, SolverSettings
