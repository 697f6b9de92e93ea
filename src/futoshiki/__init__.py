"""Futoshiki grid model, puzzle parsing, and constraint propagation engine."""

from .model import Cell, Constraint, ConstraintKind, Grid, EmptyDomainError, PropagationError, StalledError
from .solver_core import PropagationResult, is_complete, propagate_round, solve, step
from .parser import PuzzleDefinition, parse_puzzle

__all__ = [
    "Cell",
    "Constraint",
    "ConstraintKind",
    "Grid",
    "EmptyDomainError",
    "PropagationError",
    "StalledError",
    "PropagationResult",
    "is_complete",
    "propagate_round",
    "solve",
    "step",
    "PuzzleDefinition",
    "parse_puzzle",
]
