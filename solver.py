"""Top-level solve interface.

Expose `solve_puzzle(puzzle)` that accepts a pre-built Grid, a PuzzleDefinition,
or a raw puzzle dictionary compatible with `src.futoshiki.parser.parse_puzzle`.
"""

from typing import Any, Optional

from src.futoshiki import solver_core
from src.futoshiki.model import Grid
from src.futoshiki.parser import build_grid
from src.futoshiki.solver_core import PropagationResult, RoundCallback


def solve_puzzle(
    puzzle: Any,
    max_rounds: Optional[int] = None,
    on_round: Optional[RoundCallback] = None,
) -> PropagationResult:
    """
    Propagate a puzzle to completion and return the solved snapshot with round counts.
    Accepts:
      - Grid instances (solved in place)
      - PuzzleDefinition instances
      - Raw puzzle dictionaries (parsed via `parse_puzzle`)
    Raises EmptyDomainError or StalledError when propagation cannot finish.
    """
    grid = puzzle if isinstance(puzzle, Grid) else build_grid(puzzle)
    return solver_core.solve(grid, max_rounds=max_rounds, on_round=on_round)


__all__ = ["solve_puzzle"]
