"""Propagation engine: direct elimination plus hidden singles, run to a fixed point."""

from dataclasses import dataclass
from typing import Callable, List, Optional

from .model import Cell, Constraint, EmptyDomainError, Grid, Snapshot, StalledError
from src.utils.trace import Tracer, get_tracer

RoundCallback = Callable[[int, Snapshot], None]


@dataclass
class PropagationResult:
    solution: Snapshot
    rounds: int
    changes: int


def solve(
    grid: Grid,
    max_rounds: Optional[int] = None,
    on_round: Optional[RoundCallback] = None,
    tracer: Optional[Tracer] = None,
) -> PropagationResult:
    """
    Run propagation rounds until every cell is solved.
    `on_round(round_number, snapshot)` is called after each round.
    Raises EmptyDomainError on a contradiction and StalledError when a round
    changes nothing (or `max_rounds` is used up) before the grid is complete.
    """
    tracer = tracer or get_tracer()
    rounds = 0
    total_changes = 0
    try:
        check_consistency(grid)
        while not is_complete(grid):
            if max_rounds is not None and rounds >= max_rounds:
                reason = f"round budget of {max_rounds} exhausted"
                tracer.log_stall(rounds=rounds, reason=reason)
                raise StalledError(rounds, reason, grid.snapshot())

            rounds += 1
            changes = propagate_round(grid, tracer)
            total_changes += changes
            check_consistency(grid)
            tracer.log_round(
                round_number=rounds,
                changes=changes,
                solved_cells=sum(1 for cell in grid if cell.is_solved),
            )
            if on_round is not None:
                on_round(rounds, grid.snapshot())

            if not changes and not is_complete(grid):
                reason = "no candidate changed in the last round"
                tracer.log_stall(rounds=rounds, reason=reason)
                raise StalledError(rounds, reason, grid.snapshot())
    except EmptyDomainError as exc:
        if exc.snapshot is None:
            exc.snapshot = grid.snapshot()
        exc.rounds = rounds
        tracer.log_contradiction(column=exc.column, row=exc.row, reason=str(exc))
        raise

    tracer.log_solution_found(rounds=rounds)
    return PropagationResult(solution=grid.snapshot(), rounds=rounds, changes=total_changes)


def is_complete(grid: Grid) -> bool:
    return grid.is_complete()


def step(grid: Grid, tracer: Optional[Tracer] = None) -> bool:
    """Run one round and report whether any candidate set changed."""
    return propagate_round(grid, tracer) > 0


def propagate_round(grid: Grid, tracer: Optional[Tracer] = None) -> int:
    """One round: direct elimination, hidden singles by column, then by row."""
    tracer = tracer or get_tracer()
    changes = _eliminate(grid, tracer)
    columns = [grid.column_cells(column) for column in range(grid.size)]
    changes += _hidden_singles(columns, grid.values, "column", tracer)
    rows = [grid.row_cells(row) for row in range(grid.size)]
    changes += _hidden_singles(rows, grid.values, "row", tracer)
    return changes


def check_consistency(grid: Grid) -> None:
    """Raise EmptyDomainError if a solved cell's own value is ruled out."""
    for cell in grid:
        if not cell.candidates:
            raise EmptyDomainError(cell.column, cell.row, grid.snapshot())
        if cell.is_solved and _eliminating_constraint(cell, cell.value, grid) is not None:
            raise EmptyDomainError(cell.column, cell.row, grid.snapshot())


def _eliminate(grid: Grid, tracer: Tracer) -> int:
    """Remove every candidate that some attached constraint rules out."""
    removed = 0
    for cell in grid:
        if cell.is_solved:
            continue
        # Iterate a copy; removals are visible to later cells in this sweep.
        for value in sorted(cell.candidates):
            constraint = _eliminating_constraint(cell, value, grid)
            if constraint is None:
                continue
            cell.remove(value)
            removed += 1
            tracer.log_elimination(
                column=cell.column,
                row=cell.row,
                value=value,
                domain_size=len(cell.candidates),
                constraint_desc=constraint.description,
            )
            if not cell.candidates:
                raise EmptyDomainError(cell.column, cell.row, grid.snapshot())
    return removed


def _eliminating_constraint(cell: Cell, value: int, grid: Grid) -> Optional[Constraint]:
    for constraint in cell.constraints:
        if constraint.is_eliminated(value, grid):
            return constraint
    return None


def _hidden_singles(lines: List[List[Cell]], values: List[int], axis: str, tracer: Tracer) -> int:
    """Force a value into the only cell of a line that still admits it."""
    forced = 0
    for line in lines:
        for value in values:
            holders = [cell for cell in line if value in cell.candidates]
            if len(holders) != 1 or holders[0].is_solved:
                continue
            holder = holders[0]
            holder.assign(value)
            forced += 1
            tracer.log_hidden_single(column=holder.column, row=holder.row, value=value, axis=axis)
    return forced
