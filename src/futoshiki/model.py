"""Futoshiki grid model: cells, candidate sets, and the constraint variants."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple

Position = Tuple[int, int]
Snapshot = Tuple[Tuple[Optional[int], ...], ...]


class PropagationError(RuntimeError):
    """Base class for failures surfaced by the propagation engine."""

    def __init__(self, message: str, snapshot: Optional[Snapshot] = None) -> None:
        super().__init__(message)
        self.snapshot = snapshot


class EmptyDomainError(PropagationError):
    """A cell has no candidate value left (the puzzle contradicts itself)."""

    def __init__(
        self,
        column: int,
        row: int,
        snapshot: Optional[Snapshot] = None,
        rounds: Optional[int] = None,
    ) -> None:
        super().__init__(f"Cell {column},{row} has no candidate values left", snapshot)
        self.column = column
        self.row = row
        # Round in which the contradiction surfaced; 0 means before the first round.
        self.rounds = rounds


class StalledError(PropagationError):
    """Propagation stopped making progress before every cell was solved."""

    def __init__(self, rounds: int, reason: str, snapshot: Optional[Snapshot] = None) -> None:
        super().__init__(f"Propagation stalled after {rounds} rounds: {reason}", snapshot)
        self.rounds = rounds
        self.reason = reason


class ConstraintKind(str, Enum):
    ROW_UNIQUE = "row_unique"
    COLUMN_UNIQUE = "column_unique"
    LESS_THAN = "less_than"
    GREATER_THAN = "greater_than"


@dataclass(frozen=True)
class Constraint:
    """
    A rule attached to one cell. `is_eliminated` answers whether a candidate
    value of that cell is ruled out by the current state of the grid.
    Inequality constraints also name the `other` cell they compare against.
    """

    kind: ConstraintKind
    cell: Position
    other: Optional[Position] = None

    @classmethod
    def row_unique(cls, column: int, row: int) -> "Constraint":
        return cls(kind=ConstraintKind.ROW_UNIQUE, cell=(column, row))

    @classmethod
    def column_unique(cls, column: int, row: int) -> "Constraint":
        return cls(kind=ConstraintKind.COLUMN_UNIQUE, cell=(column, row))

    @classmethod
    def less_than(cls, this: Position, other: Position) -> "Constraint":
        return cls(kind=ConstraintKind.LESS_THAN, cell=this, other=other)

    @classmethod
    def greater_than(cls, this: Position, other: Position) -> "Constraint":
        return cls(kind=ConstraintKind.GREATER_THAN, cell=this, other=other)

    @property
    def description(self) -> str:
        column, row = self.cell
        if self.kind is ConstraintKind.ROW_UNIQUE:
            return f"RowUnique: row {row} at column {column}"
        if self.kind is ConstraintKind.COLUMN_UNIQUE:
            return f"ColumnUnique: column {column} at row {row}"
        symbol = "<" if self.kind is ConstraintKind.LESS_THAN else ">"
        return f"{column},{row} {symbol} {self.other[0]},{self.other[1]}"

    def is_eliminated(self, value: int, grid: "Grid") -> bool:
        column, row = self.cell
        if self.kind is ConstraintKind.ROW_UNIQUE:
            others = [c for c in grid.row_cells(row) if c.column != column]
            return _line_excludes(value, others)
        if self.kind is ConstraintKind.COLUMN_UNIQUE:
            others = [c for c in grid.column_cells(column) if c.row != row]
            return _line_excludes(value, others)
        if self.kind is ConstraintKind.LESS_THAN:
            return value >= grid.cell(*self.other).highest()
        if self.kind is ConstraintKind.GREATER_THAN:
            return value <= grid.cell(*self.other).lowest()
        raise ValueError(f"Unknown constraint kind: {self.kind}")


def _line_excludes(value: int, others: List["Cell"]) -> bool:
    pairs = []
    for other in others:
        candidates = other.candidates
        if len(candidates) == 1 and value in candidates:
            return True
        if len(candidates) == 2 and value in candidates:
            pairs.append(frozenset(candidates))
    # Two other cells locked to the same pair containing `value`.
    return len(pairs) != len(set(pairs))


@dataclass
class Cell:
    column: int
    row: int
    candidates: Set[int] = field(default_factory=set)
    constraints: List[Constraint] = field(default_factory=list)

    @property
    def position(self) -> Position:
        return (self.column, self.row)

    @property
    def is_solved(self) -> bool:
        return len(self.candidates) == 1

    @property
    def value(self) -> Optional[int]:
        if len(self.candidates) == 1:
            return next(iter(self.candidates))
        return None

    def remove(self, value: int) -> None:
        self.candidates.discard(value)

    def assign(self, value: int) -> None:
        self.candidates = {value}

    def lowest(self) -> int:
        if not self.candidates:
            raise EmptyDomainError(self.column, self.row)
        return min(self.candidates)

    def highest(self) -> int:
        if not self.candidates:
            raise EmptyDomainError(self.column, self.row)
        return max(self.candidates)


class Grid:
    """
    An N×N board of cells addressed by (column, row). Every cell starts with
    the full value range and its row/column uniqueness constraints attached.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self.values: List[int] = list(range(1, size + 1))
        self._cells: List[List[Cell]] = [
            [
                Cell(
                    column=column,
                    row=row,
                    candidates=set(self.values),
                    constraints=[
                        Constraint.column_unique(column, row),
                        Constraint.row_unique(column, row),
                    ],
                )
                for row in range(size)
            ]
            for column in range(size)
        ]
        self.inequalities: List[Tuple[Position, Position]] = []

    def contains(self, column: int, row: int) -> bool:
        return 0 <= column < self.size and 0 <= row < self.size

    def cell(self, column: int, row: int) -> Cell:
        if not self.contains(column, row):
            raise IndexError(f"Cell {column},{row} is outside a {self.size}x{self.size} grid")
        return self._cells[column][row]

    def column_cells(self, column: int) -> List[Cell]:
        return list(self._cells[column])

    def row_cells(self, row: int) -> List[Cell]:
        return [self._cells[column][row] for column in range(self.size)]

    def __iter__(self) -> Iterator[Cell]:
        """Column-major: column outer, row inner."""
        for column in range(self.size):
            for row in range(self.size):
                yield self._cells[column][row]

    def fix(self, column: int, row: int, value: int) -> None:
        if value not in self.values:
            raise ValueError(f"Value {value} outside 1..{self.size} for cell {column},{row}")
        self.cell(column, row).assign(value)

    def add_inequality(self, greater: Position, lesser: Position) -> None:
        """Attach `greater > lesser` as a GREATER_THAN/LESS_THAN pair."""
        if greater == lesser:
            raise ValueError(f"Inequality relates cell {greater[0]},{greater[1]} to itself")
        greater_cell = self.cell(*greater)
        lesser_cell = self.cell(*lesser)
        greater_cell.constraints.append(Constraint.greater_than(greater, lesser))
        lesser_cell.constraints.append(Constraint.less_than(lesser, greater))
        self.inequalities.append((greater, lesser))

    def is_complete(self) -> bool:
        return all(cell.is_solved for cell in self)

    def snapshot(self) -> Snapshot:
        """Rows of solved values, `None` where a cell is undetermined."""
        return tuple(
            tuple(self._cells[column][row].value for column in range(self.size))
            for row in range(self.size)
        )

    def copy_candidates(self) -> Dict[Position, Set[int]]:
        return {cell.position: set(cell.candidates) for cell in self}
