"""Puzzle parser: convert raw puzzle records into a grid with constraints attached.

Supports:
- Structured records: "size", "givens" ([column, row, value] triples) and
  "inequalities" ([[greater_column, greater_row], [lesser_column, lesser_row]])
- Text boards under "board", e.g.

      .>. . . .
      v       v
      2>. . . .

  Cell lines hold a digit or "." per cell, separated by " ", "<" or ">".
  The line between two cell lines marks vertical relations under each cell:
  "^" (upper < lower) or "v" (upper > lower).
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .model import Grid, Position

Given = Tuple[int, int, int]
Inequality = Tuple[Position, Position]

CELL_CHARS = set(".123456789")
HORIZONTAL_CHARS = {" ", "<", ">"}
VERTICAL_CHARS = {" ", "^", "v", "V"}


@dataclass
class PuzzleDefinition:
    size: int
    givens: List[Given] = field(default_factory=list)
    inequalities: List[Inequality] = field(default_factory=list)
    puzzle_id: str = "unknown"

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"Puzzle {self.puzzle_id}: size must be positive, got {self.size}")

        fixed: Dict[Position, int] = {}
        for column, row, value in self.givens:
            self._check_position((column, row))
            if not 1 <= value <= self.size:
                raise ValueError(
                    f"Puzzle {self.puzzle_id}: value {value} at {column},{row} outside 1..{self.size}"
                )
            previous = fixed.setdefault((column, row), value)
            if previous != value:
                raise ValueError(
                    f"Puzzle {self.puzzle_id}: cell {column},{row} given both {previous} and {value}"
                )

        for greater, lesser in self.inequalities:
            self._check_position(greater)
            self._check_position(lesser)
            if greater == lesser:
                raise ValueError(f"Puzzle {self.puzzle_id}: inequality relates {greater} to itself")

    def _check_position(self, position: Position) -> None:
        column, row = position
        if not (0 <= column < self.size and 0 <= row < self.size):
            raise ValueError(
                f"Puzzle {self.puzzle_id}: cell {column},{row} outside a {self.size}x{self.size} grid"
            )

    def build_grid(self) -> Grid:
        grid = Grid(self.size)
        for column, row, value in self.givens:
            grid.fix(column, row, value)
        for greater, lesser in self.inequalities:
            grid.add_inequality(greater, lesser)
        return grid


def parse_puzzle(puzzle_json: Dict[str, Any]) -> PuzzleDefinition:
    puzzle_id = str(puzzle_json.get("id", "unknown") or "unknown")

    board = puzzle_json.get("board")
    if isinstance(board, str) and board.strip():
        size, givens, inequalities = parse_board(board)
        declared = puzzle_json.get("size")
        if declared not in (None, "") and _to_int(declared, "size") != size:
            raise ValueError(f"Puzzle {puzzle_id}: board is {size}x{size} but size says {declared}")
        return PuzzleDefinition(size=size, givens=givens, inequalities=inequalities, puzzle_id=puzzle_id)

    if puzzle_json.get("size") in (None, ""):
        raise ValueError(f"Puzzle {puzzle_id}: needs either a 'board' or a 'size'")
    size = _to_int(puzzle_json["size"], "size")

    givens: List[Given] = []
    for raw in puzzle_json.get("givens") or []:
        column, row, value = _to_ints(raw, 3, "given")
        givens.append((column, row, value))

    inequalities: List[Inequality] = []
    for raw in puzzle_json.get("inequalities") or []:
        pair = list(raw)
        if len(pair) != 2:
            raise ValueError(f"Puzzle {puzzle_id}: inequality {raw!r} must name two cells")
        greater = _to_ints(pair[0], 2, "inequality cell")
        lesser = _to_ints(pair[1], 2, "inequality cell")
        inequalities.append(((greater[0], greater[1]), (lesser[0], lesser[1])))

    return PuzzleDefinition(size=size, givens=givens, inequalities=inequalities, puzzle_id=puzzle_id)


def parse_board(text: str) -> Tuple[int, List[Given], List[Inequality]]:
    """Read a text board into (size, givens, inequalities)."""
    lines = [
        line.rstrip()
        for line in textwrap.dedent(text).splitlines()
        if not line.strip().startswith("#")
    ]

    # Pair every cell line with the relation line (if any) that follows it.
    cell_lines: List[str] = []
    relation_lines: Dict[int, str] = {}
    for line in lines:
        if not line.strip():
            continue
        if any(ch in CELL_CHARS for ch in line):
            cell_lines.append(line)
            continue
        if not cell_lines:
            raise ValueError(f"Relation line {line!r} comes before any cell line")
        gap = len(cell_lines) - 1
        if gap in relation_lines:
            raise ValueError(f"Two relation lines between board rows {gap} and {gap + 1}")
        relation_lines[gap] = line

    if not cell_lines:
        raise ValueError("Board has no cell lines")

    size = (len(cell_lines[0]) + 1) // 2
    if len(cell_lines) != size:
        raise ValueError(f"Board has {len(cell_lines)} rows but {size} columns")
    if size - 1 in relation_lines:
        raise ValueError("Relation line after the last board row")

    givens: List[Given] = []
    inequalities: List[Inequality] = []
    for row, line in enumerate(cell_lines):
        if len(line) != 2 * size - 1:
            raise ValueError(f"Board row {row} {line!r} should be {2 * size - 1} characters wide")
        for column in range(size):
            ch = line[2 * column]
            if ch not in CELL_CHARS:
                raise ValueError(f"Unexpected {ch!r} at column {column} of board row {row}")
            if ch != ".":
                givens.append((column, row, int(ch)))
            if column == size - 1:
                continue
            sep = line[2 * column + 1]
            if sep not in HORIZONTAL_CHARS:
                raise ValueError(f"Unexpected {sep!r} after column {column} of board row {row}")
            if sep == ">":
                inequalities.append(((column, row), (column + 1, row)))
            elif sep == "<":
                inequalities.append(((column + 1, row), (column, row)))

    for row, line in sorted(relation_lines.items()):
        if len(line) > 2 * size - 1:
            raise ValueError(f"Relation line {line!r} is wider than the board")
        for pos, ch in enumerate(line):
            if ch not in VERTICAL_CHARS or (pos % 2 and ch != " "):
                raise ValueError(f"Unexpected {ch!r} in relation line {line!r}")
            column = pos // 2
            if ch == "^":
                inequalities.append(((column, row + 1), (column, row)))
            elif ch in ("v", "V"):
                inequalities.append(((column, row), (column, row + 1)))

    return size, givens, inequalities


def _to_int(raw: Any, what: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Expected an integer {what}, got {raw!r}") from None


def _to_ints(raw: Any, count: int, what: str) -> Tuple[int, ...]:
    try:
        values = tuple(int(v) for v in raw)
    except (TypeError, ValueError):
        raise ValueError(f"Expected {count} integers for {what}, got {raw!r}") from None
    if len(values) != count:
        raise ValueError(f"Expected {count} integers for {what}, got {raw!r}")
    return values


def build_grid(puzzle: Any) -> Grid:
    """Build a grid from a PuzzleDefinition or a raw puzzle record."""
    if isinstance(puzzle, PuzzleDefinition):
        return puzzle.build_grid()
    if isinstance(puzzle, dict):
        return parse_puzzle(puzzle).build_grid()
    raise TypeError("Expected a Grid, PuzzleDefinition or puzzle dictionary")


__all__ = ["PuzzleDefinition", "parse_puzzle", "parse_board", "build_grid"]
