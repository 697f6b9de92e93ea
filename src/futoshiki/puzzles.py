"""Built-in puzzles."""

from typing import Any, Dict, List

DEFAULT_PUZZLE: Dict[str, Any] = {
    "id": "futoshiki-5x5-demo",
    "board": """
.>. . . .
v       v
2>. . . .
    v
. .>.<.<.
      v
. . . . .
  v ^ v
. .>.>. .
""",
}

# Rows top to bottom.
DEFAULT_SOLUTION: List[List[int]] = [
    [3, 2, 5, 1, 4],
    [2, 1, 4, 5, 3],
    [1, 3, 2, 4, 5],
    [4, 5, 1, 3, 2],
    [5, 4, 3, 2, 1],
]

PUZZLES: Dict[str, Dict[str, Any]] = {
    DEFAULT_PUZZLE["id"]: DEFAULT_PUZZLE,
}


def get_puzzle(puzzle_id: str) -> Dict[str, Any]:
    if puzzle_id not in PUZZLES:
        raise KeyError(f"Unknown built-in puzzle: {puzzle_id}")
    return dict(PUZZLES[puzzle_id])
