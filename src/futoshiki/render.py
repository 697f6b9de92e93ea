"""Text rendering of grid snapshots."""

from typing import List, Optional

from .model import Snapshot

UNKNOWN = "_"


def render_board(snapshot: Snapshot) -> str:
    """One line per row, `_` where a cell is still undetermined."""
    return "\n".join("".join(_cell_text(value) for value in row) for row in snapshot)


def snapshot_rows(snapshot: Snapshot) -> List[List[Optional[int]]]:
    return [list(row) for row in snapshot]


def _cell_text(value: Optional[int]) -> str:
    return UNKNOWN if value is None else str(value)


def print_round(round_number: int, snapshot: Snapshot) -> None:
    print("")
    print(f"Round {round_number}")
    print(render_board(snapshot))
