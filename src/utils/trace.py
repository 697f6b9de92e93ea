"""Tracing module: logs propagation steps and writes them to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd


@dataclass
class TraceStep:
    """A single step in the solving process."""

    timestamp: float
    step_number: int
    action_type: str  # 'eliminate', 'hidden_single', 'round', 'stall', 'contradiction', 'solution_found'
    round_number: int
    column: Optional[int] = None
    row: Optional[int] = None
    value: Optional[int] = None
    domain_size: Optional[int] = None  # Candidates left in the cell after the step
    changes: Optional[int] = None  # Candidate sets touched during a round
    solved_cells: Optional[int] = None
    constraint_checked: Optional[str] = None
    reason: Optional[str] = None


FIELDNAMES = [
    'timestamp', 'step_number', 'action_type', 'round_number', 'column', 'row', 'value',
    'domain_size', 'changes', 'solved_cells', 'constraint_checked', 'reason'
]


class Tracer:
    """Records propagation steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0
        self.current_round = 1

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            round_number=fields.pop('round_number', self.current_round),
            **fields,
        ))

    def log_elimination(self, column: int, row: int, value: int, domain_size: int, constraint_desc: str):
        """Log a candidate removed by a constraint."""
        if not self.enabled:
            return
        self._record(
            'eliminate',
            column=column,
            row=row,
            value=value,
            domain_size=domain_size,
            constraint_checked=constraint_desc,
        )

    def log_hidden_single(self, column: int, row: int, value: int, axis: str):
        """Log a cell forced because it is the only one in its line admitting `value`."""
        if not self.enabled:
            return
        self._record(
            'hidden_single',
            column=column,
            row=row,
            value=value,
            domain_size=1,
            reason=f"Only cell in its {axis} admitting {value}",
        )

    def log_round(self, round_number: int, changes: int, solved_cells: int):
        """Log the end of a propagation round."""
        if not self.enabled:
            return
        self._record('round', round_number=round_number, changes=changes, solved_cells=solved_cells)
        self.current_round = round_number + 1

    def log_stall(self, rounds: int, reason: str):
        """Log propagation giving up without a complete grid."""
        if not self.enabled:
            return
        self._record('stall', round_number=rounds, reason=reason)

    def log_contradiction(self, column: int, row: int, reason: str):
        """Log a cell left without candidates."""
        if not self.enabled:
            return
        self._record('contradiction', column=column, row=row, domain_size=0, reason=reason)

    def log_solution_found(self, rounds: int):
        """Log when every cell is solved."""
        if not self.enabled:
            return
        self._record('solution_found', round_number=rounds)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def to_frame(self) -> pd.DataFrame:
        """Trace steps as a DataFrame, one row per step."""
        return pd.DataFrame([asdict(step) for step in self.steps], columns=FIELDNAMES)

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_rounds': action_counts.get('round', 0),
            'num_eliminations': action_counts.get('eliminate', 0),
            'num_hidden_singles': action_counts.get('hidden_single', 0),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=True)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
