"""Tests for the propagation tracer."""

import csv

from src.utils.trace import FIELDNAMES, Tracer, enable_tracing, get_tracer, reset_tracer


def _populated_tracer():
    tracer = Tracer()
    tracer.log_elimination(0, 1, 3, domain_size=2, constraint_desc="RowUnique: row 1 at column 0")
    tracer.log_hidden_single(2, 2, 4, axis="row")
    tracer.log_round(round_number=1, changes=2, solved_cells=5)
    tracer.log_elimination(1, 1, 2, domain_size=1, constraint_desc="1,1 < 0,1")
    tracer.log_round(round_number=2, changes=1, solved_cells=6)
    tracer.log_solution_found(rounds=2)
    return tracer


def test_tracer_captures_steps():
    tracer = _populated_tracer()
    summary = tracer.summary()

    assert summary["total_steps"] == 6
    assert summary["num_rounds"] == 2
    assert summary["num_eliminations"] == 2
    assert summary["num_hidden_singles"] == 1
    assert [s.step_number for s in tracer.steps] == [1, 2, 3, 4, 5, 6]
    assert [s.round_number for s in tracer.steps] == [1, 1, 1, 2, 2, 2]


def test_disabled_tracer_records_nothing():
    tracer = Tracer(enabled=False)
    tracer.log_stall(rounds=3, reason="no progress")
    tracer.log_contradiction(0, 0, reason="empty")
    assert tracer.steps == []


def test_to_csv_writes_header_and_rows(tmp_path):
    output_path = tmp_path / "nested" / "trace.csv"
    _populated_tracer().to_csv(output_path)

    with open(output_path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert list(rows[0].keys()) == FIELDNAMES
    assert rows[0]["action_type"] == "eliminate"
    assert rows[0]["constraint_checked"] == "RowUnique: row 1 at column 0"
    assert rows[-1]["action_type"] == "solution_found"


def test_to_frame_has_one_row_per_step():
    frame = _populated_tracer().to_frame()
    assert list(frame.columns) == FIELDNAMES
    assert len(frame) == 6
    assert frame["action_type"].value_counts()["round"] == 2


def test_global_tracer_lifecycle():
    reset_tracer()
    tracer = get_tracer()
    assert get_tracer() is tracer
    enable_tracing(False)
    assert not tracer.enabled
    reset_tracer()
    assert get_tracer() is not tracer
    assert get_tracer().enabled
