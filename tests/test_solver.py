"""Integration-style tests for the top-level solve interface."""

import pytest

from solver import solve_puzzle
from src.futoshiki.model import EmptyDomainError, StalledError
from src.futoshiki.parser import parse_puzzle
from src.futoshiki.puzzles import DEFAULT_PUZZLE, DEFAULT_SOLUTION
from src.utils.trace import get_tracer, reset_tracer


@pytest.fixture(autouse=True)
def _fresh_tracer():
    reset_tracer()
    yield
    reset_tracer()


def test_solver_completes_built_in_puzzle():
    result = solve_puzzle(DEFAULT_PUZZLE)
    assert [list(row) for row in result.solution] == DEFAULT_SOLUTION
    assert result.rounds == 5


def test_completed_grid_is_latin_and_respects_inequalities():
    definition = parse_puzzle(DEFAULT_PUZZLE)
    grid = definition.build_grid()
    solve_puzzle(grid)

    values = set(grid.values)
    for index in range(grid.size):
        assert {cell.value for cell in grid.row_cells(index)} == values
        assert {cell.value for cell in grid.column_cells(index)} == values
    for greater, lesser in definition.inequalities:
        assert grid.cell(*greater).value > grid.cell(*lesser).value


def test_candidates_only_shrink_between_rounds():
    grid = parse_puzzle(DEFAULT_PUZZLE).build_grid()
    history = [grid.copy_candidates()]

    solve_puzzle(grid, on_round=lambda n, snapshot: history.append(grid.copy_candidates()))

    assert len(history) > 2
    for before, after in zip(history, history[1:]):
        for position, candidates in after.items():
            assert candidates <= before[position]


def test_rounds_are_deterministic():
    def _run():
        snapshots = []
        solve_puzzle(DEFAULT_PUZZLE, on_round=lambda n, snapshot: snapshots.append(snapshot))
        return snapshots

    assert _run() == _run()


def test_round_budget_stops_propagation():
    with pytest.raises(StalledError) as excinfo:
        solve_puzzle(DEFAULT_PUZZLE, max_rounds=1)
    assert excinfo.value.rounds == 1
    assert "budget" in excinfo.value.reason


def test_unsatisfiable_two_by_two_is_reported():
    puzzle = {"id": "clash", "size": 2, "givens": [[0, 0, 1], [1, 0, 1]]}
    with pytest.raises(EmptyDomainError):
        solve_puzzle(puzzle)
    assert get_tracer().summary()["action_counts"] == {"contradiction": 1}


def test_trace_counts_match_result():
    result = solve_puzzle(DEFAULT_PUZZLE)
    summary = get_tracer().summary()
    assert summary["num_rounds"] == result.rounds
    assert summary["num_eliminations"] + summary["num_hidden_singles"] == result.changes
    assert summary["action_counts"]["solution_found"] == 1


def test_solve_puzzle_rejects_unknown_input():
    with pytest.raises(TypeError):
        solve_puzzle("5x5")
