import pytest

from src.futoshiki.model import ConstraintKind, Grid
from src.futoshiki.parser import PuzzleDefinition, build_grid, parse_board, parse_puzzle
from src.futoshiki.puzzles import DEFAULT_PUZZLE, get_puzzle


def test_parse_built_in_board():
    definition = parse_puzzle(DEFAULT_PUZZLE)

    assert definition.puzzle_id == "futoshiki-5x5-demo"
    assert definition.size == 5
    assert definition.givens == [(0, 1, 2)]
    assert set(definition.inequalities) == {
        ((0, 0), (1, 0)),
        ((4, 0), (4, 1)),
        ((0, 0), (0, 1)),
        ((0, 1), (1, 1)),
        ((2, 1), (2, 2)),
        ((1, 2), (2, 2)),
        ((3, 2), (2, 2)),
        ((4, 2), (3, 2)),
        ((3, 2), (3, 3)),
        ((1, 3), (1, 4)),
        ((3, 3), (3, 4)),
        ((1, 4), (2, 4)),
        ((2, 4), (2, 3)),
        ((2, 4), (3, 4)),
    }


def test_board_allows_comments_and_indentation():
    size, givens, inequalities = parse_board(
        """
        # 3x3 with one relation each way
        1<. .
            ^
        . . .
        . . 3
        """
    )
    assert size == 3
    assert givens == [(0, 0, 1), (2, 2, 3)]
    assert inequalities == [((1, 0), (0, 0)), ((2, 1), (2, 0))]


def test_structured_record_builds_grid():
    grid = build_grid(
        {
            "id": "tiny",
            "size": "3",
            "givens": [[2, 0, 3]],
            "inequalities": [[[0, 0], [1, 0]]],
        }
    )
    assert isinstance(grid, Grid)
    assert grid.cell(2, 0).candidates == {3}
    assert grid.cell(0, 0).constraints[-1].kind is ConstraintKind.GREATER_THAN
    assert grid.cell(1, 0).constraints[-1].kind is ConstraintKind.LESS_THAN


def test_conflicting_givens_on_one_row_are_accepted_for_propagation():
    definition = parse_puzzle({"size": 2, "givens": [[0, 0, 1], [1, 0, 1]]})
    assert len(definition.givens) == 2


@pytest.mark.parametrize(
    "record",
    [
        {"id": "no-size"},
        {"size": "five"},
        {"size": 3, "givens": [[3, 0, 1]]},
        {"size": 3, "givens": [[0, 0, 4]]},
        {"size": 3, "givens": [[0, 0, 1], [0, 0, 2]]},
        {"size": 3, "givens": [[0, 0]]},
        {"size": 3, "inequalities": [[[0, 0], [0, 0]]]},
        {"size": 3, "inequalities": [[[0, 0], [1, 0], [2, 0]]]},
        {"board": ". .\n. .", "size": 3},
        {"board": ". . .\n. . ."},
        {"board": ". .\n. .\n^"},
        {"board": ".x.\n. ."},
        {"board": ". .\n^ ^ ^\n. ."},
    ],
)
def test_malformed_records_raise_value_error(record):
    with pytest.raises(ValueError):
        parse_puzzle(record)


def test_zero_size_rejected():
    with pytest.raises(ValueError):
        PuzzleDefinition(size=0)


def test_build_grid_rejects_other_types():
    with pytest.raises(TypeError):
        build_grid(["not", "a", "puzzle"])


def test_get_puzzle_returns_copy():
    puzzle = get_puzzle("futoshiki-5x5-demo")
    puzzle["id"] = "changed"
    assert DEFAULT_PUZZLE["id"] == "futoshiki-5x5-demo"
    with pytest.raises(KeyError):
        get_puzzle("missing")
