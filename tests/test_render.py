from src.futoshiki.model import Grid
from src.futoshiki.render import print_round, render_board, snapshot_rows


def test_render_board_marks_unknown_cells():
    grid = Grid(3)
    grid.fix(0, 0, 3)
    grid.fix(2, 1, 1)
    assert render_board(grid.snapshot()) == "3__\n__1\n___"


def test_snapshot_rows_are_lists():
    assert snapshot_rows(((1, None), (None, 1))) == [[1, None], [None, 1]]


def test_print_round(capsys):
    print_round(4, ((2, 1), (1, 2)))
    assert capsys.readouterr().out == "\nRound 4\n21\n12\n"
