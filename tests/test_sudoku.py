import pytest

from board import DEFAULT_PUZZLE, box_index, format_grid, is_complete, parse_puzzle
from errors import InvalidPuzzleError
from placements import Placement, build_matrix, constraint_labels, generate_placements
from solver import build_exact_cover, solve_puzzle

DEFAULT_SOLUTION = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]


def test_parse_puzzle_reads_digits_and_blanks():
    grid = parse_puzzle("1.3.\n0 2 . 4\n....\n....")
    assert grid[0] == [1, 0, 3, 0]
    assert grid[1] == [0, 2, 0, 4]
    assert len(grid) == 4


@pytest.mark.parametrize(
    "text",
    [
        "123",  # not square
        "." * 16 + ".",  # 17 cells
        "." * 25,  # 5x5 has no box layout
        "5" + "." * 15,  # digit too large for 4x4
        "x" + "." * 15,  # bad character
    ],
)
def test_parse_puzzle_rejects_bad_input(text):
    with pytest.raises(InvalidPuzzleError):
        parse_puzzle(text)


def test_format_grid_matches_parse():
    text = format_grid(parse_puzzle(DEFAULT_PUZZLE))
    assert text.splitlines()[0] == "53..7...."
    assert parse_puzzle(text) == parse_puzzle(DEFAULT_PUZZLE)


def test_box_index():
    assert box_index(0, 0, 3) == 0
    assert box_index(4, 4, 3) == 4
    assert box_index(8, 0, 3) == 6
    assert box_index(3, 3, 2) == 3


def test_is_complete():
    assert is_complete(DEFAULT_SOLUTION)
    broken = [row[:] for row in DEFAULT_SOLUTION]
    broken[0][0], broken[0][1] = broken[0][1], broken[0][0]
    assert not is_complete(broken)


def test_placement_columns():
    assert Placement(0, 0, 1).name == "R1C1#1"
    assert Placement(0, 0, 1).columns(4) == (0, 16, 32, 48)
    assert Placement(3, 3, 4).columns(4) == (15, 31, 47, 63)


def test_matrix_rows_have_four_constraints():
    placements = generate_placements(4)
    matrix = build_matrix(placements, 4)
    assert len(matrix) == 64
    assert all(len(row) == 64 and sum(row) == 4 for row in matrix)
    # Every constraint can be met by exactly `size` placements
    assert all(sum(row[c] for row in matrix) == 4 for c in range(64))
    assert len(constraint_labels(4)) == 64


def test_build_exact_cover_selects_givens():
    grid = parse_puzzle(DEFAULT_PUZZLE)
    problem, placements, labels = build_exact_cover(grid)
    givens = sum(1 for row in grid for digit in row if digit)
    assert len(problem.selected_rows()) == givens == 30
    assert problem.selected_rows()[:2] == ["R1C1#5", "R1C2#3"]
    assert len(placements) == 729
    assert len(labels) == 324


def test_solves_default_puzzle():
    solutions = solve_puzzle(DEFAULT_PUZZLE)
    assert solutions == [DEFAULT_SOLUTION]


def test_solution_keeps_givens():
    grid = parse_puzzle(DEFAULT_PUZZLE)
    (solution,) = solve_puzzle(DEFAULT_PUZZLE, find_all=True)
    assert is_complete(solution)
    for r in range(9):
        for c in range(9):
            if grid[r][c]:
                assert solution[r][c] == grid[r][c]


def test_empty_four_by_four_has_all_grids():
    solutions = solve_puzzle("." * 16, find_all=True)
    assert len(solutions) == 288
    assert all(is_complete(s) for s in solutions)
    assert len({format_grid(s) for s in solutions}) == 288


def test_find_all_respects_limit():
    assert len(solve_puzzle("." * 16, find_all=True, limit=5)) == 5
    assert len(solve_puzzle("." * 16)) == 1


def test_conflicting_givens_are_rejected():
    with pytest.raises(InvalidPuzzleError, match="row 1, column 2"):
        solve_puzzle("11.." + "." * 12)


def test_unsolvable_puzzle_has_no_solutions():
    # R1C3 has no candidate left: 1 and 2 are in its row, 3 in its box, 4 in its column
    puzzle = "12.." "..3." "..4." "...."
    assert solve_puzzle(puzzle, find_all=True) == []
