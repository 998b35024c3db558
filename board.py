# board.py
# Sudoku grid geometry, puzzle parsing and formatting

from __future__ import annotations

import math

from errors import InvalidPuzzleError

# Box edge lengths the encoder supports: 4x4 and 9x9 grids.
SUPPORTED_BOX_SIZES = (2, 3)

BLANK_CHARS = {".", "0"}

# Classic puzzle with a unique solution, rows left to right.
DEFAULT_PUZZLE = (
    "53..7...."
    "6..195..."
    ".98....6."
    "8...6...3"
    "4..8.3..1"
    "7...2...6"
    ".6....28."
    "...419..5"
    "....8..79"
)

# 0 marks an empty cell.
Grid = list[list[int]]


def box_size_for(size: int) -> int:
    box = math.isqrt(size)
    if box * box != size or box not in SUPPORTED_BOX_SIZES:
        raise InvalidPuzzleError(f"Unsupported grid size {size}x{size}")
    return box


def box_index(row: int, col: int, box: int) -> int:
    """Index of the box containing (row, col), counted left to right, top to bottom."""
    return (row // box) * box + col // box


def parse_puzzle(text: str) -> Grid:
    """Parse a puzzle string; whitespace is ignored, '.' or '0' mark blanks."""
    chars = [ch for ch in text if not ch.isspace()]
    size = math.isqrt(len(chars))
    if size * size != len(chars):
        raise InvalidPuzzleError(f"Puzzle must have a square number of cells, got {len(chars)}")
    box_size_for(size)

    grid: Grid = []
    for r in range(size):
        row: list[int] = []
        for ch in chars[r * size:(r + 1) * size]:
            if ch in BLANK_CHARS:
                row.append(0)
            elif ch.isdigit() and 1 <= int(ch) <= size:
                row.append(int(ch))
            else:
                raise InvalidPuzzleError(f"Invalid character {ch!r} in row {r + 1}")
        grid.append(row)
    return grid


def format_grid(grid: Grid) -> str:
    return "\n".join(
        "".join(str(digit) if digit else "." for digit in row) for row in grid
    )


def is_complete(grid: Grid) -> bool:
    """True if every row, column and box holds each digit exactly once."""
    size = len(grid)
    box = box_size_for(size)
    digits = set(range(1, size + 1))

    rows = [set(row) for row in grid]
    cols = [{grid[r][c] for r in range(size)} for c in range(size)]
    boxes: list[set[int]] = [set() for _ in range(size)]
    for r in range(size):
        for c in range(size):
            boxes[box_index(r, c, box)].add(grid[r][c])

    return all(group == digits for group in rows + cols + boxes)
