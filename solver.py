# solver.py
# Combines everything; solves a sudoku puzzle as an exact cover problem

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from board import Grid, parse_puzzle
from dlx import Problem
from errors import RowConflictError, InvalidPuzzleError
from placements import Placement, build_matrix, constraint_labels, generate_placements

logger = logging.getLogger(__name__)


def build_exact_cover(grid: Grid) -> Tuple[Problem, List[Placement], List[str]]:
    """Build the shared sudoku matrix and pre-select the puzzle's givens."""
    size = len(grid)
    placements = generate_placements(size)
    matrix = build_matrix(placements, size)
    problem = Problem(matrix, [p.name for p in placements])

    givens = 0
    for r, row in enumerate(grid):
        for c, digit in enumerate(row):
            if not digit:
                continue
            try:
                problem.select_row(Placement(r, c, digit).name)
            except RowConflictError as exc:
                raise InvalidPuzzleError(
                    f"Given {digit} at row {r + 1}, column {c + 1} conflicts with another given"
                ) from exc
            givens += 1

    logger.info("Built %dx%d sudoku with %d givens", size, size, givens)
    return problem, placements, constraint_labels(size)


def solution_to_grid(solution: List[str], placements: List[Placement], size: int) -> Grid:
    by_name: Dict[str, Placement] = {p.name: p for p in placements}
    grid = [[0] * size for _ in range(size)]
    for name in solution:
        p = by_name[name]
        grid[p.row][p.col] = p.digit
    return grid


def solve_puzzle(puzzle: str, find_all: bool = False, limit: int | None = None) -> List[Grid]:
    """Solve a puzzle string; with find_all, return up to limit solutions (all by default)."""
    grid = parse_puzzle(puzzle)
    size = len(grid)
    problem, placements, _ = build_exact_cover(grid)

    solutions = problem.solve(limit) if find_all else problem.solve(limit=1)
    return [solution_to_grid(sol, placements, size) for sol in solutions]
