# placements.py
# Candidate digit placements and the constraint columns they satisfy

from __future__ import annotations

from dataclasses import dataclass

from board import box_index, box_size_for


@dataclass(frozen=True)
class Placement:
    row: int
    col: int
    digit: int

    @property
    def name(self) -> str:
        return f"R{self.row + 1}C{self.col + 1}#{self.digit}"

    def columns(self, size: int) -> tuple[int, int, int, int]:
        # Column blocks: cell filled, digit in row, digit in column, digit in box.
        box = box_size_for(size)
        area = size * size
        d = self.digit - 1
        return (
            self.row * size + self.col,
            area + self.row * size + d,
            2 * area + self.col * size + d,
            3 * area + box_index(self.row, self.col, box) * size + d,
        )


def generate_placements(size: int) -> list[Placement]:
    """Every digit in every cell, in row, column, digit order."""
    return [
        Placement(row=r, col=c, digit=d)
        for r in range(size)
        for c in range(size)
        for d in range(1, size + 1)
    ]


def constraint_labels(size: int) -> list[str]:
    labels = [f"cell ({r + 1},{c + 1})" for r in range(size) for c in range(size)]
    labels += [f"row {r + 1} #{d}" for r in range(size) for d in range(1, size + 1)]
    labels += [f"col {c + 1} #{d}" for c in range(size) for d in range(1, size + 1)]
    labels += [f"box {b + 1} #{d}" for b in range(size) for d in range(1, size + 1)]
    return labels


def build_matrix(placements: list[Placement], size: int) -> list[list[bool]]:
    num_columns = 4 * size * size
    matrix: list[list[bool]] = []
    for placement in placements:
        row = [False] * num_columns
        for c in placement.columns(size):
            row[c] = True
        matrix.append(row)
    return matrix
