# dlx.py
# Algorithm X (Dancing Links) over a boolean exact cover matrix

from __future__ import annotations

import logging
from contextlib import closing
from dataclasses import dataclass
from itertools import islice
from typing import Any, Iterator, Sequence

from errors import (
    DuplicateRowNameError,
    EmptyRowError,
    RowConflictError,
    RowLengthMismatchError,
    RowNotFoundError,
    SearchInProgressError,
    TooFewRowsError,
)

logger = logging.getLogger(__name__)

Event = dict[str, Any]


class ColumnNode:
    def __init__(self, index: int):
        self.index = index
        self.size = 0
        self.left: ColumnNode = self
        self.right: ColumnNode = self
        self.up: "Node" = self  # type: ignore[assignment]
        self.down: "Node" = self  # type: ignore[assignment]


class RowHeader:
    def __init__(self, name: str, index: int):
        self.name = name
        self.index = index
        # Entry point into the row ring; None if the row has no true cells.
        self.first: Node | None = None


class Node:
    def __init__(self, column: ColumnNode, row: RowHeader):
        self.column = column
        self.row = row
        self.left: Node = self
        self.right: Node = self
        self.up: Node = self
        self.down: Node = self


@dataclass
class SearchStats:
    nodes: int = 0
    dead_ends: int = 0
    solutions: int = 0


@dataclass
class _Frame:
    # A covered column and the row currently tried for it.
    column: ColumnNode
    row: Node | None = None
    selected: bool = False


class Problem:
    """An exact cover problem built from a boolean matrix and row names.

    The matrix is held as a dancing links structure: every true cell is a
    node linked into a ring over its row and a ring over its column, and the
    column headers form a ring around ``header`` (the root). Searching mutates
    the links in place and restores them on the way back.
    """

    def __init__(self, matrix: Sequence[Sequence[bool]], names: Sequence[str]):
        self._check_inputs(matrix, names)

        self.num_rows = len(matrix)
        self.num_columns = len(matrix[0])

        self.header = ColumnNode(-1)
        # Create column headers in a circular doubly-linked list.
        self.columns = [ColumnNode(i) for i in range(self.num_columns)]
        last = self.header
        for col in self.columns:
            col.left = last
            col.right = self.header
            last.right = col
            self.header.left = col
            last = col

        self.row_headers: list[RowHeader] = []
        self._rows_by_name: dict[str, RowHeader] = {}
        # Rows on the current search path, pre-selected rows at the bottom.
        self._solution: list[RowHeader] = []
        self._searching = False
        self._trace = False
        self.solutions: list[list[str]] = []
        self.stats = SearchStats()

        num_cells = self._create_nodes(matrix, names)
        logger.debug(
            "Built exact cover problem: %d rows, %d columns, %d cells",
            self.num_rows,
            self.num_columns,
            num_cells,
        )

    @staticmethod
    def _check_inputs(matrix: Sequence[Sequence[bool]], names: Sequence[str]) -> None:
        if len(matrix) <= 1:
            raise TooFewRowsError(f"Matrix must have at least 2 rows, got {len(matrix)}")
        if len(names) != len(matrix):
            raise RowLengthMismatchError(
                f"Expected {len(matrix)} row names, got {len(names)}"
            )

        row_len = len(matrix[0])
        if row_len == 0:
            raise RowLengthMismatchError("Rows must have at least one column")
        for i, row in enumerate(matrix):
            if len(row) != row_len:
                raise RowLengthMismatchError(
                    f"All rows must be same length: rows[0]={row_len}, rows[{i}]={len(row)}"
                )

        seen: set[str] = set()
        for name in names:
            if name in seen:
                raise DuplicateRowNameError(f"Duplicate row name present: {name!r}")
            seen.add(name)

    def _create_nodes(self, matrix: Sequence[Sequence[bool]], names: Sequence[str]) -> int:
        num_cells = 0
        for row_index, (values, name) in enumerate(zip(matrix, names)):
            row_head = RowHeader(name, row_index)
            self.row_headers.append(row_head)
            self._rows_by_name[name] = row_head

            for col_index, value in enumerate(values):
                if not value:
                    continue
                column = self.columns[col_index]
                node = Node(column, row_head)

                # Link horizontally at the right end of the row
                first = row_head.first
                if first is None:
                    row_head.first = node
                else:
                    node.right = first
                    node.left = first.left
                    first.left.right = node
                    first.left = node

                # Insert into column (at bottom)
                node.down = column  # type: ignore[assignment]
                node.up = column.up
                column.up.down = node
                column.up = node
                column.size += 1
                num_cells += 1
        return num_cells

    def _cover(self, column: ColumnNode) -> None:
        column.right.left = column.left
        column.left.right = column.right
        row = column.down
        while row is not column:
            node = row.right
            while node is not row:
                node.down.up = node.up
                node.up.down = node.down
                node.column.size -= 1
                assert node.column.size >= 0, f"column {node.column.index} size went negative"
                node = node.right
            row = row.down

    def _uncover(self, column: ColumnNode) -> None:
        row = column.up
        while row is not column:
            node = row.left
            while node is not row:
                node.column.size += 1
                node.down.up = node
                node.up.down = node
                node = node.left
            row = row.up
        column.right.left = column
        column.left.right = column

    def _choose_column(self) -> ColumnNode:
        # Heuristic: choose column with smallest size, leftmost on ties.
        c = self.header.right
        best = c
        while c is not self.header:
            if c.size < best.size:
                best = c
            c = c.right
        return best

    def _active_columns(self) -> Iterator[ColumnNode]:
        c = self.header.right
        while c is not self.header:
            yield c
            c = c.right

    @staticmethod
    def _is_linked(column: ColumnNode) -> bool:
        # A covered header keeps its own links, but its neighbours skip it.
        return column.left.right is column

    def _event(self, event_type: str, **data: Any) -> Event:
        return {"type": event_type, "data": data, "state": self.selected_rows()}

    def _push_row(self, row: Node) -> None:
        self.stats.nodes += 1
        self._solution.append(row.row)
        node = row.right
        while node is not row:
            self._cover(node.column)
            node = node.right

    def _pop_row(self, row: Node) -> None:
        popped = self._solution.pop()
        assert popped is row.row, f"solution stack out of step at row {row.row.name!r}"
        node = row.left
        while node is not row:
            self._uncover(node.column)
            node = node.left

    def _search(self) -> Iterator[Event]:
        # One frame per covered column on the current path, so the depth of
        # a solution is limited by memory rather than the interpreter stack.
        frames: list[_Frame] = []
        try:
            descend = True
            while True:
                if descend:
                    descend = False
                    if self.header.right is self.header:
                        solution = self.selected_rows()
                        self.stats.solutions += 1
                        logger.debug("Found solution %d: %s", self.stats.solutions, solution)
                        yield self._event("SOLUTION", solution=solution)
                    else:
                        column = self._choose_column()
                        if self._trace:
                            yield self._event(
                                "CHOOSE_COL",
                                chosen=column.index,
                                size=column.size,
                                candidates=[{"name": c.index, "size": c.size} for c in self._active_columns()],
                            )
                        if column.size == 0:
                            self.stats.dead_ends += 1
                            if self._trace:
                                yield self._event(
                                    "BACKTRACK",
                                    col=column.index,
                                    reason=f"Column {column.index} has no rows left.",
                                )
                        else:
                            self._cover(column)
                            frames.append(_Frame(column))
                            if self._trace:
                                yield self._event("COVER_COL", col=column.index)

                if not frames:
                    return

                frame = frames[-1]
                if frame.selected:
                    self._pop_row(frame.row)
                    frame.selected = False
                    if self._trace:
                        yield self._event("UNSELECT_ROW", row=frame.row.row.name)
                    next_row = frame.row.down
                else:
                    next_row = frame.column.down

                if next_row is frame.column:
                    frames.pop()
                    self._uncover(frame.column)
                    if self._trace:
                        yield self._event("UNCOVER_COL", col=frame.column.index)
                    continue

                frame.row = next_row
                self._push_row(next_row)
                frame.selected = True
                if self._trace:
                    yield self._event("SELECT_ROW", row=next_row.row.name)
                descend = True
        finally:
            # Undo runs even if the consumer stops early, so the links
            # always unwind in reverse order.
            while frames:
                frame = frames.pop()
                if frame.selected:
                    self._pop_row(frame.row)
                self._uncover(frame.column)

    def _run(self, trace: bool) -> Iterator[Event]:
        if self._searching:
            raise SearchInProgressError("A search is already running on this problem")
        self._searching = True
        self._trace = trace
        self.stats = SearchStats()
        try:
            if trace:
                yield self._event("INIT", rows=self.num_rows, columns=self.num_columns)
            yield from self._search()
        finally:
            self._searching = False
            self._trace = False
            logger.info(
                "Search ended: %d solution(s), %d node(s), %d dead end(s)",
                self.stats.solutions,
                self.stats.nodes,
                self.stats.dead_ends,
            )

    def iter_solutions(self) -> Iterator[list[str]]:
        """Lazily yield each solution as a list of row names in selection order.

        Closing the generator early restores the matrix, so the problem can be
        searched again afterwards.
        """
        with closing(self._run(trace=False)) as events:
            for event in events:
                yield event["data"]["solution"]

    def solve(self, limit: int | None = None) -> list[list[str]]:
        """Find all solutions, or at most ``limit`` of them.

        The result is also kept in ``self.solutions``.
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        if self._searching:
            raise SearchInProgressError("A search is already running on this problem")
        # A zero limit never starts the search, so reset the counters here.
        self.stats = SearchStats()
        with closing(self.iter_solutions()) as solutions:
            self.solutions = list(islice(solutions, limit))
        return self.solutions

    def solve_one(self) -> list[str] | None:
        solutions = self.solve(limit=1)
        return solutions[0] if solutions else None

    def solve_steps(self) -> Iterator[Event]:
        """
        Generator that yields events describing the solving process.
        Events are dicts with 'type', 'data', and 'state' (the row names
        currently selected). The first event is INIT.
        """
        yield from self._run(trace=True)

    def select_row(self, name: str) -> None:
        """Commit a row to every solution before searching.

        Useful for problems sharing a common matrix where some rows are known
        up front, e.g. the givens of a sudoku.
        """
        if self._searching:
            raise SearchInProgressError(f"Cannot select row {name!r} while a search is running")

        header = self._rows_by_name.get(name)
        if header is None:
            raise RowNotFoundError(f"No row found with name {name!r}")
        first = header.first
        if first is None:
            raise EmptyRowError(f"Row {name!r} has no true cells and can never be selected")

        node = first
        while True:
            if not self._is_linked(node.column):
                raise RowConflictError(
                    f"Row {name!r} uses column {node.column.index}, which is already covered"
                )
            node = node.right
            if node is first:
                break

        node = first.right
        while node is not first:
            self._cover(node.column)
            node = node.right
        # Ensure that the first one is done, too
        self._cover(first.column)

        self._solution.append(header)
        logger.debug("Pre-selected row %r", name)

    def selected_rows(self) -> list[str]:
        return [header.name for header in self._solution]

    def rows(self) -> list[str]:
        return [header.name for header in self.row_headers]
