import os

import pytest

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

T, F = True, False


@pytest.fixture
def knuth_matrix():
    matrix = [
        [T, F, F, T, F, F, T],
        [T, F, F, T, F, F, F],
        [F, F, F, T, T, F, T],
        [F, F, T, F, T, T, F],
        [F, T, T, F, F, T, T],
        [F, T, F, F, F, F, T],
    ]
    return matrix, ["A", "B", "C", "D", "E", "F"]


@pytest.fixture
def small_matrix():
    matrix = [
        [T, F, F, F],
        [T, T, T, F],
        [F, T, F, T],
        [F, F, T, T],
        [F, F, F, T],
    ]
    return matrix, ["A", "B", "C", "D", "E"]


def snapshot(problem):
    """Observable state of the links: active columns with sizes and ring contents."""
    columns = []
    col = problem.header.right
    while col is not problem.header:
        down = []
        node = col.down
        while node is not col:
            down.append(node.row.name)
            node = node.down
        up = []
        node = col.up
        while node is not col:
            up.append(node.row.name)
            node = node.up
        columns.append((col.index, col.size, tuple(down), tuple(up)))
        col = col.right

    leftward = []
    col = problem.header.left
    while col is not problem.header:
        leftward.append(col.index)
        col = col.left
    return columns, leftward


def assert_links_consistent(problem):
    for header in problem.row_headers:
        if header.first is None:
            continue
        node = header.first
        while True:
            assert node.left.right is node
            assert node.right.left is node
            node = node.right
            if node is header.first:
                break

    col = problem.header.right
    while col is not problem.header:
        assert col.left.right is col
        assert col.right.left is col
        count = 0
        node = col.down
        while node is not col:
            assert node.up.down is node
            assert node.down.up is node
            count += 1
            node = node.down
        assert count == col.size
        col = col.right
