# errors.py
# Exceptions raised while building or seeding an exact cover problem


class ExactCoverError(Exception):
    """Base class for all errors raised by the exact cover solver."""

    pass


class InvalidMatrixError(ExactCoverError, ValueError):
    """Raised when the input matrix or row names cannot form a problem."""

    pass


class TooFewRowsError(InvalidMatrixError):
    """Raised when the matrix has fewer than two rows."""

    pass


class RowLengthMismatchError(InvalidMatrixError):
    """Raised when rows differ in length or names do not match the rows."""

    pass


class DuplicateRowNameError(InvalidMatrixError):
    """Raised when two rows share the same name."""

    pass


class RowNotFoundError(ExactCoverError, LookupError):
    """Raised when a row name is not part of the problem."""

    pass


class EmptyRowError(ExactCoverError):
    """Raised when selecting a row that has no true cells."""

    pass


class RowConflictError(ExactCoverError):
    """Raised when a selected row touches a column that is already covered."""

    pass


class SearchInProgressError(ExactCoverError):
    """Raised when the problem is modified or re-entered during a search."""


class InvalidPuzzleError(ExactCoverError, ValueError):
    """Raised when a sudoku puzzle string is malformed or contradicts itself."""
