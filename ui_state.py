from enum import Enum, auto


class UIState(Enum):
    MENU = auto()
    SOLVE_PUZZLE = auto()
    ALGORITHM_INTRO = auto()
    ALGORITHM_VIEW = auto()


class AppState:
    def __init__(self, puzzle: str):
        self.current_state = UIState.MENU
        self.puzzle = puzzle
        self.error: str | None = None  # shown when the puzzle cannot be solved

    def go_to(self, state: UIState) -> None:
        self.current_state = state
        self.error = None
