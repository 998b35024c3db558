import logging
import random
from contextlib import closing
from typing import Any, Dict, List, Optional, Sequence

import pygame

from dlx import Problem
from gui import BG, CARD_BG, GRID, TEXT_MAIN, TEXT_SECONDARY

logger = logging.getLogger(__name__)

# Knuth's example from the Dancing Links paper: the only cover is B, D, F.
DEMO_MATRIX: List[List[bool]] = [
    [True, False, False, True, False, False, True],
    [True, False, False, True, False, False, False],
    [False, False, False, True, True, False, True],
    [False, False, True, False, True, True, False],
    [False, True, True, False, False, True, True],
    [False, True, False, False, False, False, True],
]
DEMO_NAMES: List[str] = ["A", "B", "C", "D", "E", "F"]

# Stop recording after this many raw events when no solution turns up.
MAX_HISTORY = 5000
PLAY_SPEED = 0.6

# Matrix view colors
MATRIX_BG = (10, 10, 12)
MATRIX_HEADER_BG = (20, 20, 25)
MATRIX_ROW_SELECTED = (40, 50, 40)
MATRIX_GRID = (40, 40, 45)
CELL_ON = (100, 100, 255)
CELL_SELECTED = (60, 200, 80)
CELL_COVERED = (55, 55, 70)
FOCUS = (255, 200, 50)
BACKTRACK_RED = (250, 80, 80)

MATRIX_CELL = 32
HEADER_HEIGHT = 40
ROW_LABEL_WIDTH = 80
CONTROL_BUTTONS = [("<<", "prev"), ("PLAY", "toggle"), (">>", "next"), ("MENU", "menu")]


def get_narrative_text(event_type: str, data: Dict[str, Any], context: Dict[str, Any], state: "VizState") -> List[str]:
    """Generates the narrative lines shown next to the matrix for one step."""

    # Deterministic per step so the text does not flicker while scrubbing
    rng = random.Random(state.current_step)

    if event_type == "INIT":
        variations = [
            ["INITIALIZING", f"Building the {len(state.names)} x {len(state.column_labels)} exact cover matrix..."],
            ["STARTING", "Let's find rows that cover every column exactly once."],
        ]
        return rng.choice(variations)

    if event_type == "CHOOSE_COL":
        col_desc = state.column_desc(data["chosen"])
        size = data["size"]
        variations = [
            [
                "ANALYZING",
                f"I need to satisfy {col_desc}.",
                f"It is the most constrained column with only {size} options.",
            ],
            [
                "SCANNING",
                "Looking for the tightest constraint...",
                f"{col_desc} has just {size} possible rows.",
            ],
        ]
        return rng.choice(variations)

    if event_type == "SELECT_ROW":
        col = context.get("col")
        col_desc = state.column_desc(col) if isinstance(col, int) else "the column"
        idx = context.get("option_idx", "?")
        total = context.get("total_options", "?")
        variations = [
            ["DECIDING", f"Trying row {data['row']}, option {idx} of {total} for {col_desc}."],
            ["HYPOTHESIZING", f"What if I pick row {data['row']} ({idx}/{total})?", "Covering every column it touches."],
        ]
        return rng.choice(variations)

    if event_type == "BACKTRACK":
        col = data.get("col", context.get("col"))
        col_desc = state.column_desc(col) if isinstance(col, int) else "this column"
        variations = [
            ["BACKTRACKING", f"No row is left to satisfy {col_desc}.", "An earlier choice must be wrong."],
            ["DEAD END", f"{col_desc} cannot be covered any more.", "Going back up the tree..."],
        ]
        return rng.choice(variations)

    if event_type == "UNSELECT_ROW":
        return ["REVERSING", f"Removing row {data['row']} and uncovering its columns."]

    if event_type == "SOLUTION":
        rows = ", ".join(data["solution"])
        return ["SOLVED", f"Rows {rows} cover every column exactly once."]

    return []


class VizState:
    def __init__(self, matrix: Sequence[Sequence[bool]], names: Sequence[str], column_labels: Optional[List[str]] = None, max_history: int = MAX_HISTORY):
        self.names = list(names)
        self.column_labels = column_labels or [str(i) for i in range(len(matrix[0]))]
        self.row_columns: Dict[str, List[int]] = {
            name: [c for c, value in enumerate(row) if value] for name, row in zip(names, matrix)
        }

        problem = Problem(matrix, names)
        raw_history: List[Dict[str, Any]] = []
        # Stop after the first solution; closing the generator restores the matrix
        with closing(problem.solve_steps()) as steps:
            for event in steps:
                raw_history.append(event)
                if event["type"] == "SOLUTION" or len(raw_history) >= max_history:
                    break

        self.history = self.process_history(raw_history)
        logger.info("History generated: %d steps.", len(self.history))

        self.total_steps = len(self.history)
        self.current_step = 0
        self.current_event = self.history[0]
        self.current_narrative: List[str] = []
        self.playing = False
        self.play_speed = PLAY_SPEED
        self.timer = 0.0
        self.scroll_row = 0
        self.scroll_col = 0

        self.set_step(0)

    def process_history(self, raw_events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Drops COVER/UNCOVER noise and adds 'option X of Y' context to row
        selections and backtracks.
        """
        processed = []
        # Stack of {col, total, current}, one per open CHOOSE_COL
        context_stack: List[Dict[str, int]] = []

        for event in raw_events:
            etype = event["type"]
            data = event.get("data", {})

            if etype == "CHOOSE_COL":
                context_stack.append({"col": data["chosen"], "total": data["size"], "current": 0})
                processed.append(event)

            elif etype == "SELECT_ROW":
                if context_stack:
                    ctx = context_stack[-1]
                    ctx["current"] += 1
                    event["narrative_ctx"] = {
                        "col": ctx["col"],
                        "option_idx": ctx["current"],
                        "total_options": ctx["total"],
                    }
                processed.append(event)

            elif etype == "BACKTRACK":
                if context_stack:
                    ctx = context_stack[-1]
                    event["narrative_ctx"] = {"col": ctx["col"], "total_options": ctx["total"]}
                    # A dead-end column is never covered, so no UNCOVER_COL follows
                    if ctx["total"] == 0:
                        context_stack.pop()
                processed.append(event)

            elif etype == "UNCOVER_COL":
                if context_stack and context_stack[-1]["col"] == data["col"]:
                    context_stack.pop()

            elif etype in ("INIT", "UNSELECT_ROW", "SOLUTION"):
                processed.append(event)

        return processed

    def column_desc(self, col: int) -> str:
        return f"Column {col} ({self.column_labels[col]})"

    def selected_rows(self) -> List[str]:
        return list(self.current_event.get("state", []))

    def covered_columns(self) -> set:
        covered = set()
        for name in self.selected_rows():
            covered.update(self.row_columns[name])
        return covered

    def focus_column(self) -> Optional[int]:
        data = self.current_event.get("data", {})
        if self.current_event["type"] in ("CHOOSE_COL", "BACKTRACK"):
            return data.get("chosen", data.get("col"))
        return self.current_event.get("narrative_ctx", {}).get("col")

    def focus_row(self) -> Optional[str]:
        return self.current_event.get("data", {}).get("row")

    def update(self, dt: float):
        if self.playing and self.current_step < self.total_steps - 1:
            self.timer += dt
            if self.timer >= self.play_speed:
                self.timer = 0.0
                self.set_step(self.current_step + 1)
        elif self.current_step >= self.total_steps - 1:
            self.playing = False

    def set_step(self, step: int):
        self.current_step = max(0, min(step, self.total_steps - 1))
        self.current_event = self.history[self.current_step]

        event_type = self.current_event["type"]
        event_data = self.current_event.get("data", {})
        narrative_ctx = self.current_event.get("narrative_ctx", {})
        self.current_narrative = get_narrative_text(event_type, event_data, narrative_ctx, self)

        # Keep the focused row and column in view
        row = self.focus_row()
        if row is not None:
            self.scroll_row = max(0, self.names.index(row) - 5)
        col = self.focus_column()
        if col is not None:
            self.scroll_col = max(0, col - 5)

    def step_forward(self):
        if self.current_step < self.total_steps - 1:
            self.set_step(self.current_step + 1)

    def step_backward(self):
        if self.current_step > 0:
            self.set_step(self.current_step - 1)

    def toggle_play(self):
        self.playing = not self.playing

    def scroll_x(self, dx: int):
        self.scroll_col = max(0, min(len(self.column_labels) - 1, self.scroll_col + dx))

    def scroll_y(self, dy: int):
        self.scroll_row = max(0, min(len(self.names) - 1, self.scroll_row + dy))


def _layout(screen_size: tuple[int, int]):
    w, h = screen_size
    half_h = h // 2
    half_w = w // 2
    stack_area = pygame.Rect(0, 0, half_w, half_h)
    text_area = pygame.Rect(half_w, 0, w - half_w, half_h)
    matrix_area = pygame.Rect(0, half_h, w, h - half_h)
    return stack_area, text_area, matrix_area


def _control_rects(text_area: pygame.Rect) -> List[tuple]:
    btn_y = text_area.bottom - 50
    total_btn_w = len(CONTROL_BUTTONS) * 80
    start_x = text_area.x + (text_area.width - total_btn_w) // 2
    rects = []
    for text, action in CONTROL_BUTTONS:
        rects.append((pygame.Rect(start_x, btn_y, 68, 30), text, action))
        start_x += 80
    return rects


def draw_matrix(screen: pygame.Surface, rect: pygame.Rect, state: VizState, font: pygame.font.Font):
    pygame.draw.rect(screen, MATRIX_BG, rect)

    selected = set(state.selected_rows())
    covered = state.covered_columns()
    focus_col = state.focus_column()
    focus_row = state.focus_row()

    visible_cols = max(1, (rect.width - ROW_LABEL_WIDTH) // MATRIX_CELL)
    visible_rows = max(1, (rect.height - HEADER_HEIGHT) // MATRIX_CELL)
    cols = range(state.scroll_col, min(len(state.column_labels), state.scroll_col + visible_cols))
    rows = state.names[state.scroll_row:state.scroll_row + visible_rows]

    # Column headers
    pygame.draw.rect(screen, MATRIX_HEADER_BG, (rect.x, rect.y, rect.width, HEADER_HEIGHT))
    for i, col in enumerate(cols):
        x = rect.x + ROW_LABEL_WIDTH + i * MATRIX_CELL
        color = FOCUS if col == focus_col else (TEXT_SECONDARY if col not in covered else GRID)
        lbl = font.render(str(col), True, color)
        screen.blit(lbl, lbl.get_rect(center=(x + MATRIX_CELL // 2, rect.y + HEADER_HEIGHT // 2)))

    for j, name in enumerate(rows):
        y = rect.y + HEADER_HEIGHT + j * MATRIX_CELL
        row_rect = pygame.Rect(rect.x, y, rect.width, MATRIX_CELL)
        if name in selected:
            pygame.draw.rect(screen, MATRIX_ROW_SELECTED, row_rect)

        lbl = font.render(name, True, TEXT_MAIN)
        screen.blit(lbl, (rect.x + 10, y + (MATRIX_CELL - lbl.get_height()) // 2))

        on_cols = set(state.row_columns[name])
        for i, col in enumerate(cols):
            x = rect.x + ROW_LABEL_WIDTH + i * MATRIX_CELL
            cell = pygame.Rect(x + 2, y + 2, MATRIX_CELL - 4, MATRIX_CELL - 4)
            pygame.draw.rect(screen, MATRIX_GRID, cell, width=1)
            if col in on_cols:
                if name in selected:
                    color = CELL_SELECTED
                elif col in covered:
                    color = CELL_COVERED
                else:
                    color = CELL_ON
                pygame.draw.rect(screen, color, cell.inflate(-6, -6), border_radius=4)

        if name == focus_row:
            pygame.draw.rect(screen, FOCUS, row_rect, width=2)

    if focus_col in cols:
        x = rect.x + ROW_LABEL_WIDTH + (focus_col - state.scroll_col) * MATRIX_CELL
        color = BACKTRACK_RED if state.current_event["type"] == "BACKTRACK" else FOCUS
        pygame.draw.rect(screen, color, (x, rect.y, MATRIX_CELL, rect.height), width=2)


def draw_viz(screen: pygame.Surface, font_title: pygame.font.Font, font_body: pygame.font.Font, state: VizState):
    stack_area, text_area, matrix_area = _layout(screen.get_size())
    screen.fill(BG)

    # --- 1. Partial solution (Top Left) ---
    y = 40
    title = font_title.render("Partial Solution", True, TEXT_MAIN)
    screen.blit(title, (stack_area.x + 20, y))
    y += 50
    selected = state.selected_rows()
    if not selected:
        screen.blit(font_body.render("(empty)", True, TEXT_SECONDARY), (stack_area.x + 20, y))
    for depth, name in enumerate(selected):
        cols = ", ".join(str(c) for c in state.row_columns[name])
        surf = font_body.render(f"{depth + 1}. Row {name}  covers  {cols}", True, TEXT_SECONDARY)
        screen.blit(surf, (stack_area.x + 20, y))
        y += 28

    # --- 2. Narrative (Top Right) ---
    pygame.draw.rect(screen, (20, 20, 25), text_area)
    pygame.draw.line(screen, GRID, (text_area.x, 0), (text_area.x, text_area.bottom))
    pygame.draw.line(screen, GRID, (0, matrix_area.y), (matrix_area.right, matrix_area.y))

    y = 40
    title = font_title.render("Algorithm's Mind", True, TEXT_MAIN)
    screen.blit(title, (text_area.x + 20, y))
    y += 50
    for line in state.current_narrative:
        surf = font_body.render(line, True, TEXT_SECONDARY)
        screen.blit(surf, (text_area.x + 20, y))
        y += 30

    # Timeline
    progress = state.current_step / (state.total_steps - 1) if state.total_steps > 1 else 0
    bar_y = text_area.bottom - 80
    pygame.draw.rect(screen, GRID, (text_area.x + 20, bar_y, text_area.width - 40, 4))
    pygame.draw.circle(screen, TEXT_MAIN, (int(text_area.x + 20 + (text_area.width - 40) * progress), bar_y + 2), 6)

    for btn_rect, text, action in _control_rects(text_area):
        if action == "toggle" and state.playing:
            text = "PAUSE"
        pygame.draw.rect(screen, CARD_BG, btn_rect, border_radius=4)
        pygame.draw.rect(screen, GRID, btn_rect, width=1, border_radius=4)
        lbl = font_body.render(text, True, TEXT_MAIN)
        screen.blit(lbl, lbl.get_rect(center=btn_rect.center))

    # --- 3. Matrix (Bottom) ---
    draw_matrix(screen, matrix_area, state, font_body)


def handle_viz_input(event: pygame.event.Event, state: VizState, screen_size: tuple[int, int]) -> str | None:
    """Handles input for the visualization view. Returns an action string if one was triggered."""
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_RIGHT:
            return "next"
        if event.key == pygame.K_LEFT:
            return "prev"
        if event.key == pygame.K_SPACE:
            return "toggle"
        if event.key == pygame.K_ESCAPE:
            return "menu"

    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        _, text_area, _ = _layout(screen_size)
        for btn_rect, _, action in _control_rects(text_area):
            if btn_rect.collidepoint(event.pos):
                return action

    elif event.type == pygame.MOUSEWHEEL:
        if pygame.key.get_mods() & pygame.KMOD_SHIFT:
            state.scroll_x(-event.y)
        else:
            state.scroll_y(-event.y)

    return None
