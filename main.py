from __future__ import annotations

import logging
import random
import sys
from typing import List

import pygame

from board import DEFAULT_PUZZLE, Grid, parse_puzzle
from errors import InvalidPuzzleError
from gui import (
    WINDOW_WIDTH, WINDOW_HEIGHT, BG,
    draw_menu, get_menu_action,
    draw_top_bar, draw_sudoku_grid,
)
from solver import solve_puzzle
from ui_intro import draw_intro, get_intro_action
from ui_state import AppState, UIState
from ui_viz import DEMO_MATRIX, DEMO_NAMES, VizState, draw_viz, handle_viz_input

logger = logging.getLogger(__name__)

# Cap on solutions listed for puzzles with more than one answer
MAX_SOLUTIONS = 20
CELL_DELAY = 0.03
COMPLETION_GLOW_DURATION = 0.6


def _blank_cells(puzzle: Grid) -> List[tuple[int, int]]:
    return [(r, c) for r, row in enumerate(puzzle) for c, digit in enumerate(row) if not digit]


def main(puzzle_text: str = DEFAULT_PUZZLE):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    pygame.init()
    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.RESIZABLE)
    pygame.display.set_caption("Exact Cover Solver")

    title_font = pygame.font.SysFont("SF Pro Display", 32, bold=True)
    label_font = pygame.font.SysFont("SF Pro Text", 24)
    cell_font = pygame.font.SysFont("SF Pro Text", 28, bold=True)
    button_font = pygame.font.SysFont("SF Pro Text", 20)
    body_font = pygame.font.SysFont("SF Pro Text", 18)

    clock = pygame.time.Clock()
    app_state = AppState(puzzle_text)

    # State for Solve Puzzle
    puzzle: Grid | None = None
    solutions: List[Grid] = []
    current_sol_idx = 0

    # Placing animation: solved cells appear one by one in random order
    placing = False
    visible_cells: set[tuple[int, int]] = set()
    cells_sequence: List[tuple[int, int]] = []
    cell_timer = 0.0
    glow_timer = 0.0

    def start_placing():
        nonlocal placing, visible_cells, cells_sequence, cell_timer
        placing = True
        visible_cells = set()
        cells_sequence = _blank_cells(puzzle)
        random.shuffle(cells_sequence)
        cell_timer = 0.0

    viz_state: VizState | None = None

    running = True
    while running:
        dt = clock.tick(60) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)

            if app_state.current_state == UIState.MENU:
                if event.type == pygame.MOUSEBUTTONDOWN:
                    action = get_menu_action(event.pos, screen.get_size())
                    if action == "solve":
                        app_state.go_to(UIState.SOLVE_PUZZLE)
                        current_sol_idx = 0
                        try:
                            puzzle = parse_puzzle(app_state.puzzle)
                            solutions = solve_puzzle(app_state.puzzle, find_all=True, limit=MAX_SOLUTIONS)
                        except InvalidPuzzleError as exc:
                            logger.error("Cannot solve puzzle: %s", exc)
                            app_state.error = str(exc)
                            puzzle, solutions = None, []
                        if solutions:
                            start_placing()
                    elif action == "algorithm":
                        app_state.go_to(UIState.ALGORITHM_INTRO)
                    elif action == "quit":
                        running = False

            elif app_state.current_state == UIState.ALGORITHM_INTRO:
                if event.type == pygame.MOUSEBUTTONDOWN:
                    if get_intro_action(event.pos, screen.get_size()) == "start_viz":
                        app_state.go_to(UIState.ALGORITHM_VIEW)
                        logger.info("Initializing visualization...")
                        viz_state = VizState(DEMO_MATRIX, DEMO_NAMES)
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    app_state.go_to(UIState.MENU)

            elif app_state.current_state == UIState.ALGORITHM_VIEW and viz_state:
                action = handle_viz_input(event, viz_state, screen.get_size())
                if action == "prev":
                    viz_state.step_backward()
                elif action == "next":
                    viz_state.step_forward()
                elif action == "toggle":
                    viz_state.toggle_play()
                elif action == "menu":
                    app_state.go_to(UIState.MENU)
                    viz_state = None

            elif app_state.current_state == UIState.SOLVE_PUZZLE:
                if event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        app_state.go_to(UIState.MENU)
                    elif not placing and event.key == pygame.K_RIGHT and current_sol_idx < len(solutions) - 1:
                        current_sol_idx += 1
                        start_placing()
                    elif not placing and event.key == pygame.K_LEFT and current_sol_idx > 0:
                        current_sol_idx -= 1
                        start_placing()

        # Update
        if app_state.current_state == UIState.ALGORITHM_VIEW and viz_state:
            viz_state.update(dt)

        if placing:
            cell_timer += dt
            while cell_timer >= CELL_DELAY and cells_sequence:
                cell_timer -= CELL_DELAY
                visible_cells.add(cells_sequence.pop())
            if not cells_sequence:
                placing = False
                glow_timer = COMPLETION_GLOW_DURATION
        elif glow_timer > 0:
            glow_timer -= dt

        # Draw
        if app_state.current_state == UIState.MENU:
            draw_menu(screen, title_font, button_font)

        elif app_state.current_state == UIState.ALGORITHM_INTRO:
            draw_intro(screen, title_font, body_font)

        elif app_state.current_state == UIState.ALGORITHM_VIEW and viz_state:
            draw_viz(screen, title_font, body_font, viz_state)

        elif app_state.current_state == UIState.SOLVE_PUZZLE:
            screen.fill(BG)
            draw_top_bar(screen, title_font, label_font, current_sol_idx, len(solutions), app_state.error)
            if puzzle is not None:
                draw_sudoku_grid(
                    screen,
                    cell_font,
                    puzzle,
                    solutions[current_sol_idx] if solutions else None,
                    visible_cells=visible_cells if placing else None,
                    completion_glow=glow_timer > 0,
                )

        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_PUZZLE)
