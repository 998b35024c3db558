# gui.py

from __future__ import annotations

from typing import List, Tuple

import pygame

from board import Grid, box_size_for

CELL_SIZE = 56
TOP_BAR_HEIGHT = 120

WINDOW_WIDTH = 960
WINDOW_HEIGHT = 720

# Colors – dark mode
BG = (15, 15, 17)
CARD_BG = (30, 30, 34)
BUTTON_HOVER = (50, 50, 55)
GRID = (90, 90, 95)
BOX_BORDER = (200, 200, 210)
TEXT_MAIN = (245, 245, 250)
TEXT_SECONDARY = (230, 230, 235)
GIVEN_BG = (45, 45, 49)
SOLVED_DIGIT = (90, 220, 220)
ERROR_TEXT = (250, 80, 80)
SUCCESS_GLOW = (50, 255, 80)

MENU_BUTTONS: List[Tuple[str, str]] = [
    ("Solve Puzzle", "solve"),
    ("Understand the Algorithm", "algorithm"),
    ("Quit", "quit"),
]


def draw_top_bar(
    screen: pygame.Surface,
    title_font: pygame.font.Font,
    label_font: pygame.font.Font,
    current_idx: int,
    total_solutions: int,
    error: str | None = None,
):
    w = screen.get_width()
    pygame.draw.rect(screen, BG, (0, 0, w, TOP_BAR_HEIGHT))

    card_rect = pygame.Rect(16, 16, w - 32, TOP_BAR_HEIGHT - 32)
    pygame.draw.rect(screen, CARD_BG, card_rect, border_radius=16)

    title_surf = title_font.render("Sudoku", True, TEXT_MAIN)
    screen.blit(title_surf, (card_rect.x + 20, card_rect.y + 12))

    if error:
        sol_surf = label_font.render(error, True, ERROR_TEXT)
    elif total_solutions == 0:
        sol_surf = label_font.render("No solution", True, ERROR_TEXT)
    else:
        sol_text = f"Solution {current_idx + 1} of {total_solutions}"
        sol_surf = label_font.render(sol_text, True, TEXT_SECONDARY)
    screen.blit(sol_surf, (card_rect.x + 20, card_rect.y + 48))


def board_origin(screen_size: Tuple[int, int], size: int) -> Tuple[int, int]:
    w, h = screen_size
    board_px = size * CELL_SIZE
    x = (w - board_px) // 2
    y = TOP_BAR_HEIGHT + max(0, (h - TOP_BAR_HEIGHT - board_px) // 2)
    return x, y


def draw_sudoku_grid(
    screen: pygame.Surface,
    cell_font: pygame.font.Font,
    puzzle: Grid,
    solution: Grid | None,
    visible_cells: set[Tuple[int, int]] | None = None,
    completion_glow: bool = False,
):
    """
    Draws the board.
    puzzle: the givens, 0 for blanks. Givens are always drawn.
    solution: solved grid, or None to draw the givens only.
    visible_cells: cells of the solution to draw. If None, draw all.
    completion_glow: if True, draw a green glow around the board.
    """
    size = len(puzzle)
    box = box_size_for(size)
    ox, oy = board_origin(screen.get_size(), size)

    for r in range(size):
        for c in range(size):
            x = ox + c * CELL_SIZE
            y = oy + r * CELL_SIZE
            rect = pygame.Rect(x + 1, y + 1, CELL_SIZE - 2, CELL_SIZE - 2)

            given = puzzle[r][c]
            if given:
                pygame.draw.rect(screen, GIVEN_BG, rect)
                digit, color = given, TEXT_MAIN
            else:
                pygame.draw.rect(screen, BG, rect)
                pygame.draw.rect(screen, GRID, rect, width=1)
                digit, color = 0, SOLVED_DIGIT
                if solution is not None and (visible_cells is None or (r, c) in visible_cells):
                    digit = solution[r][c]

            if digit:
                text_surf = cell_font.render(str(digit), True, color)
                screen.blit(text_surf, text_surf.get_rect(center=rect.center))

    # Box borders
    board_px = size * CELL_SIZE
    for i in range(0, size + 1, box):
        offset = i * CELL_SIZE
        pygame.draw.line(screen, BOX_BORDER, (ox + offset, oy), (ox + offset, oy + board_px), 3)
        pygame.draw.line(screen, BOX_BORDER, (ox, oy + offset), (ox + board_px, oy + offset), 3)

    if completion_glow:
        glow_surf = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        board_rect = pygame.Rect(ox, oy, board_px, board_px)
        pygame.draw.rect(glow_surf, (*SUCCESS_GLOW, 50), board_rect.inflate(8, 8), border_radius=8, width=4)
        pygame.draw.rect(glow_surf, (*SUCCESS_GLOW, 255), board_rect, border_radius=6, width=3)
        pygame.draw.rect(glow_surf, (*SUCCESS_GLOW, 80), board_rect.inflate(-10, -10), border_radius=4, width=4)
        screen.blit(glow_surf, (0, 0))


def _menu_button_rects(screen_size: Tuple[int, int]) -> List[Tuple[pygame.Rect, str, str]]:
    w, h = screen_size
    start_y = h // 2
    button_height = 60
    spacing = 20
    button_width = min(400, w - 80)

    rects = []
    for i, (text, action) in enumerate(MENU_BUTTONS):
        rect = pygame.Rect((w - button_width) // 2, start_y + i * (button_height + spacing), button_width, button_height)
        rects.append((rect, text, action))
    return rects


def draw_menu(screen: pygame.Surface, title_font: pygame.font.Font, button_font: pygame.font.Font):
    screen.fill(BG)
    w, h = screen.get_size()

    title_surf = title_font.render("Exact Cover Solver", True, TEXT_MAIN)
    screen.blit(title_surf, title_surf.get_rect(center=(w // 2, h // 4)))

    mouse_pos = pygame.mouse.get_pos()
    for rect, text, _ in _menu_button_rects((w, h)):
        color = BUTTON_HOVER if rect.collidepoint(mouse_pos) else CARD_BG
        pygame.draw.rect(screen, color, rect, border_radius=12)
        pygame.draw.rect(screen, GRID, rect, width=1, border_radius=12)

        label = button_font.render(text, True, TEXT_MAIN)
        screen.blit(label, label.get_rect(center=rect.center))


def get_menu_action(mouse_pos: Tuple[int, int], screen_size: Tuple[int, int] = (WINDOW_WIDTH, WINDOW_HEIGHT)) -> str | None:
    for rect, _, action in _menu_button_rects(screen_size):
        if rect.collidepoint(mouse_pos):
            return action
    return None
