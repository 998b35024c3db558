import pygame

from gui import BG, TEXT_MAIN, TEXT_SECONDARY, CARD_BG, GRID, BUTTON_HOVER

INTRO_LINES = [
    "Puzzles like sudoku are solved as an 'exact cover' problem.",
    "",
    "1. The Matrix:",
    "   - ROWS are candidate choices (a digit in a cell).",
    "   - COLUMNS are constraints that must be met exactly once.",
    "",
    "2. The Goal:",
    "   Select ROWS so that every COLUMN holds exactly one '1'.",
    "",
    "3. The Dance (Algorithm X with Dancing Links):",
    "   Pick the column with the fewest options, try each of its rows,",
    "   'cover' every column that row satisfies and recurse.",
    "   When a column has no options left, 'uncover' and backtrack.",
    "",
    "Next you will step through a small 6 x 7 matrix.",
]


def _start_button_rect(screen_size: tuple[int, int]) -> pygame.Rect:
    w, h = screen_size
    return pygame.Rect(w - 160, h - 80, 120, 50)


def draw_intro(screen: pygame.Surface, title_font: pygame.font.Font, body_font: pygame.font.Font):
    screen.fill(BG)

    title = title_font.render("How it Works: Dancing Links", True, TEXT_MAIN)
    screen.blit(title, (40, 40))

    y = 100
    for line in INTRO_LINES:
        surf = body_font.render(line, True, TEXT_SECONDARY)
        screen.blit(surf, (40, y))
        y += 30

    button_rect = _start_button_rect(screen.get_size())
    color = BUTTON_HOVER if button_rect.collidepoint(pygame.mouse.get_pos()) else CARD_BG
    pygame.draw.rect(screen, color, button_rect, border_radius=8)
    pygame.draw.rect(screen, GRID, button_rect, width=1, border_radius=8)

    btn_text = body_font.render("Start >", True, TEXT_MAIN)
    screen.blit(btn_text, btn_text.get_rect(center=button_rect.center))


def get_intro_action(mouse_pos: tuple[int, int], screen_size: tuple[int, int]) -> str | None:
    if _start_button_rect(screen_size).collidepoint(mouse_pos):
        return "start_viz"
    return None
