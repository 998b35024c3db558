import pytest

pygame = pytest.importorskip("pygame")

from ui_state import AppState, UIState  # noqa: E402
from ui_viz import (  # noqa: E402
    DEMO_MATRIX,
    DEMO_NAMES,
    VizState,
    get_narrative_text,
    handle_viz_input,
)


@pytest.fixture
def viz():
    return VizState(DEMO_MATRIX, DEMO_NAMES)


def test_history_stops_at_first_solution(viz):
    assert viz.history[0]["type"] == "INIT"
    assert viz.history[-1]["type"] == "SOLUTION"
    assert viz.history[-1]["state"] == ["B", "D", "F"]
    assert viz.total_steps == len(viz.history)


def test_history_drops_cover_events(viz):
    types = {event["type"] for event in viz.history}
    assert "COVER_COL" not in types
    assert "UNCOVER_COL" not in types
    assert "BACKTRACK" in types


def test_row_selections_carry_option_context(viz):
    selects = {e["data"]["row"]: e["narrative_ctx"] for e in viz.history if e["type"] == "SELECT_ROW"}
    assert selects["A"] == {"col": 0, "option_idx": 1, "total_options": 2}
    assert selects["B"] == {"col": 0, "option_idx": 2, "total_options": 2}
    assert selects["D"] == {"col": 4, "option_idx": 1, "total_options": 1}


def test_history_is_capped():
    capped = VizState(DEMO_MATRIX, DEMO_NAMES, max_history=3)
    assert len(capped.history) <= 3
    assert capped.history[-1]["type"] != "SOLUTION"


def test_stepping_stays_in_bounds(viz):
    viz.step_backward()
    assert viz.current_step == 0
    for _ in range(viz.total_steps + 5):
        viz.step_forward()
    assert viz.current_step == viz.total_steps - 1
    assert viz.current_narrative[0] == "SOLVED"


def test_covered_columns_follow_selected_rows(viz):
    viz.set_step(viz.total_steps - 1)
    assert viz.selected_rows() == ["B", "D", "F"]
    assert viz.covered_columns() == set(range(7))

    viz.set_step(0)
    assert viz.covered_columns() == set()


def test_focus_on_backtrack(viz):
    step = next(i for i, e in enumerate(viz.history) if e["type"] == "BACKTRACK")
    viz.set_step(step)
    assert viz.focus_column() == 1
    assert viz.current_narrative[0] in ("BACKTRACKING", "DEAD END")


def test_narrative_is_stable_per_step(viz):
    viz.set_step(1)
    first = list(viz.current_narrative)
    viz.set_step(2)
    viz.set_step(1)
    assert viz.current_narrative == first
    assert get_narrative_text("UNKNOWN", {}, {}, viz) == []


def test_playback_advances_and_stops(viz):
    viz.toggle_play()
    for _ in range(viz.total_steps * 2):
        viz.update(viz.play_speed)
    assert viz.current_step == viz.total_steps - 1
    assert not viz.playing


def test_keyboard_actions(viz):
    size = (960, 720)
    assert handle_viz_input(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_RIGHT), viz, size) == "next"
    assert handle_viz_input(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_LEFT), viz, size) == "prev"
    assert handle_viz_input(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE), viz, size) == "toggle"
    assert handle_viz_input(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE), viz, size) == "menu"


def test_app_state_transitions():
    app = AppState("." * 16)
    assert app.current_state == UIState.MENU
    app.error = "bad puzzle"
    app.go_to(UIState.SOLVE_PUZZLE)
    assert app.current_state == UIState.SOLVE_PUZZLE
    assert app.error is None
