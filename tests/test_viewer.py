from types import SimpleNamespace

import pygame
import pytest

from storenav import config
from storenav.layout import load_layout


@pytest.fixture(autouse=True)
def stub_pygame(monkeypatch):
    """Stub out pygame display, fonts and clock so the app runs headless."""
    monkeypatch.setattr(pygame, "init", lambda: None)
    monkeypatch.setattr(pygame, "quit", lambda: None)
    monkeypatch.setattr(
        pygame.display,
        "set_mode",
        lambda size, *args, **kwargs: pygame.Surface(size),
    )
    monkeypatch.setattr(
        pygame.display, "set_caption", lambda *args, **kwargs: None
    )
    monkeypatch.setattr(pygame.display, "flip", lambda: None)

    class DummyFont:
        def render(self, text, antialias, color):
            return pygame.Surface((len(text), 10))

    monkeypatch.setattr(pygame.font, "SysFont", lambda *args, **kwargs: DummyFont())

    class DummyClock:
        def tick(self, fps):
            return 0

    monkeypatch.setattr(pygame.time, "Clock", DummyClock)


def feed_events(monkeypatch, events):
    monkeypatch.setattr(pygame.event, "get", lambda: list(events))


def key(k):
    return SimpleNamespace(type=pygame.KEYDOWN, key=k)


def click(button, pos):
    return SimpleNamespace(type=pygame.MOUSEBUTTONDOWN, button=button, pos=pos)


def make_app():
    from storenav.viewer import StoreMapApp

    return StoreMapApp()


def test_input_handler_maps_events(monkeypatch):
    from storenav.viewer import InputHandler

    handler = InputHandler(cell_size=20)
    feed_events(
        monkeypatch,
        [click(1, (45, 25)), click(3, (100, 399)), key(pygame.K_r), key(pygame.K_h)],
    )
    handler.process_events()
    assert handler.start_clicked() == (2, 1)
    assert handler.end_clicked() == (5, 19)
    assert handler.recompute_pressed()
    assert handler.toggle_heuristic_pressed()
    assert not handler.walk_pressed()
    assert not handler.should_quit()
    # Actions only last one frame
    feed_events(monkeypatch, [key(pygame.K_ESCAPE)])
    handler.process_events()
    assert handler.should_quit()
    assert handler.start_clicked() is None
    assert not handler.recompute_pressed()


def test_app_starts_at_entrance():
    app = make_app()
    assert app.start == app.layout.locate("Entrance")
    assert app.end is None
    assert app.path == []
    assert app.heuristic_name == config.HEURISTIC


def test_select_end_routes_from_start():
    app = make_app()
    assert app.select_end((4, 8))
    assert app.path[0] == app.start
    assert app.path[-1] == (4, 8)
    assert "A1" in app.status and "steps" in app.status


def test_rejected_endpoints_keep_previous_route():
    app = make_app()
    app.select_end((4, 8))
    path = list(app.path)
    # Shelf cell
    assert not app.select_end((3, 7))
    assert "not walkable" in app.status
    assert app.end == (4, 8)
    # Click in the status band below the map
    assert not app.select_start((0, config.GRID_HEIGHT))
    assert "outside" in app.status
    assert app.path == path


def test_select_section_and_toggle_heuristic():
    app = make_app()
    assert app.select_section("Produce")
    assert app.end == app.layout.locate("Produce")
    app.toggle_heuristic()
    assert app.heuristic_name == "octile"
    assert app.path[-1] == app.end
    app.toggle_heuristic()
    assert app.heuristic_name == "manhattan"


def test_walk_to_destination():
    app = make_app()
    assert not app.start_walk()
    app.select_end((4, 8))
    assert app.start_walk()
    app.update(config.STEP_INTERVAL)
    assert app.walker is not None
    assert app.walker.current == app.path[1]
    # Long enough to finish the walk
    app.update(1000.0)
    assert app.walker is None
    assert app.start == (4, 8)
    assert app.end is None
    assert app.status.startswith("Arrived at A1")


def test_handle_events_drives_app(monkeypatch):
    app = make_app()
    feed_events(monkeypatch, [click(3, (4 * 20 + 5, 8 * 20 + 5)), key(pygame.K_SPACE)])
    app.handle_events()
    assert app.end == (4, 8)
    assert app.walker is not None
    feed_events(monkeypatch, [SimpleNamespace(type=pygame.QUIT)])
    app.handle_events()
    assert not app.running


def test_run_exits_when_quit(monkeypatch):
    app = make_app()
    feed_events(monkeypatch, [key(pygame.K_x)])
    app.run()
    assert not app.running


def test_renderer_draws_sections_and_walker():
    from storenav.viewer import MapRenderer

    layout = load_layout()
    renderer = MapRenderer(layout, cell_size=config.CELL_SIZE)
    surface = pygame.Surface((config.SCREEN_WIDTH, config.SCREEN_HEIGHT))
    grid = layout.grid
    walker = grid.cell(0, 0)
    renderer.draw(surface, path=[walker, grid.cell(1, 1)], walker=walker)
    produce = renderer.cell_center(grid.cell(2, 2))
    assert tuple(surface.get_at(produce))[:3] == (187, 247, 208)
    assert tuple(surface.get_at(renderer.cell_center(walker)))[:3] == config.WALKER_COLOR
    band = (5, config.GRID_HEIGHT * config.CELL_SIZE + 5)
    assert tuple(surface.get_at(band))[:3] == config.STATUS_BG_COLOR


def test_fractional_click_is_rejected():
    app = make_app()
    start = app.start
    assert not app.select_start((0.5, 1))
    assert "whole grid coordinates" in app.status
    assert app.start == start
