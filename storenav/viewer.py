"""
Interactive store map: pick endpoints with the mouse, route, and walk the path.

Controls:
    left click   -> set start
    right click  -> set destination
    [R]          -> recompute route
    [H]          -> toggle heuristic (manhattan / octile)
    [SPACE]      -> walk the current route
    [X]/[ESC]    -> quit
"""

from __future__ import annotations
import logging
import pygame
from typing import Optional, Sequence, Tuple, TYPE_CHECKING

from .config import (
    SCREEN_WIDTH,
    SCREEN_HEIGHT,
    FPS,
    CELL_SIZE,
    HEURISTIC,
    FLOOR_COLOR,
    GRID_LINE_COLOR,
    PATH_COLOR,
    START_COLOR,
    END_COLOR,
    WALKER_COLOR,
    STATUS_BG_COLOR,
    STATUS_TEXT_COLOR,
)
from .layout import load_layout
from .pathfinding import (
    HEURISTICS,
    InvalidEndpoint,
    endpoint_coords,
    UnreachableEndpoint,
    path_length,
    recompute_path,
)
from .route import estimate_minutes
from .walker import RouteWalker

if TYPE_CHECKING:
    from .grid import Cell
    from .layout import StoreLayout

logger = logging.getLogger(__name__)


class InputHandler:
    """
    Abstraction for gathering input state. Processes Pygame events and
    exposes the map actions requested this frame.
    """

    def __init__(self, cell_size: int = CELL_SIZE) -> None:
        self.cell_size = cell_size
        self._quit = False
        self._recompute = False
        self._walk = False
        self._toggle_heuristic = False
        self._start_click: Optional[Tuple[int, int]] = None
        self._end_click: Optional[Tuple[int, int]] = None

    def process_events(self) -> None:
        """Poll Pygame events and record the actions they trigger."""
        self._quit = False
        self._recompute = False
        self._walk = False
        self._toggle_heuristic = False
        self._start_click = None
        self._end_click = None
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._quit = True
            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_x, pygame.K_ESCAPE):
                    self._quit = True
                elif event.key == pygame.K_r:
                    self._recompute = True
                elif event.key == pygame.K_SPACE:
                    self._walk = True
                elif event.key == pygame.K_h:
                    self._toggle_heuristic = True
            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self._start_click = self.to_cell(event.pos)
                elif event.button == 3:
                    self._end_click = self.to_cell(event.pos)

    def to_cell(self, pos: Tuple[int, int]) -> Tuple[int, int]:
        """Convert a pixel position to grid coordinates."""
        return (pos[0] // self.cell_size, pos[1] // self.cell_size)

    def should_quit(self) -> bool:
        return self._quit

    def recompute_pressed(self) -> bool:
        return self._recompute

    def walk_pressed(self) -> bool:
        return self._walk

    def toggle_heuristic_pressed(self) -> bool:
        return self._toggle_heuristic

    def start_clicked(self) -> Optional[Tuple[int, int]]:
        """Grid cell left-clicked this frame, if any."""
        return self._start_click

    def end_clicked(self) -> Optional[Tuple[int, int]]:
        """Grid cell right-clicked this frame, if any."""
        return self._end_click


class MapRenderer:
    """Draws the store floor, the route and the markers onto a surface."""

    def __init__(
        self,
        layout: StoreLayout,
        cell_size: int = CELL_SIZE,
        font: Optional[pygame.font.Font] = None,
    ) -> None:
        self.layout = layout
        self.cell_size = cell_size
        self.font = font

    def cell_rect(self, cell: Cell) -> pygame.Rect:
        s = self.cell_size
        return pygame.Rect(cell.x * s, cell.y * s, s, s)

    def cell_center(self, cell: Cell) -> Tuple[int, int]:
        return self.cell_rect(cell).center

    def draw(
        self,
        surface: pygame.Surface,
        path: Sequence[Cell] = (),
        start: Optional[Cell] = None,
        end: Optional[Cell] = None,
        walker: Optional[Cell] = None,
        status: str = "",
    ) -> None:
        surface.fill(FLOOR_COLOR)
        for row in self.layout.grid.cells:
            for cell in row:
                rect = self.cell_rect(cell)
                if cell.walkable:
                    pygame.draw.rect(surface, GRID_LINE_COLOR, rect, 1)
                else:
                    surface.fill(self.layout.color_of(cell), rect)
        if len(path) > 1:
            points = [self.cell_center(c) for c in path]
            pygame.draw.lines(surface, PATH_COLOR, False, points, 3)
        radius = max(self.cell_size // 3, 2)
        if start is not None:
            pygame.draw.circle(surface, START_COLOR, self.cell_center(start), radius)
        if end is not None:
            pygame.draw.circle(surface, END_COLOR, self.cell_center(end), radius)
        if walker is not None:
            pygame.draw.circle(surface, WALKER_COLOR, self.cell_center(walker), radius + 2)
        # Status band below the floor
        band_top = self.layout.grid.height * self.cell_size
        band = pygame.Rect(0, band_top, surface.get_width(), surface.get_height() - band_top)
        if band.height > 0:
            surface.fill(STATUS_BG_COLOR, band)
            if self.font is not None and status:
                text = self.font.render(status, True, STATUS_TEXT_COLOR)
                surface.blit(text, (8, band_top + 8))


class StoreMapApp:
    """Store map window: owns endpoints, route, walker and the main loop."""

    def __init__(
        self,
        layout: Optional[StoreLayout] = None,
        clock: Optional[pygame.time.Clock] = None,
    ) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("Store Map")
        # Clock for frame rate (injectable for testing)
        self.clock = clock or pygame.time.Clock()
        self.fps = FPS
        self.layout = layout or load_layout()
        self.grid = self.layout.grid
        self.renderer = MapRenderer(self.layout, font=pygame.font.SysFont(None, 22))
        self.input = InputHandler()
        self.heuristic_name = HEURISTIC
        # Shopper starts at the entrance with no destination
        self.start: Optional[Cell] = self.layout.locate(self.layout.entrance)
        self.end: Optional[Cell] = None
        self.path = []
        self.walker: Optional[RouteWalker] = None
        self.status = "Right click a destination"
        self.running = True

    def _validate(self, point: Tuple[int, int]) -> Cell:
        x, y = endpoint_coords(point)
        if not self.grid.in_bounds(x, y):
            raise InvalidEndpoint((x, y), self.grid)
        if not self.grid.is_walkable(x, y):
            raise UnreachableEndpoint((x, y))
        return self.grid.cell(x, y)

    def _set_endpoint(self, which: str, point: Tuple[int, int]) -> bool:
        try:
            cell = self._validate(point)
        except (InvalidEndpoint, UnreachableEndpoint) as e:
            logger.warning("Rejected %s %s: %s", which, point, e)
            self.status = str(e)
            return False
        setattr(self, which, cell)
        self.recompute()
        return True

    def select_start(self, point: Tuple[int, int]) -> bool:
        """Move the start marker; returns False if the cell was rejected."""
        return self._set_endpoint("start", point)

    def select_end(self, point: Tuple[int, int]) -> bool:
        """Move the destination marker; returns False if the cell was rejected."""
        return self._set_endpoint("end", point)

    def select_section(self, name: str) -> bool:
        """Route to a section or aisle by name."""
        return self.select_end(self.layout.locate(name).pos)

    def toggle_heuristic(self) -> None:
        names = list(HEURISTICS)
        self.heuristic_name = names[(names.index(self.heuristic_name) + 1) % len(names)]
        logger.info("Heuristic switched to %s", self.heuristic_name)
        self.recompute()

    def recompute(self) -> None:
        """Rerun the search for the current endpoints and refresh the status line."""
        # Any walk in progress belongs to the old route
        self.walker = None
        if self.start is None or self.end is None:
            self.path = []
            return
        self.path = recompute_path(
            self.grid,
            self.start,
            self.end,
            heuristic=HEURISTICS[self.heuristic_name],
        )
        if not self.path:
            self.status = "No route found"
            return
        steps = path_length(self.path)
        self.status = (
            f"{self.end.section or 'Destination'}: {steps} steps, "
            f"about {estimate_minutes(steps)} min ({self.heuristic_name})"
        )

    def start_walk(self) -> bool:
        """Begin replaying the current path; False when there is nothing to walk."""
        if len(self.path) < 2:
            return False
        self.walker = RouteWalker(self.path)
        return True

    def handle_events(self) -> None:
        """Process input via InputHandler and apply the requested actions."""
        self.input.process_events()
        if self.input.should_quit():
            self.running = False
        start = self.input.start_clicked()
        if start is not None:
            self.select_start(start)
        end = self.input.end_clicked()
        if end is not None:
            self.select_end(end)
        if self.input.toggle_heuristic_pressed():
            self.toggle_heuristic()
        if self.input.recompute_pressed():
            self.recompute()
        if self.input.walk_pressed():
            self.start_walk()

    def update(self, dt: float) -> None:
        """Advance the walker; on arrival the destination becomes the new start."""
        if self.walker is None:
            return
        self.walker.update(dt)
        if self.walker.finished:
            arrived = self.walker.current
            self.status = f"Arrived at {arrived.section or arrived.pos}"
            self.start = arrived
            self.end = None
            self.path = []
            self.walker = None

    def render(self) -> None:
        walker = self.walker.current if self.walker is not None else None
        self.renderer.draw(
            self.screen,
            path=self.path,
            start=self.start,
            end=self.end,
            walker=walker,
            status=self.status,
        )
        pygame.display.flip()

    def run(self) -> None:
        """Main loop: handle events, update, and render."""
        while self.running:
            dt = self.clock.tick(self.fps) / 1000.0
            self.handle_events()
            self.update(dt)
            self.render()
        pygame.quit()
