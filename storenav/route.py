"""
Shopping trip planning: chains shortest walks through the aisles on a list.
"""

from __future__ import annotations
import math
import logging
from typing import List, Optional, Sequence, Tuple, Union, TYPE_CHECKING

from .config import MINUTES_PER_STEP, MINUTES_PER_ITEM, BASE_TRIP_MINUTES
from .grid import Cell
from .pathfinding import (
    Heuristic,
    InvalidEndpoint,
    endpoint_coords,
    find_path,
    path_cost,
    path_length,
)

if TYPE_CHECKING:
    from .layout import StoreLayout

logger = logging.getLogger(__name__)

Origin = Union[str, Cell, Tuple[int, int]]


def estimate_minutes(steps: int) -> int:
    """Walking time for a number of grid steps, rounded up to whole minutes."""
    # Round first so float noise in the multiplier never adds a minute
    return math.ceil(round(steps * MINUTES_PER_STEP, 6))


def shopping_list_minutes(pending_count: int) -> int:
    """Trip estimate for a shopping list: fixed base plus time per pending item."""
    return math.ceil(pending_count * MINUTES_PER_ITEM) + BASE_TRIP_MINUTES


class Trip:
    """
    A planned walk through a sequence of stops.
    Attributes:
        origin: Cell the trip starts from.
        stops: Aisle or section names in visiting order.
        legs: One path per stop, each starting where the previous ended.
        skipped: Requested stops that cannot be reached from the origin.
    """

    def __init__(
        self,
        origin: Cell,
        stops: List[str],
        legs: List[List[Cell]],
        skipped: List[str],
    ) -> None:
        self.origin = origin
        self.stops = stops
        self.legs = legs
        self.skipped = skipped

    @property
    def path(self) -> List[Cell]:
        """All legs joined into one cell sequence."""
        path = [self.origin]
        for leg in self.legs:
            path.extend(leg[1:])
        return path

    @property
    def cost(self) -> float:
        return sum(path_cost(leg) for leg in self.legs)

    @property
    def steps(self) -> int:
        return path_length(self.path)

    @property
    def minutes(self) -> int:
        return estimate_minutes(self.steps)

    def __repr__(self) -> str:
        return f"<Trip stops={self.stops} steps={self.steps} skipped={self.skipped}>"


def _resolve_origin(layout: StoreLayout, origin: Origin) -> Cell:
    if isinstance(origin, str):
        return layout.locate(origin)
    if isinstance(origin, Cell):
        return origin
    x, y = endpoint_coords(origin)
    if not layout.grid.in_bounds(x, y):
        raise InvalidEndpoint((x, y), layout.grid)
    return layout.grid.cell(x, y)


def plan_trip(
    layout: StoreLayout,
    origin: Origin,
    aisles: Sequence[str],
    optimize: bool = False,
    heuristic: Optional[Heuristic] = None,
) -> Trip:
    """
    Plan a walk from origin through every aisle in aisles.
    Stops are visited in list order, or nearest-first when optimize is set.
    Duplicate aisles are visited once; unreachable ones are reported in
    Trip.skipped.
    """
    grid = layout.grid
    current = _resolve_origin(layout, origin)
    start = current
    targets = [(name, layout.locate(name)) for name in dict.fromkeys(aisles)]
    stops: List[str] = []
    legs: List[List[Cell]] = []
    skipped: List[str] = []

    if not optimize:
        for name, cell in targets:
            leg = find_path(grid, current, cell, heuristic=heuristic)
            if not leg:
                skipped.append(name)
                continue
            stops.append(name)
            legs.append(leg)
            current = cell
    else:
        remaining = list(targets)
        while remaining:
            best = None
            reachable = []
            for name, cell in remaining:
                leg = find_path(grid, current, cell, heuristic=heuristic)
                if not leg:
                    skipped.append(name)
                    continue
                reachable.append((name, cell))
                cost = path_cost(leg)
                if best is None or cost < best[0]:
                    best = (cost, name, cell, leg)
            if best is None:
                break
            _, name, cell, leg = best
            stops.append(name)
            legs.append(leg)
            current = cell
            remaining = [t for t in reachable if t[0] != name]

    trip = Trip(start, stops, legs, skipped)
    if skipped:
        logger.warning("Unreachable stops skipped: %s", ", ".join(skipped))
    logger.info(
        "Planned trip through %d stops: %d steps, about %d min",
        len(stops),
        trip.steps,
        trip.minutes,
    )
    return trip
