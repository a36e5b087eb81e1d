"""
Pathfinding utilities: implements 8-directional grid A* search.
"""
from __future__ import annotations
import heapq
import logging
import math
import numbers
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .config import STEP_COST, DIAGONAL_COST, HEURISTIC
from .grid import Cell, Grid

logger = logging.getLogger(__name__)

Point = Union[Cell, Tuple[int, int]]
Heuristic = Callable[[Tuple[int, int], Tuple[int, int]], float]


class InvalidEndpoint(ValueError):
    """Raised when a start or end coordinate is malformed or lies outside the grid."""

    def __init__(self, point, grid: Optional[Grid] = None) -> None:
        if grid is None:
            message = f"Endpoint {point!r} is not a pair of whole grid coordinates"
        else:
            message = f"Endpoint {point} is outside the {grid.width}x{grid.height} grid"
        super().__init__(message)
        self.point = point


class UnreachableEndpoint(ValueError):
    """Raised when a start or end cell is not walkable."""

    def __init__(self, point: Tuple[int, int]) -> None:
        super().__init__(f"Endpoint {point} is not walkable")
        self.point = point


class SearchAborted(RuntimeError):
    """Raised when a search exceeds its expansion budget."""

    def __init__(self, expansions: int) -> None:
        super().__init__(f"Search aborted after {expansions} expansions")
        self.expansions = expansions


def manhattan(a, b):
    """Manhattan distance heuristic for grid."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def octile(a, b):
    """Octile distance: exact cost on an open 8-directional grid."""
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    return max(dx, dy) + (DIAGONAL_COST - 1) * min(dx, dy)


HEURISTICS = {'manhattan': manhattan, 'octile': octile}


def step_cost(a: Point, b: Point) -> float:
    """Cost of a single move between two adjacent cells."""
    ax, ay = endpoint_coords(a)
    bx, by = endpoint_coords(b)
    dx, dy = abs(ax - bx), abs(ay - by)
    if (dx, dy) == (1, 0) or (dx, dy) == (0, 1):
        return STEP_COST
    if (dx, dy) == (1, 1):
        return DIAGONAL_COST
    raise ValueError(f"Cells {(ax, ay)} and {(bx, by)} are not adjacent")


def path_cost(path: Sequence[Point]) -> float:
    """Sum of step costs along path; 0 for empty or single-cell paths."""
    return sum(step_cost(a, b) for a, b in zip(path, path[1:]))


def path_length(path: Sequence[Point]) -> int:
    """Number of steps in path, used for travel time estimates."""
    return max(len(path) - 1, 0)


def _grid_index(value) -> int:
    # Whole numbers (2, 2.0, numpy ints) convert; bools and fractions do not
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError
    if isinstance(value, numbers.Integral):
        return int(value)
    if float(value).is_integer():
        return int(value)
    raise TypeError


def endpoint_coords(point: Point) -> Tuple[int, int]:
    """
    Convert a Cell or (x, y) pair to integer grid coordinates.
    Raises InvalidEndpoint for anything that is not a pair of whole numbers.
    """
    if isinstance(point, Cell):
        return point.pos
    try:
        x, y = point
        return (_grid_index(x), _grid_index(y))
    except (TypeError, ValueError):
        raise InvalidEndpoint(point) from None


def find_path(
    grid: Grid,
    start: Point,
    end: Point,
    heuristic: Optional[Heuristic] = None,
    max_expansions: Optional[int] = None,
) -> List[Cell]:
    """
    Find a path on the store grid from start to end using A*.
    start, end: Cell objects or (x, y) integer grid coordinates.
    heuristic: distance estimate, defaults to the configured HEURISTIC.
    max_expansions: optional budget; SearchAborted is raised when exceeded.
    Returns list of Cells from start to end inclusive, or empty list if no path.
    """
    start_xy = endpoint_coords(start)
    end_xy = endpoint_coords(end)
    for point in (start_xy, end_xy):
        if not grid.in_bounds(*point):
            raise InvalidEndpoint(point, grid)

    # Already there
    if start_xy == end_xy:
        return [grid.cell(*start_xy)]

    for point in (start_xy, end_xy):
        if not grid.is_walkable(*point):
            raise UnreachableEndpoint(point)

    if heuristic is None:
        heuristic = HEURISTICS[HEURISTIC]

    # Different regions can never be joined; skip the search
    if not grid.connected(start_xy, end_xy):
        logger.debug("No route %s -> %s: disconnected regions", start_xy, end_xy)
        return []

    start_cell = grid.cell(*start_xy)
    goal = grid.cell(*end_xy)

    # A* open set as a priority queue of (f_score, count, cell)
    open_set = []
    count = 0
    # G cost from start to cell
    g_score = {start_cell: 0.0}
    # For path reconstruction
    came_from = {}
    heapq.heappush(open_set, (heuristic(start_xy, end_xy), count, start_cell))
    # Closed set of expanded cells
    closed = set()
    expansions = 0

    while open_set:
        _, _, current = heapq.heappop(open_set)
        # If reached goal, reconstruct path
        if current == goal:
            path = [current]
            while current in came_from:
                current = came_from[current]
                path.append(current)
            path.reverse()
            logger.debug(
                "Route %s -> %s: %d cells, %d expansions",
                start_xy,
                end_xy,
                len(path),
                expansions,
            )
            return path

        if current in closed:
            continue
        closed.add(current)
        expansions += 1
        if max_expansions is not None and expansions > max_expansions:
            logger.warning(
                "Search %s -> %s exceeded %d expansions",
                start_xy,
                end_xy,
                max_expansions,
            )
            raise SearchAborted(max_expansions)

        for neighbor, cost in grid.neighbors(current):
            if neighbor in closed:
                continue
            tentative_g = g_score[current] + cost
            # If this path to neighbor is better than any previous one
            if tentative_g < g_score.get(neighbor, math.inf):
                came_from[neighbor] = current
                g_score[neighbor] = tentative_g
                f_score = tentative_g + heuristic(neighbor.pos, end_xy)
                count += 1
                heapq.heappush(open_set, (f_score, count, neighbor))

    # No path found
    logger.debug("No route %s -> %s: open set exhausted", start_xy, end_xy)
    return []


def recompute_path(grid: Grid, start: Point, end: Point, **kwargs) -> List[Cell]:
    """Rerun a full search after the caller moved an endpoint."""
    return find_path(grid, start, end, **kwargs)
