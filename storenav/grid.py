"""
Store floor occupancy grid: cells, walkability, connected regions and the
section index.
"""

from __future__ import annotations
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .config import TILE_FLOOR, STEP_COST, DIAGONAL_COST

logger = logging.getLogger(__name__)

# Neighbor offsets: orthogonal moves first, then diagonals
NEIGHBOR_OFFSETS = (
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)


class Cell:
    """One addressable unit of the store floor."""

    def __init__(
        self,
        x: int,
        y: int,
        walkable: bool = True,
        section: Optional[str] = None,
    ) -> None:
        self.x = x
        self.y = y
        self.walkable = walkable
        # Opaque display tag (department or aisle name)
        self.section = section

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Cell):
            return self.pos == other.pos
        if isinstance(other, tuple) and len(other) == 2:
            return self.pos == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.pos)

    def __repr__(self) -> str:
        flag = "" if self.walkable else " blocked"
        return f"<Cell x={self.x} y={self.y}{flag} section={self.section!r}>"


class Grid:
    """
    Fixed-size 2D walkability map.

    Dimensions and walkability are set once at construction. Connected
    walkable regions and the section index are computed here as well, so
    lookups never rescan the floor.
    """

    def __init__(
        self,
        width: int,
        height: int,
        blocked: Optional[Iterable[Tuple[int, int]]] = None,
        sections: Optional[Dict[Tuple[int, int], str]] = None,
    ) -> None:
        if not isinstance(width, int) or not isinstance(height, int):
            raise ValueError("Grid dimensions must be integers")
        if width <= 0 or height <= 0:
            raise ValueError(
                f"Grid dimensions must be positive, got {width}x{height}"
            )
        self.width = width
        self.height = height
        blocked_set = set(blocked or ())
        for x, y in blocked_set:
            if not self.in_bounds(x, y):
                raise ValueError(f"Blocked cell ({x}, {y}) is outside the grid")
        sections = sections or {}
        # Cells are addressed as cells[y][x]
        self.cells: List[List[Cell]] = [
            [
                Cell(x, y, (x, y) not in blocked_set, sections.get((x, y)))
                for x in range(width)
            ]
            for y in range(height)
        ]
        self.region_map = self._label_regions()
        self.num_regions = int(self.region_map.max()) + 1
        self._section_cells, self._section_anchor = self._index_sections()

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[int]],
        sections: Optional[Dict[Tuple[int, int], str]] = None,
    ) -> Grid:
        """Build a grid from rows of tile codes (TILE_FLOOR is walkable)."""
        height = len(rows)
        width = len(rows[0]) if height > 0 else 0
        if any(len(row) != width for row in rows):
            raise ValueError("All grid rows must have the same length")
        blocked = [
            (x, y)
            for y, row in enumerate(rows)
            for x, tile in enumerate(row)
            if tile != TILE_FLOOR
        ]
        return cls(width, height, blocked, sections)

    @classmethod
    def from_array(
        cls,
        array: np.ndarray,
        sections: Optional[Dict[Tuple[int, int], str]] = None,
    ) -> Grid:
        """Build a grid from a 2D occupancy array indexed [y, x]; non-zero is blocked."""
        arr = np.asarray(array)
        if arr.ndim != 2 or arr.size == 0:
            raise ValueError("Occupancy array must be a non-empty 2D array")
        height, width = arr.shape
        blocked = [(int(x), int(y)) for y, x in np.argwhere(arr != 0)]
        return cls(int(width), int(height), blocked, sections)

    def to_array(self) -> np.ndarray:
        """Return the walkability mask as a boolean array indexed [y, x]."""
        mask = np.zeros((self.height, self.width), dtype=bool)
        for row in self.cells:
            for cell in row:
                mask[cell.y, cell.x] = cell.walkable
        return mask

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside the {self.width}x{self.height} grid")
        return self.cells[y][x]

    def is_walkable(self, x: int, y: int) -> bool:
        """Return True if (x, y) is inside the grid and walkable."""
        return self.in_bounds(x, y) and self.cells[y][x].walkable

    def neighbors(self, cell: Cell) -> Iterator[Tuple[Cell, float]]:
        """Yield walkable in-bounds neighbors of cell with their step cost."""
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = cell.x + dx, cell.y + dy
            if not self.is_walkable(nx, ny):
                continue
            cost = DIAGONAL_COST if dx and dy else STEP_COST
            yield self.cells[ny][nx], cost

    def walkable_cells(self) -> Iterator[Cell]:
        for row in self.cells:
            for cell in row:
                if cell.walkable:
                    yield cell

    # -------------------- regions --------------------

    def _label_regions(self) -> np.ndarray:
        """Flood-fill 8-connected walkable regions; blocked cells stay -1."""
        region_map = np.full((self.height, self.width), -1, dtype=np.int32)
        region_id = 0
        for ry in range(self.height):
            for rx in range(self.width):
                if not self.cells[ry][rx].walkable or region_map[ry, rx] != -1:
                    continue
                stack = [(rx, ry)]
                while stack:
                    cx, cy = stack.pop()
                    if (
                        not self.is_walkable(cx, cy)
                        or region_map[cy, cx] != -1
                    ):
                        continue
                    region_map[cy, cx] = region_id
                    stack.extend(
                        (cx + dx, cy + dy) for dx, dy in NEIGHBOR_OFFSETS
                    )
                region_id += 1
        return region_map

    def region_of(self, x: int, y: int) -> Optional[int]:
        """Return the region id at (x, y), or None for blocked or out-of-bounds cells."""
        if not self.is_walkable(x, y):
            return None
        return int(self.region_map[y, x])

    def connected(self, a: Tuple[int, int], b: Tuple[int, int]) -> bool:
        """Return True if both cells are walkable and share a region."""
        ra = self.region_of(*a)
        return ra is not None and ra == self.region_of(*b)

    # -------------------- sections --------------------

    def _index_sections(self):
        section_cells: Dict[str, List[Cell]] = {}
        for row in self.cells:
            for cell in row:
                if cell.section is not None:
                    section_cells.setdefault(cell.section, []).append(cell)
        anchors: Dict[str, Optional[Cell]] = {}
        for name, cells in section_cells.items():
            cx = sum(c.x for c in cells) / len(cells)
            cy = sum(c.y for c in cells) / len(cells)
            # Department blocks are shelving; fall back to the nearest floor cell
            candidates = [c for c in cells if c.walkable] or list(
                self.walkable_cells()
            )
            anchors[name] = _nearest(candidates, cx, cy)
            if anchors[name] is None:
                logger.warning("Section %s has no reachable floor cell", name)
        return section_cells, anchors

    @property
    def sections(self) -> List[str]:
        return list(self._section_cells)

    def cells_in(self, section: str) -> List[Cell]:
        """Return every cell tagged with section."""
        try:
            return list(self._section_cells[section])
        except KeyError:
            raise KeyError(f"Unknown section: {section}") from None

    def locate(self, section: str) -> Cell:
        """Return the walkable cell that represents section on the floor."""
        if section not in self._section_anchor:
            raise KeyError(f"Unknown section: {section}")
        anchor = self._section_anchor[section]
        if anchor is None:
            raise KeyError(f"Section {section} has no walkable cell")
        return anchor


def _nearest(cells: List[Cell], cx: float, cy: float) -> Optional[Cell]:
    """Closest cell to (cx, cy); earlier cells win ties."""
    best = None
    best_d = float("inf")
    for c in cells:
        d = (c.x - cx) ** 2 + (c.y - cy) ** 2
        if d < best_d:
            best = c
            best_d = d
    return best
