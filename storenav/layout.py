"""
Store layout: builds the walkable floor grid from a JSON layout description.
"""

from __future__ import annotations
import os
import json
import logging
from typing import Dict, List, Optional, Tuple

from .config import (
    LAYOUT_FILE,
    GRID_WIDTH,
    GRID_HEIGHT,
    SHELF_COLOR,
    ENTRANCE_SECTION,
)
from .grid import Cell, Grid

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


class StoreLayout:
    """Store floor grid plus the presentation data that goes with it."""

    def __init__(
        self,
        grid: Grid,
        colors: Optional[Dict[str, Color]] = None,
        aisles: Optional[List[str]] = None,
        entrance: str = ENTRANCE_SECTION,
    ) -> None:
        self.grid = grid
        self.colors = colors or {}
        self.aisles = aisles or []
        self.entrance = entrance

    @property
    def sections(self) -> List[str]:
        return self.grid.sections

    def color_of(self, cell: Cell) -> Color:
        """Display color of a blocked cell: its department color or plain shelving."""
        return self.colors.get(cell.section, SHELF_COLOR)

    def locate(self, name: str) -> Cell:
        """
        Return the floor cell for a section or aisle name.
        Unknown names fall back to the entrance.
        """
        try:
            return self.grid.locate(name)
        except KeyError:
            logger.warning("Unknown location %s, using %s", name, self.entrance)
            return self.grid.locate(self.entrance)


def _parse_rect(raw) -> Optional[Tuple[int, int, int, int]]:
    if not (isinstance(raw, (list, tuple)) and len(raw) == 4):
        return None
    try:
        x, y, w, h = (int(v) for v in raw)
    except (TypeError, ValueError):
        return None
    if w <= 0 or h <= 0:
        return None
    return x, y, w, h


def _parse_color(raw) -> Optional[Color]:
    if not (isinstance(raw, (list, tuple)) and len(raw) == 3):
        return None
    try:
        r, g, b = (int(v) for v in raw)
    except (TypeError, ValueError):
        return None
    return (r, g, b)


def _rect_cells(rect, width: int, height: int) -> List[Tuple[int, int]]:
    """Cells of rect that fall inside the grid."""
    x0, y0, w, h = rect
    cells = [
        (x, y)
        for y in range(max(y0, 0), min(y0 + h, height))
        for x in range(max(x0, 0), min(x0 + w, width))
    ]
    if len(cells) < w * h:
        logger.warning(
            "Rect %s clipped to the %dx%d floor: %d of %d cells kept",
            list(rect),
            width,
            height,
            len(cells),
            w * h,
        )
    return cells


def build_layout(data: dict) -> StoreLayout:
    """
    Build a StoreLayout from a parsed layout definition.
    Blocks are non-walkable shelving (optionally labelled with a department),
    zones are labelled walkable areas such as aisles and the entrance.
    Malformed entries are skipped.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Layout must be a JSON object, got {type(data).__name__}")
    size = data.get("size", [GRID_WIDTH, GRID_HEIGHT])
    if not (isinstance(size, (list, tuple)) and len(size) == 2):
        raise ValueError(f"Layout size must be a [width, height] pair, got {size!r}")
    width, height = int(size[0]), int(size[1])

    blocked = set()
    sections: Dict[Tuple[int, int], str] = {}
    colors: Dict[str, Color] = {}
    for block in data.get("blocks", []):
        if not isinstance(block, dict):
            logger.warning("Skipping malformed block: %r", block)
            continue
        rect = _parse_rect(block.get("rect"))
        if rect is None:
            logger.warning("Skipping block with invalid rect: %s", block)
            continue
        cells = _rect_cells(rect, width, height)
        if not cells:
            logger.warning("Skipping block outside the floor: %s", block)
            continue
        name = block.get("section")
        for pos in cells:
            blocked.add(pos)
            if isinstance(name, str):
                sections[pos] = name
        color = _parse_color(block.get("color"))
        if isinstance(name, str) and color is not None:
            colors[name] = color

    aisles: List[str] = []
    for zone in data.get("zones", []):
        if not isinstance(zone, dict):
            logger.warning("Skipping malformed zone: %r", zone)
            continue
        rect = _parse_rect(zone.get("rect"))
        name = zone.get("section")
        if rect is None or not isinstance(name, str):
            logger.warning("Skipping zone with invalid rect or section: %s", zone)
            continue
        cells = _rect_cells(rect, width, height)
        if not cells:
            logger.warning("Skipping zone outside the floor: %s", zone)
            continue
        for pos in cells:
            sections[pos] = name
        if zone.get("aisle") and name not in aisles:
            aisles.append(name)

    grid = Grid(width, height, blocked, sections)
    entrance = data.get("entrance", ENTRANCE_SECTION)
    if entrance not in grid.sections:
        raise ValueError(f"Layout entrance {entrance!r} is not a section")
    logger.info(
        "Built %dx%d store layout: %d sections, %d aisles, %d regions",
        width,
        height,
        len(grid.sections),
        len(aisles),
        grid.num_regions,
    )
    return StoreLayout(grid, colors=colors, aisles=aisles, entrance=entrance)


def load_layout(path: Optional[str] = None) -> StoreLayout:
    """Load the store layout from a JSON file (the packaged default when path is None)."""
    layout_path = path or os.path.join(os.path.dirname(__file__), LAYOUT_FILE)
    try:
        with open(layout_path, "r") as f:
            data = json.load(f)
        return build_layout(data)
    except Exception as e:
        raise RuntimeError(
            f"Failed to load store layout from {layout_path}: {e}"
        ) from e
