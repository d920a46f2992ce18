"""
Data structures passed between the pyramid planner, overlays and sinks.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import numpy as np


@dataclass(frozen=True)
class TileSpec:
    """
    Position of one tile in a level's grid.

    Attributes:
        row: 0-based grid row
        col: 0-based grid column
        x: Left edge in level coordinates
        y: Top edge in level coordinates
        dx: Requested tile width (border or overlap tile size)
        dy: Requested tile height
    """
    row: int
    col: int
    x: int
    y: int
    dx: int
    dy: int

    @property
    def rect(self) -> Tuple[int, int, int, int]:
        """(x1, y1, x2, y2) of the requested tile."""
        return (self.x, self.y, self.x + self.dx, self.y + self.dy)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "row": self.row,
            "col": self.col,
            "x": self.x,
            "y": self.y,
            "dx": self.dx,
            "dy": self.dy,
        }


@dataclass
class OverlayTile:
    """
    Part of an overlay that lands on a tile.

    Attributes:
        image: Cropped overlay pixels
        x: Left offset relative to the tile origin
        y: Top offset relative to the tile origin
    """
    image: np.ndarray
    x: int
    y: int


@dataclass
class Tile:
    """
    A finished tile as handed to a tile sink.

    Attributes:
        image: Tile pixel data
        level: Pyramid level (0 is coarsest)
        row: Grid row
        col: Grid column
    """
    image: np.ndarray
    level: int
    row: int
    col: int

    @property
    def width(self) -> int:
        """Tile width in pixels."""
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        """Tile height in pixels."""
        return int(self.image.shape[0])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (without image data)."""
        return {
            "level": self.level,
            "row": self.row,
            "col": self.col,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class PyramidSummary:
    """
    What a pyramid run produced.

    Attributes:
        width: Total width at the finest level
        height: Total height at the finest level
        max_level: Finest level number
        canvas_level: Finest level at which the canvas alone yields tiles
        tiles_per_level: Number of tiles emitted per level
    """
    width: int
    height: int
    max_level: int
    canvas_level: int
    tiles_per_level: Dict[int, int] = field(default_factory=dict)

    @property
    def total_tiles(self) -> int:
        """Number of tiles emitted over all levels."""
        return sum(self.tiles_per_level.values())

    @property
    def level_count(self) -> int:
        """Number of levels that emitted at least one tile."""
        return sum(1 for count in self.tiles_per_level.values() if count > 0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "max_level": self.max_level,
            "canvas_level": self.canvas_level,
            "total_tiles": self.total_tiles,
            "tiles_per_level": {str(k): v for k, v in sorted(self.tiles_per_level.items())},
        }
