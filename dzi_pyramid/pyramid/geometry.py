"""
Rectangle and tile-grid arithmetic for Deep Zoom pyramids.

Rectangles are (x1, y1, x2, y2) tuples with min/max corners, the same
convention used for tile bounds everywhere else in the package.
"""

import math
from typing import Iterator, Optional, Tuple

from .models import TileSpec

Rect = Tuple[int, int, int, int]


def intersects(a: Rect, b: Rect) -> bool:
    """
    Check whether two axis-aligned rectangles touch or overlap.

    Args:
        a: (x1, y1, x2, y2) of first rectangle
        b: (x1, y1, x2, y2) of second rectangle

    Returns:
        False only if one rectangle lies strictly beside the other

    Example:
        >>> intersects((0, 0, 10, 10), (5, 5, 20, 20))
        True
        >>> intersects((0, 0, 10, 10), (11, 0, 20, 10))
        False
    """
    ax1, ay1, ax2, ay2 = a
    bx1, by1, bx2, by2 = b
    return not (ax2 < bx1 or bx2 < ax1 or ay2 < by1 or by2 < ay1)


def intersection(a: Rect, b: Rect) -> Optional[Rect]:
    """
    Clip two rectangles against each other.

    Args:
        a: (x1, y1, x2, y2) of first rectangle
        b: (x1, y1, x2, y2) of second rectangle

    Returns:
        The shared (x1, y1, x2, y2) in the same coordinate space as the
        inputs, or None if the rectangles do not intersect

    Example:
        >>> intersection((0, 0, 100, 100), (50, 20, 150, 80))
        (50, 20, 100, 80)
    """
    if not intersects(a, b):
        return None
    return (
        max(a[0], b[0]),
        max(a[1], b[1]),
        min(a[2], b[2]),
        min(a[3], b[3]),
    )


def max_level(width: int, height: int) -> int:
    """
    Number of the finest pyramid level for an image of the given size.

    Level 0 is the coarsest (about one pixel), so the finest level is
    ceil(log2(max(width, height))).

    Example:
        >>> max_level(300, 200)
        9
        >>> max_level(512, 512)
        9
        >>> max_level(1, 1)
        0
    """
    longest = max(width, height)
    if longest <= 1:
        return 0
    return int(math.ceil(math.log2(longest)))


def half(value: int) -> int:
    """
    Halve a level dimension, rounding up.

    Rounding up keeps every level at least one pixel wide and matches the
    level sizes Deep Zoom viewers compute.

    Example:
        >>> half(75)
        38
        >>> half(1)
        1
    """
    return max(1, (value + 1) // 2)


def level_dimensions(width: int, height: int) -> Iterator[Tuple[int, int, int]]:
    """
    Yield (level, width, height) from the finest level down to level 0.

    Args:
        width: Width at full resolution
        height: Height at full resolution
    """
    level = max_level(width, height)
    while level >= 0:
        yield level, width, height
        width, height = half(width), half(height)
        level -= 1


def tile_sizes(tile_size: int, overlap: int) -> Tuple[int, int]:
    """
    Compute (border_tile_size, overlap_tile_size).

    Tiles on the leading edge only overlap inwards; interior tiles overlap
    both neighbours.

    Example:
        >>> tile_sizes(256, 4)
        (260, 264)
    """
    return tile_size + overlap, tile_size + 2 * overlap


def tile_grid(
    width: int,
    height: int,
    tile_size: int,
    overlap: int,
) -> Iterator[TileSpec]:
    """
    Walk the tile grid of one pyramid level.

    Columns are walked in the outer loop and rows in the inner loop. The
    extent of a tile may run past the level's width or height; the last
    tile on each axis is clipped when it is cropped from the raster.

    Args:
        width: Level width in pixels
        height: Level height in pixels
        tile_size: Nominal tile size
        overlap: Overlap between neighbouring tiles

    Yields:
        TileSpec for every grid position
    """
    border_size, overlap_size = tile_sizes(tile_size, overlap)

    x = 0
    col = 0
    while x < width:
        dx = border_size if x == 0 else overlap_size
        y = 0
        row = 0
        while y < height:
            dy = border_size if y == 0 else overlap_size
            yield TileSpec(row=row, col=col, x=x, y=y, dx=dx, dy=dy)
            y += dy - 2 * overlap
            row += 1
        x += dx - 2 * overlap
        col += 1
