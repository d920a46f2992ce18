"""
Overlays: secondary images composited onto a canvas.

An overlay lives in the canvas's total (logical) coordinate space. Its
squeeze factor says how much the canvas has to be blown up so that the
overlay fits onto it at full resolution.
"""

from typing import List, Optional

import numpy as np

from ..raster.backend import OpenCVRaster
from .geometry import Rect, intersection
from .models import OverlayTile


class Overlay:
    """
    One image placed at (x, y) on the canvas.

    The overlay's pixels and position are halved once per pyramid level,
    so an overlay can only take part in a single pyramid run.

    Example:
        >>> overlay = Overlay(page, x=0, y=0, squeeze=2)
        >>> piece = overlay.crop((0, 0, 260, 260))
        >>> if piece is not None:
        ...     tile = raster.composite(tile, piece.image, piece.x, piece.y)
    """

    def __init__(
        self,
        image: np.ndarray,
        x: int = 0,
        y: int = 0,
        squeeze: float = 1,
        raster: Optional[OpenCVRaster] = None,
    ):
        """
        Initialize the overlay.

        Args:
            image: Overlay pixels at full resolution
            x: Left edge in total canvas coordinates
            y: Top edge in total canvas coordinates
            squeeze: Factor by which the canvas is enlarged to host this overlay
            raster: Raster backend used for cropping and resizing
        """
        if squeeze <= 0:
            raise ValueError(f"squeeze must be > 0, got {squeeze}")

        self.image = image
        self.x = x
        self.y = y
        self.squeeze = squeeze
        self.raster = raster or OpenCVRaster()

    @property
    def width(self) -> int:
        """Current width in pixels."""
        return self.raster.dimensions(self.image)[0]

    @property
    def height(self) -> int:
        """Current height in pixels."""
        return self.raster.dimensions(self.image)[1]

    @property
    def bounds(self) -> Rect:
        """(x1, y1, x2, y2) of the overlay in canvas coordinates."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def crop(self, tile_rect: Rect) -> Optional[OverlayTile]:
        """
        Cut out the part of the overlay that falls onto a tile.

        Args:
            tile_rect: (x1, y1, x2, y2) of the tile in canvas coordinates

        Returns:
            The cropped pixels with their offset relative to the tile's
            origin, or None if the overlay does not cover the tile
        """
        clipped = intersection(self.bounds, tile_rect)
        if clipped is None:
            return None

        x1, y1, x2, y2 = clipped
        width, height = x2 - x1, y2 - y1
        if width <= 0 or height <= 0:
            # Rectangles only share an edge
            return None

        image = self.raster.crop(self.image, x1 - self.x, y1 - self.y, width, height)
        return OverlayTile(image=image, x=x1 - tile_rect[0], y=y1 - tile_rect[1])

    def halfsize(self) -> None:
        """Halve the overlay's resolution and position for the next level."""
        width, height = self.width, self.height
        self.image = self.raster.resize(self.image, max(1, width // 2), max(1, height // 2))
        self.x = int(self.x / 2)
        self.y = int(self.y / 2)

    def __repr__(self) -> str:
        return (
            f"Overlay(x={self.x}, y={self.y}, width={self.width}, "
            f"height={self.height}, squeeze={self.squeeze})"
        )


def stretch_overlays(
    image: np.ndarray,
    stretch: float,
    raster: Optional[OpenCVRaster] = None,
) -> List[Overlay]:
    """
    Build the overlay set that magnifies an image by a stretch factor.

    The image itself stays the canvas; an enlarged copy covers it
    completely, so the finest level shows the image stretch times its
    native size.

    Args:
        image: Source image (also used as canvas)
        stretch: Magnification, 1 means no overlay at all
        raster: Raster backend

    Returns:
        Empty list for stretch == 1, else a single overlay
    """
    if stretch < 1:
        raise ValueError(f"stretch must be >= 1, got {stretch}")
    if stretch == 1:
        return []

    raster = raster or OpenCVRaster()
    width, height = raster.dimensions(image)
    enlarged = raster.resize(image, int(width * stretch), int(height * stretch))
    return [Overlay(enlarged, x=0, y=0, squeeze=stretch, raster=raster)]

