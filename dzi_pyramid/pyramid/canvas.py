"""
Canvas: the primary image of a pyramid plus its overlays.
"""

import logging
import math
from typing import List, Optional, Tuple

import numpy as np

from ..config.pyramid_config import PyramidConfig
from ..errors import CanvasConsumedError
from ..raster.backend import OpenCVRaster
from .descriptor import build_descriptor
from .models import PyramidSummary
from .planner import PyramidPlanner
from .overlay import Overlay
from .sinks import TileSink


class Canvas:
    """
    Primary image, tile parameters and overlays of one pyramid.

    The canvas is logically enlarged by the largest overlay squeeze
    factor ("total" dimensions) without upscaling its pixels; tiles are
    resized on demand in crop().

    A canvas is consumed by iterate(): its image and overlays are halved
    level by level, so it cannot be iterated twice.

    Example:
        >>> canvas = Canvas(image, tile_size=256, overlap=4, tile_format="png")
        >>> xml = canvas.descriptor()
        >>> canvas.iterate(FileTileSink("out/image_files", "png"))
    """

    def __init__(
        self,
        image: np.ndarray,
        overlays: Optional[List[Overlay]] = None,
        tile_size: int = 256,
        overlap: int = 4,
        tile_format: str = "png",
        scale: float = 1,
        config: Optional[PyramidConfig] = None,
        raster: Optional[OpenCVRaster] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the canvas.

        Args:
            image: Canvas pixels
            overlays: Images composited on top, drawn in list order
            tile_size: Nominal tile size
            overlap: Tile overlap in pixels
            tile_format: Tile encoding
            scale: Initial stretch; recomputed from overlays by dimensions()
            config: Optional PyramidConfig to use instead of individual params
            raster: Raster backend
            logger: Logger for progress messages
        """
        self.config = config or PyramidConfig(
            tile_size=tile_size,
            overlap=overlap,
            tile_format=tile_format,
        )
        self.image = image
        self.overlays = list(overlays or [])
        self.scale = scale
        self.raster = raster or OpenCVRaster()
        self.logger = logger or logging.getLogger(__name__)
        self._consumed = False

    @property
    def tile_size(self) -> int:
        return self.config.tile_size

    @property
    def overlap(self) -> int:
        return self.config.overlap

    @property
    def tile_format(self) -> str:
        return self.config.tile_format

    @property
    def consumed(self) -> bool:
        """True once iterate() has run."""
        return self._consumed

    def dimensions(self, kind: str = "total") -> Tuple[int, int]:
        """
        Compute the pixel size of the pyramid.

        Args:
            kind: "canvas" for the image's own size, "total" for the size
                after enlarging the canvas by the largest overlay squeeze
                factor. "total" also stores that factor as the canvas scale.

        Returns:
            (width, height)
        """
        width, height = self.raster.dimensions(self.image)
        if kind == "canvas":
            return width, height
        if kind != "total":
            raise ValueError(f"kind must be 'total' or 'canvas', got {kind!r}")

        self.scale = max((o.squeeze for o in self.overlays), default=1)
        return int(width * self.scale), int(height * self.scale)

    def crop(
        self,
        scale: float,
        x: int,
        y: int,
        dx: int,
        dy: int,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> np.ndarray:
        """
        Cut one tile out of the canvas image.

        Args:
            scale: Current ratio between level coordinates and canvas pixels
            x: Tile left edge in level coordinates
            y: Tile top edge in level coordinates
            dx: Tile width
            dy: Tile height
            width: Level width (default: canvas width times scale)
            height: Level height (default: canvas height times scale)

        Returns:
            Tile pixels, clipped to the level's extent
        """
        if scale == 1:
            tile = self.raster.crop(self.image, x, y, dx, dy)
        else:
            image_width, image_height = self.raster.dimensions(self.image)
            if width is None:
                width = int(image_width * scale)
            if height is None:
                height = int(image_height * scale)
            # tile size follows the level extent
            tdx = max(1, min(dx, width - x))
            tdy = max(1, min(dy, height - y))

            sx, sy = int(x / scale), int(y / scale)
            ex = math.ceil((x + tdx) / scale)
            ey = math.ceil((y + tdy) / scale)
            self.logger.debug(f"rescale {x}, {y} --> {sx}, {sy}")
            tile = self.raster.crop(self.image, sx, sy, max(1, ex - sx), max(1, ey - sy))
            tile = self.raster.resize(tile, tdx, tdy)
        self.logger.debug(f"tiled {dx}x{dy}+{x}+{y}")
        return tile

    def descriptor(self) -> str:
        """Return the Deep Zoom XML descriptor for this canvas."""
        width, height = self.dimensions("total")
        return build_descriptor(
            self.tile_size,
            self.overlap,
            self.tile_format,
            width,
            height,
        )

    def iterate(self, sink: TileSink) -> PyramidSummary:
        """
        Generate every tile of the pyramid and hand it to a sink.

        Args:
            sink: TileSink receiving (tile, level, row, col)

        Returns:
            PyramidSummary with per-level tile counts

        Raises:
            CanvasConsumedError: If the canvas was already iterated
        """
        if self._consumed:
            raise CanvasConsumedError("canvas has already been iterated")
        self._consumed = True
        return PyramidPlanner(self, sink, logger=self.logger).run()
