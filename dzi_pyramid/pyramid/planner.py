"""
Pyramid planner: walks levels and tile grids and emits finished tiles.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

import numpy as np

from .geometry import level_dimensions, max_level, tile_grid
from .models import OverlayTile, PyramidSummary, TileSpec
from .sinks import TileSink

if TYPE_CHECKING:
    from .canvas import Canvas


class PyramidPlanner:
    """
    Generates all tiles of a canvas, finest level first.

    Each level is tiled on a grid whose leading tiles are
    tile_size + overlap wide and whose interior tiles are
    tile_size + 2 * overlap wide. Overlays are composited onto the
    canvas tile wherever they intersect it. Between levels the level
    size is halved; with overlays the overlays are halved and the canvas
    is rescaled virtually, without overlays the canvas image itself is
    shrunk.

    The planner consumes the canvas: its image and overlays are replaced
    by smaller versions as the levels are walked.
    """

    def __init__(
        self,
        canvas: "Canvas",
        sink: TileSink,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the planner.

        Args:
            canvas: Canvas to tile
            sink: Receiver of finished tiles
            logger: Logger for progress messages
        """
        self.canvas = canvas
        self.sink = sink
        self.logger = logger or logging.getLogger(__name__)

    def run(self) -> PyramidSummary:
        """
        Produce every tile of every level.

        Returns:
            PyramidSummary with per-level tile counts
        """
        canvas = self.canvas

        canvas_width, canvas_height = canvas.dimensions("canvas")
        canvas_level = max_level(canvas_width, canvas_height)
        self.logger.debug(f"canvas dimensions: {canvas_width}, {canvas_height} --> levels: {canvas_level}")

        width, height = canvas.dimensions("total")
        top_level = max_level(width, height)
        self.logger.debug(f"total dimensions: {width}, {height} --> levels: {top_level}")

        summary = PyramidSummary(
            width=width,
            height=height,
            max_level=top_level,
            canvas_level=canvas_level,
        )

        scale = canvas.scale
        for level, width, height in level_dimensions(width, height):
            if level < top_level:
                scale = self._shrink(width, height, scale)

            count = 0
            for spec in tile_grid(width, height, canvas.tile_size, canvas.overlap):
                tile = self._render_tile(spec, level, canvas_level, scale, width, height)
                if tile is not None:
                    self.sink.accept(tile, level, spec.row, spec.col)
                    count += 1

            summary.tiles_per_level[level] = count
            self.logger.info(f"level {level}: {width}x{height}, {count} tiles")

        return summary

    def _shrink(self, width: int, height: int, scale: float) -> float:
        """
        Move canvas and overlays to the next coarser level.

        Returns:
            The scale between level coordinates and canvas pixels
        """
        canvas = self.canvas
        if canvas.overlays:
            for overlay in canvas.overlays:
                overlay.halfsize()
            return scale / 2

        canvas.image = canvas.raster.resize(canvas.image, width, height)
        return scale

    def _render_tile(
        self,
        spec: TileSpec,
        level: int,
        canvas_level: int,
        scale: float,
        width: int,
        height: int,
    ) -> Optional[np.ndarray]:
        """
        Build the pixels of one tile.

        Returns:
            The tile, or None if nothing is to be emitted at this position
        """
        canvas = self.canvas
        pieces: List[OverlayTile] = []
        for overlay in canvas.overlays:
            piece = overlay.crop(spec.rect)
            if piece is not None:
                pieces.append(piece)

        if pieces:
            tile = canvas.crop(scale, spec.x, spec.y, spec.dx, spec.dy, width, height)
            for piece in pieces:
                tile = canvas.raster.composite(tile, piece.image, piece.x, piece.y)
            return tile

        if level <= canvas_level:
            return canvas.crop(scale, spec.x, spec.y, spec.dx, spec.dy, width, height)

        return None
