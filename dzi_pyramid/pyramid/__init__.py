"""
Deep Zoom Pyramid Module

Cuts a canvas image, optionally with overlays composited on top,
into the overlapping multi-level tiles of a Deep Zoom image.
"""

from .models import OverlayTile, PyramidSummary, Tile, TileSpec
from .geometry import (
    half,
    intersection,
    intersects,
    level_dimensions,
    max_level,
    tile_grid,
    tile_sizes,
)
from .overlay import Overlay, stretch_overlays
from .canvas import Canvas
from .planner import PyramidPlanner
from .descriptor import build_descriptor
from .sinks import DiscardTileSink, FileTileSink, MemoryTileSink, TileSink
from .document import DocumentLayout, build_document, layout_pages

__all__ = [
    # Models
    "OverlayTile",
    "PyramidSummary",
    "Tile",
    "TileSpec",
    # Geometry
    "half",
    "intersection",
    "intersects",
    "level_dimensions",
    "max_level",
    "tile_grid",
    "tile_sizes",
    # Overlays
    "Overlay",
    "stretch_overlays",
    # Canvas and planner
    "Canvas",
    "PyramidPlanner",
    # Descriptor
    "build_descriptor",
    # Sinks
    "DiscardTileSink",
    "FileTileSink",
    "MemoryTileSink",
    "TileSink",
    # Document mode
    "DocumentLayout",
    "build_document",
    "layout_pages",
]
