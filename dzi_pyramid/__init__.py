"""
Deep Zoom Pyramid Generator

Converts images, or the pages of a document, into Deep Zoom tile
pyramids with an XML descriptor for zoomable viewers.
"""

__version__ = "0.4.0"

from .config import PyramidConfig
from .errors import CanvasConsumedError, PyramidError, RasterDecodeError, TileWriteError
from .pyramid import (
    Canvas,
    DiscardTileSink,
    FileTileSink,
    MemoryTileSink,
    Overlay,
    PyramidPlanner,
    build_descriptor,
    build_document,
    stretch_overlays,
)
from .raster import OpenCVRaster

__all__ = [
    "__version__",
    "PyramidConfig",
    "CanvasConsumedError",
    "PyramidError",
    "RasterDecodeError",
    "TileWriteError",
    "Canvas",
    "DiscardTileSink",
    "FileTileSink",
    "MemoryTileSink",
    "Overlay",
    "PyramidPlanner",
    "build_descriptor",
    "build_document",
    "stretch_overlays",
    "OpenCVRaster",
]
