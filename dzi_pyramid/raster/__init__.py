"""
Raster Backend

Image decode, crop, resize, composite and encode used by the
pyramid builder.
"""

from .backend import OpenCVRaster, SUPPORTED_FORMATS, channel_count

__all__ = [
    "OpenCVRaster",
    "SUPPORTED_FORMATS",
    "channel_count",
]
