"""
Exception types raised while building image pyramids.
"""


class PyramidError(Exception):
    """Base class for all pyramid generation errors."""


class RasterDecodeError(PyramidError):
    """A source image could not be found or decoded."""

    def __init__(self, source: str, reason: str = "could not decode image"):
        self.source = source
        self.reason = reason
        super().__init__(f"{reason}: {source}")


class TileWriteError(PyramidError):
    """A tile could not be encoded or written to disk."""

    def __init__(self, path: str, reason: str = "could not write tile"):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class CanvasConsumedError(PyramidError):
    """A canvas was iterated a second time after its rasters were halved."""
