"""
Pyramid configuration: tile geometry and output encoding.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ..raster.backend import SUPPORTED_FORMATS


@dataclass
class PyramidConfig:
    """
    Configuration for Deep Zoom pyramid generation.

    Attributes:
        tile_size: Nominal edge length of a tile in pixels
        overlap: Pixels shared between neighbouring tiles
        tile_format: Encoding of the written tiles (png, jpg, ...)
        background: BGR fill colour for document sheets
    """
    tile_size: int = 256
    overlap: int = 4
    tile_format: str = "png"
    background: Tuple[int, int, int] = (255, 255, 255)

    def __post_init__(self):
        """Validate configuration."""
        self.tile_format = self.tile_format.lower()
        self.background = tuple(self.background)

        if self.tile_size < 1:
            raise ValueError(f"tile_size must be >= 1, got {self.tile_size}")
        if self.overlap < 0:
            raise ValueError(f"overlap must be >= 0, got {self.overlap}")
        if self.overlap >= self.tile_size:
            raise ValueError(f"overlap ({self.overlap}) must be < tile_size ({self.tile_size})")
        if self.tile_format not in SUPPORTED_FORMATS:
            raise ValueError(
                f"tile_format must be one of {sorted(SUPPORTED_FORMATS)}, got {self.tile_format!r}"
            )
        if len(self.background) != 3:
            raise ValueError(f"background must have 3 components, got {self.background}")

    @property
    def border_tile_size(self) -> int:
        """Size of tiles on the leading edge of a level."""
        return self.tile_size + self.overlap

    @property
    def overlap_tile_size(self) -> int:
        """Size of interior tiles."""
        return self.tile_size + 2 * self.overlap

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "tile_size": self.tile_size,
            "overlap": self.overlap,
            "tile_format": self.tile_format,
            "background": list(self.background),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PyramidConfig":
        """Create from dictionary."""
        return cls(
            tile_size=data.get("tile_size", 256),
            overlap=data.get("overlap", 4),
            tile_format=data.get("tile_format", "png"),
            background=tuple(data.get("background", (255, 255, 255))),
        )
