"""
Tile sinks: receivers of finished tiles.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Set, Union

import numpy as np

from ..raster.backend import OpenCVRaster
from .models import Tile

logger = logging.getLogger(__name__)


class TileSink(Protocol):
    """Anything that accepts finished tiles."""

    def accept(self, tile: np.ndarray, level: int, row: int, col: int) -> None:
        ...


class DiscardTileSink:
    """Sink that only logs tiles and drops them."""

    def accept(self, tile: np.ndarray, level: int, row: int, col: int) -> None:
        logger.debug(f"discarding tile {level} {row} {col} ({tile.shape[1]}x{tile.shape[0]})")


class MemoryTileSink:
    """
    Sink that keeps every tile in memory, in emission order.

    Example:
        >>> sink = MemoryTileSink()
        >>> canvas.iterate(sink)
        >>> sink.count(0)
        1
    """

    def __init__(self):
        self.tiles: List[Tile] = []

    def accept(self, tile: np.ndarray, level: int, row: int, col: int) -> None:
        self.tiles.append(Tile(image=tile, level=level, row=row, col=col))

    def levels(self) -> List[int]:
        """Levels that received tiles, finest first."""
        return sorted({t.level for t in self.tiles}, reverse=True)

    def count(self, level: Optional[int] = None) -> int:
        """Number of tiles, optionally for one level."""
        if level is None:
            return len(self.tiles)
        return sum(1 for t in self.tiles if t.level == level)

    def get(self, level: int, row: int, col: int) -> Optional[Tile]:
        """Look up a tile by its position."""
        for tile in self.tiles:
            if (tile.level, tile.row, tile.col) == (level, row, col):
                return tile
        return None

    def by_level(self) -> Dict[int, List[Tile]]:
        """Group tiles by level."""
        grouped: Dict[int, List[Tile]] = {}
        for tile in self.tiles:
            grouped.setdefault(tile.level, []).append(tile)
        return grouped


class FileTileSink:
    """
    Sink that writes tiles as <path>/<level>/<col>_<row>.<format>.

    Level directories are created on first use. Write failures propagate
    and abort the run; tiles already written stay on disk.
    """

    def __init__(
        self,
        path: Union[str, Path],
        tile_format: str = "png",
        raster: Optional[OpenCVRaster] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the sink.

        Args:
            path: Root directory of the tile tree (usually <name>_files)
            tile_format: Tile encoding and file extension
            raster: Raster backend used for encoding
            logger: Logger for per-tile messages
        """
        self.path = Path(path)
        self.tile_format = tile_format
        self.raster = raster or OpenCVRaster()
        self.logger = logger or logging.getLogger(__name__)
        self.written = 0
        self._levels_created: Set[int] = set()

    def tile_path(self, level: int, row: int, col: int) -> Path:
        """File a tile is written to."""
        return self.path / str(level) / f"{col}_{row}.{self.tile_format}"

    def accept(self, tile: np.ndarray, level: int, row: int, col: int) -> None:
        if level not in self._levels_created:
            (self.path / str(level)).mkdir(parents=True, exist_ok=True)
            self._levels_created.add(level)

        filename = self.tile_path(level, row, col)
        self.logger.debug(f"saving tile {level} {row} {col} --> {filename}")
        self.raster.write(tile, filename, self.tile_format)
        self.written += 1
