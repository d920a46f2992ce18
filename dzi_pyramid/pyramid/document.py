"""
Document mode: lay out the pages of a document on one zoomable sheet.

Pages are arranged in a near-square grid. The canvas is a small sheet
holding page thumbnails; every page is an overlay at full resolution,
so zooming in reveals each page in detail.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..raster.backend import OpenCVRaster
from .overlay import Overlay


@dataclass
class DocumentLayout:
    """
    Result of laying out document pages.

    Attributes:
        sheet: Canvas image with page thumbnails
        overlays: One overlay per page, in page order
        columns: Pages per row
        rows: Number of page rows
        page_width: Width of a grid cell at full resolution
        page_height: Height of a grid cell at full resolution
        squeeze: Ratio between full resolution and the sheet
    """
    sheet: np.ndarray
    overlays: List[Overlay] = field(default_factory=list)
    columns: int = 1
    rows: int = 1
    page_width: int = 0
    page_height: int = 0
    squeeze: float = 1


def layout_pages(count: int, columns: Optional[int] = None) -> Tuple[int, int]:
    """
    Choose the grid for a number of pages.

    Args:
        count: Number of pages
        columns: Fixed number of columns, or None for a near-square grid

    Returns:
        (columns, rows)

    Example:
        >>> layout_pages(5)
        (3, 2)
        >>> layout_pages(5, columns=1)
        (1, 5)
    """
    if count < 1:
        raise ValueError(f"a document needs at least one page, got {count}")
    if columns is None:
        columns = int(math.ceil(math.sqrt(count)))
    if columns < 1:
        raise ValueError(f"columns must be >= 1, got {columns}")

    columns = min(columns, count)
    rows = int(math.ceil(count / columns))
    return columns, rows


def build_document(
    pages: Sequence[np.ndarray],
    raster: Optional[OpenCVRaster] = None,
    columns: Optional[int] = None,
    squeeze: Optional[float] = None,
    background: Tuple[int, int, int] = (255, 255, 255),
) -> DocumentLayout:
    """
    Build the canvas sheet and page overlays for a document.

    Args:
        pages: Page images, in reading order
        raster: Raster backend
        columns: Pages per row (default: near-square grid)
        squeeze: How much smaller the sheet is than the full page grid
            (default: the larger of columns and rows, so the sheet is
            about one page in size)
        background: BGR colour of the sheet

    Returns:
        DocumentLayout holding the sheet and one overlay per page
    """
    raster = raster or OpenCVRaster()
    columns, rows = layout_pages(len(pages), columns)

    sizes = [raster.dimensions(page) for page in pages]
    page_width = max(w for w, _ in sizes)
    page_height = max(h for _, h in sizes)

    if squeeze is None:
        squeeze = max(columns, rows)
    if squeeze <= 0:
        raise ValueError(f"squeeze must be > 0, got {squeeze}")

    sheet = raster.blank(
        int(columns * page_width / squeeze),
        int(rows * page_height / squeeze),
        background,
    )

    overlays = []
    for index, (page, (width, height)) in enumerate(zip(pages, sizes)):
        x = (index % columns) * page_width
        y = (index // columns) * page_height

        thumbnail = raster.resize(page, int(width / squeeze), int(height / squeeze))
        sheet = raster.composite(sheet, thumbnail, int(x / squeeze), int(y / squeeze))

        overlays.append(Overlay(page, x=x, y=y, squeeze=squeeze, raster=raster))

    return DocumentLayout(
        sheet=sheet,
        overlays=overlays,
        columns=columns,
        rows=rows,
        page_width=page_width,
        page_height=page_height,
        squeeze=squeeze,
    )
