"""Tests for document mode page layout."""

import numpy as np
import pytest

from dzi_pyramid.pyramid.canvas import Canvas
from dzi_pyramid.pyramid.document import build_document, layout_pages
from dzi_pyramid.pyramid.sinks import MemoryTileSink
from tests.fixtures.image_fixtures import create_solid


class TestLayoutPages:
    """Tests for layout_pages."""

    @pytest.mark.parametrize("count,expected", [
        (1, (1, 1)),
        (2, (2, 1)),
        (4, (2, 2)),
        (5, (3, 2)),
        (9, (3, 3)),
        (10, (4, 3)),
    ])
    def test_near_square_grid(self, count, expected):
        """Test the default grid is about as wide as it is tall."""
        assert layout_pages(count) == expected

    def test_fixed_columns(self):
        """Test a fixed number of columns."""
        assert layout_pages(5, columns=1) == (1, 5)
        assert layout_pages(5, columns=2) == (2, 3)

    def test_columns_capped_by_count(self):
        """Test more columns than pages collapses to one row."""
        assert layout_pages(2, columns=5) == (2, 1)

    def test_no_pages(self):
        """Test an empty document raises error."""
        with pytest.raises(ValueError, match="at least one page"):
            layout_pages(0)

    def test_invalid_columns(self):
        """Test zero columns raises error."""
        with pytest.raises(ValueError, match="columns must be >= 1"):
            layout_pages(3, columns=0)


class TestBuildDocument:
    """Tests for build_document."""

    def test_four_pages(self):
        """Test four pages are placed on a 2x2 grid."""
        pages = [create_solid(100, 80, value=v) for v in (0, 50, 100, 150)]

        layout = build_document(pages)

        assert (layout.columns, layout.rows) == (2, 2)
        assert layout.squeeze == 2
        assert (layout.page_width, layout.page_height) == (100, 80)
        assert layout.sheet.shape == (80, 100, 3)
        assert [(o.x, o.y) for o in layout.overlays] == [(0, 0), (100, 0), (0, 80), (100, 80)]
        assert all(o.squeeze == 2 for o in layout.overlays)

    def test_sheet_holds_thumbnails(self):
        """Test the sheet shows each page at reduced size."""
        pages = [create_solid(100, 80, value=v) for v in (0, 50, 100, 150)]

        sheet = build_document(pages).sheet

        assert np.all(sheet[0:40, 0:50] == 0)
        assert np.all(sheet[0:40, 50:100] == 50)
        assert np.all(sheet[40:80, 0:50] == 100)
        assert np.all(sheet[40:80, 50:100] == 150)

    def test_empty_cells_use_background(self):
        """Test grid cells without a page keep the background colour."""
        pages = [create_solid(100, 80, value=0) for _ in range(3)]

        layout = build_document(pages, background=(10, 20, 30))

        assert (layout.columns, layout.rows) == (2, 2)
        assert np.all(layout.sheet[40:80, 50:100] == (10, 20, 30))

    def test_mixed_page_sizes_use_largest_cell(self):
        """Test grid cells are sized by the largest page."""
        pages = [create_solid(100, 80), create_solid(60, 120)]

        layout = build_document(pages)

        assert (layout.page_width, layout.page_height) == (100, 120)
        assert [(o.x, o.y) for o in layout.overlays] == [(0, 0), (100, 0)]

    def test_explicit_squeeze(self):
        """Test a custom squeeze factor sizes the sheet."""
        pages = [create_solid(100, 80) for _ in range(4)]

        layout = build_document(pages, squeeze=4)

        assert layout.sheet.shape == (40, 50, 3)
        assert all(o.squeeze == 4 for o in layout.overlays)

    def test_document_canvas_total_size(self):
        """Test a document canvas spans the full page grid."""
        pages = [create_solid(100, 80) for _ in range(4)]
        layout = build_document(pages)

        canvas = Canvas(layout.sheet, overlays=layout.overlays)

        assert canvas.dimensions("total") == (200, 160)

    def test_document_pyramid_shows_pages(self):
        """Test the finest level shows the pages at full resolution."""
        pages = [create_solid(100, 80, value=v) for v in (0, 50, 100, 150)]
        layout = build_document(pages)
        canvas = Canvas(layout.sheet, overlays=layout.overlays, overlap=0)

        sink = MemoryTileSink()
        summary = canvas.iterate(sink)

        assert summary.max_level == 8
        top = sink.get(8, 0, 0).image
        assert top.shape == (160, 200, 3)
        assert np.all(top[0:80, 0:100] == 0)
        assert np.all(top[0:80, 100:200] == 50)
        assert np.all(top[80:160, 0:100] == 100)
        assert np.all(top[80:160, 100:200] == 150)
        assert sink.count(0) == 1
