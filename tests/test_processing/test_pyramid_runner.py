"""Tests for batch conversion."""

import cv2
import pytest

from dzi_pyramid.config.pyramid_config import PyramidConfig
from dzi_pyramid.processing.runner import (
    BatchResult,
    ConversionJob,
    PyramidRunner,
    collect_files,
    jobs_from_paths,
)
from tests.fixtures.image_fixtures import create_gradient, create_solid


@pytest.fixture
def image_path(tmp_path):
    """Write a 300x200 test image."""
    path = tmp_path / "input" / "map.png"
    path.parent.mkdir()
    cv2.imwrite(str(path), create_gradient(300, 200))
    return str(path)


@pytest.fixture
def page_paths(tmp_path):
    """Write four document pages."""
    folder = tmp_path / "pages"
    folder.mkdir()
    paths = []
    for i in range(4):
        path = folder / f"page{i}.png"
        cv2.imwrite(str(path), create_solid(100, 80, value=40 * i))
        paths.append(str(path))
    return paths


class TestConversionJob:
    """Tests for ConversionJob."""

    def test_output_paths(self, tmp_path):
        """Test descriptor and tile paths derive from prefix."""
        job = ConversionJob(sources=["a.png"], prefix="a", output_dir=str(tmp_path))
        assert job.descriptor_path == tmp_path / "a.xml"
        assert job.tiles_path == tmp_path / "a_files"

    def test_requires_source(self):
        """Test an empty job raises error."""
        with pytest.raises(ValueError, match="at least one source"):
            ConversionJob(sources=[], prefix="a")

    def test_single_image_takes_one_source(self):
        """Test several sources need document mode."""
        with pytest.raises(ValueError, match="exactly one source"):
            ConversionJob(sources=["a.png", "b.png"], prefix="a")

    def test_prefix_without_slashes(self):
        """Test prefix validation."""
        with pytest.raises(ValueError, match="prefix"):
            ConversionJob(sources=["a.png"], prefix="x/y")

    def test_invalid_stretch(self):
        """Test stretch validation."""
        with pytest.raises(ValueError, match="stretch must be >= 1"):
            ConversionJob(sources=["a.png"], prefix="a", stretch=0.5)

    @pytest.mark.parametrize("columns", [0, -2])
    def test_invalid_columns(self, columns):
        """Test columns validation."""
        with pytest.raises(ValueError, match="columns must be >= 1"):
            ConversionJob(sources=["a.png"], prefix="a", document=True, columns=columns)

    def test_stretch_rejected_for_documents(self):
        """Test a document cannot be stretched."""
        with pytest.raises(ValueError, match="document mode"):
            ConversionJob(sources=["a.png", "b.png"], prefix="doc", document=True, stretch=2)


class TestJobsFromPaths:
    """Tests for pairing inputs with outputs."""

    def test_one_job_per_image(self):
        """Test every image is paired with its own stem."""
        jobs = jobs_from_paths(["x/first.png", "y/second.jpg"], output_dir="out")

        assert [(j.sources, j.prefix, j.output_dir) for j in jobs] == [
            (["x/first.png"], "first", "out"),
            (["y/second.jpg"], "second", "out"),
        ]

    def test_prefix_for_single_image(self):
        """Test an explicit prefix names a single output."""
        jobs = jobs_from_paths(["x/first.png"], prefix="renamed")
        assert jobs[0].prefix == "renamed"

    def test_prefix_rejected_for_several_images(self):
        """Test one prefix cannot name several outputs."""
        with pytest.raises(ValueError, match="single input"):
            jobs_from_paths(["a.png", "b.png"], prefix="both")

    def test_document_mode(self):
        """Test document mode makes one job holding every page."""
        jobs = jobs_from_paths(["p1.png", "p2.png"], document=True, columns=1)

        assert len(jobs) == 1
        assert jobs[0].sources == ["p1.png", "p2.png"]
        assert jobs[0].prefix == "document"
        assert jobs[0].document is True
        assert jobs[0].columns == 1

    def test_document_mode_rejects_stretch(self):
        """Test stretch is not silently dropped for documents."""
        with pytest.raises(ValueError, match="document mode"):
            jobs_from_paths(["p1.png", "p2.png"], document=True, stretch=3)


class TestCollectFiles:
    """Tests for input expansion."""

    def test_directory_expansion(self, page_paths, tmp_path):
        """Test directories expand to their images."""
        (tmp_path / "pages" / "notes.txt").write_text("skip me")
        assert collect_files([str(tmp_path / "pages")]) == sorted(page_paths)

    def test_files_kept(self):
        """Test explicitly named files are kept even if missing."""
        assert collect_files(["b.png", "a.png", "b.png"]) == ["a.png", "b.png"]


class TestPyramidRunner:
    """Tests for PyramidRunner."""

    def test_run_job(self, image_path, tmp_path):
        """Test a job writes descriptor and tiles."""
        out = tmp_path / "out"
        job = jobs_from_paths([image_path], output_dir=str(out))[0]

        result = PyramidRunner().run_job(job)

        xml = (out / "map.xml").read_text()
        assert "<Size Width='300' Height='200'/>" in xml
        assert (out / "map_files" / "9" / "0_0.png").is_file()
        assert (out / "map_files" / "9" / "1_0.png").is_file()
        assert (out / "map_files" / "0" / "0_0.png").is_file()
        assert result["summary"]["max_level"] == 9
        assert result["summary"]["tiles_per_level"]["0"] == 1

    def test_tile_format(self, image_path, tmp_path):
        """Test tiles use the configured format."""
        out = tmp_path / "out"
        job = jobs_from_paths([image_path], output_dir=str(out))[0]

        PyramidRunner(PyramidConfig(tile_format="jpg")).run_job(job)

        assert "Format='jpg'" in (out / "map.xml").read_text()
        assert (out / "map_files" / "9" / "0_0.jpg").is_file()

    def test_stretch(self, image_path, tmp_path):
        """Test a stretched image reports magnified dimensions."""
        out = tmp_path / "out"
        job = jobs_from_paths([image_path], output_dir=str(out), stretch=2)[0]

        result = PyramidRunner().run_job(job)

        assert "<Size Width='600' Height='400'/>" in (out / "map.xml").read_text()
        assert result["summary"]["max_level"] == 10

    def test_descriptor_only(self, image_path, tmp_path):
        """Test no tiles are written in descriptor-only mode."""
        out = tmp_path / "out"
        job = jobs_from_paths([image_path], output_dir=str(out))[0]

        result = PyramidRunner(descriptor_only=True).run_job(job)

        assert (out / "map.xml").is_file()
        assert not (out / "map_files").exists()
        assert "summary" not in result

    def test_document_job(self, page_paths, tmp_path):
        """Test a document job lays out all pages."""
        out = tmp_path / "out"
        job = jobs_from_paths(page_paths, output_dir=str(out), prefix="report", document=True)[0]

        result = PyramidRunner().run_job(job)

        assert "<Size Width='200' Height='160'/>" in (out / "report.xml").read_text()
        assert (out / "report_files" / "8" / "0_0.png").is_file()
        assert result["summary"]["max_level"] == 8

    def test_batch_records_failures(self, image_path, tmp_path):
        """Test a failing job does not stop the batch."""
        out = tmp_path / "out"
        jobs = jobs_from_paths([str(tmp_path / "missing.png"), image_path], output_dir=str(out))
        seen = []

        result = PyramidRunner(progress_callback=lambda i, n, job: seen.append((i, n))).run_batch(jobs)

        assert isinstance(result, BatchResult)
        assert result.total_jobs == 2
        assert result.successful == 1
        assert result.failed == 1
        assert "image not found" in result.errors[0]["errors"][0]
        assert seen == [(1, 2), (2, 2)]
        assert result.to_dict()["success_rate"] == 0.5

    def test_empty_batch(self):
        """Test an empty batch."""
        result = PyramidRunner().run_batch([])
        assert result.total_jobs == 0
        assert result.to_dict()["success_rate"] == 0
