"""
Batch conversion of images and documents into Deep Zoom trees.

Each conversion is an explicit job pairing its source image(s) with the
name and directory of its output.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..config.pyramid_config import PyramidConfig
from ..errors import PyramidError
from ..pyramid.canvas import Canvas
from ..pyramid.document import build_document
from ..pyramid.overlay import stretch_overlays
from ..pyramid.sinks import FileTileSink
from ..raster.backend import OpenCVRaster

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".tiff", ".tif", ".webp"}


@dataclass
class ConversionJob:
    """
    One Deep Zoom image to produce.

    Attributes:
        sources: Input image paths (several pages in document mode)
        prefix: Output name; writes <prefix>.xml and <prefix>_files/
        output_dir: Directory receiving the descriptor and tile tree
        document: Lay the sources out as pages of one document
        stretch: Magnification of a single image (1 = native size)
        columns: Pages per row in document mode (None = near-square)
    """
    sources: List[str]
    prefix: str
    output_dir: str = "."
    document: bool = False
    stretch: float = 1
    columns: Optional[int] = None

    def __post_init__(self):
        """Validate job."""
        if not self.sources:
            raise ValueError("a conversion job needs at least one source")
        if not self.document and len(self.sources) != 1:
            raise ValueError(
                f"a single-image job takes exactly one source, got {len(self.sources)}"
            )
        if not self.prefix or "/" in self.prefix:
            raise ValueError(f"prefix must be a non-empty name without slashes, got {self.prefix!r}")
        if self.stretch < 1:
            raise ValueError(f"stretch must be >= 1, got {self.stretch}")
        if self.document and self.stretch != 1:
            raise ValueError("stretch cannot be combined with document mode")
        if self.columns is not None and self.columns < 1:
            raise ValueError(f"columns must be >= 1, got {self.columns}")

    @property
    def descriptor_path(self) -> Path:
        """Where the XML descriptor is written."""
        return Path(self.output_dir) / f"{self.prefix}.xml"

    @property
    def tiles_path(self) -> Path:
        """Root of the tile tree."""
        return Path(self.output_dir) / f"{self.prefix}_files"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "sources": self.sources,
            "prefix": self.prefix,
            "output_dir": self.output_dir,
            "document": self.document,
            "stretch": self.stretch,
            "columns": self.columns,
        }


@dataclass
class BatchResult:
    """Result of batch conversion."""
    total_jobs: int
    successful: int
    failed: int
    total_time_ms: float
    results: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_jobs": self.total_jobs,
            "successful": self.successful,
            "failed": self.failed,
            "total_time_ms": self.total_time_ms,
            "success_rate": self.successful / self.total_jobs if self.total_jobs > 0 else 0,
            "results": self.results,
            "errors": self.errors,
        }


def collect_files(paths: List[str], recursive: bool = False) -> List[str]:
    """
    Expand files and directories into a sorted list of image files.

    Args:
        paths: Image files or directories
        recursive: Search directories recursively

    Returns:
        Image paths; explicitly named files are kept whatever their suffix
    """
    files = []
    for path in paths:
        p = Path(path)
        if p.is_dir():
            pattern = "**/*" if recursive else "*"
            files.extend(
                str(f) for f in p.glob(pattern)
                if f.is_file() and f.suffix.lower() in SUPPORTED_EXTENSIONS
            )
        else:
            files.append(str(p))

    return sorted(set(files))


def jobs_from_paths(
    paths: List[str],
    output_dir: str = ".",
    prefix: Optional[str] = None,
    document: bool = False,
    stretch: float = 1,
    columns: Optional[int] = None,
) -> List[ConversionJob]:
    """
    Pair input images with their outputs.

    Without document mode every image becomes its own job named after
    the file stem (or prefix, which is then only allowed for a single
    image). In document mode all images become pages of one job.

    Returns:
        List of ConversionJob
    """
    if document:
        return [ConversionJob(
            sources=list(paths),
            prefix=prefix or "document",
            output_dir=output_dir,
            document=True,
            stretch=stretch,
            columns=columns,
        )]

    if prefix is not None and len(paths) > 1:
        raise ValueError("prefix can only be given for a single input image")

    return [
        ConversionJob(
            sources=[path],
            prefix=prefix or Path(path).stem,
            output_dir=output_dir,
            stretch=stretch,
        )
        for path in paths
    ]


class PyramidRunner:
    """
    Runs conversion jobs, writing descriptors and tile trees.

    Example:
        >>> runner = PyramidRunner(PyramidConfig(tile_format="jpg"))
        >>> result = runner.run_batch(jobs_from_paths(["map.png"], "out"))
        >>> print(f"Converted {result.successful}/{result.total_jobs}")
    """

    def __init__(
        self,
        config: Optional[PyramidConfig] = None,
        raster: Optional[OpenCVRaster] = None,
        descriptor_only: bool = False,
        progress_callback: Optional[Callable[[int, int, ConversionJob], None]] = None,
    ):
        """
        Initialize runner.

        Args:
            config: Tile geometry and format
            raster: Raster backend
            descriptor_only: Write only the XML descriptor, no tiles
            progress_callback: Callback for progress updates (current, total, job)
        """
        self.config = config or PyramidConfig()
        self.raster = raster or OpenCVRaster()
        self.descriptor_only = descriptor_only
        self.progress_callback = progress_callback

    def build_canvas(self, job: ConversionJob) -> Canvas:
        """
        Load a job's sources and assemble its canvas.

        Raises:
            RasterDecodeError: If a source cannot be read
        """
        images = [self.raster.read(source) for source in job.sources]

        if job.document:
            layout = build_document(
                images,
                raster=self.raster,
                columns=job.columns,
                background=self.config.background,
            )
            logger.info(
                f"{job.prefix}: {len(images)} pages on a "
                f"{layout.columns}x{layout.rows} grid, squeeze {layout.squeeze}"
            )
            image, overlays = layout.sheet, layout.overlays
        else:
            image = images[0]
            overlays = stretch_overlays(image, job.stretch, raster=self.raster)

        return Canvas(
            image,
            overlays=overlays,
            config=self.config,
            raster=self.raster,
            logger=logger,
        )

    def run_job(self, job: ConversionJob) -> Dict[str, Any]:
        """
        Convert one job.

        Returns:
            Dictionary describing the written output

        Raises:
            PyramidError: If a source cannot be read or a tile cannot be written
            OSError: If an output directory cannot be created
        """
        start_time = time.time()
        canvas = self.build_canvas(job)

        Path(job.output_dir).mkdir(parents=True, exist_ok=True)
        job.descriptor_path.write_text(canvas.descriptor(), encoding="utf-8")
        logger.info(f"Descriptor written to: {job.descriptor_path}")

        output: Dict[str, Any] = {
            "job": job.to_dict(),
            "descriptor": str(job.descriptor_path),
        }
        if not self.descriptor_only:
            sink = FileTileSink(
                job.tiles_path,
                self.config.tile_format,
                raster=self.raster,
                logger=logger,
            )
            summary = canvas.iterate(sink)
            output["tiles"] = str(job.tiles_path)
            output["summary"] = summary.to_dict()
            logger.info(f"{job.prefix}: {summary.total_tiles} tiles in {job.tiles_path}")

        output["processing_time_ms"] = (time.time() - start_time) * 1000
        return output

    def run_batch(self, jobs: List[ConversionJob]) -> BatchResult:
        """
        Convert jobs one after another.

        A failing job is recorded and the remaining jobs still run.

        Returns:
            BatchResult with aggregated results
        """
        start_time = time.time()
        results = []
        errors = []

        for i, job in enumerate(jobs):
            if self.progress_callback:
                self.progress_callback(i + 1, len(jobs), job)

            try:
                results.append(self.run_job(job))
            except (PyramidError, OSError) as e:
                logger.error(f"Error converting {job.prefix}: {e}")
                errors.append({
                    "job": job.to_dict(),
                    "errors": [str(e)],
                })

        total_time = (time.time() - start_time) * 1000

        return BatchResult(
            total_jobs=len(jobs),
            successful=len(results),
            failed=len(errors),
            total_time_ms=total_time,
            results=results,
            errors=errors,
        )
