"""
Batch conversion of images and documents into Deep Zoom output trees.
"""

from .runner import (
    BatchResult,
    ConversionJob,
    PyramidRunner,
    collect_files,
    jobs_from_paths,
)

__all__ = [
    "BatchResult",
    "ConversionJob",
    "PyramidRunner",
    "collect_files",
    "jobs_from_paths",
]
