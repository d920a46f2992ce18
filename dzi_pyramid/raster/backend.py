"""
Raster operations on numpy images backed by OpenCV.

Images are numpy arrays in OpenCV layout: (H, W) for grayscale,
(H, W, 3) for BGR and (H, W, 4) for BGRA.
"""

import logging
from pathlib import Path
from typing import Tuple, Union

import cv2
import numpy as np

from ..errors import RasterDecodeError, TileWriteError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Formats that OpenCV can encode without optional codecs
SUPPORTED_FORMATS = {"png", "jpg", "jpeg", "webp", "tif", "tiff", "bmp"}


def channel_count(image: np.ndarray) -> int:
    """Number of channels of an OpenCV image."""
    if image.ndim == 2:
        return 1
    return int(image.shape[2])


def _to_color(image: np.ndarray) -> np.ndarray:
    """Convert grayscale to BGR, leave colour images untouched."""
    if channel_count(image) == 1:
        return cv2.cvtColor(image.reshape(image.shape[:2]), cv2.COLOR_GRAY2BGR)
    return image


class OpenCVRaster:
    """
    Decode, crop, resize, composite and encode raster images.

    Every operation returns a new array; inputs are never modified.

    Example:
        >>> raster = OpenCVRaster()
        >>> image = raster.read("photo.png")
        >>> tile = raster.crop(image, 0, 0, 256, 256)
        >>> raster.write(tile, "tile.png", "png")
    """

    def read(self, source: PathLike) -> np.ndarray:
        """
        Load an image from disk.

        Args:
            source: Path to the image file

        Returns:
            8-bit image array

        Raises:
            RasterDecodeError: If the file is missing or cannot be decoded
        """
        path = Path(source)
        if not path.is_file():
            raise RasterDecodeError(str(source), "image not found")

        image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if image is None:
            raise RasterDecodeError(str(source))

        if image.dtype == np.uint16:
            image = (image // 257).astype(np.uint8)
        elif image.dtype != np.uint8:
            image = cv2.convertScaleAbs(image)

        if image.ndim == 3 and image.shape[2] == 1:
            image = image[:, :, 0]

        logger.debug(f"Loaded {path} ({image.shape[1]}x{image.shape[0]})")
        return image

    def blank(
        self,
        width: int,
        height: int,
        color: Tuple[int, int, int] = (255, 255, 255),
    ) -> np.ndarray:
        """Create an opaque BGR image filled with one colour."""
        image = np.zeros((max(1, height), max(1, width), 3), dtype=np.uint8)
        image[:, :] = color
        return image

    def clone(self, image: np.ndarray) -> np.ndarray:
        """Deep copy of an image."""
        return image.copy()

    def dimensions(self, image: np.ndarray) -> Tuple[int, int]:
        """Return (width, height) of an image."""
        return int(image.shape[1]), int(image.shape[0])

    def crop(self, image: np.ndarray, x: int, y: int, dx: int, dy: int) -> np.ndarray:
        """
        Cut a region out of an image.

        The region is clipped to the image bounds, so a request that runs
        past the right or bottom edge returns a smaller image. A region
        completely outside the image returns an empty (0-sized) array.

        Args:
            image: Source image
            x: Left edge
            y: Top edge
            dx: Requested width
            dy: Requested height

        Returns:
            Copy of the clipped region
        """
        height, width = image.shape[:2]
        x1 = min(max(0, x), width)
        y1 = min(max(0, y), height)
        x2 = min(max(0, x + dx), width)
        y2 = min(max(0, y + dy), height)
        return image[y1:y2, x1:x2].copy()

    def resize(self, image: np.ndarray, width: int, height: int) -> np.ndarray:
        """
        Scale an image to exactly width x height.

        Target sizes below one pixel are clamped to one pixel.
        """
        width = max(1, int(width))
        height = max(1, int(height))

        src_height, src_width = image.shape[:2]
        if src_width == 0 or src_height == 0:
            shape = (height, width) + image.shape[2:]
            return np.zeros(shape, dtype=image.dtype)

        if width == src_width and height == src_height:
            return image.copy()

        shrinking = width < src_width and height < src_height
        interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LINEAR
        resized = cv2.resize(image, (width, height), interpolation=interpolation)

        # cv2.resize drops the channel axis of single-channel 3D arrays
        if image.ndim == 3 and resized.ndim == 2:
            resized = resized[:, :, np.newaxis]
        return resized

    def composite(
        self,
        base: np.ndarray,
        overlay: np.ndarray,
        x: int,
        y: int,
    ) -> np.ndarray:
        """
        Draw overlay over base with its top-left corner at (x, y).

        Uses the overlay's alpha channel when it has one; otherwise the
        overlay pixels replace the base pixels. Parts of the overlay that
        fall outside the base are dropped.

        Args:
            base: Background image
            overlay: Image drawn on top
            x: Left offset of overlay within base
            y: Top offset of overlay within base

        Returns:
            New composited image with the channel layout of the richer input
        """
        result = _to_color(base)
        source = _to_color(overlay)

        if channel_count(source) == 4 and channel_count(result) == 3:
            alpha = np.full(result.shape[:2] + (1,), 255, dtype=result.dtype)
            result = np.concatenate([result, alpha], axis=2)
        else:
            result = result.copy()

        base_height, base_width = result.shape[:2]
        over_height, over_width = source.shape[:2]

        x1, y1 = max(0, x), max(0, y)
        x2, y2 = min(base_width, x + over_width), min(base_height, y + over_height)
        if x1 >= x2 or y1 >= y2:
            return result

        patch = source[y1 - y:y2 - y, x1 - x:x2 - x]
        region = result[y1:y2, x1:x2]

        if channel_count(patch) == 4:
            alpha = patch[:, :, 3:4].astype(np.float32) / 255.0
            blended = patch[:, :, :3] * alpha + region[:, :, :3] * (1.0 - alpha)
            region[:, :, :3] = np.clip(np.rint(blended), 0, 255).astype(result.dtype)
            if channel_count(region) == 4:
                base_alpha = region[:, :, 3:4].astype(np.float32) / 255.0
                out_alpha = alpha + base_alpha * (1.0 - alpha)
                region[:, :, 3:4] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(result.dtype)
        else:
            region[:, :, :3] = patch[:, :, :3]
            if channel_count(region) == 4:
                region[:, :, 3] = 255

        return result

    def write(self, image: np.ndarray, path: PathLike, tile_format: str) -> None:
        """
        Encode an image and write it to disk.

        Args:
            image: Image to write
            path: Destination file (parent directory must exist)
            tile_format: Encoding, e.g. "png" or "jpg"

        Raises:
            TileWriteError: If encoding or writing fails
        """
        tile_format = tile_format.lower()
        if tile_format in ("jpg", "jpeg") and channel_count(image) == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)

        try:
            ok, buffer = cv2.imencode(f".{tile_format}", image)
        except cv2.error as e:
            raise TileWriteError(str(path), f"could not encode {tile_format}: {e}") from e
        if not ok:
            raise TileWriteError(str(path), f"could not encode {tile_format}")

        try:
            Path(path).write_bytes(buffer.tobytes())
        except OSError as e:
            raise TileWriteError(str(path), str(e)) from e
