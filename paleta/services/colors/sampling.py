"""
Pixel sampling for dominant color extraction.

Reduces a dense decoded image to a strided working set of opaque RGB pixels and
keeps the (x, y) source coordinate of every sample for position resolution.
"""

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from loguru import logger

from paleta.config import config


@dataclass(frozen=True)
class PixelSample:
    """Strided pixel sample of one image."""
    pixels: np.ndarray     # (N, 3) int64 RGB
    positions: np.ndarray  # (N, 2) int64 (x, y)
    width: int
    height: int
    stride: int

    @property
    def count(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.count == 0


def image_from_rgba_bytes(data: Union[bytes, bytearray, memoryview, np.ndarray],
                          width: int, height: int) -> np.ndarray:
    """
    Reshape a flat RGBA buffer (canvas ImageData layout) into an image array.

    Args:
        data: Row-major RGBA bytes, 4 per pixel
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        Read-only (height, width, 4) uint8 array

    Raises:
        ValueError: If the buffer length does not match width * height * 4
    """
    if width < 0 or height < 0:
        raise ValueError(f"Invalid image dimensions: {width}x{height}")

    if isinstance(data, np.ndarray):
        flat = np.asarray(data, dtype=np.uint8).reshape(-1)
    else:
        flat = np.frombuffer(bytes(data), dtype=np.uint8)

    expected = width * height * 4
    if flat.size != expected:
        raise ValueError(
            f"RGBA buffer length mismatch: got {flat.size} bytes, "
            f"expected {expected} for {width}x{height}"
        )

    image = flat.reshape(height, width, 4)
    image.flags.writeable = False
    return image


def validate_image_array(image: np.ndarray) -> np.ndarray:
    """Ensure the image is a (H, W, 3|4) array of 0-255 channel values."""
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(
            f"Expected image array of shape (height, width, 3|4), got {image.shape}"
        )
    return image


def composite_over_white(image: np.ndarray) -> np.ndarray:
    """
    Flatten RGBA onto an opaque white background.

    Each channel becomes c*a/255 + 255*(1 - a/255), rounded half-up, so
    transparent regions read as white instead of their hidden RGB values.
    Three-channel images are returned as int64 RGB unchanged.
    """
    rgb = image[..., :3].astype(np.int64)
    if image.shape[-1] != 4:
        return rgb

    alpha = image[..., 3:4].astype(np.float64) / 255.0
    blended = rgb * alpha + 255.0 * (1.0 - alpha)
    return np.floor(blended + 0.5).astype(np.int64)


def effective_stride(width: int, height: int, stride: int, min_samples: int) -> int:
    """
    Largest stride not above `stride` that still yields `min_samples` samples.

    Large images keep the configured stride; small images fall back toward
    sampling every pixel so clustering has enough data to work with.
    """
    stride = max(1, stride)
    while stride > 1:
        count = -(-width // stride) * -(-height // stride)
        if count >= min_samples:
            break
        stride -= 1
    return stride


def sample_pixels(image: np.ndarray, stride: Optional[int] = None,
                  min_samples: Optional[int] = None) -> PixelSample:
    """
    Sample every `stride`-th pixel of every `stride`-th row.

    Args:
        image: Decoded image, shape (height, width, 3|4); RGBA is
            composited over white
        stride: Sampling step in both axes, defaults to PALETA_SAMPLE_STRIDE
        min_samples: Sample count below which the stride is reduced

    Returns:
        PixelSample with pixels and their source positions in row-major order
    """
    image = validate_image_array(image)
    height, width = int(image.shape[0]), int(image.shape[1])

    stride = effective_stride(
        width, height,
        config.SAMPLE_STRIDE if stride is None else stride,
        config.MIN_SAMPLES if min_samples is None else min_samples
    )

    ys = np.arange(0, height, stride)
    xs = np.arange(0, width, stride)
    grid_y, grid_x = np.meshgrid(ys, xs, indexing="ij")

    pixels = composite_over_white(image[::stride, ::stride]).reshape(-1, 3)
    positions = np.stack([grid_x.reshape(-1), grid_y.reshape(-1)], axis=1).astype(np.int64)

    logger.debug(f"Sampled {pixels.shape[0]} pixels from {width}x{height} image (stride={stride})")

    return PixelSample(
        pixels=pixels,
        positions=positions,
        width=width,
        height=height,
        stride=stride
    )
