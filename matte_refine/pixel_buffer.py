"""
RGBA pixel buffer handling shared by the matte filters.

A buffer arrives either as flat bytes (``width * height * 4`` of them, row-major
RGBA), as a flat uint8 array, or as an image array of shape (height, width, 4).
Filters work on the (height, width, 4) view and hand results back in whatever
layout the caller used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from numbers import Integral

import numpy as np

from matte_refine.errors import InvalidBufferError, InvalidParameterError

logger = logging.getLogger(__name__)

CHANNELS = 4
ALPHA = 3

_BYTES = "bytes"
_FLAT = "flat"
_IMAGE = "image"


def _check_dimension(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidBufferError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidBufferError(f"{name} must be positive, got {value}")
    return int(value)


@dataclass(frozen=True)
class PixelBuffer:
    """
    A validated, read-only view of a caller's RGBA buffer.

    Attributes:
        pixels: The pixel data as a (height, width, 4) uint8 array. May share
                memory with the caller's buffer, so it must not be written to.
        layout: How the caller passed the buffer in; used by ``export``.
    """
    pixels: np.ndarray
    layout: str

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, ALPHA]

    @classmethod
    def wrap(cls, buffer, width: int | None = None, height: int | None = None) -> PixelBuffer:
        """
        Validate a caller's buffer and wrap it without copying.

        Args:
            buffer: bytes-like object, 1-D uint8 array, or (height, width, 4) uint8 array
            width: Image width in pixels. Required for flat buffers.
            height: Image height in pixels. Required for flat buffers.

        Returns:
            PixelBuffer over the same memory

        Raises:
            InvalidBufferError: If the buffer cannot be a width x height RGBA image.
        """
        if isinstance(buffer, (bytes, bytearray, memoryview)):
            layout = _BYTES
            try:
                data = np.frombuffer(buffer, dtype=np.uint8)
            except (BufferError, ValueError) as e:
                raise InvalidBufferError(f"buffer must be a contiguous byte buffer: {e}") from e
        elif isinstance(buffer, np.ndarray):
            if buffer.dtype != np.uint8:
                raise InvalidBufferError(f"buffer must be uint8, got {buffer.dtype}")
            if buffer.ndim == 1:
                layout = _FLAT
            elif buffer.ndim == 3:
                layout = _IMAGE
            else:
                raise InvalidBufferError(
                    f"buffer must be flat or (height, width, 4), got shape {buffer.shape}")
            data = buffer
        else:
            raise InvalidBufferError(f"buffer must be bytes or a numpy array, got {type(buffer)}")

        if layout == _IMAGE:
            if data.shape[2] != CHANNELS:
                raise InvalidBufferError(f"buffer must have 4 (RGBA) channels, got {data.shape[2]}")
            h, w = data.shape[:2]
            if width is not None and _check_dimension("width", width) != w:
                raise InvalidBufferError(f"width {width} does not match buffer shape {data.shape}")
            if height is not None and _check_dimension("height", height) != h:
                raise InvalidBufferError(f"height {height} does not match buffer shape {data.shape}")
            _check_dimension("width", w)
            _check_dimension("height", h)
            return cls(pixels=data, layout=layout)

        if width is None or height is None:
            raise InvalidBufferError("width and height are required for a flat buffer")
        w = _check_dimension("width", width)
        h = _check_dimension("height", height)
        expected = w * h * CHANNELS
        if data.size != expected:
            raise InvalidBufferError(
                f"buffer length {data.size} != width*height*4 = {w}*{h}*4 = {expected}")
        return cls(pixels=data.reshape(h, w, CHANNELS), layout=layout)

    def export(self, pixels: np.ndarray):
        """Return ``pixels`` (height, width, 4) in the layout this buffer was given in."""
        if self.layout == _BYTES:
            return pixels.tobytes()
        if self.layout == _FLAT:
            return pixels.reshape(-1)
        return pixels


def check_radius(name: str, radius) -> int:
    """Return ``radius`` as an int, or raise InvalidParameterError."""
    if isinstance(radius, bool) or not isinstance(radius, Integral):
        raise InvalidParameterError(f"{name} must be an integer, got {radius!r}")
    if radius < 0:
        raise InvalidParameterError(f"{name} must be non-negative, got {radius}")
    return int(radius)


def interior(buf: PixelBuffer, radius: int, stage: str) -> tuple[slice, slice] | None:
    """
    Rows and columns whose (2*radius+1)^2 window lies fully inside the image.

    Returns None when no pixel qualifies, after logging a warning: the window
    is larger than the image, so the whole image is border.
    """
    size = 2 * radius + 1
    if size > min(buf.width, buf.height):
        logger.warning(
            "%s: window %dx%d does not fit a %dx%d image; every pixel is border",
            stage, size, size, buf.width, buf.height)
        return None
    return slice(radius, buf.height - radius), slice(radius, buf.width - radius)
