"""
Box-blur smoothing of the alpha channel ("alpha matte smoothing").

Each interior pixel's alpha becomes the unweighted mean of its
(2*box_radius+1)^2 window, computed from the original alpha plane. The mean
is held at single precision and rounded half-up, matching the original web
tool's Float32Array + Math.round output exactly.
"""

from __future__ import annotations

import logging

import numpy as np

from matte_refine.config import BORDER_POLICIES, BORDER_POLICY, BORDER_ZERO, BOX_RADIUS
from matte_refine.errors import InvalidParameterError
from matte_refine.pixel_buffer import ALPHA, PixelBuffer, check_radius, interior

logger = logging.getLogger(__name__)


def window_sums(alpha: np.ndarray, radius: int) -> np.ndarray:
    """
    Sum of every full (2*radius+1)^2 window in ``alpha``, via a summed-area table.

    Returns an int64 array of shape (height - 2*radius, width - 2*radius);
    entry [i, j] is the sum of the window centered at (i + radius, j + radius).
    """
    k = 2 * radius + 1
    h, w = alpha.shape
    sat = np.zeros((h + 1, w + 1), dtype=np.int64)
    sat[1:, 1:] = np.cumsum(np.cumsum(alpha, axis=0, dtype=np.int64), axis=1)
    return sat[k:, k:] - sat[:-k, k:] - sat[k:, :-k] + sat[:-k, :-k]


def smooth(buffer, width: int | None = None, height: int | None = None,
           box_radius: int = BOX_RADIUS, *, border: str = BORDER_POLICY):
    """
    Replace each interior pixel's alpha with the mean alpha of its window.

    Args:
        buffer: RGBA buffer (flat bytes, flat uint8 array, or (height, width, 4) uint8 array)
        width: Image width; optional for (height, width, 4) arrays
        height: Image height; optional for (height, width, 4) arrays
        box_radius: Window radius. 0 leaves the image unchanged.
        border: What happens to pixels closer than ``box_radius`` to an edge:
                "preserve" keeps their alpha, "zero" makes them fully
                transparent (the original tool's behavior).

    Returns:
        New buffer in the caller's layout; RGB identical to the input

    Raises:
        InvalidBufferError: If the buffer is malformed
        InvalidParameterError: If box_radius is negative or border is unknown
    """
    buf = PixelBuffer.wrap(buffer, width, height)
    box_radius = check_radius("box_radius", box_radius)
    if border not in BORDER_POLICIES:
        raise InvalidParameterError(f"border must be one of {BORDER_POLICIES}, got {border!r}")

    plane = buf.alpha.astype(np.float32)
    blurred = np.zeros_like(plane) if border == BORDER_ZERO else plane.copy()

    window = interior(buf, box_radius, "smooth")
    if window is not None:
        rows, cols = window
        size = (2 * box_radius + 1) ** 2
        blurred[rows, cols] = window_sums(buf.alpha, box_radius) / size

    out = buf.pixels.copy()
    # floor(x + 0.5) == Math.round for non-negative x
    out[:, :, ALPHA] = np.floor(blurred.astype(np.float64) + 0.5).astype(np.uint8)
    logger.debug("smooth: box_radius=%d, border=%s", box_radius, border)
    return buf.export(out)
