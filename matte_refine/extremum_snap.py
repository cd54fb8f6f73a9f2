"""
Extremum snap filter ("refine mask") for the alpha channel.

Every pixel looks at the (2*radius+1)^2 window around it in the input. Pixels
below the threshold are pulled down to within ``tolerance`` of the window
minimum; the rest are pushed up to within ``tolerance`` of the window maximum.
A pixel that already is the local extremum stays put. This removes faint
halos and speckle along mask edges without touching flat regions.
"""

from __future__ import annotations

import logging
from numbers import Integral

import cv2
import numpy as np

from matte_refine.config import ALPHA_THRESHOLD, REFINE_RADIUS, SNAP_TOLERANCE
from matte_refine.errors import InvalidParameterError
from matte_refine.pixel_buffer import ALPHA, PixelBuffer, check_radius, interior

logger = logging.getLogger(__name__)


def _check_level(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral) or not 0 <= value <= 255:
        raise InvalidParameterError(f"{name} must be an integer in [0, 255], got {value!r}")
    return int(value)


def refine(buffer, width: int | None = None, height: int | None = None,
           radius: int = REFINE_RADIUS, *, threshold: int = ALPHA_THRESHOLD,
           tolerance: int = SNAP_TOLERANCE):
    """
    Snap near-extreme alpha values toward the local extremum on their side of the threshold.

    Args:
        buffer: RGBA buffer (flat bytes, flat uint8 array, or (height, width, 4) uint8 array)
        width: Image width; optional for (height, width, 4) arrays
        height: Image height; optional for (height, width, 4) arrays
        radius: Window radius. Pixels closer than this to an edge are copied unchanged.
        threshold: Alpha values below this snap toward the window minimum
        tolerance: Maximum distance from the window extremum after snapping

    Returns:
        New buffer in the caller's layout; RGB identical to the input

    Raises:
        InvalidBufferError: If the buffer is malformed
        InvalidParameterError: If a parameter is out of range
    """
    buf = PixelBuffer.wrap(buffer, width, height)
    radius = check_radius("radius", radius)
    threshold = _check_level("threshold", threshold)
    tolerance = _check_level("tolerance", tolerance)

    out = buf.pixels.copy()
    window = interior(buf, radius, "refine")
    if window is None:
        return buf.export(out)
    rows, cols = window

    # Min/max over the full window, computed from the untouched input plane.
    # Only interior results are used, so OpenCV's border extrapolation never leaks in.
    alpha = np.ascontiguousarray(buf.alpha)
    size = 2 * radius + 1
    kernel = np.ones((size, size), np.uint8)
    local_min = cv2.erode(alpha, kernel)
    local_max = cv2.dilate(alpha, kernel)

    a = alpha[rows, cols].astype(np.int16)
    lo = local_min[rows, cols].astype(np.int16) + tolerance
    hi = local_max[rows, cols].astype(np.int16) - tolerance
    snapped = np.where(a < threshold, np.minimum(a, lo), np.maximum(a, hi))

    out[rows, cols, ALPHA] = snapped.astype(np.uint8)
    logger.debug("refine: radius=%d, %d pixel(s) snapped",
                 radius, int(np.count_nonzero(snapped != a)))
    return buf.export(out)
