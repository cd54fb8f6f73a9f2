#!/usr/bin/env python3
"""
Public API for the matte post-processing pipeline.

A raw segmentation mask (the alpha channel of an RGBA image) is cleaned in two
fixed stages: the extremum snap filter (``refine``) followed by box-blur
smoothing (``smooth``). Colour channels pass through untouched.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Generator

import numpy as np

from matte_refine.box_blur import smooth
from matte_refine.config import (ALPHA_THRESHOLD, BORDER_POLICY, BOX_RADIUS,
                                 REFINE_RADIUS, SNAP_TOLERANCE)
from matte_refine.extremum_snap import refine
from matte_refine.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefineParams:
    """Parameters of the extremum snap stage."""
    radius: int = REFINE_RADIUS
    threshold: int = ALPHA_THRESHOLD
    tolerance: int = SNAP_TOLERANCE


@dataclass(frozen=True)
class SmoothParams:
    """Parameters of the box-blur stage."""
    box_radius: int = BOX_RADIUS
    border: str = BORDER_POLICY


@dataclass
class ProcessedMatte:
    """
    An image produced by the matte pipeline.

    Attributes:
        image: RGBA pixels as a (height, width, 4) uint8 array
        name: Stage name ("debug_refined" for the intermediate, "matte" for the result)
        is_debug: True for intermediate images, False for the final matte
        metadata: Stage parameters and the stage's wall time in seconds ("stage_s")
    """
    image: np.ndarray
    name: str
    is_debug: bool
    metadata: dict[str, float | int | str] = field(default_factory=dict)


def process_matte(
    image,
    width: int | None = None,
    height: int | None = None,
    *,
    refine_params: RefineParams | None = None,
    smooth_params: SmoothParams | None = None,
    debug: bool = False
) -> Generator[ProcessedMatte, None, None]:
    """
    Run refine then smooth on an RGBA buffer, yielding images as they are produced.

    Each stage runs exactly once and in this order; smoothing always sees the
    complete output of the refine stage.

    Args:
        image: RGBA buffer (flat bytes, flat uint8 array, or (height, width, 4) uint8 array)
        width: Image width; optional for (height, width, 4) arrays
        height: Image height; optional for (height, width, 4) arrays
        refine_params: Extremum snap parameters (defaults: radius 1, threshold 128, tolerance 40)
        smooth_params: Box-blur parameters (defaults: box radius 2, border "preserve")
        debug: If True, also yield the refined intermediate image before the final matte

    Yields:
        ProcessedMatte objects: "debug_refined" (debug only), then "matte".

    Raises:
        InvalidBufferError: If the buffer is malformed. Nothing is yielded.
        InvalidParameterError: If a stage parameter is out of range. A refine
            failure means the smoothing stage never runs.

    Example:
        >>> img = cv2.imread("cutout.png", cv2.IMREAD_UNCHANGED)
        >>> for result in process_matte(img, debug=True):
        >>>     cv2.imwrite(f"{result.name}.png", result.image)
    """
    buf = PixelBuffer.wrap(image, width, height)
    refine_params = refine_params or RefineParams()
    smooth_params = smooth_params or SmoothParams()

    t0 = time.perf_counter()
    refined = refine(buf.pixels, radius=refine_params.radius,
                     threshold=refine_params.threshold, tolerance=refine_params.tolerance)
    t1 = time.perf_counter()
    logger.debug("refine stage done in %.4fs", t1 - t0)

    if debug:
        yield ProcessedMatte(
            image=refined.copy(),
            name="debug_refined",
            is_debug=True,
            metadata={**asdict(refine_params), "stage_s": t1 - t0}
        )

    smoothed = smooth(refined, box_radius=smooth_params.box_radius,
                      border=smooth_params.border)
    t2 = time.perf_counter()
    logger.debug("smooth stage done in %.4fs", t2 - t1)

    yield ProcessedMatte(
        image=smoothed,
        name="matte",
        is_debug=False,
        metadata={**asdict(smooth_params), "stage_s": t2 - t1}
    )


def apply(buffer, width: int | None = None, height: int | None = None,
          refine_params: RefineParams | None = None,
          smooth_params: SmoothParams | None = None):
    """
    Refine and smooth the alpha channel of an RGBA buffer.

    Pure function: the caller's buffer is never modified and the same inputs
    always produce the same bytes.

    Returns:
        The final matte, in the same layout as ``buffer``
    """
    buf = PixelBuffer.wrap(buffer, width, height)
    matte = None
    for result in process_matte(buf.pixels, refine_params=refine_params,
                                smooth_params=smooth_params):
        matte = result.image
    return buf.export(matte)
