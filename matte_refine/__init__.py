"""
Matte Refine

Post-processes a raw foreground/background segmentation mask into a clean,
soft-edged alpha matte.

Public API:
    - apply: Refine then smooth an RGBA buffer
    - process_matte: Generator variant yielding intermediate and final images
    - refine: Extremum snap filter on the alpha channel
    - smooth: Box-blur smoothing of the alpha channel
    - RefineParams, SmoothParams: Stage parameters
    - ProcessedMatte: Result object containing images with metadata
"""

from matte_refine.api import ProcessedMatte, RefineParams, SmoothParams, apply, process_matte
from matte_refine.box_blur import smooth
from matte_refine.errors import InvalidBufferError, InvalidParameterError, MatteError
from matte_refine.extremum_snap import refine

__version__ = "0.1.0"
__all__ = [
    "apply", "process_matte", "refine", "smooth",
    "RefineParams", "SmoothParams", "ProcessedMatte",
    "MatteError", "InvalidBufferError", "InvalidParameterError",
    "__version__",
]
