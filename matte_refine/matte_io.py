#!/usr/bin/env python3
"""
Reading and writing images for the command line tool.

OpenCV stores colour as BGR(A); the filters only touch channel 3, so the
colour order never matters here.
"""

from pathlib import Path

import cv2
import numpy as np

from matte_refine.config import OUTPUT_SUFFIX


def load_rgba(path: str) -> np.ndarray:
    """
    Load an image as a (height, width, 4) uint8 array.

    Images without an alpha channel get a fully opaque one.

    Raises:
        ValueError: If the file cannot be decoded or is not a colour image.
    """
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValueError(f"Could not load image from {path}")
    if img.dtype != np.uint8:
        raise ValueError(f"Only 8-bit images are supported, got {img.dtype}")
    if img.ndim != 3 or img.shape[2] not in (3, 4):
        raise ValueError(f"Expected a BGR or BGRA image, got shape {img.shape}")
    if img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_BGR2BGRA)
    return img


def default_output_path(input_path: str) -> Path:
    """photo.jpg -> photo_nobg.png, next to the input."""
    p = Path(input_path)
    return p.with_name(f"{p.stem}{OUTPUT_SUFFIX}.png")


def save_png(image: np.ndarray, output_path: str) -> None:
    """Save an image as lossless PNG, creating the parent directory if needed."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path.with_suffix(".png")), image):
        raise ValueError(f"Could not write image to {path}")
