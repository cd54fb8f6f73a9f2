"""
Tests for the refine -> smooth pipeline.
"""

import numpy as np
import pytest

import matte_refine.api as api
from matte_refine import (InvalidBufferError, InvalidParameterError, ProcessedMatte,
                          RefineParams, SmoothParams, apply, process_matte, refine, smooth)


def make_rgba(alpha: np.ndarray, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    h, w = alpha.shape
    img = rng.integers(0, 256, size=(h, w, 4), dtype=np.uint8)
    img[:, :, 3] = alpha
    return img


def step_edge() -> np.ndarray:
    """9x9 mask: transparent left, a 100 halo column, opaque right."""
    alpha = np.zeros((9, 9), dtype=np.uint8)
    alpha[:, 4] = 100
    alpha[:, 5:] = 255
    return make_rgba(alpha)


def test_apply_is_refine_then_smooth():
    img = step_edge()
    expected = smooth(refine(img, radius=1), box_radius=2)
    np.testing.assert_array_equal(apply(img), expected)


def test_stage_order_matters():
    """Refining first snaps the halo to 40 before blurring; the reverse order lands elsewhere."""
    img = step_edge()
    out = apply(img)
    reversed_order = refine(smooth(img, box_radius=2), radius=1)
    # (0+0+40+255+255)/5 = 110
    assert out[4, 4, 3] == 110
    # blur gives 122 with a 71 neighbour, then min(122, 71 + 40) = 111
    assert reversed_order[4, 4, 3] == 111
    assert not np.array_equal(out, reversed_order)


def test_apply_is_deterministic_and_pure():
    rng = np.random.default_rng(21)
    img = rng.integers(0, 256, size=(20, 17, 4), dtype=np.uint8)
    before = img.copy()
    first = apply(img)
    second = apply(img)
    np.testing.assert_array_equal(first, second)
    np.testing.assert_array_equal(img, before)
    np.testing.assert_array_equal(first[:, :, :3], img[:, :, :3])


def test_bright_spot_pipeline():
    """7x7 of 100 with a 250 center, radius 2 for both stages."""
    alpha = np.full((7, 7), 100, dtype=np.uint8)
    alpha[3, 3] = 250
    img = make_rgba(alpha)
    refined = refine(img, radius=2)
    np.testing.assert_array_equal(refined, img)
    out = apply(img, refine_params=RefineParams(radius=2), smooth_params=SmoothParams(box_radius=2))
    assert out[3, 3, 3] == 106
    assert out[0, 0, 3] == 100


def test_apply_keeps_byte_layout():
    img = step_edge()
    out = apply(img.tobytes(), 9, 9)
    assert isinstance(out, bytes)
    assert out == apply(img).tobytes()


def test_zero_border_through_pipeline():
    img = make_rgba(np.full((8, 8), 255, dtype=np.uint8))
    out = apply(img, smooth_params=SmoothParams(border="zero"))
    assert np.all(out[0, :, 3] == 0)
    assert np.all(out[2:6, 2:6, 3] == 255)


def test_process_matte_yields_final_only():
    results = list(process_matte(step_edge()))
    assert len(results) == 1
    result = results[0]
    assert isinstance(result, ProcessedMatte)
    assert result.name == "matte"
    assert not result.is_debug
    assert result.metadata["box_radius"] == 2
    assert result.metadata["border"] == "preserve"
    assert result.metadata["stage_s"] >= 0.0


def test_process_matte_debug_yields_intermediate_first():
    img = step_edge()
    results = list(process_matte(img, debug=True))
    assert [r.name for r in results] == ["debug_refined", "matte"]
    assert [r.is_debug for r in results] == [True, False]
    np.testing.assert_array_equal(results[0].image, refine(img))
    assert results[0].metadata["radius"] == 1
    assert results[0].metadata["tolerance"] == 40


def test_refine_failure_stops_before_smoothing(monkeypatch):
    calls = []
    monkeypatch.setattr(api, "smooth", lambda *args, **kwargs: calls.append(args))
    with pytest.raises(InvalidParameterError):
        apply(step_edge(), refine_params=RefineParams(radius=-1))
    assert calls == []


def test_invalid_buffer_fails_fast():
    with pytest.raises(InvalidBufferError):
        apply(bytes(10), 2, 2)
    with pytest.raises(InvalidBufferError):
        next(process_matte(np.zeros((3, 3), dtype=np.uint8)))
