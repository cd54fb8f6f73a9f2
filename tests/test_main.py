"""
End-to-end tests for the matte-refine command line tool.
"""

import cv2
import numpy as np
from click.testing import CliRunner

from matte_refine import apply
from matte_refine.main import main
from matte_refine.matte_io import default_output_path, load_rgba


def write_cutout(path) -> np.ndarray:
    """Write a 12x10 BGRA cutout with a soft-edged square and return it."""
    img = np.zeros((10, 12, 4), dtype=np.uint8)
    img[:, :, 0] = 40
    img[:, :, 1] = 120
    img[:, :, 2] = 200
    img[2:8, 3:9, 3] = 255
    img[2:8, 2, 3] = 90
    img[5, 5, 3] = 180
    assert cv2.imwrite(str(path), img)
    return img


def test_default_output_path():
    assert default_output_path("shots/photo.jpg").as_posix() == "shots/photo_nobg.png"


def test_cli_writes_matte(tmp_path):
    input_path = tmp_path / "cutout.png"
    img = write_cutout(input_path)

    result = CliRunner().invoke(main, [str(input_path)])
    assert result.exit_code == 0, result.output

    out_path = tmp_path / "cutout_nobg.png"
    assert out_path.exists()
    out = cv2.imread(str(out_path), cv2.IMREAD_UNCHANGED)
    np.testing.assert_array_equal(out, apply(img))
    assert "Matte saved" in result.output


def test_cli_options_and_debug(tmp_path):
    input_path = tmp_path / "cutout.png"
    img = write_cutout(input_path)
    out_path = tmp_path / "out" / "matte.png"

    result = CliRunner().invoke(main, [
        str(input_path), str(out_path), "-r", "2", "-b", "1", "--border", "zero", "--debug"])
    assert result.exit_code == 0, result.output

    out = cv2.imread(str(out_path), cv2.IMREAD_UNCHANGED)
    assert np.all(out[0, :, 3] == 0)
    assert (tmp_path / "out" / "debug" / "debug_refined.png").exists()
    np.testing.assert_array_equal(out[:, :, :3], img[:, :, :3])


def test_cli_adds_alpha_to_bgr(tmp_path):
    input_path = tmp_path / "photo.png"
    bgr = np.full((6, 6, 3), 77, dtype=np.uint8)
    assert cv2.imwrite(str(input_path), bgr)

    assert load_rgba(str(input_path)).shape == (6, 6, 4)
    result = CliRunner().invoke(main, [str(input_path)])
    assert result.exit_code == 0, result.output
    out = cv2.imread(str(tmp_path / "photo_nobg.png"), cv2.IMREAD_UNCHANGED)
    assert out.shape == (6, 6, 4)
    assert np.all(out[:, :, 3] == 255)


def test_cli_rejects_unreadable_image(tmp_path):
    input_path = tmp_path / "broken.png"
    input_path.write_text("not an image")
    result = CliRunner().invoke(main, [str(input_path)])
    assert result.exit_code == 1
    assert "Could not load image" in result.output


def test_cli_rejects_negative_radius(tmp_path):
    input_path = tmp_path / "cutout.png"
    write_cutout(input_path)
    result = CliRunner().invoke(main, [str(input_path), "-r", "-1"])
    assert result.exit_code == 2


def test_cli_reports_unwritable_output(tmp_path):
    """An output directory that is really a file gives an error message, not a traceback."""
    input_path = tmp_path / "cutout.png"
    write_cutout(input_path)
    blocker = tmp_path / "blk"
    blocker.write_text("regular file")

    result = CliRunner().invoke(main, [str(input_path), str(blocker / "out.png")])
    assert result.exit_code == 1
    assert "Error saving matte" in result.output
    assert isinstance(result.exception, SystemExit)
