import numpy as np
import pytest
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from cubemosaic.palette import Palette, get_default_palette
from cubemosaic.quantize import (
    SerpentineQuantizer,
    diffusion_targets,
    nearest_index,
    quantize,
)


def _black_white() -> Palette:
    return Palette.from_pairs([("K", (0, 0, 0)), ("W", (255, 255, 255))])


def _gradient(height=9, width=12) -> np.ndarray:
    xs = np.linspace(0, 255, num=width)
    ys = np.linspace(0, 255, num=height)
    r = np.tile(xs, (height, 1))
    g = np.tile(ys[:, None], (1, width))
    b = np.full((height, width), 120.0)
    return np.stack([r, g, b], axis=2).astype(np.uint8)


def test_nearest_index_ties_resolve_to_lowest_index():
    palette_lab = np.array([[50.0, 10.0, 0.0], [50.0, -10.0, 0.0]])
    assert nearest_index((50.0, 0.0, 0.0), palette_lab, 2.2) == 0
    assert nearest_index((50.0, 0.0, 0.0), palette_lab[::-1], 2.2) == 0

    twins = Palette.from_pairs([("A", (200, 30, 30)), ("B", (200, 30, 30))])
    indices = quantize(np.full((3, 3, 3), 90, dtype=np.uint8), twins, 2.2)
    assert not indices.any()


def test_luminance_weight_shifts_the_match():
    palette_lab = np.array([[70.0, 0.0, 0.0], [50.0, 25.0, 0.0]])
    assert nearest_index((50.0, 0.0, 0.0), palette_lab, 1.0) == 0
    assert nearest_index((50.0, 0.0, 0.0), palette_lab, 2.0) == 1


def test_forward_and_reverse_kernels_are_mirrored():
    forward = diffusion_targets(1, 0, 3, 2, left_to_right=True)
    assert forward == [((0, 2), 7 / 16), ((1, 0), 3 / 16), ((1, 1), 5 / 16), ((1, 2), 1 / 16)]

    reverse = diffusion_targets(1, 1, 3, 3, left_to_right=False)
    assert reverse == [((1, 0), 7 / 16), ((2, 2), 3 / 16), ((2, 1), 5 / 16), ((2, 0), 1 / 16)]


def test_edge_cells_drop_error_mass():
    width, height = 4, 2
    targets = diffusion_targets(width - 1, 0, width, height, left_to_right=True)
    assert all(0 <= tx < width for (_, tx), _ in targets)
    assert sum(weight for _, weight in targets) == pytest.approx(8 / 16)
    assert sum(weight for _, weight in targets) < 1.0

    reverse_edge = diffusion_targets(0, 1, width, 3, left_to_right=False)
    assert [pos for pos, _ in reverse_edge] == [(2, 1), (2, 0)]

    assert diffusion_targets(1, height - 1, width, height, left_to_right=True) == [((1, 2), 7 / 16)]


def test_even_rows_diffuse_rightward_and_odd_rows_leftward():
    quantizer = SerpentineQuantizer(_black_white(), 2.2)

    working = np.zeros((3, 3, 3))
    working[0, 1] = 100.0
    indices = np.zeros((3, 3), dtype=np.uint8)
    quantizer.process_row(working, indices, 0)
    assert np.all(working[0, 0] == 0.0)
    assert np.all(working[0, 2] > 0.0)
    assert np.all(working[1, 0] > 0.0)
    assert np.all(working[2] == 0.0)

    working = np.zeros((3, 3, 3))
    working[1, 1] = 100.0
    indices = np.zeros((3, 3), dtype=np.uint8)
    quantizer.process_row(working, indices, 1)
    assert np.all(working[1, 2] == 0.0)
    assert np.all(working[1, 0] > 0.0)
    assert np.all(working[2, 2] > 0.0)
    assert np.all(working[0] == 0.0)


def test_working_values_stay_unclamped_between_matches():
    only_black = Palette.from_pairs([("K", (0, 0, 0))])
    quantizer = SerpentineQuantizer(only_black, 2.2)
    working = np.full((1, 3, 3), 255.0)
    indices = np.zeros((1, 3), dtype=np.uint8)

    quantizer.process_row(working, indices, 0)

    second = 255 + 255 * 7 / 16
    assert working[0, 1, 0] == pytest.approx(second)
    assert working[0, 2, 0] == pytest.approx(255 + second * 7 / 16)


def test_quantize_is_deterministic_and_leaves_input_untouched():
    pixels = _gradient()
    before = pixels.copy()
    palette = get_default_palette()

    first = quantize(pixels, palette, 2.2)
    second = quantize(pixels, palette, 2.2)

    assert np.array_equal(pixels, before)
    assert first.shape == pixels.shape[:2]
    assert first.dtype == np.uint8
    assert np.array_equal(first, second)
    assert first.tobytes() == second.tobytes()
    assert int(first.max()) < palette.size()


def test_index_raster_is_read_only():
    indices = quantize(_gradient(3, 3), get_default_palette(), 2.2)
    assert not indices.flags.writeable
    with pytest.raises(ValueError):
        indices[0, 0] = 1


@pytest.mark.parametrize("lum_weight", [0.5, 2.2, 5.0])
def test_solid_palette_color_quantizes_exactly(lum_weight):
    pixels = np.zeros((3, 3, 3), dtype=np.uint8)
    pixels[:, :] = (170, 16, 31)
    palette = get_default_palette()
    indices = quantize(pixels, palette, lum_weight)
    assert np.all(indices == palette.index_of("R"))


def test_quantizer_rejects_non_rgb_rasters():
    with pytest.raises(ValueError):
        quantize(np.zeros((3, 3)), get_default_palette(), 2.2)


def test_alpha_channel_is_ignored():
    rgba = np.zeros((3, 3, 4), dtype=np.uint8)
    rgba[:, :] = (0, 70, 173, 10)
    indices = quantize(rgba, get_default_palette(), 2.2)
    assert np.all(indices == get_default_palette().index_of("B"))
