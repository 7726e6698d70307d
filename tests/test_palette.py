import numpy as np
import pytest
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from cubemosaic.color_math import to_lab
from cubemosaic.palette import Palette, PaletteEntry, get_default_palette


def test_default_palette_order_and_colors():
    palette = get_default_palette()
    assert palette.size() == 6
    assert palette.keys == ["W", "Y", "R", "O", "B", "G"]
    assert palette.color_at(2) == (170, 16, 31)
    assert palette.key_at(4) == "B"
    assert palette.index_of("G") == 5
    assert palette.entry_at(3).name == "Orange"
    assert get_default_palette() is palette


def test_lab_values_are_precomputed_from_rgb():
    palette = get_default_palette()
    for i in range(palette.size()):
        assert palette.lab_at(i) == pytest.approx(to_lab(palette.color_at(i)))


def test_palette_rejects_empty_and_duplicate_keys():
    with pytest.raises(ValueError):
        Palette([])
    with pytest.raises(ValueError, match="Duplicate"):
        Palette.from_pairs([("A", (0, 0, 0)), ("B", (1, 1, 1)), ("A", (2, 2, 2))])


def test_palette_entry_validation():
    with pytest.raises(ValueError):
        PaletteEntry(key="WW", rgb=(255, 255, 255))
    with pytest.raises(ValueError):
        PaletteEntry(key="X", rgb=(256, 0, 0))
    with pytest.raises(ValueError):
        PaletteEntry(key="X", rgb=(0, 0))
    assert PaletteEntry(key="X", rgb=(255, 88, 0)).hex == "#ff5800"


def test_from_dict_keeps_mapping_order():
    palette = Palette.from_dict({"K": [0, 0, 0], "W": [255, 255, 255], "P": [255, 0, 255]})
    assert palette.keys == ["K", "W", "P"]
    assert palette.color_at(2) == (255, 0, 255)
    with pytest.raises(KeyError):
        palette.index_of("Z")


def test_palette_arrays_are_read_only():
    palette = get_default_palette()
    with pytest.raises(ValueError):
        palette.lab_array[0, 0] = 1.0
    with pytest.raises(ValueError):
        palette.rgb_array[0] = np.zeros(3)


def test_mapping_channels_are_validated_not_truncated():
    with pytest.raises(ValueError):
        Palette.from_dict({"X": [12.7, 0, 0]})
    with pytest.raises(ValueError):
        Palette.from_pairs([("X", ("12", 0, 0))])

    palette = Palette.from_dict({"X": [12.0, 0, 255]})
    assert palette.color_at(0) == (12, 0, 255)
    assert all(isinstance(c, int) for c in palette.color_at(0))
