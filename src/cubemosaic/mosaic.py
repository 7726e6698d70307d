"""
Mosaic composition from an index raster: rendered pixels and per-cube tables.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from .grid import CUBE_SIZE
from .palette import Palette

CUBE_TABLE_HEADER = ("cube_x", "cube_y", "row0", "row1", "row2")


@dataclass(frozen=True)
class CubeRecord:
    """Sticker keys of one 3x3 cube, one string per row."""
    cube_x: int
    cube_y: int
    row0: str
    row1: str
    row2: str

    @property
    def rows(self) -> Tuple[str, str, str]:
        return self.row0, self.row1, self.row2

    def as_row(self) -> list:
        """CSV row in header order."""
        return [self.cube_x, self.cube_y, self.row0, self.row1, self.row2]


def _palette_lut(palette: Palette) -> np.ndarray:
    return np.array([palette.color_at(i) for i in range(palette.size())], dtype=np.uint8)


def to_raster(indices: np.ndarray, palette: Palette, sticker_px: int,
              with_alpha: bool = False) -> np.ndarray:
    """
    Render each sticker as a solid sticker_px x sticker_px block.

    Returns:
        uint8 array of shape (H*s, W*s, 3), or (H*s, W*s, 4) with opaque
        alpha when with_alpha is set
    """
    if sticker_px < 1:
        raise ValueError("Sticker pixel size must be at least 1")

    stickers = _palette_lut(palette)[np.asarray(indices)]
    raster = np.repeat(np.repeat(stickers, sticker_px, axis=0), sticker_px, axis=1)

    if with_alpha:
        alpha = np.full(raster.shape[:2] + (1,), 255, dtype=np.uint8)
        raster = np.concatenate([raster, alpha], axis=2)
    return raster


def cube_keys(indices: np.ndarray, palette: Palette, cube_x: int, cube_y: int) -> List[str]:
    """Three row strings of palette keys for one cube."""
    sy, sx = cube_y * CUBE_SIZE, cube_x * CUBE_SIZE
    block = np.asarray(indices)[sy:sy + CUBE_SIZE, sx:sx + CUBE_SIZE]
    return ["".join(palette.key_at(int(i)) for i in row) for row in block]


def to_cube_table(indices: np.ndarray, palette: Palette,
                  cubes_across: int, cubes_down: int) -> List[CubeRecord]:
    """Per-cube key table, cube rows outer and cube columns inner."""
    table = []
    for cy in range(cubes_down):
        for cx in range(cubes_across):
            row0, row1, row2 = cube_keys(indices, palette, cx, cy)
            table.append(CubeRecord(cx, cy, row0, row1, row2))
    return table


def cube_raster(indices: np.ndarray, palette: Palette, cube_x: int, cube_y: int,
                sticker_px: int) -> np.ndarray:
    """Render a single cube as a (3*s, 3*s, 3) raster."""
    sy, sx = cube_y * CUBE_SIZE, cube_x * CUBE_SIZE
    block = np.asarray(indices)[sy:sy + CUBE_SIZE, sx:sx + CUBE_SIZE]
    return to_raster(block, palette, sticker_px)


def color_usage(indices: np.ndarray, palette: Palette) -> Dict[str, int]:
    """Sticker count per palette key, in palette order."""
    counts = np.bincount(np.asarray(indices).ravel(), minlength=palette.size())
    return {palette.key_at(i): int(counts[i]) for i in range(palette.size())}
