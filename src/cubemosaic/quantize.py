"""
Serpentine Floyd-Steinberg quantization to a fixed sticker palette.

Each sticker is matched to the palette entry with the smallest
luminance-weighted Lab distance, and the RGB error of that choice is pushed
onto neighbours that have not been visited yet. Even rows run left to right,
odd rows right to left, with the diffusion kernel mirrored to follow the
direction of travel.
"""

from typing import List, Optional, Tuple

import numpy as np

from .color_math import to_lab
from .palette import Palette, get_default_palette

DEFAULT_LUM_WEIGHT = 2.2

# (row offset, column offset in scan direction, weight)
FS_KERNEL: Tuple[Tuple[int, int, float], ...] = (
    (0, 1, 7 / 16),
    (1, -1, 3 / 16),
    (1, 0, 5 / 16),
    (1, 1, 1 / 16),
)

Target = Tuple[Tuple[int, int], float]


def nearest_index(lab: Tuple[float, float, float], palette_lab: np.ndarray,
                  lum_weight: float = DEFAULT_LUM_WEIGHT) -> int:
    """
    Index of the palette Lab row closest to ``lab``.

    Squared distance is (w*dL)^2 + da^2 + db^2. Entries are scanned in
    ascending order with a strict comparison, so ties go to the lowest index.
    """
    L, a, b = lab
    best_idx = 0
    best_d = float("inf")
    for i in range(len(palette_lab)):
        dL = (palette_lab[i][0] - L) * lum_weight
        da = palette_lab[i][1] - a
        db = palette_lab[i][2] - b
        d2 = dL * dL + da * da + db * db
        if d2 < best_d:
            best_d = d2
            best_idx = i
    return best_idx


def diffusion_targets(x: int, y: int, width: int, height: int,
                      left_to_right: bool) -> List[Target]:
    """
    Neighbours of (y, x) that receive quantization error, with their weights.

    Column offsets are mirrored for right-to-left rows. Targets outside the
    grid are dropped, so edge cells diffuse less than the full error.
    """
    step = 1 if left_to_right else -1
    targets = []
    for dy, dx, weight in FS_KERNEL:
        ty = y + dy
        tx = x + dx * step
        if ty >= height or tx < 0 or tx >= width:
            continue
        targets.append(((ty, tx), weight))
    return targets


class SerpentineQuantizer:
    """Maps an RGB raster to palette indices with serpentine error diffusion."""

    def __init__(self, palette: Optional[Palette] = None,
                 lum_weight: float = DEFAULT_LUM_WEIGHT):
        """Initialize quantizer with a palette and luminance weight."""
        self.palette = palette or get_default_palette()
        self.lum_weight = float(lum_weight)

    @staticmethod
    def new_working_buffer(pixels: np.ndarray) -> np.ndarray:
        """Float64 copy of the first three channels; the input is never touched."""
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] < 3:
            raise ValueError(f"Expected an (H, W, 3) raster, got shape {pixels.shape}")
        return pixels[:, :, :3].astype(np.float64, copy=True)

    def index_dtype(self):
        return np.uint8 if self.palette.size() <= 256 else np.uint16

    def process_row(self, working: np.ndarray, indices: np.ndarray, y: int) -> None:
        """
        Quantize row ``y`` of ``working`` in place, writing into ``indices``.

        Matching reads a clamped copy of each pixel; the stored working value
        stays unclamped and keeps accumulating error.
        """
        height, width = working.shape[:2]
        left_to_right = (y % 2 == 0)
        xs = range(width) if left_to_right else range(width - 1, -1, -1)
        palette_lab = self.palette.lab_array
        palette_rgb = self.palette.rgb_array

        for x in xs:
            pixel = working[y, x]
            best_idx = nearest_index(to_lab(pixel), palette_lab, self.lum_weight)
            indices[y, x] = best_idx

            err = pixel - palette_rgb[best_idx]
            for (ty, tx), weight in diffusion_targets(x, y, width, height, left_to_right):
                working[ty, tx] += err * weight

    def quantize(self, pixels: np.ndarray) -> np.ndarray:
        """
        Quantize an (H, W, 3) RGB raster.

        Args:
            pixels: Source raster, 0-255 scale. Borrowed read-only.

        Returns:
            Read-only (H, W) index raster into the palette
        """
        working = self.new_working_buffer(pixels)
        height, width = working.shape[:2]
        indices = np.zeros((height, width), dtype=self.index_dtype())

        for y in range(height):
            self.process_row(working, indices, y)

        indices.flags.writeable = False
        return indices


def quantize(pixels: np.ndarray, palette: Optional[Palette] = None,
             lum_weight: float = DEFAULT_LUM_WEIGHT) -> np.ndarray:
    """Quantize ``pixels`` to ``palette`` indices (see SerpentineQuantizer)."""
    return SerpentineQuantizer(palette, lum_weight).quantize(pixels)
