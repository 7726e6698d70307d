"""
Sticker and cube grid geometry.
Maps an image aspect ratio onto a sticker grid whose sides are multiples of 3.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict

CUBE_SIZE = 3


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class GridPlan:
    """Frozen grid dimensions for one mosaic run."""
    stickers_across: int
    stickers_high: int
    cubes_across: int
    cubes_down: int
    sticker_px: int = 1

    def __post_init__(self):
        """Validate multiple-of-3 invariants."""
        if self.stickers_across != self.cubes_across * CUBE_SIZE:
            raise ValueError("stickers_across must equal cubes_across * 3")
        if self.stickers_high != self.cubes_down * CUBE_SIZE:
            raise ValueError("stickers_high must equal cubes_down * 3")
        if self.sticker_px < 1:
            raise ValueError("Sticker pixel size must be at least 1")

    @property
    def mosaic_width_px(self) -> int:
        return self.stickers_across * self.sticker_px

    @property
    def mosaic_height_px(self) -> int:
        return self.stickers_high * self.sticker_px

    @property
    def total_stickers(self) -> int:
        return self.stickers_across * self.stickers_high

    @property
    def total_cubes(self) -> int:
        return self.cubes_across * self.cubes_down

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stickers_across": self.stickers_across,
            "stickers_high": self.stickers_high,
            "cubes_across": self.cubes_across,
            "cubes_down": self.cubes_down,
            "sticker_px": self.sticker_px,
            "mosaic_width_px": self.mosaic_width_px,
            "mosaic_height_px": self.mosaic_height_px,
        }


def plan_grid(image_width: int, image_height: int, cubes_across: int,
              sticker_px: int = 1) -> GridPlan:
    """
    Derive sticker and cube grid dimensions for an image.

    Args:
        image_width: Source image width in pixels
        image_height: Source image height in pixels
        cubes_across: Number of cubes along the horizontal edge (>= 1)
        sticker_px: Rendered size of one sticker in pixels

    Returns:
        GridPlan with stickers_high rounded up to the next multiple of 3
    """
    if cubes_across < 1:
        raise ValueError(f"cubes_across must be at least 1, got {cubes_across}")
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {image_width}x{image_height}")

    stickers_across = cubes_across * CUBE_SIZE
    stickers_high = round_half_up(stickers_across * image_height / image_width)
    remainder = stickers_high % CUBE_SIZE
    if remainder != 0:
        stickers_high += CUBE_SIZE - remainder

    return GridPlan(
        stickers_across=stickers_across,
        stickers_high=stickers_high,
        cubes_across=cubes_across,
        cubes_down=stickers_high // CUBE_SIZE,
        sticker_px=sticker_px,
    )
