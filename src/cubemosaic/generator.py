"""
Cube mosaic generator.
Wires grid planning, resampling, quantization, composition and export together.
"""

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from .config import Config
from .export import ExportManager
from .grid import GridPlan, plan_grid
from .image_io import load_image, resample_to_grid
from .mosaic import CubeRecord, color_usage, to_cube_table, to_raster
from .palette import Palette
from .quantize import SerpentineQuantizer


@dataclass
class MosaicResult:
    """Everything downstream consumers need from one quantization run."""
    indices: np.ndarray  # (stickers_high, stickers_across) palette indices
    plan: GridPlan
    palette: Palette
    lum_weight: float
    cube_table: List[CubeRecord]
    raster: np.ndarray  # rendered mosaic, uint8 RGB
    grid_hash: str

    def usage(self) -> Dict[str, int]:
        return color_usage(self.indices, self.palette)


def compute_grid_hash(indices: np.ndarray, plan: GridPlan, palette: Palette) -> str:
    """SHA-256 fingerprint of grid dimensions, palette keys and indices."""
    hash_input = (
        f"{plan.stickers_across}x{plan.stickers_high}|"
        f"{''.join(palette.keys)}|"
        f"{np.ascontiguousarray(indices).tobytes().hex()}"
    )
    return hashlib.sha256(hash_input.encode()).hexdigest()[:16]


def build_mosaic(pixels: np.ndarray, plan: GridPlan, palette: Palette,
                 lum_weight: float) -> MosaicResult:
    """
    Quantize a sticker-resolution raster and compose its outputs in memory.

    Args:
        pixels: (stickers_high, stickers_across, 3) RGB raster
        plan: Grid plan the raster was resampled to
        palette: Sticker palette
        lum_weight: Luminance weighting for palette matching

    Returns:
        MosaicResult
    """
    pixels = np.asarray(pixels)
    if pixels.shape[:2] != (plan.stickers_high, plan.stickers_across):
        raise ValueError(
            f"Raster is {pixels.shape[1]}x{pixels.shape[0]}, "
            f"plan expects {plan.stickers_across}x{plan.stickers_high}"
        )

    indices = SerpentineQuantizer(palette, lum_weight).quantize(pixels)
    return MosaicResult(
        indices=indices,
        plan=plan,
        palette=palette,
        lum_weight=lum_weight,
        cube_table=to_cube_table(indices, palette, plan.cubes_across, plan.cubes_down),
        raster=to_raster(indices, palette, plan.sticker_px),
        grid_hash=compute_grid_hash(indices, plan, palette),
    )


class MosaicGenerator:
    """Turns an image file into a cube mosaic and its export files."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize generator with configuration."""
        self.config = config or Config()
        self.config.validate()
        self.palette = self.config.build_palette()

    def generate(self, image_path: str, output_dir: Optional[str] = None) -> Dict[str, Any]:
        """
        Generate a cube mosaic.

        Args:
            image_path: Path to input image
            output_dir: Output directory, defaults to config.output_dir

        Returns:
            Dict with the MosaicResult, written outputs and metadata
        """
        settings = self.config.mosaic
        output_dir = output_dir or self.config.output_dir

        print(f"Generating cube mosaic from {image_path}...")
        image = load_image(image_path)
        print(f"Loaded {image.width}x{image.height}px")

        plan = plan_grid(image.width, image.height, settings.cubes_across, settings.sticker_px)
        if plan.stickers_high == 0:
            raise ValueError(
                f"Image {image.width}x{image.height} is too wide for "
                f"{settings.cubes_across} cubes across"
            )
        print(f"Target stickers: {plan.stickers_across}x{plan.stickers_high} "
              f"-> cubes: {plan.cubes_across}x{plan.cubes_down}")

        pixels = resample_to_grid(image, plan, settings.blur_radius)
        result = build_mosaic(pixels, plan, self.palette, settings.lum_weight)

        outputs = ExportManager(self.config, output_dir, image_path).export_all(result)

        metadata = {
            "source_size": [image.width, image.height],
            "grid": plan.to_dict(),
            "lum_weight": settings.lum_weight,
            "blur_radius": settings.blur_radius,
            "palette_keys": self.palette.keys,
            "color_usage": result.usage(),
            "grid_hash": result.grid_hash,
        }

        print(f"Done. Mosaic size: {plan.mosaic_width_px}x{plan.mosaic_height_px}px. "
              f"Cubes: {plan.cubes_across}x{plan.cubes_down}.")

        return {
            "result": result,
            "outputs": outputs,
            "metadata": metadata,
        }


def generate_cube_mosaic(image_path: str, output_dir: str,
                         cubes_across: int = 20, sticker_px: int = 12,
                         blur_radius: float = 0.0, lum_weight: float = 2.2,
                         save_cubes: bool = False) -> Dict[str, Any]:
    """
    Convenience function to generate a cube mosaic with the standard palette.

    Returns:
        Generation results (see MosaicGenerator.generate)
    """
    config = Config(output_dir=output_dir)
    config.mosaic.cubes_across = cubes_across
    config.mosaic.sticker_px = sticker_px
    config.mosaic.blur_radius = blur_radius
    config.mosaic.lum_weight = lum_weight
    config.export.save_cubes = save_cubes
    return MosaicGenerator(config).generate(image_path, output_dir)
