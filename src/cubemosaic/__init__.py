"""
Cube Mosaic Generator

Converts images into mosaics of 3x3 sticker cubes using a small fixed
palette, Lab nearest-color matching and serpentine error diffusion.
"""

__version__ = "1.0.0"

from .config import Config
from .palette import Palette, PaletteEntry, get_default_palette
from .quantize import SerpentineQuantizer, quantize
from .grid import GridPlan, plan_grid
from .mosaic import CubeRecord, to_cube_table, to_raster
from .export import ExportManager
from .generator import MosaicGenerator, MosaicResult, build_mosaic, generate_cube_mosaic
from . import cli

__all__ = [
    "Config",
    "Palette",
    "PaletteEntry",
    "get_default_palette",
    "SerpentineQuantizer",
    "quantize",
    "GridPlan",
    "plan_grid",
    "CubeRecord",
    "to_cube_table",
    "to_raster",
    "ExportManager",
    "MosaicGenerator",
    "MosaicResult",
    "build_mosaic",
    "generate_cube_mosaic",
    "cli"
]
