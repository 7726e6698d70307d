"""
Export manager for cube mosaic outputs (PNG, CSV, ZIP, JSON).
"""

import os
import csv
import io
import json
import zipfile
from datetime import datetime
from typing import Any, Dict, Optional

from PIL import Image

from . import __version__
from .config import Config
from .mosaic import CUBE_TABLE_HEADER, color_usage, cube_raster


class ExportManager:
    """Writes the rendered mosaic and its cube tables to an output directory."""

    def __init__(self, config: Config, output_dir: Optional[str] = None,
                 input_path: Optional[str] = None):
        """Initialize export manager with configuration."""
        self.config = config
        self.output_dir = output_dir or config.output_dir
        self.input_path = input_path or config.input

        os.makedirs(self.output_dir, exist_ok=True)

    def _path(self, filename: str) -> str:
        return os.path.join(self.output_dir, filename)

    def export_all(self, result) -> Dict[str, str]:
        """
        Export every artifact for a mosaic result.

        Args:
            result: MosaicResult from the generator

        Returns:
            Mapping of artifact name to written path
        """
        print(f"Exporting cube mosaic to {self.output_dir}...")

        outputs = {
            "mosaic_png": self.export_mosaic_png(result),
            "cubes_csv": self.export_cube_csv(result),
        }
        if self.config.export.save_cubes:
            outputs["cube_zip"] = self.export_cube_zip(result)
        outputs["manifest"] = self.export_manifest(result, outputs)

        print(f"[OK] Exported {len(outputs)} files")
        return outputs

    def export_mosaic_png(self, result) -> str:
        """Export rendered mosaic as PNG."""
        png_path = self._path(self.config.export.mosaic_filename)
        Image.fromarray(result.raster).save(png_path, format="PNG")
        print(f"  PNG: {os.path.basename(png_path)}")
        return png_path

    def export_cube_csv(self, result) -> str:
        """Export one row per cube: cube_x, cube_y, row0, row1, row2."""
        csv_path = self._path(self.config.export.csv_filename)

        with open(csv_path, 'w', newline='', encoding='utf-8') as csvfile:
            writer = csv.writer(csvfile, lineterminator='\n')
            writer.writerow(CUBE_TABLE_HEADER)
            for record in result.cube_table:
                writer.writerow(record.as_row())

        print(f"  CSV: {os.path.basename(csv_path)}")
        return csv_path

    def export_cube_zip(self, result) -> str:
        """Export one small PNG per cube, packed into a ZIP archive."""
        zip_path = self._path(self.config.export.zip_filename)
        plan = result.plan

        with zipfile.ZipFile(zip_path, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
            for cy in range(plan.cubes_down):
                for cx in range(plan.cubes_across):
                    raster = cube_raster(result.indices, result.palette, cx, cy, plan.sticker_px)
                    buffer = io.BytesIO()
                    Image.fromarray(raster).save(buffer, format="PNG")
                    archive.writestr(f"cube_{cx:03d}_{cy:03d}.png", buffer.getvalue())

        print(f"  ZIP: {os.path.basename(zip_path)} ({plan.total_cubes} cubes)")
        return zip_path

    def export_manifest(self, result, outputs: Dict[str, str]) -> str:
        """Export JSON manifest with grid plan, parameters and color usage."""
        json_path = self._path(self.config.export.manifest_filename)

        manifest: Dict[str, Any] = {
            'generated_at': datetime.now().isoformat(),
            'generator_version': __version__,
            'input_image': self.input_path,
            'grid': result.plan.to_dict(),
            'processing': {
                'lum_weight': result.lum_weight,
                'blur_radius': self.config.mosaic.blur_radius,
            },
            'palette': result.palette.to_dict(),
            'color_usage': color_usage(result.indices, result.palette),
            'grid_hash': result.grid_hash,
            'output_files': {
                name: os.path.basename(path) for name, path in outputs.items()
            },
        }
        manifest['output_files']['manifest'] = os.path.basename(json_path)

        with open(json_path, 'w', encoding='utf-8') as jsonfile:
            json.dump(manifest, jsonfile, indent=2, ensure_ascii=False)

        print(f"  JSON: {os.path.basename(json_path)}")
        return json_path
