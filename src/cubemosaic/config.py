"""
Configuration management for the cube mosaic generator.
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .palette import CUBE_PALETTE_NAMES, CUBE_PALETTE_PAIRS, Palette, get_default_palette


@dataclass
class MosaicConfig:
    """Grid and quantization parameters."""
    cubes_across: int = 20
    sticker_px: int = 12
    blur_radius: float = 0.0
    lum_weight: float = 2.2


@dataclass
class PaletteConfig:
    """Palette override. Empty means the standard six cube colors."""
    colors: Dict[str, List[int]] = field(default_factory=dict)


@dataclass
class ExportConfig:
    """Export configuration."""
    save_cubes: bool = False
    mosaic_filename: str = "mosaic.png"
    csv_filename: str = "cubes_map.csv"
    zip_filename: str = "cube_images.zip"
    manifest_filename: str = "mosaic_manifest.json"


@dataclass
class Config:
    """Main configuration class."""
    # File paths
    input: str = ""
    output_dir: str = "out"
    config_file: Optional[str] = None

    # Component configurations
    mosaic: MosaicConfig = field(default_factory=MosaicConfig)
    palette: PaletteConfig = field(default_factory=PaletteConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    @classmethod
    def from_yaml(cls, config_path: str, **overrides) -> "Config":
        """Load configuration from YAML file with optional overrides."""
        if not os.path.exists(config_path):
            # Return default config if file doesn't exist
            config = cls()
            config.config_file = config_path
        else:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}

            config = cls(
                input=data.get('input', ''),
                output_dir=data.get('output_dir', 'out'),
                config_file=config_path,
                mosaic=MosaicConfig(**data.get('mosaic', {})),
                palette=PaletteConfig(**data.get('palette', {})),
                export=ExportConfig(**data.get('export', {}))
            )

        # Apply CLI overrides, skipping unset values
        for key, value in overrides.items():
            if value is None:
                continue
            if hasattr(config, key):
                setattr(config, key, value)
            elif hasattr(config.mosaic, key):
                setattr(config.mosaic, key, value)
            elif hasattr(config.palette, key):
                setattr(config.palette, key, value)
            elif hasattr(config.export, key):
                setattr(config.export, key, value)
            else:
                raise ValueError(f"Unknown configuration option '{key}'")

        config.validate()
        return config

    def validate(self):
        """Validate configuration parameters."""
        for name in ("cubes_across", "sticker_px"):
            value = getattr(self.mosaic, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")

        if self.mosaic.cubes_across < 1:
            raise ValueError("Cubes across must be at least 1")

        if self.mosaic.sticker_px < 1:
            raise ValueError("Sticker pixel size must be at least 1")

        if self.mosaic.blur_radius < 0:
            raise ValueError("Blur radius must be non-negative")

        if self.mosaic.lum_weight <= 0:
            raise ValueError("Luminance weight must be positive")

        # Fails fast on empty or duplicate-key palettes
        self.build_palette()

    def build_palette(self) -> Palette:
        """Palette described by this configuration."""
        if not self.palette.colors:
            return get_default_palette()
        return Palette.from_dict(self.palette.colors)

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return {
            'input': self.input,
            'output_dir': self.output_dir,
            'mosaic': {
                'cubes_across': self.mosaic.cubes_across,
                'sticker_px': self.mosaic.sticker_px,
                'blur_radius': self.mosaic.blur_radius,
                'lum_weight': self.mosaic.lum_weight
            },
            'palette': {
                'colors': {key: list(rgb) for key, rgb in self.palette.colors.items()}
            },
            'export': {
                'save_cubes': self.export.save_cubes,
                'mosaic_filename': self.export.mosaic_filename,
                'csv_filename': self.export.csv_filename,
                'zip_filename': self.export.zip_filename,
                'manifest_filename': self.export.manifest_filename
            }
        }

    def save_yaml(self, path: Optional[str] = None):
        """Save configuration to YAML file."""
        if path is None:
            path = self.config_file or "config.yaml"

        # Ensure directory exists
        dir_path = os.path.dirname(path)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)


def default_palette_colors() -> Dict[str, List[int]]:
    """Standard palette as a YAML-ready {key: [r, g, b]} mapping."""
    return {key: list(rgb) for key, rgb in CUBE_PALETTE_PAIRS}


def describe_palette(palette: Palette) -> List[str]:
    """Human-readable palette lines for CLI output."""
    lines = []
    for i, entry in enumerate(palette):
        name = entry.name or CUBE_PALETTE_NAMES.get(entry.key, "")
        lab = ", ".join(f"{v:.1f}" for v in palette.lab_at(i))
        lines.append(f"{i}. {entry.key} {name:<7} RGB{entry.rgb}  {entry.hex}  Lab({lab})")
    return lines
