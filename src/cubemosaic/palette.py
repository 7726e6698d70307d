"""
Fixed sticker palettes for cube mosaics.
The palette order defines the index used by every downstream raster.
"""

from typing import Dict, List, Mapping, Optional, Sequence, Tuple
from dataclasses import dataclass

import numpy as np

from .color_math import rgb_to_lab


RGBTuple = Tuple[int, int, int]

# Standard cube sticker colors (W Y R O B G)
CUBE_PALETTE_PAIRS: List[Tuple[str, RGBTuple]] = [
    ("W", (255, 255, 255)),
    ("Y", (255, 213, 0)),
    ("R", (170, 16, 31)),
    ("O", (255, 88, 0)),
    ("B", (0, 70, 173)),
    ("G", (0, 155, 72)),
]

CUBE_PALETTE_NAMES: Dict[str, str] = {
    "W": "White",
    "Y": "Yellow",
    "R": "Red",
    "O": "Orange",
    "B": "Blue",
    "G": "Green",
}


@dataclass(frozen=True)
class PaletteEntry:
    """Represents one sticker color."""
    key: str
    rgb: RGBTuple
    name: str = ""

    def __post_init__(self):
        """Validate key and channel ranges, then store channels as ints."""
        if not isinstance(self.key, str) or len(self.key) != 1:
            raise ValueError(f"Palette key must be a single character, got {self.key!r}")
        if len(self.rgb) != 3:
            raise ValueError(f"Palette color {self.key} must have 3 channels, got {len(self.rgb)}")
        for channel in self.rgb:
            if (isinstance(channel, bool) or not isinstance(channel, (int, float, np.integer, np.floating))
                    or not (0 <= channel <= 255) or int(channel) != channel):
                raise ValueError(f"Palette color {self.key} has invalid channel value {channel!r}")
        object.__setattr__(self, "rgb", tuple(int(c) for c in self.rgb))

    @property
    def hex(self) -> str:
        """Hex string for this color."""
        return "#{:02x}{:02x}{:02x}".format(*self.rgb)


class Palette:
    """Ordered, immutable set of keyed colors with precomputed Lab values."""

    def __init__(self, entries: Sequence[PaletteEntry]):
        """Validate entries and precompute their Lab representatives."""
        entries = tuple(entries)
        if not entries:
            raise ValueError("Palette must contain at least one color")

        seen = set()
        duplicates = []
        for entry in entries:
            if entry.key in seen:
                duplicates.append(entry.key)
            seen.add(entry.key)
        if duplicates:
            raise ValueError(f"Duplicate palette keys: {duplicates}")

        self._entries = entries
        self._rgb = np.array([entry.rgb for entry in entries], dtype=np.float64)
        self._lab = rgb_to_lab(self._rgb)
        self._rgb.flags.writeable = False
        self._lab.flags.writeable = False
        self._index_by_key = {entry.key: i for i, entry in enumerate(entries)}

    @classmethod
    def from_pairs(cls, pairs: Sequence[Tuple[str, Sequence[int]]],
                   names: Optional[Mapping[str, str]] = None) -> "Palette":
        """Build a palette from ordered (key, rgb) pairs."""
        names = names or {}
        return cls([
            PaletteEntry(key=key, rgb=tuple(rgb), name=names.get(key, ""))
            for key, rgb in pairs
        ])

    @classmethod
    def from_dict(cls, mapping: Mapping[str, Sequence[int]]) -> "Palette":
        """Build a palette from an ordered {key: [r, g, b]} mapping."""
        return cls.from_pairs(list(mapping.items()))

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def entry_at(self, index: int) -> PaletteEntry:
        return self._entries[index]

    def color_at(self, index: int) -> RGBTuple:
        return self._entries[index].rgb

    def key_at(self, index: int) -> str:
        return self._entries[index].key

    def lab_at(self, index: int) -> Tuple[float, float, float]:
        L, a, b = self._lab[index]
        return float(L), float(a), float(b)

    def index_of(self, key: str) -> int:
        """Get palette index for a key."""
        if key not in self._index_by_key:
            raise KeyError(f"Unknown palette key '{key}'. Available: {self.keys}")
        return self._index_by_key[key]

    @property
    def keys(self) -> List[str]:
        return [entry.key for entry in self._entries]

    @property
    def rgb_array(self) -> np.ndarray:
        """(N, 3) float64 RGB rows, read-only."""
        return self._rgb

    @property
    def lab_array(self) -> np.ndarray:
        """(N, 3) float64 Lab rows, read-only."""
        return self._lab

    def to_dict(self) -> List[Dict]:
        """Serializable description of the palette."""
        return [
            {
                "index": i,
                "key": entry.key,
                "name": entry.name,
                "rgb": list(entry.rgb),
                "hex": entry.hex,
                "lab": [round(v, 4) for v in self.lab_at(i)],
            }
            for i, entry in enumerate(self._entries)
        ]

    def __repr__(self) -> str:
        return f"Palette({''.join(self.keys)})"


# Global instance
_default_palette: Optional[Palette] = None


def get_default_palette() -> Palette:
    """Get the shared standard cube palette."""
    global _default_palette
    if _default_palette is None:
        _default_palette = Palette.from_pairs(CUBE_PALETTE_PAIRS, CUBE_PALETTE_NAMES)
    return _default_palette
