"""
Color science helpers for the cube mosaic pipeline.

Provides:
    - sRGB -> linear RGB -> XYZ (D65) -> Lab conversion
    - a clamped single-color helper used at palette match time

The array functions accept anything shaped (..., 3) with channels on the
0-255 scale, so callers can convert a whole raster or a single triple.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

SRGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ],
    dtype=np.float64,
)

D65_WHITE = np.array([0.95047, 1.0, 1.08883], dtype=np.float64)
LAB_EPSILON = 0.008856
LAB_KAPPA_SLOPE = 7.787


def _to_ndarray(color) -> np.ndarray:
    arr = np.asarray(color, dtype=np.float64)
    if arr.shape[-1] != 3:
        raise ValueError("Input color must have three channels")
    return arr


def srgb_to_linear(rgb) -> np.ndarray:
    """Convert sRGB on the 0-255 scale to linear RGB (0-1)."""
    v = _to_ndarray(rgb) / 255.0
    return np.where(v <= 0.04045, v / 12.92, ((v + 0.055) / 1.055) ** 2.4)


def rgb_to_xyz(rgb) -> np.ndarray:
    """Convert sRGB (0-255) to CIE XYZ (D65)."""
    linear = srgb_to_linear(rgb)
    return linear @ SRGB_TO_XYZ.T


def xyz_to_lab(xyz) -> np.ndarray:
    """Convert XYZ to Lab relative to the D65 reference white."""
    xyz = _to_ndarray(xyz) / D65_WHITE

    def f(t):
        return np.where(t > LAB_EPSILON, np.cbrt(t), LAB_KAPPA_SLOPE * t + 16 / 116)

    fx = f(xyz[..., 0])
    fy = f(xyz[..., 1])
    fz = f(xyz[..., 2])

    L = (116 * fy) - 16
    a = 500 * (fx - fy)
    b = 200 * (fy - fz)
    return np.stack([L, a, b], axis=-1)


def rgb_to_lab(rgb) -> np.ndarray:
    """Convenience helper for sRGB -> Lab."""
    return xyz_to_lab(rgb_to_xyz(rgb))


def clamp_rgb(rgb) -> np.ndarray:
    """Clamp channels to the displayable 0-255 range."""
    return np.clip(_to_ndarray(rgb), 0.0, 255.0)


def to_lab(rgb: Sequence[float]) -> Tuple[float, float, float]:
    """
    Convert a single RGB triple to Lab.

    Out-of-range channels (common mid-diffusion) are clamped to 0-255 before
    conversion, so the function is total over any real-valued input.
    """
    lab = rgb_to_lab(clamp_rgb(rgb))
    return float(lab[0]), float(lab[1]), float(lab[2])
