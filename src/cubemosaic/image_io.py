"""
Image loading and resampling to the sticker grid.
"""

import os
from typing import Union

import numpy as np
from PIL import Image, ImageFilter, ImageOps

from .grid import GridPlan


def load_image(image_path: str) -> Image.Image:
    """
    Load an input image as RGB with EXIF orientation applied.

    Args:
        image_path: Path to input image

    Returns:
        PIL image in RGB mode
    """
    if not os.path.exists(image_path):
        raise FileNotFoundError(f"Image not found: {image_path}")

    with Image.open(image_path) as pil_image:
        pil_image = ImageOps.exif_transpose(pil_image)
        if pil_image.mode != 'RGB':
            pil_image = pil_image.convert('RGB')
        else:
            pil_image = pil_image.copy()

    return pil_image


def resample_to_grid(image: Union[Image.Image, np.ndarray], plan: GridPlan,
                     blur_radius: float = 0.0) -> np.ndarray:
    """
    Resize an image to exactly one pixel per sticker.

    The Gaussian blur runs after resizing, so blur_radius is measured in
    sticker cells.

    Returns:
        uint8 array of shape (stickers_high, stickers_across, 3)
    """
    if isinstance(image, np.ndarray):
        image = Image.fromarray(np.asarray(image, dtype=np.uint8))
    if image.mode != 'RGB':
        image = image.convert('RGB')

    resized = image.resize((plan.stickers_across, plan.stickers_high), Image.LANCZOS)
    if blur_radius > 0:
        resized = resized.filter(ImageFilter.GaussianBlur(radius=blur_radius))

    return np.array(resized, dtype=np.uint8)
