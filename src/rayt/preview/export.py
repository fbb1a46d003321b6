"""Image output for rendered frames.

Rendered frames are written as 8-bit RGB PNG files via Pillow. Before a
render overwrites its output file, backup_existing() can move the previous
result aside.

Example:
    >>> from rayt.preview.export import backup_existing, save_png
    >>> from rayt.core.progressive import ProgressiveRenderer
    >>>
    >>> backup_existing("render.png", "render_bak.png")
    >>> renderer = ProgressiveRenderer(200, 200)
    >>> renderer.render(8)
    >>> save_png(renderer, "render.png")
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from rayt.core.progressive import ProgressiveRenderer

logger = logging.getLogger(__name__)


def save_png(
    renderer: ProgressiveRenderer,
    filepath: str | Path,
    *,
    gamma: float = 2.2,
) -> None:
    """Save the renderer's current image as a PNG file.

    Args:
        renderer: The ProgressiveRenderer to read from.
        filepath: Output file path.
        gamma: Gamma used to encode the image.
    """
    save_png_from_array(renderer.get_image_uint8(gamma=gamma), filepath)


def save_png_from_array(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB array of shape (H, W, 3), top row first, as PNG.

    Raises:
        ValueError: If the array is not (H, W, 3) uint8.
        OSError: If the file cannot be written.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 image, got dtype {image.dtype}")

    PILImage.fromarray(image).save(filepath)
    logger.info("Wrote %dx%d image to %s", image.shape[1], image.shape[0], filepath)


def backup_existing(filepath: str | Path, backup_path: str | Path) -> bool:
    """Rename an existing output file to its backup name.

    An existing backup is replaced.

    Returns:
        True if a file was moved, False if filepath did not exist.

    Raises:
        OSError: If the rename fails.
    """
    if not os.path.exists(filepath):
        return False

    logger.info("Backing up %s -> %s", filepath, backup_path)
    os.replace(filepath, backup_path)
    return True
