"""Progressive renderer for iterative sample accumulation.

ProgressiveRenderer wraps the integrator's render target with:
- batch rendering with a progress callback or a generator interface
- reset and resize
- 8-bit image access and PNG output

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.core.progressive import ProgressiveRenderer
    >>> from rayt.scene.cornell_box import create_cornell_box_scene
    >>> from rayt.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_cornell_box_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = ProgressiveRenderer(200, 200)
    >>> renderer.render(8, batch_size=2)
    >>> renderer.save_image("render.png")
"""

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from rayt.core.integrator import (
    GAMMA_FACTOR,
    MAX_DEPTH,
    clear_render_target,
    get_image_uint8,
    get_radiance_numpy,
    get_total_samples,
    render_image,
    setup_render_target,
)

logger = logging.getLogger(__name__)

# Callback receives (current_samples, target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A renderer that accumulates samples over repeated calls.

    The renderer owns the image size and maximum path depth and delegates
    storage to the integrator's Taichi fields.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Maximum number of scatter events per path.
    """

    def __init__(self, width: int, height: int, max_depth: int = MAX_DEPTH) -> None:
        """Set up the render target.

        Raises:
            ValueError: If the dimensions are invalid or max_depth is negative.
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        self._width = width
        self._height = height
        self._max_depth = max_depth
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def sample_count(self) -> int:
        """Samples accumulated per pixel so far."""
        return get_total_samples()

    def reset(self) -> None:
        """Discard accumulated samples, keeping the image size."""
        clear_render_target()

    def resize(self, width: int, height: int) -> None:
        """Change the image size and discard accumulated samples.

        Raises:
            ValueError: If the dimensions are invalid.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Accumulate num_samples more samples per pixel.

        Args:
            num_samples: Samples to add per pixel.
            batch_size: Samples rendered between callbacks.
            callback: Optional function called after each batch with
                (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Accumulate samples in batches, yielding progress after each one.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if num_samples <= 0:
            return

        target_samples = self.sample_count + num_samples
        logger.info(
            "Rendering %dx%d, %d samples per pixel, max depth %d",
            self._width,
            self._height,
            num_samples,
            self._max_depth,
        )

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch, self._max_depth)
            remaining -= batch
            logger.debug("Accumulated %d/%d samples", self.sample_count, target_samples)
            yield (self.sample_count, target_samples)

        logger.info("Render finished with %d samples per pixel", self.sample_count)

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Averaged linear radiance, shape (height, width, 3), top row first."""
        return get_radiance_numpy()

    def get_image_uint8(self, gamma: float = GAMMA_FACTOR) -> npt.NDArray[np.uint8]:
        """Gamma-encoded 8-bit image, shape (height, width, 3), top row first."""
        return get_image_uint8(gamma)

    def save_image(self, filepath: str | Path, gamma: float = GAMMA_FACTOR) -> None:
        """Write the gamma-encoded image as a PNG file."""
        from rayt.preview.export import save_png_from_array

        save_png_from_array(self.get_image_uint8(gamma=gamma), filepath)

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"max_depth={self.max_depth}, samples={self.sample_count})"
        )
