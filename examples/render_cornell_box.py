#!/usr/bin/env python3
"""Render the Cornell box scene to a PNG file.

Defaults come from RenderSettings (200x200, 8 samples per pixel, depth 50,
gamma 2.2, render.png) and can be overridden by RAYT_* environment variables
or by the options below. An existing output file is moved to the backup path
before rendering starts.

Usage:
    python examples/render_cornell_box.py [options]

Options:
    --width WIDTH        Image width in pixels
    --height HEIGHT      Image height in pixels
    --samples SAMPLES    Samples per pixel
    --max-depth DEPTH    Maximum number of scatter events per path
    --output OUTPUT      Output PNG path
    --backup BACKUP      Where an existing output file is moved
    --seed SEED          Random seed
    --threads THREADS    Number of CPU worker threads
    --batch-size SIZE    Samples per progress update (default: 1)
    --log-level LEVEL    Log level name

Example:
    python examples/render_cornell_box.py --width 256 --height 256 --samples 50
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from rayt.config import RenderSettings, init_taichi
from rayt.log import setup_logging

logger = logging.getLogger("rayt.examples.render_cornell_box")


def parse_args(defaults: RenderSettings) -> argparse.Namespace:
    """Parse command-line arguments on top of the environment defaults."""
    parser = argparse.ArgumentParser(
        description="Render the Cornell box scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=defaults.width, help=f"Image width (default: {defaults.width})")
    parser.add_argument(
        "--height", type=int, default=defaults.height, help=f"Image height (default: {defaults.height})"
    )
    parser.add_argument(
        "--samples", type=int, default=defaults.samples, help=f"Samples per pixel (default: {defaults.samples})"
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=defaults.max_depth,
        help=f"Maximum scatter events per path (default: {defaults.max_depth})",
    )
    parser.add_argument("--output", default=defaults.output, help=f"Output PNG path (default: {defaults.output})")
    parser.add_argument(
        "--backup", default=defaults.backup, help=f"Path an existing output is moved to (default: {defaults.backup})"
    )
    parser.add_argument("--seed", type=int, default=defaults.seed, help=f"Random seed (default: {defaults.seed})")
    parser.add_argument(
        "--threads", type=int, default=defaults.threads, help="CPU worker threads (default: Taichi's choice)"
    )
    parser.add_argument("--batch-size", type=int, default=1, help="Samples per progress update (default: 1)")
    parser.add_argument("--log-level", default=defaults.log_level, help=f"Log level (default: {defaults.log_level})")
    return parser.parse_args()


def render_cornell_box(settings: RenderSettings, batch_size: int = 1) -> None:
    """Render the Cornell box with the given settings and write the PNG.

    Taichi must already be initialized.
    """
    # Rendering modules allocate Taichi fields on import
    from rayt.camera.pinhole import setup_camera
    from rayt.core.progressive import ProgressiveRenderer
    from rayt.preview.export import backup_existing, save_png
    from rayt.scene.cornell_box import create_cornell_box_scene

    backup_existing(settings.output, settings.backup)

    _, camera = create_cornell_box_scene(settings.aspect_ratio)
    setup_camera(camera)

    renderer = ProgressiveRenderer(settings.width, settings.height, settings.max_depth)
    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        elapsed = time.time() - start_time
        rate = current / elapsed if elapsed > 0 else 0.0
        logger.info("%d/%d samples (%.1f%%) - %.2f spp/s", current, target, 100.0 * current / target, rate)

    renderer.render(settings.samples, batch_size=batch_size, callback=progress_callback)
    save_png(renderer, settings.output, gamma=settings.gamma)
    logger.info("Total time: %.2fs", time.time() - start_time)


def main() -> int:
    """Main entry point."""
    try:
        defaults = RenderSettings.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    args = parse_args(defaults)
    settings = RenderSettings(
        width=args.width,
        height=args.height,
        samples=args.samples,
        max_depth=args.max_depth,
        gamma=defaults.gamma,
        output=args.output,
        backup=args.backup,
        seed=args.seed,
        threads=args.threads,
        log_level=args.log_level,
    )

    try:
        settings.validate()
        setup_logging(settings.log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    init_taichi(settings)

    try:
        render_cornell_box(settings, batch_size=args.batch_size)
    except ValueError as e:
        logger.error("Invalid render parameters: %s", e)
        return 2
    except OSError as e:
        logger.error("Could not write %s: %s", settings.output, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
