"""Render settings and Taichi runtime initialization.

Settings default to the reference render (200x200, 8 samples per pixel,
gamma 2.2, depth 50) and can be overridden through environment variables:

    RAYT_WIDTH, RAYT_HEIGHT, RAYT_SAMPLES, RAYT_MAX_DEPTH, RAYT_GAMMA,
    RAYT_OUTPUT, RAYT_BACKUP, RAYT_SEED, RAYT_THREADS, RAYT_LOG_LEVEL

This module does not touch any Taichi field, so it can be imported and
init_taichi() called before the rendering modules are imported.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

import taichi as ti

ENV_PREFIX = "RAYT_"


@dataclass
class RenderSettings:
    """Parameters of one render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples per pixel.
        max_depth: Maximum number of scatter events per path.
        gamma: Gamma used to encode the output image.
        output: Output PNG path.
        backup: Path an existing output file is moved to before rendering.
        seed: Taichi random seed.
        threads: Number of CPU worker threads, or None for Taichi's default.
        log_level: Log level name.
    """

    width: int = 200
    height: int = 200
    samples: int = 8
    max_depth: int = 50
    gamma: float = 2.2
    output: str = "render.png"
    backup: str = "render_bak.png"
    seed: int = 0
    threads: int | None = None
    log_level: str = "INFO"

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RenderSettings":
        """Build settings from RAYT_* environment variables.

        Unset variables keep their defaults.

        Raises:
            ValueError: If a variable cannot be parsed or the result is invalid.
        """
        if environ is None:
            environ = os.environ

        def get(name: str, convert, default):
            raw = environ.get(ENV_PREFIX + name)
            if raw is None or raw == "":
                return default
            try:
                return convert(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}") from e

        defaults = cls()
        settings = cls(
            width=get("WIDTH", int, defaults.width),
            height=get("HEIGHT", int, defaults.height),
            samples=get("SAMPLES", int, defaults.samples),
            max_depth=get("MAX_DEPTH", int, defaults.max_depth),
            gamma=get("GAMMA", float, defaults.gamma),
            output=get("OUTPUT", str, defaults.output),
            backup=get("BACKUP", str, defaults.backup),
            seed=get("SEED", int, defaults.seed),
            threads=get("THREADS", int, defaults.threads),
            log_level=get("LOG_LEVEL", str, defaults.log_level),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Check every field.

        Raises:
            ValueError: Naming the first invalid field.
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        if self.samples <= 0:
            raise ValueError(f"samples must be positive, got {self.samples}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.gamma <= 0.0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
        if self.threads is not None and self.threads <= 0:
            raise ValueError(f"threads must be positive, got {self.threads}")
        if not self.output:
            raise ValueError("output path must not be empty")


def init_taichi(settings: RenderSettings) -> None:
    """Initialize Taichi on the CPU backend in double precision."""
    kwargs = {}
    if settings.threads is not None:
        kwargs["cpu_max_num_threads"] = settings.threads
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=settings.seed, **kwargs)
