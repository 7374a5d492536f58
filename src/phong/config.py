"""Runtime configuration: Taichi backend initialisation and logging.

Settings can be given explicitly or read from the environment:

    PHONG_ARCH       Taichi backend: "cpu", "gpu", "cuda", "vulkan", "metal"
    PHONG_FAST_MATH  "true" to let Taichi reorder float arithmetic
    PHONG_DEBUG      "true" for Taichi debug mode (bounds checks)
    PHONG_LOG_LEVEL  DEBUG, INFO, WARNING, ERROR

Example:
    >>> from src.phong.config import RuntimeConfig, configure_logging, init_runtime
    >>> configure_logging("INFO")
    >>> init_runtime(RuntimeConfig(arch="cpu"))
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import taichi as ti

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_ARCHES = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
}


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class RuntimeConfig:
    """Settings for the Taichi runtime.

    Attributes:
        arch: Taichi backend name (a key of the supported arches).
        fast_math: Allow Taichi to reorder float arithmetic. Off by default
            so the device renderer matches the host reference.
        random_seed: Seed for Taichi's random number generator.
        debug: Enable Taichi debug mode.
        log_level: Level passed to ``configure_logging``.
    """

    arch: str = "cpu"
    fast_math: bool = False
    random_seed: int = 0
    debug: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.arch not in _ARCHES:
            raise ValueError(f"Unknown Taichi arch {self.arch!r}; expected one of {sorted(_ARCHES)}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls) -> RuntimeConfig:
        return cls(
            arch=os.getenv("PHONG_ARCH", "cpu"),
            fast_math=_env_flag("PHONG_FAST_MATH", "false"),
            debug=_env_flag("PHONG_DEBUG", "false"),
            log_level=os.getenv("PHONG_LOG_LEVEL", "INFO"),
        )


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stream handler to the package logger.

    Calling this again only changes the level; it never stacks handlers.

    Args:
        level: Log level name.

    Returns:
        The ``src.phong`` package logger.
    """
    package_logger = logging.getLogger("src.phong")
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    return package_logger


def init_runtime(config: RuntimeConfig | None = None) -> RuntimeConfig:
    """Initialise Taichi with float64 as the default float type.

    Must run before importing any module that declares Taichi fields
    (``camera.device``, ``scene.device``, ``core.integrator``).

    Args:
        config: Runtime settings; defaults to ``RuntimeConfig()``.

    Returns:
        The configuration that was applied.
    """
    if config is None:
        config = RuntimeConfig()
    ti.init(
        arch=_ARCHES[config.arch],
        default_fp=ti.f64,
        fast_math=config.fast_math,
        random_seed=config.random_seed,
        debug=config.debug,
    )
    logger.info("Taichi initialised (arch=%s, fast_math=%s)", config.arch, config.fast_math)
    return config
